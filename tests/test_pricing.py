from decimal import Decimal

from storefront.schemas.cart import CartItemOut
from storefront.schemas.product import ProductOut
from storefront.services.pricing import _money, compute_totals


def _line(price, quantity, line_id=1):
    product = ProductOut(
        id=line_id, name=f"Item {line_id}", price=Decimal(price), category="home",
        rating=4.0, image="img.jpg", description="test item",
    )
    return CartItemOut(id=line_id, product_id=line_id, quantity=quantity, session_id="s", product=product)


def test_empty_cart_is_free():
    totals = compute_totals([], Decimal("0.10"))
    assert totals == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))


def test_fractional_prices():
    totals = compute_totals([_line("19.99", 3)], Decimal("0.10"))
    assert totals.subtotal == Decimal("59.97")
    assert totals.tax == Decimal("6.00")
    assert totals.total == Decimal("65.97")


def test_tax_rounds_half_up_on_the_subtotal():
    # 0.05 * 0.10 = 0.005 rounds up to a cent
    totals = compute_totals([_line("0.05", 1)], Decimal("0.10"))
    assert totals.tax == Decimal("0.01")
    assert totals.total == Decimal("0.06")


def test_total_is_subtotal_plus_tax():
    lines = [_line("12999", 2, 1), _line("1899", 1, 2), _line("0.33", 7, 3)]
    totals = compute_totals(lines, "0.10")
    assert totals.subtotal == Decimal("27899.31")
    assert totals.tax == Decimal("2789.93")
    assert totals.total == totals.subtotal + totals.tax


def test_money_helper():
    assert _money(None) == Decimal("0.00")
    assert _money("") == Decimal("0.00")
    assert _money(2.675) == Decimal("2.68")
    assert str(_money(5)) == "5.00"
