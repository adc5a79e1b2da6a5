# storefront/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

from storefront.schemas.cart import CartItemOut

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class CartTotals(NamedTuple):
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_totals(lines: Iterable[CartItemOut], tax_rate) -> CartTotals:
    """Subtotal, tax and total for a set of cart lines.

    Shared by the cart view and checkout so both always agree. Tax is
    rounded once, on the subtotal, and total is the exact sum of the two.
    """
    subtotal = sum((_money(line.product.price) * line.quantity for line in lines), Decimal("0.00"))
    tax = _money(subtotal * Decimal(str(tax_rate)))
    return CartTotals(subtotal=_money(subtotal), tax=tax, total=_money(subtotal) + tax)
