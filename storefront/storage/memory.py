# storefront/storage/memory.py
import itertools
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from storefront.models.order import OrderStatus
from storefront.schemas.cart import CartItemOut, CartLineOut
from storefront.schemas.order import OrderCreate, OrderOut
from storefront.schemas.product import ProductCreate, ProductOut
from storefront.schemas.user import UserRecord
from storefront.storage.base import Storage, normalize_quantity


class MemoryStorage(Storage):
    """Keyed-map storage for tests and local development.

    State lives as long as the instance; nothing is persisted.
    """

    def __init__(self):
        self._products: Dict[int, ProductOut] = {}
        self._cart: Dict[int, CartLineOut] = {}
        self._users: Dict[int, UserRecord] = {}
        self._orders: Dict[int, dict] = {}

        self._product_ids = itertools.count(1)
        self._cart_ids = itertools.count(1)
        self._user_ids = itertools.count(1)
        self._order_ids = itertools.count(1)

    # Products
    def list_products(self) -> List[ProductOut]:
        return [p.model_copy() for p in self._products.values()]

    def list_products_by_category(self, category: str) -> List[ProductOut]:
        return [p.model_copy() for p in self._products.values() if p.category == category]

    def list_categories(self) -> List[str]:
        return sorted({p.category for p in self._products.values()})

    def get_product(self, product_id: int) -> Optional[ProductOut]:
        product = self._products.get(product_id)
        return product.model_copy() if product else None

    def seed_products(self, products: Iterable[ProductCreate]) -> int:
        if self._products:
            return 0
        added = 0
        for data in products:
            product_id = next(self._product_ids)
            self._products[product_id] = ProductOut(id=product_id, **data.model_dump())
            added += 1
        return added

    # Cart
    def list_cart(self, session_id: str) -> List[CartItemOut]:
        items = []
        for line in self._cart.values():
            if line.session_id != session_id:
                continue
            product = self._products.get(line.product_id)
            # Lines pointing at a vanished product are skipped
            if product:
                items.append(CartItemOut(**line.model_dump(), product=product.model_copy()))
        return items

    def get_line(self, line_id: int) -> Optional[CartLineOut]:
        line = self._cart.get(line_id)
        return line.model_copy() if line else None

    def add_line(self, session_id: str, product_id: int, quantity: Optional[int] = 1) -> CartLineOut:
        quantity = normalize_quantity(quantity)
        for line_id, line in self._cart.items():
            if line.session_id == session_id and line.product_id == product_id:
                merged = line.model_copy(update={"quantity": line.quantity + quantity})
                self._cart[line_id] = merged
                return merged.model_copy()

        line_id = next(self._cart_ids)
        line = CartLineOut(id=line_id, product_id=product_id, quantity=quantity, session_id=session_id)
        self._cart[line_id] = line
        return line.model_copy()

    def update_quantity(self, line_id: int, quantity: int) -> Optional[CartLineOut]:
        line = self._cart.get(line_id)
        if line is None:
            return None
        updated = line.model_copy(update={"quantity": quantity})
        self._cart[line_id] = updated
        return updated.model_copy()

    def remove_line(self, line_id: int) -> bool:
        return self._cart.pop(line_id, None) is not None

    def clear_cart(self, session_id: str) -> None:
        for line_id in [i for i, line in self._cart.items() if line.session_id == session_id]:
            del self._cart[line_id]

    # Users
    def create_user(self, email: str, password_hash: str, first_name: str, last_name: str) -> UserRecord:
        user_id = next(self._user_ids)
        user = UserRecord(
            id=user_id, email=email, password_hash=password_hash,
            first_name=first_name, last_name=last_name,
            created_at=datetime.now(timezone.utc),
        )
        self._users[user_id] = user
        return user.model_copy()

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == email:
                return user.model_copy()
        return None

    def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    # Orders
    def create_order(self, order: OrderCreate) -> OrderOut:
        order_id = next(self._order_ids)
        row = order.model_dump()
        row["id"] = order_id
        row["status"] = OrderStatus(order.status).value
        row["created_at"] = datetime.now(timezone.utc)
        self._orders[order_id] = row
        return OrderOut.from_row(row)

    def get_order(self, order_id: int) -> Optional[OrderOut]:
        row = self._orders.get(order_id)
        return OrderOut.from_row(row) if row else None

    def list_orders(self) -> List[OrderOut]:
        return [OrderOut.from_row(row) for row in self._orders.values()]

    def list_user_orders(self, user_id: int) -> List[OrderOut]:
        return [OrderOut.from_row(row) for row in self._orders.values() if row["user_id"] == user_id]
