# storefront/storage/base.py
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from storefront.schemas.cart import CartItemOut, CartLineOut
from storefront.schemas.order import OrderCreate, OrderOut
from storefront.schemas.product import ProductCreate, ProductOut
from storefront.schemas.user import UserRecord


def normalize_quantity(quantity: Optional[int]) -> int:
    # Missing or non-positive quantities count as a single unit
    if not quantity or quantity < 1:
        return 1
    return quantity


class Storage(ABC):
    """Repository for the storefront's four tables.

    Every method returns detached schema objects, so callers can hold on to
    results without keeping a database session or a reference into the
    in-memory maps.
    """

    # Products
    @abstractmethod
    def list_products(self) -> List[ProductOut]: ...

    @abstractmethod
    def list_products_by_category(self, category: str) -> List[ProductOut]: ...

    @abstractmethod
    def list_categories(self) -> List[str]: ...

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[ProductOut]: ...

    @abstractmethod
    def seed_products(self, products: Iterable[ProductCreate]) -> int:
        """Insert the given products when the catalog is empty. Returns how many were added."""

    # Cart
    @abstractmethod
    def list_cart(self, session_id: str) -> List[CartItemOut]: ...

    @abstractmethod
    def get_line(self, line_id: int) -> Optional[CartLineOut]: ...

    @abstractmethod
    def add_line(self, session_id: str, product_id: int, quantity: Optional[int] = 1) -> CartLineOut: ...

    @abstractmethod
    def update_quantity(self, line_id: int, quantity: int) -> Optional[CartLineOut]: ...

    @abstractmethod
    def remove_line(self, line_id: int) -> bool: ...

    @abstractmethod
    def clear_cart(self, session_id: str) -> None: ...

    def merge_carts(self, from_session: str, to_session: str) -> int:
        """Move every line of one cart into another, merging quantities per product."""
        if from_session == to_session:
            return 0
        lines = self.list_cart(from_session)
        for line in lines:
            self.add_line(to_session, line.product_id, line.quantity)
        self.clear_cart(from_session)
        return len(lines)

    # Users
    @abstractmethod
    def create_user(self, email: str, password_hash: str, first_name: str, last_name: str) -> UserRecord: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserRecord]: ...

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> Optional[UserRecord]: ...

    # Orders
    @abstractmethod
    def create_order(self, order: OrderCreate) -> OrderOut: ...

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[OrderOut]: ...

    @abstractmethod
    def list_orders(self) -> List[OrderOut]: ...

    @abstractmethod
    def list_user_orders(self, user_id: int) -> List[OrderOut]: ...
