# storefront/storage/sql.py
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, contains_eager

from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.models.users import User
from storefront.schemas.cart import CartItemOut, CartLineOut
from storefront.schemas.order import OrderCreate, OrderOut
from storefront.schemas.product import ProductCreate, ProductOut
from storefront.schemas.user import UserRecord
from storefront.storage.base import Storage, normalize_quantity


def _order_to_out(order: Order) -> OrderOut:
    row = {column.key: getattr(order, column.key) for column in Order.__table__.columns}
    return OrderOut.from_row(row)


class SqlStorage(Storage):
    """Relational storage bound to a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # Products
    def list_products(self) -> List[ProductOut]:
        rows = self.db.query(Product).order_by(Product.id.asc()).all()
        return [ProductOut.model_validate(p) for p in rows]

    def list_products_by_category(self, category: str) -> List[ProductOut]:
        rows = self.db.query(Product).filter(Product.category == category).order_by(Product.id.asc()).all()
        return [ProductOut.model_validate(p) for p in rows]

    def list_categories(self) -> List[str]:
        rows = self.db.query(Product.category).distinct().order_by(Product.category.asc()).all()
        return [r[0] for r in rows]

    def get_product(self, product_id: int) -> Optional[ProductOut]:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        return ProductOut.model_validate(product) if product else None

    def seed_products(self, products: Iterable[ProductCreate]) -> int:
        if self.db.query(Product.id).first() is not None:
            return 0
        rows = [Product(**p.model_dump()) for p in products]
        self.db.add_all(rows)
        self.db.commit()
        return len(rows)

    # Cart
    def list_cart(self, session_id: str) -> List[CartItemOut]:
        # Inner join drops lines whose product no longer exists
        rows = (
            self.db.query(CartItem)
            .join(CartItem.product)
            .options(contains_eager(CartItem.product))
            .filter(CartItem.session_id == session_id)
            .order_by(CartItem.id.asc())
            .all()
        )
        return [CartItemOut.model_validate(it) for it in rows]

    def get_line(self, line_id: int) -> Optional[CartLineOut]:
        item = self.db.query(CartItem).filter(CartItem.id == line_id).first()
        return CartLineOut.model_validate(item) if item else None

    def add_line(self, session_id: str, product_id: int, quantity: Optional[int] = 1) -> CartLineOut:
        quantity = normalize_quantity(quantity)
        item = self.db.query(CartItem).filter(
            CartItem.session_id == session_id, CartItem.product_id == product_id
        ).first()

        if item:
            item.quantity += quantity
        else:
            item = CartItem(session_id=session_id, product_id=product_id, quantity=quantity)
            self.db.add(item)

        self.db.commit()
        self.db.refresh(item)
        return CartLineOut.model_validate(item)

    def update_quantity(self, line_id: int, quantity: int) -> Optional[CartLineOut]:
        item = self.db.query(CartItem).filter(CartItem.id == line_id).first()
        if not item:
            return None
        item.quantity = quantity
        self.db.commit()
        self.db.refresh(item)
        return CartLineOut.model_validate(item)

    def remove_line(self, line_id: int) -> bool:
        deleted = self.db.query(CartItem).filter(CartItem.id == line_id).delete()
        self.db.commit()
        return deleted > 0

    def clear_cart(self, session_id: str) -> None:
        self.db.query(CartItem).filter(CartItem.session_id == session_id).delete()
        self.db.commit()

    # Users
    def create_user(self, email: str, password_hash: str, first_name: str, last_name: str) -> UserRecord:
        user = User(email=email, password_hash=password_hash, first_name=first_name, last_name=last_name)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return UserRecord.model_validate(user)

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        normalized = email.strip().lower()
        user = self.db.query(User).filter(func.lower(User.email) == normalized).first()
        return UserRecord.model_validate(user) if user else None

    def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        user = self.db.query(User).filter(User.id == user_id).first()
        return UserRecord.model_validate(user) if user else None

    # Orders
    def create_order(self, order: OrderCreate) -> OrderOut:
        data = order.model_dump()
        data["status"] = OrderStatus(order.status).value
        row = Order(**data)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _order_to_out(row)

    def get_order(self, order_id: int) -> Optional[OrderOut]:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        return _order_to_out(order) if order else None

    def list_orders(self) -> List[OrderOut]:
        rows = self.db.query(Order).order_by(Order.id.asc()).all()
        return [_order_to_out(o) for o in rows]

    def list_user_orders(self, user_id: int) -> List[OrderOut]:
        rows = self.db.query(Order).filter(Order.user_id == user_id).order_by(Order.id.asc()).all()
        return [_order_to_out(o) for o in rows]
