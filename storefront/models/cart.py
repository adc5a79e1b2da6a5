# storefront/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, CheckConstraint
from sqlalchemy.orm import relationship
from storefront.database import Base


# A single product + quantity held in a session's cart.
# One line per (session_id, product_id) is kept by merging on add.
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    session_id = Column(String, index=True, nullable=False) # Anonymous token or user-<id>

    product = relationship("Product")
