# storefront/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, Float, Text, CheckConstraint
from storefront.database import Base


# Catalog entry shown in the storefront.
# Seeded at start-up and read-only afterwards.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Numeric(12, 2), CheckConstraint("price >= 0"), nullable=False)
    category = Column(String, nullable=False, index=True)
    rating = Column(Float, CheckConstraint("rating >= 0 AND rating <= 5"), nullable=False, default=0)
    image = Column(String, nullable=False)
    description = Column(Text, nullable=False)
