# storefront/schemas/product.py
from pydantic import Field

from storefront.schemas.common import ORMBase, Money


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str
    price: Money = Field(ge=0)
    category: str
    rating: float = Field(default=0, ge=0, le=5)
    image: str
    description: str


# Schema used when seeding the catalog
class ProductCreate(ProductBase):
    pass


# Full product representation including ID
class ProductOut(ProductBase):
    id: int
