# storefront/schemas/cart.py
from typing import List, Optional

from storefront.schemas.common import ORMBase, Money
from storefront.schemas.product import ProductOut


# Request schema for adding an item to the cart
class CartAddItem(ORMBase):
    product_id: int
    quantity: Optional[int] = None # Missing or non-positive means 1


# Request schema for updating cart item quantity
class CartUpdateItem(ORMBase):
    quantity: Optional[int] = None


# A stored cart line without product details
class CartLineOut(ORMBase):
    id: int
    product_id: int
    quantity: int
    session_id: str


# A cart line joined with its product
class CartItemOut(CartLineOut):
    product: ProductOut


# Response schema for the entire cart summary
class CartOut(ORMBase):
    items: List[CartItemOut]
    subtotal: Money
    tax: Money
    total: Money


class CartSessionOut(ORMBase):
    session_id: str
