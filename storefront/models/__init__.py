from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.users import User
from storefront.models.order import Order, OrderStatus

__all__ = ["Product", "CartItem", "User", "Order", "OrderStatus"]
