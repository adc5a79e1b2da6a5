# storefront/schemas/order.py
import json
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import ConfigDict, EmailStr, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from storefront.models.order import OrderStatus
from storefront.schemas.cart import CartItemOut
from storefront.schemas.common import ORMBase, Money

cart_snapshot_adapter = TypeAdapter(List[CartItemOut])


# Billing details submitted with the checkout form
class CheckoutData(ORMBase):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)


# Everything the ledger needs to persist a new order
class OrderCreate(ORMBase):
    user_id: Optional[int] = None
    customer_name: str
    customer_email: str
    customer_address: str
    customer_city: str
    customer_state: str
    customer_zip: str
    items_json: str
    subtotal: Money
    tax: Money
    total: Money
    payment_screenshot_url: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING


# Output schema representing the full order details
class OrderOut(ORMBase):
    id: int
    user_id: Optional[int] = None
    customer_name: str
    customer_email: str
    customer_address: str
    customer_city: str
    customer_state: str
    customer_zip: str
    items: List[CartItemOut]
    subtotal: Money
    tax: Money
    total: Money
    payment_screenshot_url: Optional[str] = None
    status: OrderStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "OrderOut":
        """Build the response from a stored order row.

        The item snapshot is parsed fresh on every read, so callers never
        share state with the ledger.
        """
        data = {key: value for key, value in row.items() if key != "items_json"}
        data["items"] = json.loads(row["items_json"])
        return cls.model_validate(data)


def dump_cart_snapshot(lines: List[CartItemOut]) -> str:
    return cart_snapshot_adapter.dump_json(lines, by_alias=True).decode()
