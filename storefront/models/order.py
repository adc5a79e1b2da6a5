# storefront/models/order.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Text, func
from storefront.database import Base


# Lifecycle states of an order. Checkout only ever creates PAYMENT_UPLOADED,
# the remaining states are set by back-office staff outside this service.
class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAYMENT_UPLOADED = "payment_uploaded"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)

    # Billing details
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_address = Column(String, nullable=False)
    customer_city = Column(String, nullable=False)
    customer_state = Column(String, nullable=False)
    customer_zip = Column(String, nullable=False)

    items_json = Column(Text, nullable=False) # Serialized snapshot of the cart lines at checkout
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)

    payment_screenshot_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
