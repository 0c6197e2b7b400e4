# shop_admin/models/order.py
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import Any, List, Optional, Union
from .base import TimeStampedModel

class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

class OrderItem(BaseModel):
    """Individual item in an order"""
    product_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: Decimal

    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity

class ShippingAddress(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

class OrderUser(BaseModel):
    user_id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    email: Optional[str] = None

class Order(TimeStampedModel):
    """Order as reported by the backend.

    ``status`` and ``payment_status`` keep values the console does not know
    as plain strings, so the transition policy can refuse them instead of
    the whole order failing to load.
    """
    order_id: Union[int, str]
    status: Union[OrderStatus, str] = Field(union_mode="left_to_right")
    payment_status: Optional[Union[PaymentStatus, str]] = Field(
        default=None, union_mode="left_to_right"
    )
    payment_method: Optional[str] = None
    total: Decimal = Decimal(0)
    items: List[OrderItem] = []
    shipping_address: Optional[ShippingAddress] = None
    user: Optional[OrderUser] = None

    @field_validator("status", "payment_status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Enum):
            return value.strip().lower()
        return value
