# shop_admin/models/customer.py
from enum import Enum
from typing import Optional, Union
from .base import TimeStampedModel

class AccountStatus(str, Enum):
    """Account status shared by customers and KOLs"""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"

class Customer(TimeStampedModel):
    """Customer account as seen by the admin console"""
    user_id: Union[int, str]
    username: str
    email: str
    phone: Optional[str] = None
    status: AccountStatus = AccountStatus.ACTIVE
    status_reason: Optional[str] = None
    total_orders: int = 0
