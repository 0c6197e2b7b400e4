# shop_admin/models/kol.py
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel
from .base import TimeStampedModel
from .customer import AccountStatus

class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class PayoutStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

class KOLTier(BaseModel):
    """Commission bracket assigned to KOLs"""
    tier_id: int
    tier_name: str
    commission_rate: Decimal
    min_successful_purchases: int = 0
    description: Optional[str] = None

class KOL(TimeStampedModel):
    """Key Opinion Leader (affiliate) account"""
    kol_id: Union[int, str]
    user_id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    email: Optional[str] = None
    referral_code: Optional[str] = None
    status: AccountStatus = AccountStatus.ACTIVE
    tier_id: Optional[int] = None
    tier_name: Optional[str] = None
    total_earnings: Decimal = Decimal(0)
    successful_purchases: int = 0

class KOLApplication(TimeStampedModel):
    """Request from a customer to join the KOL programme"""
    application_id: Union[int, str]
    user_id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    email: Optional[str] = None
    social_media: Optional[str] = None
    follower_count: Optional[int] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    rejection_reason: Optional[str] = None

class Payout(TimeStampedModel):
    """Commission payment owed to a KOL"""
    payout_id: Union[int, str]
    kol_id: Union[int, str]
    username: Optional[str] = None
    amount: Decimal
    payment_status: PayoutStatus = PayoutStatus.PENDING
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    notes: Optional[str] = None
