# shop_admin/models/review.py
from enum import Enum
from typing import Optional, Union
from .base import TimeStampedModel

class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class Review(TimeStampedModel):
    """Product review awaiting or past moderation"""
    review_id: Union[int, str]
    product_id: Optional[Union[int, str]] = None
    product_name: Optional[str] = None
    username: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    status: ReviewStatus = ReviewStatus.PENDING
    rejection_reason: Optional[str] = None
