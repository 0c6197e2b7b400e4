# shop_admin/models/category.py
from typing import Optional, List
from .base import TimeStampedModel

class Category(TimeStampedModel):
    """Category model for product categorization"""
    category_id: int
    name: str
    parent_category_id: Optional[int] = None
    description: Optional[str] = None
    
    # Populated by the backend on tree listings
    subcategories: List['Category'] = []

    @property
    def is_parent(self) -> bool:
        return self.parent_category_id is None
