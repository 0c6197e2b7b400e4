# shop_admin/models/product.py
from decimal import Decimal
from typing import Optional, List, Union
from pydantic import BaseModel
from .base import TimeStampedModel

class InventoryItem(BaseModel):
    """Stock and price of a single product size"""
    size: Optional[str] = None
    price: Decimal
    quantity: int = 0

class ProductImage(BaseModel):
    image_id: Union[int, str]
    url: str

class Product(TimeStampedModel):
    """Catalogue product as returned by the backend"""
    product_id: Union[int, str]
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    name: str
    description: Optional[str] = None
    discount: Decimal = Decimal(0)
    is_active: bool = True
    inventory: List[InventoryItem] = []
    images: List[ProductImage] = []

    @property
    def stock(self) -> int:
        return sum(item.quantity for item in self.inventory)

    @property
    def min_price(self) -> Optional[Decimal]:
        if not self.inventory:
            return None
        return min(item.price for item in self.inventory)
