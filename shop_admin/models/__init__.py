"""Backend resources as seen by the admin console"""
from .order import Order, OrderItem, OrderStatus, PaymentStatus
from .product import Product, InventoryItem
from .category import Category
from .customer import Customer, AccountStatus
from .kol import KOL, KOLApplication, KOLTier, Payout, ApplicationStatus, PayoutStatus
from .review import Review, ReviewStatus

__all__ = [
    'Order',
    'OrderItem',
    'OrderStatus',
    'PaymentStatus',
    'Product',
    'InventoryItem',
    'Category',
    'Customer',
    'AccountStatus',
    'KOL',
    'KOLApplication',
    'KOLTier',
    'Payout',
    'ApplicationStatus',
    'PayoutStatus',
    'Review',
    'ReviewStatus'
]
