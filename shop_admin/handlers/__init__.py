# shop_admin/handlers/__init__.py
"""Telegram handlers of the admin console"""
from .admin_handlers import AdminHandler
from .auth_handler import AuthHandler
from .order_management import OrderManagementHandler
from .customer_management import CustomerManagementHandler
from .product_management import ProductManagementHandler
from .category_management import CategoryManagementHandler
from .kol_management import KOLManagementHandler
from .payout_management import PayoutManagementHandler
from .review_management import ReviewManagementHandler

__all__ = [
    'AdminHandler',
    'AuthHandler',
    'OrderManagementHandler',
    'CustomerManagementHandler',
    'ProductManagementHandler',
    'CategoryManagementHandler',
    'KOLManagementHandler',
    'PayoutManagementHandler',
    'ReviewManagementHandler'
]
