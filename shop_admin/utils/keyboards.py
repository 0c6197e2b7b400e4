# shop_admin/utils/keyboards.py
from typing import List, Optional
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from ..models.order import Order, OrderStatus
from ..services.order_status_policy import is_status_allowed
from .messages import STATUS_EMOJI, STATUS_LABELS

NOOP = "noop"

class Keyboards:
    @staticmethod
    def admin_menu() -> InlineKeyboardMarkup:
        """Admin console main menu"""
        keyboard = [
            [InlineKeyboardButton("🛍 Orders", callback_data="orders_page_1"),
             InlineKeyboardButton("📦 Products", callback_data="products_page_1")],
            [InlineKeyboardButton("🗂 Categories", callback_data="manage_categories"),
             InlineKeyboardButton("👥 Customers", callback_data="customers_page_1")],
            [InlineKeyboardButton("⭐️ KOL applications", callback_data="kol_apps_page_1"),
             InlineKeyboardButton("🏅 KOL tiers", callback_data="kol_tiers")],
            [InlineKeyboardButton("💸 Payouts", callback_data="payouts_pending"),
             InlineKeyboardButton("💬 Reviews", callback_data="reviews_page_1")],
            [InlineKeyboardButton("📊 Dashboard", callback_data="report_weekly")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def report_menu(current: str) -> InlineKeyboardMarkup:
        periods = [("daily", "Today"), ("weekly", "7 days"), ("monthly", "This month")]
        keyboard = [
            [InlineKeyboardButton(
                f"• {label}" if period == current else label,
                callback_data=f"report_{period}"
            ) for period, label in periods],
            [
                InlineKeyboardButton("📤 Export", callback_data=f"report_export_{current}"),
                InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def back_to_menu() -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")]])

    @staticmethod
    def cancel_keyboard() -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Cancel", callback_data="cancel")]])

    @staticmethod
    def pagination_row(prefix: str, page: int, pages: int) -> List[InlineKeyboardButton]:
        """Previous / next buttons for ``{prefix}_page_{n}`` callbacks"""
        row = []
        if page > 1:
            row.append(InlineKeyboardButton("⬅️", callback_data=f"{prefix}_page_{page - 1}"))
        row.append(InlineKeyboardButton(f"{page}/{max(pages, 1)}", callback_data=NOOP))
        if page < pages:
            row.append(InlineKeyboardButton("➡️", callback_data=f"{prefix}_page_{page + 1}"))
        return row

    @classmethod
    def order_list(cls, orders: List[Order], page: int, pages: int) -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton(
                f"#{order.order_id} {STATUS_EMOJI.get(order.status, '❔')}",
                callback_data=f"order_{order.order_id}"
            )]
            for order in orders
        ]
        keyboard.append(cls.pagination_row("orders", page, pages))
        keyboard.append([InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def order_status_picker(order: Order,
                            selected: Optional[OrderStatus] = None) -> InlineKeyboardMarkup:
        """All six statuses; the ones the order cannot move to are inert"""
        keyboard = []
        row = []
        for status in OrderStatus:
            label = f"{STATUS_EMOJI[status]} {STATUS_LABELS[status]}"
            if status == selected:
                label = f"✔️ {label}"
            if is_status_allowed(order.status, order.payment_status, status):
                callback = f"set_status_{order.order_id}_{status.value}"
            else:
                label = f"🚫 {STATUS_LABELS[status]}"
                callback = NOOP
            row.append(InlineKeyboardButton(label, callback_data=callback))
            if len(row) == 2:
                keyboard.append(row)
                row = []

        if selected is not None and selected != order.status:
            keyboard.append([InlineKeyboardButton(
                "💾 Update status",
                callback_data=f"confirm_status_{order.order_id}_{selected.value}"
            )])
        keyboard.append([InlineKeyboardButton("🔙 Orders", callback_data="orders_page_1")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def account_status_row(prefix: str, account_id) -> List[InlineKeyboardButton]:
        """Status options for customers (``customer``) and KOLs (``kol``)"""
        return [
            InlineKeyboardButton("🟢 Activate", callback_data=f"{prefix}_status_{account_id}_active"),
            InlineKeyboardButton("🟡 Suspend", callback_data=f"{prefix}_status_{account_id}_suspended"),
            InlineKeyboardButton("🔴 Ban", callback_data=f"{prefix}_status_{account_id}_banned")
        ]

    @staticmethod
    def confirm(action: str, cancel_data: str = "admin_menu") -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([[
            InlineKeyboardButton("✅ Yes", callback_data=f"confirm_{action}"),
            InlineKeyboardButton("❌ No", callback_data=cancel_data)
        ]])
