# shop_admin/utils/messages.py
from typing import Any, Dict, List
from ..models.order import Order, OrderStatus, PaymentStatus
from ..models.customer import Customer, AccountStatus
from ..models.product import Product
from ..models.kol import KOL, KOLApplication, KOLTier, Payout
from ..models.review import Review
from ..services.order_status_policy import status_notes
from ..utils.formatters import format_price, format_datetime, format_percent

STATUS_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Delivering",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
    OrderStatus.RETURNED: "Returned"
}

STATUS_EMOJI = {
    OrderStatus.PENDING: "⏳",
    OrderStatus.PROCESSING: "⚙️",
    OrderStatus.SHIPPED: "🚚",
    OrderStatus.DELIVERED: "📦",
    OrderStatus.CANCELLED: "❌",
    OrderStatus.RETURNED: "↩️"
}

PAYMENT_EMOJI = {
    PaymentStatus.PENDING: "⏳",
    PaymentStatus.COMPLETED: "✅",
    PaymentStatus.FAILED: "❌"
}

ACCOUNT_EMOJI = {
    AccountStatus.ACTIVE: "🟢",
    AccountStatus.SUSPENDED: "🟡",
    AccountStatus.BANNED: "🔴"
}

def status_label(status: Any) -> str:
    if isinstance(status, OrderStatus):
        return f"{STATUS_EMOJI[status]} {STATUS_LABELS[status]}"
    return f"❔ {status}"

def payment_label(status: Any) -> str:
    if isinstance(status, PaymentStatus):
        return f"{PAYMENT_EMOJI[status]} {status.value.capitalize()}"
    return f"❔ {status or 'unknown'}"

class Messages:
    @staticmethod
    def format_order(order: Order) -> str:
        """Order details with the status picker notes"""
        items_text = "\n".join([
            f"- {item.quantity}x {item.name or item.product_id}"
            f"{f' ({item.size})' if item.size else ''}: {format_price(item.price)}"
            for item in order.items
        ]) or "- no items"

        text = (
            f"🛍 Order #{order.order_id}\n"
            f"------------------\n"
            f"{items_text}\n"
            f"------------------\n"
            f"💰 Total: {format_price(order.total)}\n"
            f"📊 Status: {status_label(order.status)}\n"
            f"💳 Payment: {payment_label(order.payment_status)}"
            f"{f' ({order.payment_method})' if order.payment_method else ''}\n"
            f"🕒 Date: {format_datetime(order.created_at)}\n"
        )

        if order.user:
            text += f"👤 Customer: {order.user.username or order.user.email or order.user.user_id}\n"
        if order.shipping_address:
            address = order.shipping_address
            parts = [address.full_name, address.address, address.city, address.country]
            text += f"📍 Ship to: {', '.join(p for p in parts if p)}\n"

        notes = status_notes(order.status, order.payment_status)
        if notes:
            text += "\n" + "\n".join(f"ℹ️ {note}" for note in notes)
        return text

    @staticmethod
    def format_order_list(orders: List[Order], page: int, pages: int, total: int) -> str:
        if not orders:
            return "📭 No orders found."
        lines = [f"🛍 Orders (page {page}/{pages}, {total} total)\n"]
        for order in orders:
            lines.append(
                f"#{order.order_id} · {status_label(order.status)} · {format_price(order.total)}"
            )
        return "\n".join(lines)

    @staticmethod
    def format_customer(customer: Customer) -> str:
        text = (
            f"👤 {customer.username}\n"
            f"📧 {customer.email}\n"
            f"📱 {customer.phone or '-'}\n"
            f"📊 Status: {ACCOUNT_EMOJI[customer.status]} {customer.status.value}\n"
            f"🛍 Orders: {customer.total_orders}\n"
            f"🕒 Joined: {format_datetime(customer.created_at)}\n"
        )
        if customer.status_reason:
            text += f"📝 Reason: {customer.status_reason}\n"
        return text

    @staticmethod
    def format_product(product: Product) -> str:
        sizes = "\n".join(
            f"- {item.size or 'default'}: {format_price(item.price)} ({item.quantity} in stock)"
            for item in product.inventory
        ) or "- no inventory"
        return (
            f"🏷 {product.name}\n"
            f"🗂 Category: {product.category_name or product.category_id or '-'}\n"
            f"📝 {product.description or ''}\n"
            f"🔖 Discount: {format_percent(product.discount)}\n"
            f"🔄 Stock: {product.stock}\n"
            f"{sizes}\n"
        )

    @staticmethod
    def format_kol(kol: KOL) -> str:
        return (
            f"⭐️ {kol.username or kol.kol_id}\n"
            f"📧 {kol.email or '-'}\n"
            f"🔗 Referral code: {kol.referral_code or '-'}\n"
            f"🏅 Tier: {kol.tier_name or '-'}\n"
            f"📊 Status: {ACCOUNT_EMOJI[kol.status]} {kol.status.value}\n"
            f"✅ Successful purchases: {kol.successful_purchases}\n"
            f"💰 Earnings: {format_price(kol.total_earnings)}\n"
        )

    @staticmethod
    def format_application(application: KOLApplication) -> str:
        return (
            f"📝 Application #{application.application_id}\n"
            f"👤 {application.username or application.user_id}\n"
            f"📧 {application.email or '-'}\n"
            f"🌐 {application.social_media or '-'}\n"
            f"👥 Followers: {application.follower_count if application.follower_count is not None else '-'}\n"
            f"📊 Status: {application.status.value}\n"
        )

    @staticmethod
    def format_tier(tier: KOLTier) -> str:
        return (
            f"🏅 {tier.tier_name}: {format_percent(tier.commission_rate)} "
            f"from {tier.min_successful_purchases} purchases"
        )

    @staticmethod
    def format_payout(payout: Payout) -> str:
        return (
            f"💸 Payout #{payout.payout_id} · {payout.username or payout.kol_id}\n"
            f"💰 {format_price(payout.amount)} · {payout.payment_status.value}\n"
        )

    @staticmethod
    def format_review(review: Review) -> str:
        text = (
            f"💬 Review #{review.review_id} on {review.product_name or review.product_id}\n"
            f"👤 {review.username or '-'} · {'⭐️' * max(0, min(review.rating, 5))}\n"
            f"{review.comment or ''}\n"
            f"📊 Status: {review.status.value}\n"
        )
        if review.rejection_reason:
            text += f"📝 Reason: {review.rejection_reason}\n"
        return text

    @staticmethod
    def format_dashboard(data: Dict[str, Any], start_date: str, end_date: str) -> str:
        stats = data.get('stats', {}).get('data') or data.get('stats', {})
        return (
            f"📊 Dashboard {start_date} → {end_date}\n\n"
            f"🛍 Orders: {stats.get('total_orders', 0):,}\n"
            f"💰 Revenue: {format_price(stats.get('total_revenue', 0))}\n"
            f"👥 New customers: {stats.get('new_customers', 0):,}\n"
            f"⭐️ Active KOLs: {stats.get('active_kols', 0):,}\n"
        )

    @staticmethod
    def format_statistics(title: str, stats: Dict[str, Any]) -> str:
        """Backend statistics payloads vary, so scalars are listed and nested
        groups are only counted"""
        lines = [title, ""]
        for key, value in stats.items():
            label = str(key).replace('_', ' ').capitalize()
            if isinstance(value, (dict, list)):
                lines.append(f"• {label}: {len(value)} entries")
            elif isinstance(value, bool) or value is None:
                lines.append(f"• {label}: {value if value is not None else '-'}")
            elif isinstance(value, (int, float)):
                shown = format_price(value) if 'revenue' in str(key) or 'amount' in str(key) else f"{value:,}"
                lines.append(f"• {label}: {shown}")
            else:
                lines.append(f"• {label}: {value}")
        if not stats:
            lines.append("No data.")
        return "\n".join(lines)
