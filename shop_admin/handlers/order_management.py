# shop_admin/handlers/order_management.py
from typing import Optional
from telegram import Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes
from .base_handler import BaseHandler
from ..models.order import Order, OrderStatus
from ..services.api_client import ApiClient, ApiError
from ..services.dashboard_service import DashboardService
from ..services.order_service import OrderService, TransitionNotAllowed
from ..services.order_status_policy import is_status_allowed
from ..utils.messages import STATUS_LABELS
from ..utils.validators import ValidationError, parse_date

class OrderManagementHandler(BaseHandler):
    """Order list, order details and the status picker.

    The order being edited is kept in ``context.user_data['order']`` and
    only replaced by what the backend returns; a failed update leaves it
    as it was. The highlighted candidate status sits next to it in
    ``context.user_data['order_selected']``.
    """

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.order_service = OrderService(api)
        self.dashboard_service = DashboardService(api)

    def register(self, application: Application):
        application.add_handler(CommandHandler("orders", self.show_orders))
        application.add_handler(CommandHandler("search_orders", self.search_orders))
        application.add_handler(CommandHandler("orders_on", self.orders_on))
        application.add_handler(CommandHandler("order_stats", self.order_stats))
        application.add_handler(CommandHandler("order", self.order_command))
        application.add_handler(CallbackQueryHandler(self.show_orders, pattern=r'^orders_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_order, pattern=r'^order_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.select_status, pattern=r'^set_status_(.+)_([a-z]+)$'))
        application.add_handler(CallbackQueryHandler(self.confirm_status, pattern=r'^confirm_status_(.+)_([a-z]+)$'))

    async def show_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Paginated order list; /orders [status] starts over without a search"""
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1)) if update.callback_query else 1
        if not update.callback_query:
            context.user_data.pop('orders_search', None)
            if context.args:
                context.user_data['orders_filter'] = context.args[0].lower()
            else:
                context.user_data.pop('orders_filter', None)
        await self._list_orders(update, context, token, page)

    async def search_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/search_orders <text>, kept while paging"""
        if not context.args:
            await update.message.reply_text("Usage: /search_orders <order id, customer or email>")
            return
        token = await self.authorize(update, context)
        if not token:
            return

        context.user_data.pop('orders_filter', None)
        context.user_data['orders_search'] = " ".join(context.args)
        await self._list_orders(update, context, token, 1)

    async def _list_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                           token: str, page: int):
        try:
            result = await self.order_service.get_orders(
                token, page=page,
                status=context.user_data.get('orders_filter'),
                search=context.user_data.get('orders_search')
            )
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        await self.reply(
            update,
            self.messages.format_order_list(
                result['orders'], result['page'], result['pages'], result['total']
            ),
            reply_markup=self.keyboards.order_list(result['orders'], result['page'], result['pages'])
        )

    async def orders_on(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/orders_on <YYYY-MM-DD>"""
        if not context.args:
            await update.message.reply_text("Usage: /orders_on <YYYY-MM-DD>")
            return
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            day = parse_date(context.args[0])
            result = await self.order_service.get_orders_by_date(token, day)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, context=context)
            return

        text = self.messages.format_order_list(
            result['orders'], result['page'], result['pages'], result['total']
        )
        await self.reply(
            update,
            f"📅 {day}\n{text}",
            reply_markup=self.keyboards.order_list(result['orders'], result['page'], result['pages'])
        )

    async def order_stats(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/order_stats [start end], the last seven days by default"""
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            if len(context.args) >= 2:
                start_date, end_date = parse_date(context.args[0]), parse_date(context.args[1])
            else:
                start_date, end_date = self.dashboard_service.weekly_range()
            stats = await self.order_service.get_order_statistics(token, start_date, end_date)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, context=context)
            return

        await self.reply(
            update,
            self.messages.format_statistics(f"📈 Orders {start_date} → {end_date}", stats),
            reply_markup=self.keyboards.back_to_menu()
        )

    async def order_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/order <id>"""
        if not context.args:
            await update.message.reply_text("Usage: /order <order id>")
            return
        token = await self.authorize(update, context)
        if token:
            await self._load_order(update, context, token, context.args[0])

    async def show_order(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if token:
            await self._load_order(update, context, token, context.matches[0].group(1))

    async def _load_order(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                          token: str, order_id: str):
        try:
            order = await self.order_service.get_order(token, order_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        context.user_data['order'] = order
        context.user_data.pop('order_selected', None)
        await self._render(update, order)

    async def select_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Highlight a candidate status; refused candidates are ignored"""
        query = update.callback_query
        token = await self.authorize(update, context, answer=False)
        if not token:
            return

        order_id, candidate = context.matches[0].group(1), context.matches[0].group(2)
        order = self._current_order(context, order_id)
        if order is None:
            await query.answer()
            await self._load_order(update, context, token, order_id)
            return

        if not is_status_allowed(order.status, order.payment_status, candidate):
            await query.answer("🚫 This status is not available for the order.", show_alert=True)
            return

        await query.answer()
        # the picker already shows this selection
        if context.user_data.get('order_selected') == candidate:
            return

        context.user_data['order_selected'] = candidate
        await self._render(update, order, selected=OrderStatus(candidate))

    async def confirm_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Send the selected status to the backend"""
        token = await self.authorize(update, context)
        if not token:
            return

        order_id, candidate = context.matches[0].group(1), context.matches[0].group(2)
        order = self._current_order(context, order_id)
        if order is None:
            await self._load_order(update, context, token, order_id)
            return

        context.user_data.pop('order_selected', None)
        try:
            updated = await self.order_service.update_order_status(token, order, candidate)
        except (TransitionNotAllowed, ApiError) as e:
            self.logger.warning(f"Status change for order #{order_id} failed: {e}")
            await self.report_error(
                update, e,
                reply_markup=self.keyboards.order_status_picker(order),
                context=context
            )
            return

        context.user_data['order'] = updated
        label = STATUS_LABELS.get(updated.status, updated.status)
        await self._render(update, updated, header=f"✅ Order status updated to {label}.\n\n")

    @staticmethod
    def _current_order(context: ContextTypes.DEFAULT_TYPE, order_id: str) -> Optional[Order]:
        order = context.user_data.get('order')
        if order is not None and str(order.order_id) == order_id:
            return order
        return None

    async def _render(self, update: Update, order: Order,
                      selected: Optional[OrderStatus] = None, header: str = ""):
        await self.reply(
            update,
            header + self.messages.format_order(order),
            reply_markup=self.keyboards.order_status_picker(order, selected)
        )
