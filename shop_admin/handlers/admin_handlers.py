# shop_admin/handlers/admin_handlers.py
from telegram import Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes
from .base_handler import BaseHandler
from ..services.api_client import ApiClient, ApiError
from ..services.dashboard_service import DashboardService

class AdminHandler(BaseHandler):
    """Admin panel and dashboard reports"""
    
    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.dashboard_service = DashboardService(api)

    def register(self, application: Application):
        application.add_handler(CommandHandler("start", self.admin_panel))
        application.add_handler(CommandHandler("admin", self.admin_panel))
        application.add_handler(CommandHandler("help", self.help))
        application.add_handler(CallbackQueryHandler(self.admin_panel, pattern='^admin_menu$'))
        application.add_handler(CallbackQueryHandler(self.show_report, pattern='^report_(daily|weekly|monthly)$'))
        application.add_handler(CallbackQueryHandler(self.export_report, pattern='^report_export_(daily|weekly|monthly)$'))
        application.add_handler(CallbackQueryHandler(self.noop, pattern='^noop$'))

    async def admin_panel(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show the admin panel"""
        if update.callback_query:
            await update.callback_query.answer()

        if not await self.is_admin(update.effective_user.id):
            await self.reply(update, "⛔️ You do not have access to this console.")
            return

        if not context.user_data.get('token'):
            await self.reply(update, "👋 Welcome to the shop admin console.\nPlease /login to continue.")
            return

        await self.reply(
            update,
            "🔧 Admin panel\n\n"
            "Choose a section:",
            reply_markup=self.keyboards.admin_menu()
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.message.reply_text(
            "Commands:\n"
            "/login - sign in with your admin account\n"
            "/logout - sign out\n"
            "/admin - open the admin panel\n"
            "/orders [status] - list orders\n"
            "/search_orders <text> - search orders\n"
            "/orders_on <YYYY-MM-DD> - orders placed on a day\n"
            "/order_stats [start end] - order statistics\n"
            "/order <id> - open an order\n"
            "/cancel - abort the current step"
        )

    async def show_report(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Dashboard figures for today, the last week or the month so far"""
        token = await self.authorize(update, context)
        if not token:
            return

        period = context.matches[0].group(1)
        start_date, end_date = self._period_range(period)

        try:
            data = await self.dashboard_service.refresh_dashboard(token, start_date, end_date)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = self.keyboards.report_menu(period)
        await self.reply(
            update,
            self.messages.format_dashboard(data, start_date, end_date),
            reply_markup=keyboard
        )

    async def noop(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Inert buttons (page counters, unavailable statuses)"""
        await update.callback_query.answer()

    async def export_report(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Send the dashboard figures for a period as a CSV file"""
        token = await self.authorize(update, context)
        if not token:
            return

        period = context.matches[0].group(1)
        start_date, end_date = self._period_range(period)
        try:
            report = await self.dashboard_service.export_data(token, start_date, end_date)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=self.keyboards.report_menu(period), context=context)
            return

        await update.effective_message.reply_document(
            document=report, filename=f"dashboard_{start_date}_{end_date}.csv"
        )

    def _period_range(self, period: str):
        return {
            'daily': self.dashboard_service.daily_range,
            'weekly': self.dashboard_service.weekly_range,
            'monthly': self.dashboard_service.monthly_range
        }[period]()
