# shop_admin/handlers/payout_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import Application, CallbackQueryHandler, ContextTypes
from .base_handler import BaseHandler
from ..models.kol import PayoutStatus
from ..services.api_client import ApiClient, ApiError
from ..services.payout_service import PayoutService
from ..utils.formatters import format_price

# statuses a payout may be moved to from each status
PAYOUT_ACTIONS = {
    PayoutStatus.PENDING: [PayoutStatus.PROCESSING, PayoutStatus.FAILED],
    PayoutStatus.PROCESSING: [PayoutStatus.COMPLETED, PayoutStatus.FAILED],
    PayoutStatus.FAILED: [PayoutStatus.PENDING],
    PayoutStatus.COMPLETED: []
}

class PayoutManagementHandler(BaseHandler):
    """KOL commission payouts"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.payout_service = PayoutService(api)

    def register(self, application: Application):
        application.add_handler(CallbackQueryHandler(
            self.show_payouts, pattern=r'^payouts_(pending|processing|completed|failed)$'
        ))
        application.add_handler(CallbackQueryHandler(self.show_eligible, pattern=r'^payouts_eligible$'))
        application.add_handler(CallbackQueryHandler(self.generate, pattern=r'^payouts_generate$'))
        application.add_handler(CallbackQueryHandler(
            self.export, pattern=r'^payouts_export_(pending|processing|completed|failed)$'
        ))
        application.add_handler(CallbackQueryHandler(self.show_payout, pattern=r'^payout_view_(.+)$'))
        application.add_handler(CallbackQueryHandler(
            self.set_status, pattern=r'^payout_set_(.+)_(pending|processing|completed|failed)$'
        ))

    async def show_payouts(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        status = PayoutStatus(context.matches[0].group(1))
        try:
            result = await self.payout_service.get_payouts(token, status=status.value)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton(
                f"#{payout.payout_id} {payout.username or payout.kol_id} · {format_price(payout.amount)}",
                callback_data=f"payout_view_{payout.payout_id}"
            )]
            for payout in result['payouts']
        ]
        keyboard.append([
            InlineKeyboardButton(
                f"• {s.value}" if s == status else s.value,
                callback_data=f"payouts_{s.value}"
            )
            for s in PayoutStatus
        ])
        keyboard.append([
            InlineKeyboardButton("🧾 Eligible KOLs", callback_data="payouts_eligible"),
            InlineKeyboardButton("📤 Export", callback_data=f"payouts_export_{status.value}"),
            InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")
        ])
        text = (
            f"💸 {status.value.capitalize()} payouts ({result['total']})"
            if result['payouts'] else f"📭 No {status.value} payouts."
        )
        await self.reply(update, text, reply_markup=InlineKeyboardMarkup(keyboard))

    async def show_eligible(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """KOLs owed commission that have no payout yet"""
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            eligible = await self.payout_service.get_eligible_payouts(token)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        context.user_data['pending_payouts'] = eligible
        if not eligible:
            await self.reply(
                update, "📭 No KOLs are eligible for a payout.",
                reply_markup=InlineKeyboardMarkup([[
                    InlineKeyboardButton("🔙 Payouts", callback_data="payouts_pending")
                ]])
            )
            return

        lines = [
            f"- {row.get('username') or row.get('kol_id')}: {format_price(row.get('amount', 0))}"
            for row in eligible
        ]
        keyboard = [
            [InlineKeyboardButton(f"✅ Generate {len(eligible)} payouts", callback_data="payouts_generate")],
            [InlineKeyboardButton("🔙 Payouts", callback_data="payouts_pending")]
        ]
        await self.reply(
            update,
            "🧾 Eligible KOLs\n\n" + "\n".join(lines),
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def generate(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        eligible = context.user_data.pop('pending_payouts', None)
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Payouts", callback_data="payouts_pending")]])
        if not eligible:
            await self.reply(update, "❌ Nothing to generate.", reply_markup=back)
            return

        payout_data = [
            {'kol_id': row.get('kol_id'), 'amount': row.get('amount')}
            for row in eligible
        ]
        try:
            await self.payout_service.generate_payouts(token, payout_data)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        await self.reply(update, f"✅ {len(payout_data)} payouts generated.", reply_markup=back)

    async def export(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Send the payout report for one status as a CSV file"""
        token = await self.authorize(update, context)
        if not token:
            return

        status = PayoutStatus(context.matches[0].group(1))
        try:
            report = await self.payout_service.export_payout_report(token, status=status.value)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        self.logger.info(f"Exported {status.value} payouts ({len(report)} bytes)")
        await update.effective_message.reply_document(
            document=report, filename=f"payouts_{status.value}.csv"
        )

    async def show_payout(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            payout = await self.payout_service.get_payout(token, context.matches[0].group(1))
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        await self.reply(
            update,
            self.messages.format_payout(payout),
            reply_markup=self._payout_keyboard(payout.payout_id, payout.payment_status)
        )

    async def set_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        payout_id = context.matches[0].group(1)
        status = PayoutStatus(context.matches[0].group(2))
        try:
            await self.payout_service.update_payout_status(token, payout_id, status)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        self.logger.info(f"Payout {payout_id} set to {status.value}")
        await self.reply(
            update,
            f"✅ Payout #{payout_id} is now {status.value}.",
            reply_markup=self._payout_keyboard(payout_id, status)
        )

    @staticmethod
    def _payout_keyboard(payout_id, status: PayoutStatus) -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton(
                f"➡️ {target.value}", callback_data=f"payout_set_{payout_id}_{target.value}"
            ) for target in PAYOUT_ACTIONS[status]],
            [InlineKeyboardButton("🔙 Payouts", callback_data=f"payouts_{status.value}")]
        ]
        return InlineKeyboardMarkup([row for row in keyboard if row])
