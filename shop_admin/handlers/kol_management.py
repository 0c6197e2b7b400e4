# shop_admin/handlers/kol_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application, ContextTypes, ConversationHandler, CommandHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import (
    WAITING_STATUS_REASON, WAITING_REJECTION_REASON,
    WAITING_TIER_NAME, WAITING_TIER_COMMISSION, WAITING_TIER_PURCHASES,
    KOL_STATUS_GROUP, KOL_REJECT_GROUP, TIER_FORM_GROUP
)
from ..models.customer import AccountStatus
from ..models.kol import ApplicationStatus
from ..services.api_client import ApiClient, ApiError
from ..services.kol_service import KOLService
from ..services.kol_tier_service import KOLTierService
from ..utils.messages import ACCOUNT_EMOJI
from ..utils.validators import ValidationError

class KOLManagementHandler(BaseHandler):
    """KOL accounts, programme applications and commission tiers"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.kol_service = KOLService(api)
        self.tier_service = KOLTierService(api)

    def register(self, application: Application):
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(
                    self.start_status_change,
                    pattern=r'^kol_status_(.+)_(active|suspended|banned)$'
                )
            ],
            states={
                WAITING_STATUS_REASON: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_status_reason)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=KOL_STATUS_GROUP)
        application.add_handler(ConversationHandler(
            entry_points=[CallbackQueryHandler(self.start_reject, pattern=r'^reject_app_(.+)$')],
            states={
                WAITING_REJECTION_REASON: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_reject_reason)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=KOL_REJECT_GROUP)
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(self.start_add_tier, pattern=r'^add_tier$'),
                CallbackQueryHandler(self.start_edit_tier, pattern=r'^edit_tier_(\d+)$')
            ],
            states={
                WAITING_TIER_NAME: [
                    CommandHandler('skip', self.handle_tier_name),
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_tier_name)
                ],
                WAITING_TIER_COMMISSION: [
                    CommandHandler('skip', self.handle_tier_commission),
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_tier_commission)
                ],
                WAITING_TIER_PURCHASES: [
                    CommandHandler('skip', self.handle_tier_purchases),
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_tier_purchases)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=TIER_FORM_GROUP)
        application.add_handler(CallbackQueryHandler(self.show_kols, pattern=r'^kols_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_kol, pattern=r'^kol_view_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.show_applications, pattern=r'^kol_apps_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_application, pattern=r'^kol_app_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.approve_application, pattern=r'^approve_app_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.show_tiers, pattern=r'^kol_tiers$'))
        application.add_handler(CallbackQueryHandler(self.ask_delete_tier, pattern=r'^delete_tier_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.delete_tier, pattern=r'^confirm_delete_tier_(\d+)$'))

    # KOL accounts

    async def show_kols(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1))
        try:
            result = await self.kol_service.get_kols(token, page=page)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton(
                f"{ACCOUNT_EMOJI[kol.status]} {kol.username or kol.kol_id}",
                callback_data=f"kol_view_{kol.kol_id}"
            )]
            for kol in result['kols']
        ]
        keyboard.append(self.keyboards.pagination_row("kols", result['page'], result['pages']))
        keyboard.append([
            InlineKeyboardButton("📝 Applications", callback_data="kol_apps_page_1"),
            InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")
        ])
        await self.reply(update, f"⭐️ KOLs ({result['total']} total)", reply_markup=InlineKeyboardMarkup(keyboard))

    async def show_kol(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            kol = await self.kol_service.get_kol(token, context.matches[0].group(1))
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            self.keyboards.account_status_row("kol", kol.kol_id),
            [InlineKeyboardButton("🔙 KOLs", callback_data="kols_page_1")]
        ]
        await self.reply(update, self.messages.format_kol(kol), reply_markup=InlineKeyboardMarkup(keyboard))

    async def start_status_change(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        kol_id, status = context.matches[0].group(1), AccountStatus(context.matches[0].group(2))
        if status == AccountStatus.ACTIVE:
            await self._apply_status(update, context, token, kol_id, status, None)
            return ConversationHandler.END

        context.user_data['pending_kol_status'] = (kol_id, status)
        await self.reply(
            update,
            f"📝 Why should this KOL be {status.value}?",
            reply_markup=self.keyboards.cancel_keyboard()
        )
        return WAITING_STATUS_REASON

    async def handle_status_reason(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = context.user_data.get('token')
        pending = context.user_data.pop('pending_kol_status', None)
        if not token or pending is None:
            await update.message.reply_text("❌ Nothing to update.", reply_markup=self.keyboards.back_to_menu())
            return ConversationHandler.END

        kol_id, status = pending
        await self._apply_status(update, context, token, kol_id, status, update.message.text)
        return ConversationHandler.END

    async def _apply_status(self, update, context, token, kol_id, status: AccountStatus, reason):
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 KOL", callback_data=f"kol_view_{kol_id}")]])
        try:
            await self.kol_service.update_kol_status(token, kol_id, status, reason)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        self.logger.info(f"KOL {kol_id} set to {status.value}")
        await self.reply(update, f"✅ KOL is now {status.value}.", reply_markup=back)

    # Applications

    async def show_applications(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Pending programme applications"""
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1))
        try:
            result = await self.kol_service.get_applications(
                token, page=page, status=ApplicationStatus.PENDING.value
            )
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton(
                f"📝 #{app.application_id} {app.username or ''}".strip(),
                callback_data=f"kol_app_{app.application_id}"
            )]
            for app in result['applications']
        ]
        keyboard.append(self.keyboards.pagination_row("kol_apps", result['page'], result['pages']))
        keyboard.append([
            InlineKeyboardButton("⭐️ KOLs", callback_data="kols_page_1"),
            InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")
        ])
        text = (
            f"📝 Pending applications ({result['total']})"
            if result['applications'] else "📭 No pending applications."
        )
        await self.reply(update, text, reply_markup=InlineKeyboardMarkup(keyboard))

    async def show_application(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            application = await self.kol_service.get_application(token, context.matches[0].group(1))
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = []
        if application.status == ApplicationStatus.PENDING:
            keyboard.append([
                InlineKeyboardButton("✅ Approve", callback_data=f"approve_app_{application.application_id}"),
                InlineKeyboardButton("❌ Reject", callback_data=f"reject_app_{application.application_id}")
            ])
        keyboard.append([InlineKeyboardButton("🔙 Applications", callback_data="kol_apps_page_1")])
        await self.reply(
            update,
            self.messages.format_application(application),
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def approve_application(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        application_id = context.matches[0].group(1)
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Applications", callback_data="kol_apps_page_1")]])
        try:
            await self.kol_service.approve_application(token, application_id)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        self.logger.info(f"KOL application {application_id} approved")
        await self.reply(update, "✅ Application approved.", reply_markup=back)

    async def start_reject(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        context.user_data['pending_application'] = context.matches[0].group(1)
        await self.reply(update, "📝 Reason for rejection:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_REJECTION_REASON

    async def handle_reject_reason(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        application_id = context.user_data.pop('pending_application', None)
        token = context.user_data.get('token')
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Applications", callback_data="kol_apps_page_1")]])
        if not token or application_id is None:
            await update.message.reply_text("❌ Nothing to reject.", reply_markup=back)
            return ConversationHandler.END

        try:
            await self.kol_service.reject_application(token, application_id, update.message.text)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        self.logger.info(f"KOL application {application_id} rejected")
        await update.message.reply_text("✅ Application rejected.", reply_markup=back)
        return ConversationHandler.END

    # Tiers

    async def show_tiers(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            tiers = await self.tier_service.get_tiers(token)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        text = "🏅 Commission tiers\n\n" + (
            "\n".join(self.messages.format_tier(tier) for tier in tiers) or "No tiers yet."
        )
        keyboard = [
            [
                InlineKeyboardButton(f"✏️ {tier.tier_name}", callback_data=f"edit_tier_{tier.tier_id}"),
                InlineKeyboardButton("🗑", callback_data=f"delete_tier_{tier.tier_id}")
            ]
            for tier in tiers
        ]
        keyboard.append([InlineKeyboardButton("➕ Add tier", callback_data="add_tier")])
        keyboard.append([InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")])
        await self.reply(update, text, reply_markup=InlineKeyboardMarkup(keyboard))

    async def start_add_tier(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        context.user_data['pending_tier'] = {}
        await self.reply(update, "🏅 Tier name:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_TIER_NAME

    async def start_edit_tier(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Same form as adding, prefilled; /skip keeps a value"""
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        try:
            tier = await self.tier_service.get_tier(token, int(context.matches[0].group(1)))
        except ApiError as e:
            await self.report_error(update, e, reply_markup=self._tiers_back(), context=context)
            return ConversationHandler.END

        context.user_data['pending_tier'] = {
            'tier_id': tier.tier_id,
            'tier_name': tier.tier_name,
            'commission_rate': str(tier.commission_rate),
            'min_successful_purchases': str(tier.min_successful_purchases),
            'description': tier.description or ''
        }
        await self.reply(
            update,
            f"🏅 Tier name (now {tier.tier_name}, /skip to keep):",
            reply_markup=self.keyboards.cancel_keyboard()
        )
        return WAITING_TIER_NAME

    def _tier_value(self, update: Update, context: ContextTypes.DEFAULT_TYPE, key: str) -> bool:
        """Store the answer for ``key``; False when /skip has nothing to keep"""
        tier_data = context.user_data.setdefault('pending_tier', {})
        if update.message.text.startswith('/skip'):
            return bool(tier_data.get(key))
        tier_data[key] = update.message.text.strip()
        return True

    async def handle_tier_name(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._tier_value(update, context, 'tier_name'):
            await update.message.reply_text("⚠️ A new tier needs a name:")
            return WAITING_TIER_NAME

        current = context.user_data['pending_tier'].get('commission_rate')
        hint = f" (now {current}, /skip to keep)" if current else ""
        await update.message.reply_text(f"💯 Commission rate (0-100){hint}:")
        return WAITING_TIER_COMMISSION

    async def handle_tier_commission(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._tier_value(update, context, 'commission_rate'):
            await update.message.reply_text("⚠️ A new tier needs a commission rate (0-100):")
            return WAITING_TIER_COMMISSION

        current = context.user_data['pending_tier'].get('min_successful_purchases')
        hint = f" (now {current}, /skip to keep)" if current else ""
        await update.message.reply_text(f"🛍 Minimum successful purchases{hint}:")
        return WAITING_TIER_PURCHASES

    async def handle_tier_purchases(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._tier_value(update, context, 'min_successful_purchases'):
            await update.message.reply_text("⚠️ A new tier needs a minimum number of purchases:")
            return WAITING_TIER_PURCHASES

        tier_data = context.user_data.pop('pending_tier')
        tier_id = tier_data.pop('tier_id', None)
        token = context.user_data.get('token')
        try:
            if tier_id is None:
                await self.tier_service.create_tier(token, tier_data)
            else:
                await self.tier_service.update_tier(token, tier_id, tier_data)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=self._tiers_back(), context=context)
            return ConversationHandler.END

        action = "created" if tier_id is None else "updated"
        self.logger.info(f"KOL tier {tier_data.get('tier_name')!r} {action}")
        await update.message.reply_text(f"✅ Tier {action}.", reply_markup=self._tiers_back())
        return ConversationHandler.END

    async def ask_delete_tier(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        tier_id = int(context.matches[0].group(1))
        await self.reply(
            update,
            "⚠️ Delete this tier? KOLs on it will need a new one.",
            reply_markup=self.keyboards.confirm(f"delete_tier_{tier_id}", cancel_data="kol_tiers")
        )

    async def delete_tier(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        tier_id = int(context.matches[0].group(1))
        try:
            await self.tier_service.delete_tier(token, tier_id)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=self._tiers_back(), context=context)
            return

        self.logger.info(f"KOL tier {tier_id} deleted")
        await self.reply(update, "✅ Tier deleted.", reply_markup=self._tiers_back())

    @staticmethod
    def _tiers_back() -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Tiers", callback_data="kol_tiers")]])
