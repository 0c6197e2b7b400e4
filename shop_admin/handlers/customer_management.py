# shop_admin/handlers/customer_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application, ContextTypes, ConversationHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import (
    WAITING_STATUS_REASON, WAITING_CUSTOMER_FIELD, CUSTOMER_STATUS_GROUP, CUSTOMER_EDIT_GROUP
)
from ..models.customer import AccountStatus
from ..services.api_client import ApiClient, ApiError
from ..services.customer_service import CustomerService
from ..utils.messages import ACCOUNT_EMOJI
from ..utils.validators import ValidationError

CUSTOMER_FIELDS = ("username", "email", "phone")

class CustomerManagementHandler(BaseHandler):
    """Customer accounts"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.customer_service = CustomerService(api)

    def register(self, application: Application):
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(
                    self.start_status_change,
                    pattern=r'^customer_status_(.+)_(active|suspended|banned)$'
                )
            ],
            states={
                WAITING_STATUS_REASON: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_status_reason)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=CUSTOMER_STATUS_GROUP)
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(self.start_edit, pattern=r'^customer_edit_(.+)_(username|email|phone)$')
            ],
            states={
                WAITING_CUSTOMER_FIELD: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_edit)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=CUSTOMER_EDIT_GROUP)
        application.add_handler(CallbackQueryHandler(self.show_customers, pattern=r'^customers_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_customer, pattern=r'^customer_view_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.ask_delete, pattern=r'^customer_delete_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.delete_customer, pattern=r'^confirm_customer_delete_(.+)$'))

    async def show_customers(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Paginated customer list"""
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1))
        try:
            result = await self.customer_service.get_customers(token, page=page)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        customers = result['customers']
        if not customers:
            await self.reply(update, "📭 No customers found.", reply_markup=self.keyboards.back_to_menu())
            return

        keyboard = [
            [InlineKeyboardButton(
                f"{ACCOUNT_EMOJI[customer.status]} {customer.username}",
                callback_data=f"customer_view_{customer.user_id}"
            )]
            for customer in customers
        ]
        keyboard.append(self.keyboards.pagination_row("customers", result['page'], result['pages']))
        keyboard.append([InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")])

        await self.reply(
            update,
            f"👥 Customers ({result['total']} total)",
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def show_customer(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        customer_id = context.matches[0].group(1)
        try:
            customer = await self.customer_service.get_customer(token, customer_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            self.keyboards.account_status_row("customer", customer.user_id),
            [
                InlineKeyboardButton(f"✏️ {field}", callback_data=f"customer_edit_{customer.user_id}_{field}")
                for field in CUSTOMER_FIELDS
            ],
            [InlineKeyboardButton("🗑 Delete", callback_data=f"customer_delete_{customer.user_id}")],
            [InlineKeyboardButton("🔙 Customers", callback_data="customers_page_1")]
        ]
        await self.reply(
            update,
            self.messages.format_customer(customer),
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def start_status_change(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Activate right away; suspensions and bans ask for a reason first"""
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        customer_id, status = context.matches[0].group(1), AccountStatus(context.matches[0].group(2))
        if status == AccountStatus.ACTIVE:
            await self._apply_status(update, context, token, customer_id, status, None)
            return ConversationHandler.END

        context.user_data['pending_customer_status'] = (customer_id, status)
        await self.reply(
            update,
            f"📝 Why should this account be {status.value}?",
            reply_markup=self.keyboards.cancel_keyboard()
        )
        return WAITING_STATUS_REASON

    async def handle_status_reason(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = context.user_data.get('token')
        pending = context.user_data.pop('pending_customer_status', None)
        if not token or pending is None:
            await update.message.reply_text("❌ Nothing to update.", reply_markup=self.keyboards.back_to_menu())
            return ConversationHandler.END

        customer_id, status = pending
        await self._apply_status(update, context, token, customer_id, status, update.message.text)
        return ConversationHandler.END

    async def _apply_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE, token: str,
                            customer_id: str, status: AccountStatus, reason):
        back = InlineKeyboardMarkup([[
            InlineKeyboardButton("🔙 Customer", callback_data=f"customer_view_{customer_id}")
        ]])
        try:
            await self.customer_service.change_status(token, customer_id, status, reason)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        self.logger.info(f"Customer {customer_id} set to {status.value}")
        await self.reply(update, f"✅ Customer is now {status.value}.", reply_markup=back)

    async def ask_delete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        customer_id = context.matches[0].group(1)
        await self.reply(
            update,
            "⚠️ Delete this customer account? This cannot be undone.",
            reply_markup=self.keyboards.confirm(
                f"customer_delete_{customer_id}",
                cancel_data=f"customer_view_{customer_id}"
            )
        )

    async def delete_customer(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        customer_id = context.matches[0].group(1)
        try:
            await self.customer_service.delete_customer(token, customer_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        self.logger.info(f"Customer {customer_id} deleted")
        await self.reply(
            update,
            "✅ Customer deleted.",
            reply_markup=InlineKeyboardMarkup([[
                InlineKeyboardButton("🔙 Customers", callback_data="customers_page_1")
            ]])
        )

    async def start_edit(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Ask for a new username, email or phone"""
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        customer_id, field = context.matches[0].group(1), context.matches[0].group(2)
        context.user_data['pending_customer_edit'] = (customer_id, field)
        await self.reply(update, f"📝 New {field}:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_CUSTOMER_FIELD

    async def handle_edit(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = context.user_data.get('token')
        pending = context.user_data.pop('pending_customer_edit', None)
        if not token or pending is None:
            await update.message.reply_text("❌ Nothing to update.", reply_markup=self.keyboards.back_to_menu())
            return ConversationHandler.END

        customer_id, field = pending
        back = InlineKeyboardMarkup([[
            InlineKeyboardButton("🔙 Customer", callback_data=f"customer_view_{customer_id}")
        ]])
        try:
            customer = await self.customer_service.get_customer(token, customer_id)
            data = {
                'username': customer.username,
                'email': customer.email,
                'phone': customer.phone,
                'status': customer.status.value,
                'status_reason': customer.status_reason,
                field: update.message.text.strip()
            }
            await self.customer_service.update_customer(token, customer_id, data)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        self.logger.info(f"Customer {customer_id} {field} updated")
        await update.message.reply_text(f"✅ {field.capitalize()} updated.", reply_markup=back)
        return ConversationHandler.END
