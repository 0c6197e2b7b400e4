# shop_admin/handlers/auth_handler.py
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import (
    Application, ContextTypes, ConversationHandler, CommandHandler,
    MessageHandler, filters
)
from .base_handler import BaseHandler
from ..constants import WAITING_LOGIN_EMAIL, WAITING_LOGIN_PASSWORD, LOGIN_GROUP
from ..services.api_client import ApiClient, ApiError
from ..services.auth_service import AuthService
from ..utils.validators import ValidationError

class AuthHandler(BaseHandler):
    """Backend login for console admins"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.auth_service = AuthService(api)

    def register(self, application: Application):
        application.add_handler(ConversationHandler(
            entry_points=[CommandHandler('login', self.start_login)],
            states={
                WAITING_LOGIN_EMAIL: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_email)
                ],
                WAITING_LOGIN_PASSWORD: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_password)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=LOGIN_GROUP)
        application.add_handler(CommandHandler('logout', self.logout))

    async def start_login(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not await self.is_admin(update.effective_user.id):
            await update.message.reply_text("⛔️ You do not have access to this console.")
            return ConversationHandler.END

        await update.message.reply_text("📧 Admin email:")
        return WAITING_LOGIN_EMAIL

    async def handle_email(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data['pending_email'] = update.message.text.strip()
        await update.message.reply_text("🔑 Password:")
        return WAITING_LOGIN_PASSWORD

    async def handle_password(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        password = update.message.text
        email = context.user_data.pop('pending_email', '')

        # keep the password out of the chat history
        try:
            await update.message.delete()
        except TelegramError as e:
            self.logger.debug(f"Could not delete password message: {e}")

        try:
            token = await self.auth_service.login(email, password)
        except (ValidationError, ApiError) as e:
            await update.effective_chat.send_message(f"❌ Login failed: {e}")
            return ConversationHandler.END

        context.user_data['token'] = token
        await update.effective_chat.send_message(
            "✅ Logged in.",
            reply_markup=self.keyboards.admin_menu()
        )
        return ConversationHandler.END

    async def logout(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data.clear()
        await update.message.reply_text("👋 Logged out.")
