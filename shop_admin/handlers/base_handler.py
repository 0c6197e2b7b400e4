# shop_admin/handlers/base_handler.py
import logging
from typing import List, Optional
from telegram import InlineKeyboardMarkup, Update
from telegram.error import BadRequest
from telegram.ext import (
    BaseHandler as TelegramHandler, CallbackQueryHandler, CommandHandler,
    ContextTypes, ConversationHandler, MessageHandler, filters
)
from ..config import Config
from ..services.api_client import ApiClient, ApiError
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages
from ..utils.validators import ValidationError

class BaseHandler:
    """Shared plumbing for the admin console handlers"""
    def __init__(self, api: ApiClient):
        self.api = api
        self.keyboards = Keyboards()
        self.messages = Messages()
        self.logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    def conversation_fallbacks() -> List[TelegramHandler]:
        """/cancel and the cancel button abort the prompt; any other button or
        command silently leaves it so the next prompt gets the admin's text"""
        return [
            CommandHandler('cancel', BaseHandler.cancel_conversation),
            CallbackQueryHandler(BaseHandler.cancel_conversation, pattern='^cancel$'),
            CallbackQueryHandler(BaseHandler.leave_conversation),
            MessageHandler(filters.COMMAND, BaseHandler.leave_conversation)
        ]

    @staticmethod
    async def leave_conversation(update: Update, context: ContextTypes.DEFAULT_TYPE):
        # the update itself is handled in another group
        return ConversationHandler.END

    @staticmethod
    async def cancel_conversation(update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Abort the current conversation"""
        for key in [k for k in context.user_data if k.startswith('pending_')]:
            context.user_data.pop(key)
        if update.callback_query:
            await update.callback_query.answer()
            await update.callback_query.edit_message_text(
                "❌ Cancelled.", reply_markup=Keyboards.back_to_menu()
            )
        else:
            await update.message.reply_text("❌ Cancelled.", reply_markup=Keyboards.back_to_menu())
        return ConversationHandler.END

    async def is_admin(self, user_id: int) -> bool:
        """Check console access"""
        return user_id in Config.ADMIN_IDS

    async def reply(self, update: Update, text: str,
                    reply_markup: Optional[InlineKeyboardMarkup] = None):
        """Edit the menu message for button presses, answer otherwise"""
        if update.callback_query:
            try:
                await update.callback_query.edit_message_text(text, reply_markup=reply_markup)
            except BadRequest as e:
                if 'not modified' not in str(e).lower():
                    raise
        else:
            await update.effective_message.reply_text(text, reply_markup=reply_markup)

    async def authorize(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                        answer: bool = True) -> Optional[str]:
        """Backend token of a logged-in admin, or None after telling the user why not.

        With ``answer=False`` a button press is only acknowledged on failure,
        leaving the caller free to answer it with an alert.
        """
        if update.callback_query and answer:
            await update.callback_query.answer()

        token = context.user_data.get('token')
        allowed = await self.is_admin(update.effective_user.id)
        if update.callback_query and not answer and not (allowed and token):
            await update.callback_query.answer()

        if not allowed:
            await self.reply(update, "⛔️ You do not have access to this console.")
            return None

        if not token:
            await self.reply(update, "🔐 Please /login first.")
            return None
        return token

    async def report_error(self, update: Update, error: Exception,
                           reply_markup: Optional[InlineKeyboardMarkup] = None,
                           context: Optional[ContextTypes.DEFAULT_TYPE] = None):
        """Show a failed backend call or rejected form to the user"""
        if isinstance(error, ValidationError):
            text = "⚠️ " + "\n⚠️ ".join(error.errors.values())
        elif isinstance(error, ApiError) and error.status == 401:
            if context is not None:
                context.user_data.pop('token', None)
            text = "🔐 Session expired, please /login again."
        elif isinstance(error, ApiError):
            self.logger.warning(f"Backend error: {error.message} (HTTP {error.status})")
            text = f"❌ {error.message}"
        else:
            text = f"❌ {error}"
        await self.reply(update, text, reply_markup=reply_markup or self.keyboards.back_to_menu())
