# shop_admin/bot.py
import asyncio
import logging
from typing import Optional
from telegram import Update
from telegram.ext import Application, ContextTypes
from .config import Config
from .services.api_client import ApiClient
from .handlers import (
    AdminHandler,
    AuthHandler,
    OrderManagementHandler,
    CustomerManagementHandler,
    ProductManagementHandler,
    CategoryManagementHandler,
    KOLManagementHandler,
    PayoutManagementHandler,
    ReviewManagementHandler
)

logger = logging.getLogger(__name__)

class AdminConsoleBot:
    def __init__(self, api: Optional[ApiClient] = None):
        """Build the application and wire every handler to one backend client"""
        self.api = api or ApiClient()
        self.application = Application.builder().token(Config.TELEGRAM_TOKEN).build()
        self.setup_handlers()

    def setup_handlers(self):
        # each conversation gets its own handler group, plain callbacks stay in group 0
        handlers = [
            AuthHandler(self.api),
            AdminHandler(self.api),
            OrderManagementHandler(self.api),
            CustomerManagementHandler(self.api),
            ProductManagementHandler(self.api),
            CategoryManagementHandler(self.api),
            KOLManagementHandler(self.api),
            PayoutManagementHandler(self.api),
            ReviewManagementHandler(self.api)
        ]
        for handler in handlers:
            handler.register(self.application)
        self.application.add_error_handler(self.error_handler)

    @staticmethod
    async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
        logger.error("Unhandled error while processing an update", exc_info=context.error)
        if isinstance(update, Update) and update.effective_message:
            await update.effective_message.reply_text("❌ Something went wrong, please try again.")

    async def start(self):
        """Poll Telegram until the process is stopped"""
        await self.api.connect()
        try:
            async with self.application:
                await self.application.start()
                await self.application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
                logger.info("Admin console is running")
                try:
                    await asyncio.Event().wait()
                finally:
                    await self.application.updater.stop()
                    await self.application.stop()
        finally:
            await self.api.close()
