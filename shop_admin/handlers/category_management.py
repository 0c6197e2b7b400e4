# shop_admin/handlers/category_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application, ContextTypes, ConversationHandler, CommandHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import WAITING_CATEGORY_NAME, WAITING_CATEGORY_DESCRIPTION, CATEGORY_ADD_GROUP
from ..services.api_client import ApiClient, ApiError
from ..services.category_service import CategoryService
from ..utils.validators import ValidationError

class CategoryManagementHandler(BaseHandler):
    """Category tree management"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.category_service = CategoryService(api)

    def register(self, application: Application):
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(self.start_add_category, pattern=r'^add_category$'),
                CallbackQueryHandler(self.start_add_category, pattern=r'^add_subcategory_(\d+)$')
            ],
            states={
                WAITING_CATEGORY_NAME: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_category_name)
                ],
                WAITING_CATEGORY_DESCRIPTION: [
                    CommandHandler('skip', self.handle_category_description),
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_category_description)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=CATEGORY_ADD_GROUP)
        application.add_handler(CallbackQueryHandler(self.show_categories_menu, pattern=r'^manage_categories$'))
        application.add_handler(CallbackQueryHandler(self.view_category, pattern=r'^view_category_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.ask_delete, pattern=r'^delete_(category|subcategory)_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.delete, pattern=r'^confirm_delete_(category|subcategory)_(\d+)$'))

    async def show_categories_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Top-level categories"""
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            categories = await self.category_service.get_categories(token)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton("➕ Add category", callback_data="add_category")],
        ]
        for category in categories:
            keyboard.append([
                InlineKeyboardButton(
                    f"📁 {category.name}",
                    callback_data=f"view_category_{category.category_id}"
                )
            ])
        keyboard.append([InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")])

        await self.reply(
            update,
            "🗂 Categories\n"
            "Pick a category to manage it:",
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def view_category(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Subcategories of one category"""
        token = await self.authorize(update, context)
        if not token:
            return

        category_id = int(context.matches[0].group(1))
        try:
            subcategories = await self.category_service.get_subcategories(token, category_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        message = f"📁 Category #{category_id}\n\nSubcategories:\n"
        if subcategories:
            message += "".join(f"- {sub.name}\n" for sub in subcategories)
        else:
            message += "- none\n"

        keyboard = [
            [InlineKeyboardButton(f"❌ {sub.name}", callback_data=f"delete_subcategory_{sub.category_id}")]
            for sub in subcategories
        ]
        keyboard.extend([
            [InlineKeyboardButton("➕ Add subcategory", callback_data=f"add_subcategory_{category_id}")],
            [InlineKeyboardButton("🗑 Delete category", callback_data=f"delete_category_{category_id}")],
            [InlineKeyboardButton("🔙 Categories", callback_data="manage_categories")]
        ])

        await self.reply(update, message, reply_markup=InlineKeyboardMarkup(keyboard))

    async def start_add_category(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Start adding a category, or a subcategory when a parent is given"""
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        groups = context.matches[0].groups()
        context.user_data['pending_category_parent'] = int(groups[0]) if groups else None

        await self.reply(update, "📝 Category name:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_CATEGORY_NAME

    async def handle_category_name(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data['pending_category_name'] = update.message.text.strip()
        await update.message.reply_text(
            "📝 Description (or /skip):",
            reply_markup=self.keyboards.cancel_keyboard()
        )
        return WAITING_CATEGORY_DESCRIPTION

    async def handle_category_description(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Create the category"""
        text = update.message.text
        description = None if text.startswith('/skip') else text.strip()
        name = context.user_data.pop('pending_category_name', '')
        parent_id = context.user_data.pop('pending_category_parent', None)
        token = context.user_data.get('token')

        back_data = f"view_category_{parent_id}" if parent_id else "manage_categories"
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Back", callback_data=back_data)]])

        try:
            if parent_id:
                await self.category_service.create_subcategory(token, parent_id, name, description)
            else:
                await self.category_service.create_category(token, name, description)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        self.logger.info(f"Category {name!r} created (parent {parent_id})")
        await update.message.reply_text("✅ Category created.", reply_markup=back)
        return ConversationHandler.END

    async def ask_delete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        kind, item_id = context.matches[0].group(1), context.matches[0].group(2)
        warning = (
            "⚠️ Delete this category with all its subcategories?"
            if kind == "category" else "⚠️ Delete this subcategory?"
        )
        await self.reply(
            update,
            warning,
            reply_markup=self.keyboards.confirm(f"delete_{kind}_{item_id}", cancel_data="manage_categories")
        )

    async def delete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        kind, item_id = context.matches[0].group(1), int(context.matches[0].group(2))
        try:
            if kind == "category":
                await self.category_service.delete_category(token, item_id)
            else:
                await self.category_service.delete_subcategory(token, item_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        self.logger.info(f"Deleted {kind} {item_id}")
        await self.reply(
            update,
            "✅ Deleted.",
            reply_markup=InlineKeyboardMarkup([[
                InlineKeyboardButton("🔙 Categories", callback_data="manage_categories")
            ]])
        )
