# shop_admin/handlers/product_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application, ContextTypes, ConversationHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import (
    WAITING_PRODUCT_NAME, WAITING_PRODUCT_DESCRIPTION, WAITING_PRODUCT_CATEGORY,
    WAITING_PRODUCT_DISCOUNT, WAITING_PRODUCT_INVENTORY, WAITING_PRODUCT_FIELD,
    PRODUCT_ADD_GROUP, PRODUCT_EDIT_GROUP
)
from ..services.api_client import ApiClient, ApiError
from ..services.product_service import ProductService
from ..utils.validators import ValidationError, parse_inventory

# editable field -> key in the product form
PRODUCT_FIELDS = {
    'name': 'name',
    'description': 'description',
    'category': 'category_id',
    'discount': 'discount',
    'inventory': 'inventory'
}
INVENTORY_HELP = "One line per size: size price quantity, e.g.\nS 19.90 4\nM 19.90 10"

class ProductManagementHandler(BaseHandler):
    """Product catalogue: browsing, the add and edit forms, removal"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.product_service = ProductService(api)

    def register(self, application: Application):
        text = filters.TEXT & ~filters.COMMAND
        application.add_handler(ConversationHandler(
            entry_points=[CallbackQueryHandler(self.start_add, pattern=r'^product_add$')],
            states={
                WAITING_PRODUCT_NAME: [MessageHandler(text, self.handle_name)],
                WAITING_PRODUCT_DESCRIPTION: [MessageHandler(text, self.handle_description)],
                WAITING_PRODUCT_CATEGORY: [MessageHandler(text, self.handle_category)],
                WAITING_PRODUCT_DISCOUNT: [MessageHandler(text, self.handle_discount)],
                WAITING_PRODUCT_INVENTORY: [MessageHandler(text, self.handle_inventory)]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=PRODUCT_ADD_GROUP)
        application.add_handler(ConversationHandler(
            entry_points=[
                CallbackQueryHandler(
                    self.start_edit,
                    pattern=r'^product_edit_(.+)_(name|description|category|discount|inventory)$'
                )
            ],
            states={
                WAITING_PRODUCT_FIELD: [MessageHandler(text, self.handle_edit)]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=PRODUCT_EDIT_GROUP)
        application.add_handler(CallbackQueryHandler(self.show_products, pattern=r'^products_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_product, pattern=r'^product_view_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.ask_delete, pattern=r'^product_delete_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.delete_product, pattern=r'^confirm_product_delete_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.delete_image, pattern=r'^product_image_delete_(.+)_(.+)$'))

    async def show_products(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Paginated product list"""
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1))
        try:
            result = await self.product_service.get_products(token, page=page)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        products = result['products']
        add_row = [InlineKeyboardButton("➕ Add product", callback_data="product_add")]
        if not products:
            await self.reply(
                update, "📭 No products found.",
                reply_markup=InlineKeyboardMarkup([
                    add_row, [InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")]
                ])
            )
            return

        keyboard = [
            [InlineKeyboardButton(
                f"{product.name} (stock: {product.stock})",
                callback_data=f"product_view_{product.product_id}"
            )]
            for product in products
        ]
        keyboard.append(self.keyboards.pagination_row("products", result['page'], result['pages']))
        keyboard.append(add_row)
        keyboard.append([InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")])

        await self.reply(
            update,
            f"📦 Products ({result['total']} total)",
            reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def show_product(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        product_id = context.matches[0].group(1)
        try:
            product = await self.product_service.get_product(token, product_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton(
                f"🖼 Remove image {index}",
                callback_data=f"product_image_delete_{product.product_id}_{image.image_id}"
            )]
            for index, image in enumerate(product.images, start=1)
        ]
        edit_buttons = [
            InlineKeyboardButton(f"✏️ {field}", callback_data=f"product_edit_{product.product_id}_{field}")
            for field in PRODUCT_FIELDS
        ]
        keyboard.append(edit_buttons[:3])
        keyboard.append(edit_buttons[3:])
        keyboard.append([InlineKeyboardButton("🗑 Delete product", callback_data=f"product_delete_{product.product_id}")])
        keyboard.append([InlineKeyboardButton("🔙 Products", callback_data="products_page_1")])

        await self.reply(update, self.messages.format_product(product), reply_markup=InlineKeyboardMarkup(keyboard))

    # Add form

    async def start_add(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        context.user_data['pending_product'] = {}
        await self.reply(update, "📦 Product name:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_PRODUCT_NAME

    async def handle_name(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data.setdefault('pending_product', {})['name'] = update.message.text.strip()
        await update.message.reply_text("📝 Description:")
        return WAITING_PRODUCT_DESCRIPTION

    async def handle_description(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data.setdefault('pending_product', {})['description'] = update.message.text.strip()
        await update.message.reply_text("📂 Category id:")
        return WAITING_PRODUCT_CATEGORY

    async def handle_category(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data.setdefault('pending_product', {})['category_id'] = update.message.text.strip()
        await update.message.reply_text("🏷 Discount in percent (0 for none):")
        return WAITING_PRODUCT_DISCOUNT

    async def handle_discount(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        context.user_data.setdefault('pending_product', {})['discount'] = update.message.text.strip()
        await update.message.reply_text(f"📏 Sizes and prices.\n{INVENTORY_HELP}")
        return WAITING_PRODUCT_INVENTORY

    async def handle_inventory(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Products", callback_data="products_page_1")]])
        try:
            inventory = parse_inventory(update.message.text)
        except ValidationError as e:
            # stay on this step so the sizes can be typed again
            await self.report_error(update, e, reply_markup=self.keyboards.cancel_keyboard())
            return WAITING_PRODUCT_INVENTORY

        product_data = context.user_data.pop('pending_product', {})
        product_data['inventory'] = inventory
        try:
            await self.product_service.add_product(context.user_data.get('token'), product_data)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        self.logger.info(f"Product {product_data.get('name')!r} added")
        await update.message.reply_text("✅ Product added.", reply_markup=back)
        return ConversationHandler.END

    # Edit form

    async def start_edit(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Ask for one new value; the rest of the form comes from the backend"""
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        product_id, field = context.matches[0].group(1), context.matches[0].group(2)
        context.user_data['pending_product_edit'] = (product_id, field)
        prompt = f"📏 New sizes and prices.\n{INVENTORY_HELP}" if field == 'inventory' else f"📝 New {field}:"
        await self.reply(update, prompt, reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_PRODUCT_FIELD

    async def handle_edit(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = context.user_data.get('token')
        pending = context.user_data.pop('pending_product_edit', None)
        if not token or pending is None:
            await update.message.reply_text("❌ Nothing to update.", reply_markup=self.keyboards.back_to_menu())
            return ConversationHandler.END

        product_id, field = pending
        back = InlineKeyboardMarkup([[
            InlineKeyboardButton("🔙 Product", callback_data=f"product_view_{product_id}")
        ]])
        try:
            value = (
                parse_inventory(update.message.text) if field == 'inventory'
                else update.message.text.strip()
            )
            current = await self.product_service.get_product_for_edit(token, product_id)
            product_data = {key: current.get(key) for key in PRODUCT_FIELDS.values()}
            product_data[PRODUCT_FIELDS[field]] = value
            await self.product_service.update_product(token, product_id, product_data)
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        self.logger.info(f"Product {product_id} {field} updated")
        await update.message.reply_text(f"✅ {field.capitalize()} updated.", reply_markup=back)
        return ConversationHandler.END

    async def ask_delete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        product_id = context.matches[0].group(1)
        await self.reply(
            update,
            "⚠️ Delete this product?",
            reply_markup=self.keyboards.confirm(
                f"product_delete_{product_id}",
                cancel_data=f"product_view_{product_id}"
            )
        )

    async def delete_product(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        product_id = context.matches[0].group(1)
        try:
            await self.product_service.delete_product(token, product_id)
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        self.logger.info(f"Product {product_id} deleted")
        await self.reply(
            update,
            "✅ Product deleted.",
            reply_markup=InlineKeyboardMarkup([[
                InlineKeyboardButton("🔙 Products", callback_data="products_page_1")
            ]])
        )

    async def delete_image(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        product_id, image_id = context.matches[0].group(1), context.matches[0].group(2)
        back = InlineKeyboardMarkup([[
            InlineKeyboardButton("🔙 Product", callback_data=f"product_view_{product_id}")
        ]])
        try:
            await self.product_service.delete_product_image(token, image_id)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        await self.reply(update, "✅ Image removed.", reply_markup=back)
