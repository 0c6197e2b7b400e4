# shop_admin/handlers/review_management.py
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application, ContextTypes, ConversationHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import WAITING_REJECTION_REASON, REVIEW_REJECT_GROUP
from ..models.review import ReviewStatus
from ..services.api_client import ApiClient, ApiError
from ..services.review_service import ReviewService
from ..utils.validators import ValidationError

class ReviewManagementHandler(BaseHandler):
    """Review moderation queue"""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.review_service = ReviewService(api)

    def register(self, application: Application):
        application.add_handler(ConversationHandler(
            entry_points=[CallbackQueryHandler(self.start_reject, pattern=r'^reject_review_(.+)$')],
            states={
                WAITING_REJECTION_REASON: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_reject_reason)
                ]
            },
            fallbacks=self.conversation_fallbacks(),
            allow_reentry=True
        ), group=REVIEW_REJECT_GROUP)
        application.add_handler(CallbackQueryHandler(self.show_reviews, pattern=r'^reviews_page_(\d+)$'))
        application.add_handler(CallbackQueryHandler(self.show_review, pattern=r'^review_view_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.approve, pattern=r'^approve_review_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.delete, pattern=r'^review_delete_(.+)$'))
        application.add_handler(CallbackQueryHandler(self.show_statistics, pattern=r'^reviews_stats$'))

    async def show_reviews(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Reviews waiting for moderation"""
        token = await self.authorize(update, context)
        if not token:
            return

        page = int(context.matches[0].group(1))
        try:
            result = await self.review_service.get_reviews(
                token, page=page, status=ReviewStatus.PENDING.value
            )
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = [
            [InlineKeyboardButton(
                f"{'⭐️' * max(0, min(review.rating, 5))} {review.product_name or review.product_id}",
                callback_data=f"review_view_{review.review_id}"
            )]
            for review in result['reviews']
        ]
        keyboard.append(self.keyboards.pagination_row("reviews", result['page'], result['pages']))
        keyboard.append([
            InlineKeyboardButton("📊 Statistics", callback_data="reviews_stats"),
            InlineKeyboardButton("🔙 Menu", callback_data="admin_menu")
        ])
        text = (
            f"💬 Reviews to moderate ({result['total']})"
            if result['reviews'] else "📭 No reviews waiting."
        )
        await self.reply(update, text, reply_markup=InlineKeyboardMarkup(keyboard))

    async def show_review(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        try:
            review = await self.review_service.get_review(token, context.matches[0].group(1))
        except ApiError as e:
            await self.report_error(update, e, context=context)
            return

        keyboard = []
        if review.status == ReviewStatus.PENDING:
            keyboard.append([
                InlineKeyboardButton("✅ Approve", callback_data=f"approve_review_{review.review_id}"),
                InlineKeyboardButton("❌ Reject", callback_data=f"reject_review_{review.review_id}")
            ])
        keyboard.append([InlineKeyboardButton("🗑 Delete", callback_data=f"review_delete_{review.review_id}")])
        keyboard.append([InlineKeyboardButton("🔙 Reviews", callback_data="reviews_page_1")])
        await self.reply(update, self.messages.format_review(review), reply_markup=InlineKeyboardMarkup(keyboard))

    async def approve(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        review_id = context.matches[0].group(1)
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Reviews", callback_data="reviews_page_1")]])
        try:
            await self.review_service.update_review_status(token, review_id, ReviewStatus.APPROVED)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        await self.reply(update, "✅ Review approved.", reply_markup=back)

    async def start_reject(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return ConversationHandler.END

        context.user_data['pending_review'] = context.matches[0].group(1)
        await self.reply(update, "📝 Reason for rejection:", reply_markup=self.keyboards.cancel_keyboard())
        return WAITING_REJECTION_REASON

    async def handle_reject_reason(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        review_id = context.user_data.pop('pending_review', None)
        token = context.user_data.get('token')
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Reviews", callback_data="reviews_page_1")]])
        if not token or review_id is None:
            await update.message.reply_text("❌ Nothing to reject.", reply_markup=back)
            return ConversationHandler.END

        try:
            await self.review_service.update_review_status(
                token, review_id, ReviewStatus.REJECTED, rejection_reason=update.message.text
            )
        except (ValidationError, ApiError) as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return ConversationHandler.END

        await update.message.reply_text("✅ Review rejected.", reply_markup=back)
        return ConversationHandler.END

    async def delete(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        token = await self.authorize(update, context)
        if not token:
            return

        review_id = context.matches[0].group(1)
        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Reviews", callback_data="reviews_page_1")]])
        try:
            await self.review_service.delete_review(token, review_id)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        self.logger.info(f"Review {review_id} deleted")
        await self.reply(update, "✅ Review deleted.", reply_markup=back)

    async def show_statistics(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Review counts as reported by the backend"""
        token = await self.authorize(update, context)
        if not token:
            return

        back = InlineKeyboardMarkup([[InlineKeyboardButton("🔙 Reviews", callback_data="reviews_page_1")]])
        try:
            stats = await self.review_service.get_review_statistics(token)
        except ApiError as e:
            await self.report_error(update, e, reply_markup=back, context=context)
            return

        await self.reply(update, self.messages.format_statistics("📊 Review statistics", stats), reply_markup=back)
