# tests/test_handlers.py
from unittest.mock import AsyncMock

import pytest
from telegram.error import BadRequest
from telegram.ext import ConversationHandler

from shop_admin.constants import WAITING_LOGIN_PASSWORD, WAITING_STATUS_REASON, WAITING_REJECTION_REASON
from shop_admin.handlers.auth_handler import AuthHandler
from shop_admin.handlers.base_handler import BaseHandler
from shop_admin.handlers.customer_management import CustomerManagementHandler
from shop_admin.handlers.kol_management import KOLManagementHandler
from shop_admin.handlers.payout_management import PayoutManagementHandler
from shop_admin.handlers.review_management import ReviewManagementHandler
from shop_admin.models.customer import AccountStatus
from .conftest import TOKEN, callback_update, make_context, message_update, edited_text

class TestAuthHandler:
    async def test_login_flow_stores_token(self, api):
        api.responses[('POST', '/api/users/admin')] = {'token': 'fresh'}
        handler = AuthHandler(api)
        context = make_context(token=None)

        state = await handler.handle_email(message_update("admin@shop.com"), context)
        assert state == WAITING_LOGIN_PASSWORD

        update = message_update("secret")
        update.message.delete = AsyncMock()
        update.effective_chat.send_message = AsyncMock()
        state = await handler.handle_password(update, context)

        assert state == ConversationHandler.END
        assert context.user_data == {'token': 'fresh'}
        update.message.delete.assert_awaited_once()

    async def test_failed_login(self, api):
        handler = AuthHandler(api)
        context = make_context(token=None)
        context.user_data['pending_email'] = 'not-an-email'
        update = message_update("secret")
        update.message.delete = AsyncMock()
        update.effective_chat.send_message = AsyncMock()

        await handler.handle_password(update, context)

        assert 'token' not in context.user_data
        assert "Login failed" in update.effective_chat.send_message.await_args.args[0]
        assert api.calls == []

    async def test_logout_clears_session(self, api):
        context = make_context()
        await AuthHandler(api).logout(message_update("/logout"), context)
        assert context.user_data == {}

async def test_cancel_clears_pending_input():
    context = make_context()
    context.user_data['pending_review'] = '4'
    update = callback_update()

    state = await BaseHandler.cancel_conversation(update, context)

    assert state == ConversationHandler.END
    assert context.user_data == {'token': TOKEN}

async def test_leaving_keeps_pending_input():
    context = make_context()
    context.user_data['pending_review'] = '4'

    state = await BaseHandler.leave_conversation(callback_update(), context)

    assert state == ConversationHandler.END
    assert context.user_data['pending_review'] == '4'

async def test_redrawing_an_unchanged_menu_is_ignored(api):
    update = callback_update()
    update.callback_query.edit_message_text.side_effect = BadRequest(
        "Message is not modified: specified new message content and reply markup are exactly the same"
    )

    await BaseHandler(api).reply(update, "📦 Products")

    update.callback_query.edit_message_text.assert_awaited_once()

async def test_other_edit_failures_propagate(api):
    update = callback_update()
    update.callback_query.edit_message_text.side_effect = BadRequest("Message to edit not found")

    with pytest.raises(BadRequest):
        await BaseHandler(api).reply(update, "📦 Products")

class TestCustomerHandler:
    PATTERN = r'^customer_status_(.+)_(active|suspended|banned)$'

    async def test_activation_needs_no_reason(self, api):
        update = callback_update()
        context = make_context(self.PATTERN, "customer_status_5_active")

        state = await CustomerManagementHandler(api).start_status_change(update, context)

        assert state == ConversationHandler.END
        assert api.last.json == {'status': 'active', 'reason': ''}

    async def test_ban_asks_for_reason(self, api):
        handler = CustomerManagementHandler(api)
        context = make_context(self.PATTERN, "customer_status_5_banned")

        state = await handler.start_status_change(callback_update(), context)
        assert state == WAITING_STATUS_REASON
        assert context.user_data['pending_customer_status'] == ('5', AccountStatus.BANNED)
        assert api.calls == []

        update = message_update("Chargeback fraud")
        state = await handler.handle_status_reason(update, context)

        assert state == ConversationHandler.END
        assert api.last.path == '/api/customers/5/status'
        assert api.last.json == {'status': 'banned', 'reason': 'Chargeback fraud'}
        assert "banned" in update.message.reply_text.await_args.args[0]

class TestKOLHandler:
    async def test_add_tier_conversation(self, api):
        handler = KOLManagementHandler(api)
        context = make_context(r'^add_tier$', "add_tier")

        await handler.start_add_tier(callback_update(), context)
        await handler.handle_tier_name(message_update("Gold"), context)
        await handler.handle_tier_commission(message_update("12.5"), context)
        update = message_update("10")
        state = await handler.handle_tier_purchases(update, context)

        assert state == ConversationHandler.END
        assert api.last.path == '/api/kol-tiers/create'
        assert api.last.json['commission_rate'] == 12.5
        assert 'pending_tier' not in context.user_data

    async def test_invalid_tier_is_reported(self, api):
        handler = KOLManagementHandler(api)
        context = make_context()
        context.user_data['pending_tier'] = {'tier_name': 'Gold', 'commission_rate': '400'}
        update = message_update("3")

        await handler.handle_tier_purchases(update, context)

        assert api.calls == []
        assert "between 0 and 100" in update.message.reply_text.await_args.args[0]

    async def test_reject_application(self, api):
        handler = KOLManagementHandler(api)
        context = make_context(r'^reject_app_(.+)$', "reject_app_9")

        state = await handler.start_reject(callback_update(), context)
        assert state == WAITING_REJECTION_REASON

        await handler.handle_reject_reason(message_update("Not a fit"), context)
        assert api.last.path == '/api/kols/applications/9/reject'
        assert api.last.token == TOKEN

class TestReviewHandler:
    async def test_reject_review(self, api):
        handler = ReviewManagementHandler(api)
        context = make_context(r'^reject_review_(.+)$', "reject_review_4")

        await handler.start_reject(callback_update(), context)
        update = message_update("Spam")
        await handler.handle_reject_reason(update, context)

        assert api.last.json == {'status': 'rejected', 'rejection_reason': 'Spam'}
        assert "rejected" in update.message.reply_text.await_args.args[0]

    async def test_approve_review(self, api):
        update = callback_update()
        context = make_context(r'^approve_review_(.+)$', "approve_review_4")

        await ReviewManagementHandler(api).approve(update, context)

        assert api.last.json == {'status': 'approved'}
        assert "approved" in edited_text(update)

class TestPayoutHandler:
    async def test_completed_payout_offers_no_actions(self, api):
        api.responses[('GET', '/api/kol-payouts/1')] = {
            'payout': {'payout_id': 1, 'kol_id': 3, 'amount': '25', 'payment_status': 'completed'}
        }
        update = callback_update()
        context = make_context(r'^payout_view_(.+)$', "payout_view_1")

        await PayoutManagementHandler(api).show_payout(update, context)

        markup = update.callback_query.edit_message_text.await_args.kwargs['reply_markup']
        callbacks = [b.callback_data for row in markup.inline_keyboard for b in row]
        assert callbacks == ["payouts_completed"]

    async def test_set_status(self, api):
        update = callback_update()
        context = make_context(
            r'^payout_set_(.+)_(pending|processing|completed|failed)$', "payout_set_1_processing"
        )

        await PayoutManagementHandler(api).set_status(update, context)

        assert api.last.json == {'payment_status': 'processing', 'notes': ''}
        assert "processing" in edited_text(update)
