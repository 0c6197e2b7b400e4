# tests/conftest.py
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram import Update, User

# Config reads the environment at import time
os.environ.setdefault("TELEGRAM_TOKEN", "123456:test-token")
os.environ.setdefault("BACKEND_URL", "http://backend.test")
os.environ["ADMIN_IDS"] = "42"
os.environ["CURRENCY"] = "$"
os.environ["TZ"] = "UTC"

ADMIN_ID = 42
TOKEN = "admin-token"
# a zero date would turn callback messages into InaccessibleMessage
SENT_AT = 1700000000

@dataclass
class Call:
    method: str
    path: str
    token: Optional[str]
    params: Optional[Dict[str, Any]]
    json: Optional[Dict[str, Any]]
    raw: bool

class FakeApi:
    """Stands in for ApiClient and records every request"""

    def __init__(self, responses: Optional[Dict[tuple, Any]] = None):
        self.responses = responses or {}
        self.calls: List[Call] = []
        self.error: Optional[Exception] = None

    async def request(self, method, path, token=None, params=None, json=None, raw=False):
        self.calls.append(Call(method, path, token, params, json, raw))
        if self.error is not None:
            raise self.error
        return self.responses.get((method, path), {'success': True})

    async def get(self, path, token=None, **kwargs):
        return await self.request('GET', path, token=token, **kwargs)

    async def post(self, path, token=None, **kwargs):
        return await self.request('POST', path, token=token, **kwargs)

    async def put(self, path, token=None, **kwargs):
        return await self.request('PUT', path, token=token, **kwargs)

    async def patch(self, path, token=None, **kwargs):
        return await self.request('PATCH', path, token=token, **kwargs)

    async def delete(self, path, token=None, **kwargs):
        return await self.request('DELETE', path, token=token, **kwargs)

    @property
    def last(self) -> Call:
        return self.calls[-1]

@pytest.fixture
def api():
    return FakeApi()

def callback_update(user_id: int = ADMIN_ID):
    update = MagicMock()
    update.effective_user.id = user_id
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    return update

def message_update(text: str = "", user_id: int = ADMIN_ID):
    update = MagicMock()
    update.callback_query = None
    update.effective_user.id = user_id
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_message = update.message
    return update

def make_context(pattern: Optional[str] = None, data: str = "", token: Optional[str] = TOKEN,
                 args: Optional[list] = None):
    context = MagicMock()
    context.user_data = {'token': token} if token else {}
    context.matches = [re.match(pattern, data)] if pattern else []
    context.args = args or []
    return context

def edited_text(update) -> str:
    return update.callback_query.edit_message_text.await_args.args[0]

class Console:
    """A real Application with every handler registered, fed raw Telegram updates.

    Bot API calls are replaced by mocks, so ``edits``, ``replies`` and
    ``documents`` hold what the admin would have seen.
    """

    def __init__(self, api: FakeApi):
        from shop_admin.bot import AdminConsoleBot

        self.app = AdminConsoleBot(api).application
        self.app._initialized = True
        # commands are matched against the bot username, normally fetched by initialize()
        self.app.bot._bot_user = User(id=1, first_name="Console", is_bot=True, username="shop_console_bot")
        self.app.add_error_handler(self._collect_error)
        self.errors: List[BaseException] = []
        self.update_id = 0
        self.screen: List[str] = []
        self.answers = AsyncMock()
        self.edits = AsyncMock(side_effect=self._show)
        self.replies = AsyncMock(side_effect=self._show)
        self.documents = AsyncMock()

    async def _collect_error(self, update, context):
        self.errors.append(context.error)

    def _show(self, text, *args, **kwargs):
        self.screen.append(text)

    @property
    def user_data(self) -> Dict[str, Any]:
        return self.app.user_data[ADMIN_ID]

    def _sender(self, user_id: int) -> Dict[str, Any]:
        return {"id": user_id, "is_bot": False, "first_name": "Admin"}

    async def _process(self, data: Dict[str, Any]):
        with patch("telegram.CallbackQuery.answer", self.answers), \
             patch("telegram.CallbackQuery.edit_message_text", self.edits), \
             patch("telegram.Message.reply_text", self.replies), \
             patch("telegram.Message.reply_document", self.documents), \
             patch("telegram.Message.delete", AsyncMock()), \
             patch("telegram.Chat.send_message", self.replies):
            await self.app.process_update(Update.de_json(data, self.app.bot))

    async def press(self, callback_data: str, user_id: int = ADMIN_ID):
        """Tap an inline button"""
        self.update_id += 1
        await self._process({
            "update_id": self.update_id,
            "callback_query": {
                "id": str(self.update_id),
                "chat_instance": "admin-chat",
                "data": callback_data,
                "from": self._sender(user_id),
                "message": {
                    "message_id": 1, "date": SENT_AT, "text": "menu",
                    "chat": {"id": user_id, "type": "private"}
                }
            }
        })

    async def send(self, text: str, user_id: int = ADMIN_ID):
        """Type a message or command"""
        self.update_id += 1
        message = {
            "message_id": self.update_id, "date": SENT_AT, "text": text,
            "chat": {"id": user_id, "type": "private"},
            "from": self._sender(user_id)
        }
        if text.startswith("/"):
            command = text.split()[0]
            message["entities"] = [{"type": "bot_command", "offset": 0, "length": len(command)}]
        await self._process({"update_id": self.update_id, "message": message})

    @property
    def last(self) -> str:
        """Latest text the admin sees"""
        return self.screen[-1]

@pytest.fixture
def console(api):
    console = Console(api)
    console.user_data['token'] = TOKEN
    yield console
    assert console.errors == []
