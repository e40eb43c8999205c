from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest import IsolatedAsyncioTestCase, TestCase
from unittest.mock import AsyncMock

from telegram import InlineKeyboardMarkup
from telegram.constants import ParseMode
from telegram.error import BadRequest

from finance_bot.config import Settings
from finance_bot.services import ConversationEngine, LedgerStore, SessionStore, Step
from finance_bot.services.conversation import Button, Reply
from finance_bot.services.labels import ENGLISH, PORTUGUESE
from finance_bot.services.ledger import IdStrategy
from finance_bot.telegram import bot

USER = SimpleNamespace(id=528101001, full_name="Ana Tester")


class DummyMessage:
    """Minimal stand-in for a Telegram message used in handlers."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.reply_text = AsyncMock()


class DummyCallbackQuery:
    def __init__(self, data: str, *, from_user=None, message=None) -> None:
        self.data = data
        self.from_user = from_user
        self.message = message
        self.answer = AsyncMock()
        self.edit_message_text = AsyncMock()


class TelegramBotTests(IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = LedgerStore(Path(self._tmp.name) / "finances.json")
        self.sessions = SessionStore()
        self.engine = ConversationEngine(
            self.store,
            self.sessions,
            ENGLISH,
            clock=lambda: datetime(2024, 5, 17, 9, 30, 15),
        )
        self.context = SimpleNamespace(application=SimpleNamespace(bot_data={"engine": self.engine}))

    async def _text(self, text: str) -> DummyMessage:
        message = DummyMessage(text)
        update = SimpleNamespace(message=message, effective_user=USER)
        await bot.text_message(update, self.context)
        return message

    async def _tap(self, data: str) -> tuple[DummyCallbackQuery, DummyMessage]:
        message = DummyMessage()
        query = DummyCallbackQuery(data, from_user=USER, message=message)
        await bot.button_callback(SimpleNamespace(callback_query=query), self.context)
        return query, message

    async def test_start_command_shows_main_menu(self) -> None:
        message = DummyMessage("/start")
        update = SimpleNamespace(message=message, effective_user=USER)

        await bot.start(update, self.context)

        message.reply_text.assert_awaited_once()
        call_args = message.reply_text.await_args
        self.assertEqual(call_args.args[0], "WHAT WOULD YOU LIKE TO DO?")
        markup = call_args.kwargs["reply_markup"]
        self.assertIsInstance(markup, InlineKeyboardMarkup)
        self.assertEqual(len(markup.inline_keyboard), 7)
        self.assertEqual(markup.inline_keyboard[0][0].callback_data, "ADD_INCOME")
        self.assertIsNone(call_args.kwargs["parse_mode"])

    async def test_add_button_prompts_for_title(self) -> None:
        query, message = await self._tap("ADD_EXPENSE")

        query.answer.assert_awaited_once()
        message.reply_text.assert_awaited_once()
        self.assertEqual(message.reply_text.await_args.args[0], "WHAT IS THE EXPENSE TITLE?")
        self.assertEqual(self.sessions.get(USER.id).step, Step.TITLE)

    async def test_full_flow_through_handlers(self) -> None:
        await self._tap("ADD_EXPENSE")

        message = await self._text("Groceries run")
        markup = message.reply_text.await_args.kwargs["reply_markup"]
        self.assertIn("CAT_FOOD", [row[0].callback_data for row in markup.inline_keyboard])

        query, message = await self._tap("CAT_FOOD")
        query.edit_message_text.assert_awaited_once()
        self.assertEqual(
            query.edit_message_text.await_args.args[0],
            "WHAT IS THE EXPENSE VALUE? (EX: 5900 FOR R$ 59.00)",
        )
        message.reply_text.assert_not_awaited()

        message = await self._text("4599")
        call_args = message.reply_text.await_args
        self.assertIn("R$\u00a045,99", call_args.args[0])
        self.assertEqual(call_args.kwargs["parse_mode"], ParseMode.MARKDOWN)

        query, message = await self._tap("CONFIRM")
        self.assertTrue(query.edit_message_text.await_args.args[0].startswith("✅ EXPENSE SAVED SUCCESSFULLY!"))
        self.assertEqual(query.edit_message_text.await_args.kwargs["parse_mode"], ParseMode.MARKDOWN)
        self.assertEqual(message.reply_text.await_args.args[0], "WHAT WOULD YOU LIKE TO DO?")

        (saved,) = self.store.load_all()
        self.assertEqual(saved.title, "GROCERIES RUN")
        self.assertEqual(saved.value, 4599)

    async def test_cancel_keyword_replies_with_menu(self) -> None:
        await self._tap("ADD_INCOME")
        message = await self._text("cancelar")

        call_args = message.reply_text.await_args
        self.assertEqual(call_args.args[0], "❌ OPERATION CANCELLED.")
        self.assertIsInstance(call_args.kwargs["reply_markup"], InlineKeyboardMarkup)
        self.assertNotIn(USER.id, self.sessions)

    async def test_unchanged_message_edit_is_ignored(self) -> None:
        await self._tap("ADD_EXPENSE")
        await self._text("Groceries run")
        message = DummyMessage()
        query = DummyCallbackQuery("CAT_FOOD", from_user=USER, message=message)
        query.edit_message_text.side_effect = BadRequest("Message is not modified")

        await bot.button_callback(SimpleNamespace(callback_query=query), self.context)

        self.assertEqual(self.sessions.get(USER.id).step, Step.VALUE)

    async def test_other_edit_errors_propagate(self) -> None:
        await self._tap("ADD_EXPENSE")
        await self._text("Groceries run")
        query = DummyCallbackQuery("CAT_FOOD", from_user=USER, message=DummyMessage())
        query.edit_message_text.side_effect = BadRequest("Message to edit not found")

        with self.assertRaises(BadRequest):
            await bot.button_callback(SimpleNamespace(callback_query=query), self.context)

    async def test_callback_without_message_is_dropped(self) -> None:
        query = DummyCallbackQuery("ADD_INCOME", from_user=USER, message=None)

        with self.assertLogs("finance_bot.telegram.bot", level="WARNING"):
            await bot.button_callback(SimpleNamespace(callback_query=query), self.context)

        query.answer.assert_awaited_once()
        self.assertEqual(self.sessions.get(USER.id).step, Step.TITLE)

    async def test_updates_without_user_are_ignored(self) -> None:
        message = DummyMessage("hello")
        await bot.text_message(SimpleNamespace(message=message, effective_user=None), self.context)
        message.reply_text.assert_not_awaited()
        self.assertEqual(len(self.sessions), 0)

    async def test_handle_update_requires_running_bot(self) -> None:
        with self.assertRaises(RuntimeError):
            await bot.handle_update({"update_id": 1})


class KeyboardTests(TestCase):
    def test_keyboard_maps_actions_to_callback_data(self) -> None:
        markup = bot._keyboard([[Button("✅ YES", "CONFIRM")], [Button("❌ NO", "CANCEL")]])
        self.assertEqual(
            [[button.callback_data for button in row] for row in markup.inline_keyboard],
            [["CONFIRM"], ["CANCEL"]],
        )
        self.assertEqual(markup.inline_keyboard[0][0].text, "✅ YES")

    def test_no_keyboard(self) -> None:
        self.assertIsNone(bot._keyboard(None))
        self.assertIsNone(bot._keyboard(Reply("text").keyboard))


class BuildEngineTests(TestCase):
    def test_engine_follows_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings = Settings(
                LEDGER_PATH=Path(tmp) / "ledger.json",
                LEDGER_ID_STRATEGY="length",
                BOT_LOCALE="pt_BR",
                BOT_TIMEZONE="America/Sao_Paulo",
            )
            engine = bot.build_engine(settings)

        self.assertIs(engine.labels, PORTUGUESE)
        self.assertEqual(engine.store.path, Path(tmp) / "ledger.json")
        self.assertIs(engine.store.id_strategy, IdStrategy.LENGTH)
        self.assertEqual(engine.clock().utcoffset().total_seconds(), -3 * 3600)

    def test_defaults_to_monotonic_ids(self) -> None:
        engine = bot.build_engine(Settings())
        self.assertIs(engine.store.id_strategy, IdStrategy.MONOTONIC)
