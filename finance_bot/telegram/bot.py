from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

import anyio
from telegram import (
    BotCommand,
    CallbackQuery,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    Message,
    Update,
)
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import (
    AIORateLimiter,
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..config import Settings, get_settings
from ..services import Button, ConversationEngine, LedgerStore, Reply, SessionStore, get_labels
from ..utils import resolve_timezone

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = ["message", "callback_query"]
BOT_COMMANDS = [
    BotCommand("start", "Show the main menu"),
]


def build_engine(settings: Settings) -> ConversationEngine:
    """Wire the ledger store, session store and label table from settings."""
    zone = resolve_timezone(settings.bot_timezone)
    return ConversationEngine(
        LedgerStore(settings.ledger_path, id_strategy=settings.ledger_id_strategy),
        SessionStore(),
        get_labels(settings.bot_locale),
        clock=lambda: datetime.now(zone),
    )


def _keyboard(rows: list[list[Button]] | None) -> InlineKeyboardMarkup | None:
    if not rows:
        return None
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(button.label, callback_data=button.action) for button in row] for row in rows]
    )


def _is_message_not_modified_error(error: Exception) -> bool:
    return "message is not modified" in str(error).lower()


async def _safe_edit_message(
    query: CallbackQuery,
    text: str,
    *,
    parse_mode: str | None,
    reply_markup: InlineKeyboardMarkup | None,
) -> None:
    try:
        await query.edit_message_text(text, parse_mode=parse_mode, reply_markup=reply_markup)
    except BadRequest as exc:
        if not _is_message_not_modified_error(exc):
            raise


async def _send_replies(
    message: Message,
    replies: list[Reply],
    *,
    query: CallbackQuery | None = None,
) -> None:
    for reply in replies:
        parse_mode = ParseMode.MARKDOWN if reply.markdown else None
        markup = _keyboard(reply.keyboard)
        if reply.edit and query is not None:
            await _safe_edit_message(query, reply.text, parse_mode=parse_mode, reply_markup=markup)
        else:
            await message.reply_text(reply.text, parse_mode=parse_mode, reply_markup=markup)


def _engine(context: ContextTypes.DEFAULT_TYPE) -> ConversationEngine:
    return context.application.bot_data["engine"]


async def _run_engine(func: Callable[..., list[Reply]], *args: Any) -> list[Reply]:
    # Store calls block on file I/O; keep them off the event loop.
    return await anyio.to_thread.run_sync(func, *args)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.message
    user = update.effective_user
    if message is None or user is None:
        return
    replies = await _run_engine(_engine(context).handle_start, user.id)
    await _send_replies(message, replies)


async def text_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.message
    user = update.effective_user
    if message is None or user is None or message.text is None:
        return
    replies = await _run_engine(_engine(context).handle_text, user.id, message.text)
    await _send_replies(message, replies)


async def button_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    if query is None or not query.data or query.from_user is None:
        return
    await query.answer()
    replies = await _run_engine(_engine(context).handle_button, query.from_user.id, query.data)
    if query.message is None:
        logger.warning("Callback %r arrived without its message; replies dropped.", query.data)
        return
    await _send_replies(query.message, replies, query=query)


def _create_application(
    token: str,
    engine: ConversationEngine,
    *,
    post_init: Callable[[Application], Coroutine[Any, Any, None]] | None = None,
) -> Application:
    builder = Application.builder().token(token).rate_limiter(AIORateLimiter())
    if post_init is not None:
        builder = builder.post_init(post_init)
    application = builder.build()
    application.bot_data["engine"] = engine
    application.add_handler(CommandHandler("start", start))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, text_message))
    application.add_handler(CallbackQueryHandler(button_callback))
    return application


async def _set_commands(application: Application) -> None:
    try:
        await application.bot.set_my_commands(BOT_COMMANDS)
    except Exception:
        logger.exception("Failed to set Telegram command list.")


_application: Application | None = None
_lock = asyncio.Lock()


async def init_bot() -> None:
    """Initialise the Telegram bot for webhook delivery through FastAPI."""
    settings = get_settings()
    if not settings.telegram_bot_token or not settings.telegram_webhook_secret:
        logger.info("Telegram bot or webhook secret not configured; skipping bot initialisation.")
        return

    async with _lock:
        global _application
        if _application is not None:
            return

        application = _create_application(settings.telegram_bot_token, build_engine(settings))
        try:
            await application.initialize()
            await application.start()
            await _set_commands(application)
            if settings.telegram_register_webhook_on_start:
                if not settings.backend_base_url:
                    logger.warning("BACKEND_BASE_URL is missing; skipping Telegram webhook registration.")
                else:
                    webhook_url = (
                        str(settings.backend_base_url).rstrip("/")
                        + f"/api/telegram/webhook/{settings.telegram_webhook_secret}"
                    )
                    await application.bot.set_webhook(
                        url=webhook_url,
                        drop_pending_updates=False,
                        allowed_updates=ALLOWED_UPDATES,
                    )
                    logger.info("Telegram webhook registered.")
        except Exception:
            logger.exception("Failed to initialise Telegram bot; bot disabled for this run.")
            with contextlib.suppress(Exception):
                await application.stop()
            with contextlib.suppress(Exception):
                await application.shutdown()
            return

        _application = application
        logger.info("Telegram bot ready; ledger at %s", settings.ledger_path)


async def handle_update(payload: dict[str, Any]) -> None:
    """Process a Telegram update forwarded by FastAPI."""
    async with _lock:
        if _application is None:
            raise RuntimeError("Telegram bot is not initialised.")
        application = _application
    update = Update.de_json(payload, application.bot)
    await application.process_update(update)


async def shutdown_bot() -> None:
    """Tear down the Telegram bot."""
    async with _lock:
        global _application
        if _application is None:
            return
        await _application.stop()
        await _application.shutdown()
        _application = None


def run_polling() -> None:  # pragma: no cover - long-running entry point
    """Run the bot with long polling, without the FastAPI server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.telegram_bot_token:
        raise SystemExit("Set TELEGRAM_BOT_TOKEN to run the bot.")
    application = _create_application(
        settings.telegram_bot_token,
        build_engine(settings),
        post_init=_set_commands,
    )
    logger.info("Finance bot is running in polling mode; ledger at %s", settings.ledger_path)
    application.run_polling(allowed_updates=ALLOWED_UPDATES)
