from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# Amounts are always shown as Brazilian reais, whatever the label locale.
CURRENCY_SYMBOL = "R$"
TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"
DEFAULT_TIMEZONE = "America/Sao_Paulo"

_MARKDOWN_SPECIAL = ("_", "*", "`", "[")


def format_value(cents: int) -> str:
    """Render minor units the way ``pt-BR`` formats BRL, e.g. ``R$ 1.234,56``."""
    sign = "-" if cents < 0 else ""
    units, minor = divmod(abs(int(cents)), 100)
    grouped = f"{units:,}".replace(",", ".")
    return f"{sign}{CURRENCY_SYMBOL}\u00a0{grouped},{minor:02d}"


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %s; falling back to UTC-3.", name)
        return timezone(timedelta(hours=-3))


def escape_markdown(text: str) -> str:
    for char in _MARKDOWN_SPECIAL:
        text = text.replace(char, f"\\{char}")
    return text


def bold_markdown(text: str) -> str:
    """Bold ``text`` for Telegram's legacy Markdown.

    Backslash escapes only work outside entities, so text that carries markup
    characters is escaped and left unbolded.
    """
    if any(char in text for char in _MARKDOWN_SPECIAL):
        return escape_markdown(text)
    return f"*{text}*"
