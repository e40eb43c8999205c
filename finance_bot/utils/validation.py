from __future__ import annotations

import re

from ..models.transaction import TITLE_MAX_LENGTH, TITLE_MIN_LENGTH, VALUE_MAX, VALUE_MIN

_CENTS_PATTERN = re.compile(r"[0-9]+")


def validate_title(raw: str) -> str:
    """Return the normalised (uppercase) title or raise ``ValueError``."""
    title = raw.strip()
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValueError(
            f"Titles must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters."
        )
    return title.upper()


def parse_value(raw: str) -> int:
    """Parse an amount typed in cents, e.g. ``"5900"`` for 59.00.

    Only plain ASCII digits are accepted; separators, signs, decimals and
    exponents are rejected.
    """
    text = raw.strip()
    if not _CENTS_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid value '{raw}'.")
    value = int(text)
    if not VALUE_MIN <= value <= VALUE_MAX:
        raise ValueError(f"Values must be between {VALUE_MIN} and {VALUE_MAX} cents.")
    return value


def parse_transaction_id(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except ValueError:
        return None
