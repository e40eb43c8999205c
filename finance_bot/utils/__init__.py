from .formatting import (
    DEFAULT_TIMEZONE,
    bold_markdown,
    escape_markdown,
    format_timestamp,
    format_value,
    resolve_timezone,
)
from .validation import parse_transaction_id, parse_value, validate_title

__all__ = [
    "DEFAULT_TIMEZONE",
    "bold_markdown",
    "escape_markdown",
    "format_timestamp",
    "format_value",
    "parse_transaction_id",
    "parse_value",
    "resolve_timezone",
    "validate_title",
]
