from .conversation import Button, ConversationEngine, Reply
from .labels import Labels, get_labels
from .ledger import (
    IdStrategy,
    LedgerError,
    LedgerStore,
    LedgerWriteError,
    TransactionNotFoundError,
)
from .sessions import Session, SessionStore, Step

__all__ = [
    "Button",
    "ConversationEngine",
    "Reply",
    "Labels",
    "get_labels",
    "IdStrategy",
    "LedgerError",
    "LedgerStore",
    "LedgerWriteError",
    "TransactionNotFoundError",
    "Session",
    "SessionStore",
    "Step",
]
