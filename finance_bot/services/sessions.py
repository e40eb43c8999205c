from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.transaction import Category, Transaction, TransactionType


class Step(str, Enum):
    TITLE = "TITLE"
    CATEGORY = "CATEGORY"
    VALUE = "VALUE"
    CONFIRMATION = "CONFIRMATION"
    EDIT_ID = "EDIT_ID"
    DELETE_ID = "DELETE_ID"
    CONFIRM_DELETE = "CONFIRM_DELETE"


@dataclass
class Session:
    """Position of one user in the dialogue plus the transaction built so far."""

    step: Step
    type: TransactionType = TransactionType.EXPENSE
    id: Optional[int] = None
    created_at: Optional[str] = None
    title: Optional[str] = None
    category: Optional[Category] = None
    value: Optional[int] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction, step: Step) -> "Session":
        return cls(
            step=step,
            type=transaction.type,
            id=transaction.id,
            created_at=transaction.created_at,
            title=transaction.title,
            category=transaction.category,
            value=transaction.value,
        )

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            created_at=self.created_at,
            title=self.title,
            type=self.type,
            category=self.category,
            value=self.value,
        )


class SessionStore:
    """In-memory sessions keyed by chat user id; nothing survives a restart."""

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}

    def get(self, user_id: int) -> Session | None:
        return self._sessions.get(user_id)

    def start(self, user_id: int, session: Session) -> Session:
        """Install ``session`` for ``user_id``, replacing any session in progress."""
        self._sessions[user_id] = session
        return session

    def discard(self, user_id: int) -> None:
        self._sessions.pop(user_id, None)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
