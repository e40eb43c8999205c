"""Multi-step dialogue that records, edits and deletes ledger entries.

The engine is transport agnostic: it receives a user id plus either free text
or the action attached to a tapped button, and answers with a list of
:class:`Reply` objects for the chat layer to render. Per-user progress lives in
an injected :class:`SessionStore`; committed entries go to a
:class:`LedgerStore`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from datetime import datetime
from typing import Optional

from ..models.transaction import Transaction, TransactionType, TransactionUpdate, categories_for, parse_category
from ..utils import (
    DEFAULT_TIMEZONE,
    bold_markdown,
    format_timestamp,
    format_value,
    parse_transaction_id,
    parse_value,
    resolve_timezone,
    validate_title,
)
from .labels import Labels
from .ledger import LedgerStore, LedgerWriteError, TransactionNotFoundError
from .sessions import Session, SessionStore, Step

logger = logging.getLogger(__name__)

ACTION_ADD_INCOME = "ADD_INCOME"
ACTION_ADD_EXPENSE = "ADD_EXPENSE"
ACTION_LAST = "LAST"
ACTION_EDIT = "EDIT"
ACTION_DELETE = "DELETE"
ACTION_TOTAL_EXPENSES = "TOTAL_EXPENSES"
ACTION_TOTAL_INCOME = "TOTAL_INCOME"
ACTION_CONFIRM = "CONFIRM"
ACTION_CANCEL = "CANCEL"
ACTION_CONFIRM_DELETE = "CONFIRM_DELETE"
ACTION_CANCEL_DELETE = "CANCEL_DELETE"
CATEGORY_ACTION_PREFIX = "CAT_"

LAST_TRANSACTIONS_LIMIT = 10


@dataclass(frozen=True)
class Button:
    label: str
    action: str


@dataclass
class Reply:
    """One outgoing message.

    ``edit`` asks the transport to replace the message whose button was tapped
    instead of sending a new one.
    """

    text: str
    keyboard: Optional[list[list[Button]]] = None
    markdown: bool = False
    edit: bool = False


class ConversationEngine:
    def __init__(
        self,
        store: LedgerStore,
        sessions: SessionStore,
        labels: Labels,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.sessions = sessions
        self.labels = labels
        self.clock = clock or partial(datetime.now, resolve_timezone(DEFAULT_TIMEZONE))
        self._text_handlers: dict[Step, Callable[[int, Session, str], list[Reply]]] = {
            Step.TITLE: self._on_title,
            Step.CATEGORY: self._on_category_text,
            Step.VALUE: self._on_value,
            Step.CONFIRMATION: self._on_confirmation_text,
            Step.EDIT_ID: self._on_edit_id,
            Step.DELETE_ID: self._on_delete_id,
            Step.CONFIRM_DELETE: self._on_confirm_delete_text,
        }

    # Keyboards

    def main_menu(self) -> list[list[Button]]:
        labels = self.labels
        return [
            [Button(labels.add_income_button, ACTION_ADD_INCOME)],
            [Button(labels.add_expense_button, ACTION_ADD_EXPENSE)],
            [Button(labels.last_button, ACTION_LAST)],
            [Button(labels.edit_button, ACTION_EDIT)],
            [Button(labels.delete_button, ACTION_DELETE)],
            [Button(labels.total_expenses_button, ACTION_TOTAL_EXPENSES)],
            [Button(labels.total_income_button, ACTION_TOTAL_INCOME)],
        ]

    def category_menu(self, tx_type: TransactionType) -> list[list[Button]]:
        return [
            [Button(self.labels.category_names[category], f"{CATEGORY_ACTION_PREFIX}{category.value}")]
            for category in categories_for(tx_type)
        ]

    def _yes_no(self, yes_action: str, no_action: str) -> list[list[Button]]:
        return [
            [Button(self.labels.yes_button, yes_action)],
            [Button(self.labels.no_button, no_action)],
        ]

    def _menu_reply(self) -> Reply:
        return Reply(self.labels.main_menu_prompt, keyboard=self.main_menu())

    def _expired(self) -> list[Reply]:
        return [Reply(self.labels.session_expired), self._menu_reply()]

    def summary(self, transaction: Transaction | Session) -> str:
        labels = self.labels
        return (
            f"🆔 ID: {transaction.id}\n"
            f"📌 {bold_markdown(transaction.title or '')}\n"
            f"💼 {labels.type_names[transaction.type]}\n"
            f"📂 {labels.category_names[transaction.category]}\n"
            f"💰 {format_value(transaction.value)}\n"
            f"🕒 {transaction.created_at}"
        )

    # Entry points

    def handle_start(self, user_id: int) -> list[Reply]:
        self.sessions.discard(user_id)
        return [self._menu_reply()]

    def handle_text(self, user_id: int, text: str) -> list[Reply]:
        text = text.strip()
        if text.casefold() in self.labels.cancel_keywords:
            self.sessions.discard(user_id)
            return [Reply(self.labels.operation_cancelled, keyboard=self.main_menu())]

        session = self.sessions.get(user_id)
        if session is None:
            self.sessions.start(user_id, Session(step=Step.TITLE))
            return [Reply(self.labels.transaction_title_prompt)]
        return self._text_handlers[session.step](user_id, session, text)

    def handle_button(self, user_id: int, action: str) -> list[Reply]:
        if action in (ACTION_ADD_INCOME, ACTION_ADD_EXPENSE):
            tx_type = TransactionType.INCOME if action == ACTION_ADD_INCOME else TransactionType.EXPENSE
            self.sessions.start(user_id, Session(step=Step.TITLE, type=tx_type))
            return [Reply(self.labels.title_prompts[tx_type])]
        if action == ACTION_LAST:
            return [self._last_transactions()]
        if action == ACTION_TOTAL_EXPENSES:
            return [self._total(TransactionType.EXPENSE, self.labels.total_expenses)]
        if action == ACTION_TOTAL_INCOME:
            return [self._total(TransactionType.INCOME, self.labels.total_income)]
        if action == ACTION_EDIT:
            return self._start_selection(user_id, Step.EDIT_ID)
        if action == ACTION_DELETE:
            return self._start_selection(user_id, Step.DELETE_ID)
        if action.startswith(CATEGORY_ACTION_PREFIX):
            return self._on_category(user_id, action[len(CATEGORY_ACTION_PREFIX) :])
        if action == ACTION_CONFIRM:
            return self._on_confirm(user_id)
        if action == ACTION_CANCEL:
            self.sessions.discard(user_id)
            return [Reply(self.labels.transaction_cancelled, edit=True), self._menu_reply()]
        if action == ACTION_CONFIRM_DELETE:
            return self._on_confirm_delete(user_id)
        if action == ACTION_CANCEL_DELETE:
            self.sessions.discard(user_id)
            return [Reply(self.labels.deletion_cancelled, edit=True), self._menu_reply()]
        logger.warning("Ignoring unknown button action %r from user %s", action, user_id)
        return self._expired()

    # Menu actions that do not touch the session

    def _last_transactions(self) -> Reply:
        records = self.store.last_n(LAST_TRANSACTIONS_LIMIT)
        if not records:
            return Reply(self.labels.no_transactions_found)
        return Reply("\n\n".join(self.summary(record) for record in records), markdown=True)

    def _total(self, tx_type: TransactionType, template: str) -> Reply:
        total, count = self.store.total_by_type(tx_type)
        return Reply(template.format(total=format_value(total), count=count))

    def _start_selection(self, user_id: int, step: Step) -> list[Reply]:
        records = self.store.load_all()
        if not records:
            empty = self.labels.no_transactions_to_edit if step is Step.EDIT_ID else self.labels.no_transactions_to_delete
            return [Reply(empty)]
        listing = "\n".join(
            f"{record.id} - {record.title} ({self.labels.type_names[record.type]})" for record in records
        )
        self.sessions.start(user_id, Session(step=step))
        template = self.labels.edit_id_prompt if step is Step.EDIT_ID else self.labels.delete_id_prompt
        return [Reply(template.format(listing=listing))]

    # Text steps

    def _on_title(self, user_id: int, session: Session, text: str) -> list[Reply]:
        try:
            session.title = validate_title(text)
        except ValueError:
            return [Reply(self.labels.invalid_title)]
        session.step = Step.CATEGORY
        return [Reply(self.labels.choose_category, keyboard=self.category_menu(session.type))]

    def _on_category_text(self, user_id: int, session: Session, text: str) -> list[Reply]:
        return [Reply(self.labels.choose_category_with_buttons, keyboard=self.category_menu(session.type))]

    def _on_value(self, user_id: int, session: Session, text: str) -> list[Reply]:
        try:
            session.value = parse_value(text)
        except ValueError:
            return [Reply(self.labels.invalid_value)]
        if session.id is None:
            session.id = self.store.next_id()
        if session.created_at is None:
            session.created_at = format_timestamp(self.clock())
        session.step = Step.CONFIRMATION
        return [
            Reply(
                f"{self.labels.confirm_save_header}\n\n{self.summary(session)}",
                keyboard=self._yes_no(ACTION_CONFIRM, ACTION_CANCEL),
                markdown=True,
            )
        ]

    def _on_confirmation_text(self, user_id: int, session: Session, text: str) -> list[Reply]:
        return [Reply(self.labels.confirm_with_buttons, keyboard=self._yes_no(ACTION_CONFIRM, ACTION_CANCEL))]

    def _on_edit_id(self, user_id: int, session: Session, text: str) -> list[Reply]:
        record = self._lookup(text)
        if record is None:
            return [Reply(self.labels.invalid_id)]
        self.sessions.start(user_id, Session.from_transaction(record, Step.TITLE))
        return [Reply(self.labels.new_title_prompts[record.type])]

    def _on_delete_id(self, user_id: int, session: Session, text: str) -> list[Reply]:
        record = self._lookup(text)
        if record is None:
            return [Reply(self.labels.invalid_id)]
        self.sessions.start(user_id, Session.from_transaction(record, Step.CONFIRM_DELETE))
        return [
            Reply(
                f"{self.labels.confirm_delete_header}\n\n{self.summary(record)}",
                keyboard=self._yes_no(ACTION_CONFIRM_DELETE, ACTION_CANCEL_DELETE),
                markdown=True,
            )
        ]

    def _on_confirm_delete_text(self, user_id: int, session: Session, text: str) -> list[Reply]:
        return [
            Reply(
                self.labels.confirm_delete_with_buttons,
                keyboard=self._yes_no(ACTION_CONFIRM_DELETE, ACTION_CANCEL_DELETE),
            )
        ]

    def _lookup(self, text: str) -> Transaction | None:
        transaction_id = parse_transaction_id(text)
        if transaction_id is None:
            return None
        return self.store.find_by_id(transaction_id)

    # Button steps

    def _on_category(self, user_id: int, raw: str) -> list[Reply]:
        session = self.sessions.get(user_id)
        if session is None or session.step is not Step.CATEGORY:
            return self._expired()
        try:
            session.category = parse_category(session.type, raw)
        except ValueError:
            return [Reply(self.labels.choose_category_with_buttons, keyboard=self.category_menu(session.type))]
        session.step = Step.VALUE
        return [Reply(self.labels.value_prompt.format(type=self.labels.type_names[session.type]), edit=True)]

    def _on_confirm(self, user_id: int) -> list[Reply]:
        session = self.sessions.get(user_id)
        if session is None or session.step is not Step.CONFIRMATION:
            return self._expired()
        record = session.to_transaction()
        try:
            record = self._persist(record)
        except LedgerWriteError:
            logger.exception("Failed to save transaction %s for user %s", record.id, user_id)
            return [Reply(self.labels.save_failed, keyboard=self._yes_no(ACTION_CONFIRM, ACTION_CANCEL))]

        self.sessions.discard(user_id)
        return [
            Reply(
                f"{self.labels.saved_headers[record.type]}\n\n{self.summary(record)}",
                markdown=True,
                edit=True,
            ),
            self._menu_reply(),
        ]

    def _persist(self, record: Transaction) -> Transaction:
        # A stored record with the same id is overwritten, otherwise the entry is new.
        changes = TransactionUpdate(
            title=record.title,
            type=record.type,
            category=record.category,
            value=record.value,
        )
        try:
            return self.store.update_in_place(record.id, changes)
        except TransactionNotFoundError:
            return self.store.append(record)

    def _on_confirm_delete(self, user_id: int) -> list[Reply]:
        session = self.sessions.get(user_id)
        if session is None or session.step is not Step.CONFIRM_DELETE:
            return self._expired()
        try:
            removed = self.store.delete_by_id(session.id)
        except LedgerWriteError:
            logger.exception("Failed to delete transaction %s for user %s", session.id, user_id)
            return [
                Reply(
                    self.labels.delete_failed,
                    keyboard=self._yes_no(ACTION_CONFIRM_DELETE, ACTION_CANCEL_DELETE),
                )
            ]

        self.sessions.discard(user_id)
        if removed is None:
            return [Reply(self.labels.transaction_missing, edit=True), self._menu_reply()]
        return [
            Reply(f"{self.labels.deleted_header}\n\n{self.summary(removed)}", markdown=True, edit=True),
            self._menu_reply(),
        ]
