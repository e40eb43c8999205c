from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..models.transaction import Transaction, TransactionType, TransactionUpdate

logger = logging.getLogger(__name__)

_SNAPSHOT_ADAPTER = TypeAdapter(list[Transaction])


class LedgerError(Exception):
    """Base class for ledger store failures."""


class LedgerWriteError(LedgerError):
    """Raised when the snapshot file cannot be written."""


class TransactionNotFoundError(LedgerError):
    """Raised when a transaction cannot be found."""


class IdStrategy(str, Enum):
    # ``length`` reuses ids after deletions; ``monotonic`` never does.
    LENGTH = "length"
    MONOTONIC = "monotonic"


def _serialise(records: Iterable[Transaction]) -> str:
    payload = [record.model_dump(mode="json") for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False)


class LedgerStore:
    """Ordered collection of transactions kept in a single JSON snapshot file.

    Every operation reads the snapshot afresh, so several stores pointing at
    the same path observe each other's writes. Mutations are serialised with a
    process-local lock; writers in other processes are not coordinated.

    A snapshot that cannot be validated reads as empty. Before the first
    mutation overwrites it, the file is moved aside to
    ``<name>.corrupt-<timestamp>`` so its records can be recovered by hand.
    """

    def __init__(self, path: str | Path, *, id_strategy: IdStrategy | str = IdStrategy.MONOTONIC) -> None:
        self.path = Path(path)
        self.id_strategy = IdStrategy(id_strategy)
        self._lock = threading.RLock()

    def _read(self) -> list[Transaction]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        return _SNAPSHOT_ADAPTER.validate_json(raw)

    def load_all(self) -> list[Transaction]:
        """Return every record in insertion order; a missing or corrupt snapshot reads as empty."""
        try:
            return self._read()
        except OSError:
            logger.warning("Could not read ledger snapshot %s; treating it as empty.", self.path, exc_info=True)
            return []
        except ValidationError as exc:
            logger.warning(
                "Ledger snapshot %s is corrupt (%d errors); treating it as empty.",
                self.path,
                exc.error_count(),
            )
            return []

    def _load_for_update(self) -> list[Transaction]:
        """Read the records a mutation starts from, never losing an unreadable snapshot."""
        try:
            return self._read()
        except OSError as exc:
            raise LedgerWriteError(f"Could not read ledger snapshot {self.path} before writing") from exc
        except ValidationError as exc:
            backup = self._quarantine()
            logger.warning(
                "Ledger snapshot %s is corrupt (%d errors); moved it to %s and starting a new one.",
                self.path,
                exc.error_count(),
                backup,
            )
            return []

    def _quarantine(self) -> Path:
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        suffix = 1
        while backup.exists():
            backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}-{suffix}")
            suffix += 1
        try:
            os.replace(self.path, backup)
        except OSError as exc:
            raise LedgerWriteError(f"Could not move corrupt ledger snapshot {self.path} aside") from exc
        return backup

    def save_all(self, records: Iterable[Transaction]) -> None:
        """Atomically replace the snapshot with ``records``."""
        payload = _serialise(records)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise LedgerWriteError(f"Could not write ledger snapshot {self.path}") from exc

    def find_by_id(self, transaction_id: int) -> Transaction | None:
        return next((record for record in self.load_all() if record.id == transaction_id), None)

    def next_id(self) -> int:
        records = self.load_all()
        if self.id_strategy is IdStrategy.MONOTONIC:
            return max((record.id for record in records), default=0) + 1
        return len(records) + 1

    def append(self, record: Transaction) -> Transaction:
        """Store a new record; the caller has already assigned its id."""
        with self._lock:
            records = self._load_for_update()
            records.append(record)
            self.save_all(records)
        logger.info("Appended transaction %s (%s).", record.id, record.type.value)
        return record

    def update_in_place(self, transaction_id: int, changes: TransactionUpdate) -> Transaction:
        """Overwrite the editable fields of the first record with ``transaction_id``."""
        with self._lock:
            records = self._load_for_update()
            for index, record in enumerate(records):
                if record.id == transaction_id:
                    break
            else:
                raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
            data = record.model_dump()
            data.update(changes.model_dump(exclude_unset=True))
            updated = Transaction.model_validate(data)
            records[index] = updated
            self.save_all(records)
        logger.info("Updated transaction %s.", transaction_id)
        return updated

    def delete_by_id(self, transaction_id: int) -> Transaction | None:
        """Remove and return the first record with ``transaction_id``."""
        with self._lock:
            records = self._load_for_update()
            for index, record in enumerate(records):
                if record.id == transaction_id:
                    removed = records.pop(index)
                    self.save_all(records)
                    break
            else:
                return None
        logger.info("Deleted transaction %s.", transaction_id)
        return removed

    def total_by_type(self, tx_type: TransactionType) -> tuple[int, int]:
        """Return ``(sum of values, number of records)`` for ``tx_type``."""
        values = [record.value for record in self.load_all() if record.type == tx_type]
        return sum(values), len(values)

    def last_n(self, n: int) -> list[Transaction]:
        """Most recent ``n`` records, newest first."""
        if n <= 0:
            return []
        return self.load_all()[-n:][::-1]
