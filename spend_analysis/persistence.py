"""Persistence seam for imported transactions.

Durable storage lives outside this package. What the import flow needs from
it is small: accept a tagged transaction, and refuse one whose dedup key is
already stored by raising :class:`DuplicateTransactionError`.
:class:`InMemoryTransactionStore` is the reference implementation used by the
CLI and the tests.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Protocol

from .models import ImportedTransaction


class DuplicateTransactionError(Exception):
    """Raised when a store already holds a transaction with the same key."""

    def __init__(self, dedup_key: str) -> None:
        super().__init__(f"Duplicate transaction: {dedup_key}")
        self.dedup_key = dedup_key


class TransactionStore(Protocol):
    def contains(self, dedup_key: str) -> bool: ...

    def add(self, record: ImportedTransaction) -> None:
        """Store ``record`` or raise :class:`DuplicateTransactionError`."""
        ...


class InMemoryTransactionStore:
    """Dict-backed store keyed by dedup key; safe to share between threads."""

    def __init__(self) -> None:
        self._records: dict[str, ImportedTransaction] = {}
        self._lock = threading.Lock()

    def contains(self, dedup_key: str) -> bool:
        with self._lock:
            return dedup_key in self._records

    def add(self, record: ImportedTransaction) -> None:
        with self._lock:
            if record.dedup_key in self._records:
                raise DuplicateTransactionError(record.dedup_key)
            self._records[record.dedup_key] = record

    def get(self, dedup_key: str) -> ImportedTransaction | None:
        with self._lock:
            return self._records.get(dedup_key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ImportedTransaction]:
        with self._lock:
            return iter(list(self._records.values()))


__all__ = ["DuplicateTransactionError", "TransactionStore", "InMemoryTransactionStore"]
