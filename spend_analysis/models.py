"""Data models for ``spend_analysis``.

Every record here is created fresh per upload or categorization call and has
no identity beyond its field values. Durable identity (database keys) belongs
to the persistence collaborator; the only identity the core computes is the
deduplication key in :mod:`spend_analysis.fingerprint`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal, TypeAlias

UNKNOWN_MERCHANT = "Unknown"
"""Merchant used when the statement row has no merchant-like value."""

CanonicalField: TypeAlias = Literal["date", "merchant", "description", "amount"]

REQUIRED_FIELDS: tuple[CanonicalField, ...] = ("date", "amount")

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawRow:
    """One data row of a statement, keyed by normalized header name.

    ``values`` preserves header order. Keys are lower-cased and trimmed header
    names; values are the cell text exactly as read (untrimmed) so the row can
    be shown back to a user for auditing.
    """

    line_number: int
    values: dict[str, str]

    def get(self, header: str | None) -> str:
        if header is None:
            return ""
        return self.values.get(header, "")


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Header chosen for each canonical field, or ``None`` when unmapped.

    The same header may appear under several fields (a lone ``description``
    column supplies both ``merchant`` and ``description``).
    """

    date: str | None = None
    merchant: str | None = None
    description: str | None = None
    amount: str | None = None

    def get(self, name: CanonicalField) -> str | None:
        return getattr(self, name)

    def missing_required(self) -> list[CanonicalField]:
        return [name for name in REQUIRED_FIELDS if self.get(name) is None]

    def as_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for name in ("date", "merchant", "description", "amount"):
            header = getattr(self, name)
            if header is not None:
                out[name] = header
        return out


@dataclass(frozen=True, slots=True)
class CanonicalTransaction:
    """A normalized statement transaction.

    ``amount`` is signed as in the source file: negative for outflows,
    positive for inflows. No sign is inferred from other columns.
    """

    date: date
    merchant: str
    description: str
    amount: Decimal
    raw_row: RawRow


@dataclass(frozen=True, slots=True)
class RowError:
    """A row-level parse failure tied to its source line."""

    line_number: int
    reason: str

    def __str__(self) -> str:
        return f"Row {self.line_number}: {self.reason}"


@dataclass(slots=True)
class ParseOutcome:
    """Result of parsing one statement file.

    Parsing is best-effort: ``transactions`` may be non-empty even when
    ``success`` is false. ``errors`` holds human-readable messages for both
    structural and row-level problems; ``row_errors`` carries the structured
    row-level subset.
    """

    transactions: list[CanonicalTransaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @classmethod
    def failed(cls, message: str) -> ParseOutcome:
        return cls(transactions=[], errors=[message], row_errors=[])

    def add_row_error(self, line_number: int, reason: str) -> None:
        err = RowError(line_number=line_number, reason=reason)
        self.row_errors.append(err)
        self.errors.append(str(err))


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


CategorySource: TypeAlias = Literal["remote", "rules"]


@dataclass(frozen=True, slots=True)
class CategorizationResult:
    """Category decision for one transaction.

    ``confidence`` is always within ``[0, 1]``. ``source`` tells whether the
    remote model or the keyword rules produced the decision.
    """

    category: str
    confidence: float
    explanation: str
    subcategory: str | None = None
    source: CategorySource = "rules"


# ---------------------------------------------------------------------------
# Import pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ImportedTransaction:
    """A parsed transaction tagged with its dedup key and category."""

    transaction: CanonicalTransaction
    dedup_key: str
    categorization: CategorizationResult


@dataclass(slots=True)
class ImportReport:
    """Outcome of importing one statement into a transaction store."""

    imported: list[ImportedTransaction] = field(default_factory=list)
    duplicates: list[ImportedTransaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    row_error_count: int = 0

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def rows_considered(self) -> int:
        """Rows that reached either the success list or the row-error list."""

        return len(self.imported) + len(self.duplicates) + self.row_error_count

    def summary(self) -> str:
        parts = [f"Imported {len(self.imported)} of {self.rows_considered} transactions"]
        if self.duplicates:
            parts.append(f"{len(self.duplicates)} duplicate(s) skipped")
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        return "; ".join(parts)


__all__ = [
    "UNKNOWN_MERCHANT",
    "REQUIRED_FIELDS",
    "CanonicalField",
    "RawRow",
    "ColumnMap",
    "CanonicalTransaction",
    "RowError",
    "ParseOutcome",
    "CategorySource",
    "CategorizationResult",
    "ImportedTransaction",
    "ImportReport",
]
