"""Header → canonical field mapping for statement files.

Banks name their columns differently ("Transaction Date", "Posted Date",
"Payee", "Value", ...). Each canonical field has an ordered list of variant
substrings; the earliest header in file order containing any of the field's
variants is chosen.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .models import CanonicalField, ColumnMap

COLUMN_VARIANTS: Mapping[CanonicalField, tuple[str, ...]] = {
    "date": ("date", "transaction date", "posted date", "trans date", "posting date"),
    "merchant": ("merchant", "description", "payee", "name", "vendor"),
    "description": ("description", "memo", "details", "notes"),
    "amount": ("amount", "value", "transaction amount", "debit", "credit"),
}


def normalize_header(header: str | None) -> str:
    return (header or "").strip().lower()


def _match_header(headers: Sequence[str], variants: Sequence[str]) -> str | None:
    for header in headers:
        lowered = header.lower()
        if any(variant in lowered for variant in variants):
            return header
    return None


def detect_column_map(headers: Sequence[str]) -> ColumnMap:
    """Infer which header supplies each canonical field.

    ``headers`` are expected already normalized (see :func:`normalize_header`);
    the comparison lower-cases them again so raw headers also work. A header
    may be chosen for more than one field. Unmatched fields stay ``None`` and
    it is up to the caller to reject a map without ``date`` or ``amount``.
    """

    chosen = {name: _match_header(headers, variants) for name, variants in COLUMN_VARIANTS.items()}
    return ColumnMap(**chosen)


__all__ = ["COLUMN_VARIANTS", "normalize_header", "detect_column_map"]
