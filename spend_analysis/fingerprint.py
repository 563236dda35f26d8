"""Deduplication keys for statement transactions.

The key is the sole identity used to spot re-uploaded transactions, so it must
be a pure function of ``(date, amount, merchant, description)``: equal inputs
always give equal keys, and the encoding must keep distinct tuples apart.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .models import CanonicalTransaction
from .normalizers import clean_text


def _date_text(value: date | datetime) -> str:
    # datetime is a date subclass; reduce it to the calendar day.
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def _amount_text(value: Decimal | int | float | str) -> str:
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount for dedup key: {value!r}") from exc
    if not d.is_finite():
        raise ValueError(f"invalid amount for dedup key: {value!r}")
    # Fixed-point text without trailing zeros, padded to at least two decimals.
    whole, _, frac = f"{d:f}".partition(".")
    if d.is_zero():
        whole = "0"
    return f"{whole}.{frac.rstrip('0').ljust(2, '0')}"


def compute_dedup_key(
    date: date | datetime,
    amount: Decimal | int | float | str,
    merchant: str | None,
    description: str | None,
) -> str:
    """Return the lowercase hex SHA-256 of the transaction's defining fields.

    Fields are rendered canonically (ISO-8601 date, exact amount with at
    least two decimals, trimmed text) and serialized as a JSON object with
    sorted keys, which keeps field boundaries unambiguous whatever the text
    contains.
    """

    payload = {
        "date": _date_text(date),
        "amount": _amount_text(amount),
        "merchant": clean_text(merchant),
        "description": clean_text(description),
    }
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def fingerprint_transaction(tx: CanonicalTransaction) -> str:
    return compute_dedup_key(tx.date, tx.amount, tx.merchant, tx.description)


__all__ = ["compute_dedup_key", "fingerprint_transaction"]
