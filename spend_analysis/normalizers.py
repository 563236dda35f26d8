"""Field normalizers: raw statement text → typed canonical values.

Amounts become signed :class:`~decimal.Decimal` values and dates become plain
calendar :class:`~datetime.date` values (no timestamps, no time zones). Every
parser raises ``ValueError`` naming the offending text; callers decide whether
that is a row error or something else.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_AMOUNT_NOISE_RE = re.compile(r"[$£€,\s]")
_PLAIN_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def parse_amount(raw: str | None) -> Decimal:
    """Parse a statement amount such as ``"-$1,234.56"`` or ``"(87.50)"``.

    Currency symbols (``$ £ €``), thousands separators and all whitespace are
    removed first. A value wrapped in parentheses is negative (accounting
    style). Whatever remains must be a plain decimal number.
    """

    if raw is None:
        raise ValueError("amount is required")
    s = _AMOUNT_NOISE_RE.sub("", raw)
    if not s:
        raise ValueError(f"invalid amount: {raw!r}")

    negative = False
    if len(s) >= 2 and s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]

    # Decimal() alone would also accept NaN, Infinity and exponents.
    if not _PLAIN_NUMBER_RE.match(s):
        raise ValueError(f"invalid amount: {raw!r}")
    try:
        d = Decimal(s)
    except InvalidOperation as exc:  # pragma: no cover - regex already guards
        raise ValueError(f"invalid amount: {raw!r}") from exc
    return -d if negative else d


def format_amount(d: Decimal) -> str:
    # Exactly two decimals; ASCII dot; leading minus for negatives.
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two decimals in precision.
        ctx.prec = max(ctx.prec, d.adjusted() + 4)
        q = d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{q:f}"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Month-name layouts are unambiguous regardless of locale ordering.
_NAMED_MONTH_FORMATS: tuple[str, ...] = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)

_NUMERIC_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$"),
    re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$"),
)


def _generic_date(s: str) -> date | None:
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    for fmt in _NAMED_MONTH_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def _numeric_triple(a: int, b: int, c: int) -> date | None:
    # Month/day/year first, then year/month/day of the same groups; the first
    # valid calendar date wins.
    for year, month, day in ((c, a, b), (a, b, c)):
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def parse_date(raw: str | None) -> date:
    """Parse a statement date into a calendar date.

    Order of attempts: ISO-8601 dates and timestamps plus month-name forms,
    then ``MM/DD/YYYY`` / ``MM-DD-YYYY``, then ``YYYY/MM/DD`` / ``YYYY-MM-DD``.
    Numeric triples are tried as month/day/year before year/month/day, so an
    input valid both ways resolves by that order rather than by locale.
    """

    if raw is None:
        raise ValueError("date is required")
    s = raw.strip()
    if not s:
        raise ValueError("date is empty")

    parsed = _generic_date(s)
    if parsed is not None:
        return parsed

    for pattern in _NUMERIC_DATE_PATTERNS:
        m = pattern.match(s)
        if not m:
            continue
        a, b, c = (int(g) for g in m.groups())
        parsed = _numeric_triple(a, b, c)
        if parsed is not None:
            return parsed

    raise ValueError(f"invalid date: {raw!r}")


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    s = value.strip()
    return s if s else None


__all__ = ["parse_amount", "format_amount", "parse_date", "clean_text"]
