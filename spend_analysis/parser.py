"""Statement parser: delimited text → canonical transactions plus row errors.

Splitting follows RFC 4180 rules via the stdlib :mod:`csv` module (quoted
fields with embedded delimiters and newlines, doubled quotes). The delimiter is
sniffed from the header line among comma, semicolon and tab.

Failure model
-------------
- Structural problems (empty content, undecodable quoting, missing date/amount
  columns) fail the whole file: one error, zero transactions.
- Row problems (bad date, bad amount) are recorded against the row's line
  number and parsing continues with the next row.
- Rows whose date or amount cell is empty are skipped without an error.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from io import StringIO

from .columns import detect_column_map, normalize_header
from .logging_setup import get_logger
from .models import (
    UNKNOWN_MERCHANT,
    CanonicalTransaction,
    ColumnMap,
    ParseOutcome,
    RawRow,
)
from .normalizers import clean_text, parse_amount, parse_date

DELIMITER_CANDIDATES = ",;\t"

MISSING_COLUMNS_MESSAGE = (
    "Could not detect required columns. Please ensure the file has date and amount columns."
)

_logger = get_logger("spend_analysis.parser")


class StatementStructureError(ValueError):
    """The file cannot be read as a table with a header row."""


def detect_delimiter(header_line: str) -> str:
    """Return the delimiter used by ``header_line`` (comma when undecidable)."""

    try:
        dialect = csv.Sniffer().sniff(header_line, delimiters=DELIMITER_CANDIDATES)
    except csv.Error:
        return ","
    return dialect.delimiter


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def _read_table(text: str) -> tuple[list[str], Iterator[RawRow]]:
    """Split ``text`` into normalized headers and a lazy iterator of rows.

    Each row records the physical line on which it ends, so single-line rows
    report their own line (the header being line 1).
    """

    text = text.lstrip("\ufeff")
    if not text.strip():
        raise StatementStructureError("file is empty")

    delimiter = detect_delimiter(_first_line(text))
    reader = csv.reader(StringIO(text, newline=""), delimiter=delimiter)

    headers: list[str] | None = None
    for cells in reader:
        if any(c.strip() for c in cells):
            headers = [normalize_header(c) for c in cells]
            break
    if headers is None:
        raise StatementStructureError("no header row found")

    def _rows() -> Iterator[RawRow]:
        for cells in reader:
            if not any(c.strip() for c in cells):
                continue
            padded = list(cells[: len(headers)]) + [""] * (len(headers) - len(cells))
            yield RawRow(line_number=reader.line_num, values=dict(zip(headers, padded)))

    return headers, _rows()


def _build_transaction(row: RawRow, column_map: ColumnMap, outcome: ParseOutcome) -> None:
    date_text = clean_text(row.get(column_map.date))
    amount_text = clean_text(row.get(column_map.amount))
    if date_text is None or amount_text is None:
        return

    try:
        when = parse_date(date_text)
    except ValueError:
        outcome.add_row_error(row.line_number, f"Invalid date format: {date_text}")
        return
    try:
        amount = parse_amount(amount_text)
    except ValueError:
        outcome.add_row_error(row.line_number, f"Invalid amount: {amount_text}")
        return

    merchant = clean_text(row.get(column_map.merchant)) or UNKNOWN_MERCHANT
    description = clean_text(row.get(column_map.description)) or merchant
    outcome.transactions.append(
        CanonicalTransaction(
            date=when,
            merchant=merchant,
            description=description,
            amount=amount,
            raw_row=row,
        )
    )


def parse_statement(file_content: str) -> ParseOutcome:
    """Parse a delimited statement export into canonical transactions.

    Never raises for bad input; see the module docstring for how structural
    and row-level problems are reported. ``outcome.success`` is true only when
    no error of either kind occurred.
    """

    outcome = ParseOutcome()
    n_rows = 0
    try:
        headers, rows = _read_table(file_content)
        column_map = detect_column_map(headers)
        missing = column_map.missing_required()
        if missing:
            _logger.info(
                "parse:missing_columns missing=%s headers=%s", ",".join(missing), headers
            )
            return ParseOutcome.failed(MISSING_COLUMNS_MESSAGE)

        for row in rows:
            n_rows += 1
            _build_transaction(row, column_map, outcome)
    except (csv.Error, StatementStructureError) as e:
        _logger.warning("parse:failed error=%s", e)
        return ParseOutcome.failed(f"Failed to parse statement: {e}")

    _logger.info(
        "parse:done rows=%d transactions=%d errors=%d",
        n_rows,
        len(outcome.transactions),
        len(outcome.errors),
    )
    return outcome


__all__ = [
    "DELIMITER_CANDIDATES",
    "MISSING_COLUMNS_MESSAGE",
    "StatementStructureError",
    "detect_delimiter",
    "parse_statement",
]
