"""End-to-end import of a statement file.

Flow: parse → dedup key per transaction → categorize (concurrently, order
preserved) → offer each record to the transaction store. Parsing errors and
duplicate keys are reported on the returned :class:`ImportReport` so callers
can say "imported N of M" instead of failing the whole upload.
"""

from __future__ import annotations

from .categorize import Categorizer
from .fingerprint import fingerprint_transaction
from .logging_setup import get_logger
from .models import CanonicalTransaction, ImportedTransaction, ImportReport
from .parser import parse_statement
from .persistence import DuplicateTransactionError, TransactionStore
from .pmap import p_map

DEFAULT_CONCURRENCY = 4

_logger = get_logger("spend_analysis.api")


def tag_transactions(
    transactions: list[CanonicalTransaction],
    *,
    categorizer: Categorizer,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[ImportedTransaction]:
    """Attach a dedup key and a categorization to each transaction, in order."""

    def _tag(tx: CanonicalTransaction) -> ImportedTransaction:
        return ImportedTransaction(
            transaction=tx,
            dedup_key=fingerprint_transaction(tx),
            categorization=categorizer.categorize_transaction(tx),
        )

    return p_map(transactions, _tag, concurrency=concurrency)


def import_statement(
    file_content: str,
    *,
    categorizer: Categorizer,
    store: TransactionStore | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> ImportReport:
    """Parse, tag and store one statement export.

    Parameters
    ----------
    file_content:
        Delimited statement text with a header row.
    categorizer:
        Categorizer used for every parsed transaction.
    store:
        Persistence collaborator. When ``None`` the tagged records are
        returned as ``imported`` without being stored anywhere.
    concurrency:
        Maximum number of categorization calls in flight.

    Store errors other than :class:`DuplicateTransactionError` propagate.
    """

    outcome = parse_statement(file_content)
    report = ImportReport(errors=list(outcome.errors), row_error_count=len(outcome.row_errors))
    if not outcome.transactions:
        _logger.info("import:nothing_to_import errors=%d", len(outcome.errors))
        return report

    tagged = tag_transactions(outcome.transactions, categorizer=categorizer, concurrency=concurrency)

    for record in tagged:
        if store is None:
            report.imported.append(record)
            continue
        try:
            store.add(record)
        except DuplicateTransactionError:
            _logger.info(
                "import:duplicate line=%d key=%s",
                record.transaction.raw_row.line_number,
                record.dedup_key[:12],
            )
            report.duplicates.append(record)
            continue
        report.imported.append(record)

    _logger.info(
        "import:done imported=%d duplicates=%d errors=%d",
        len(report.imported),
        len(report.duplicates),
        len(report.errors),
    )
    return report


__all__ = ["DEFAULT_CONCURRENCY", "import_statement", "tag_transactions"]
