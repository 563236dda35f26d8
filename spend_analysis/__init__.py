"""Public interface for the ``spend_analysis`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import import_statement, tag_transactions
from .categories import CATEGORIES, UNCATEGORIZED, Category
from .categorize import Categorizer
from .columns import COLUMN_VARIANTS, detect_column_map
from .config import CategorizerSettings
from .fingerprint import compute_dedup_key, fingerprint_transaction
from .models import (
    UNKNOWN_MERCHANT,
    CanonicalTransaction,
    CategorizationResult,
    ColumnMap,
    ImportedTransaction,
    ImportReport,
    ParseOutcome,
    RawRow,
    RowError,
)
from .normalizers import parse_amount, parse_date
from .parser import parse_statement
from .persistence import DuplicateTransactionError, InMemoryTransactionStore, TransactionStore
from .providers import AnthropicProvider, ClassificationProvider, OpenAIProvider

__all__ = [
    # API
    "parse_statement",
    "import_statement",
    "tag_transactions",
    "detect_column_map",
    "compute_dedup_key",
    "fingerprint_transaction",
    "parse_amount",
    "parse_date",
    "Categorizer",
    "CategorizerSettings",
    # Providers / persistence seams
    "ClassificationProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "TransactionStore",
    "InMemoryTransactionStore",
    "DuplicateTransactionError",
    # Models / constants
    "RawRow",
    "ColumnMap",
    "CanonicalTransaction",
    "RowError",
    "ParseOutcome",
    "CategorizationResult",
    "ImportedTransaction",
    "ImportReport",
    "Category",
    "CATEGORIES",
    "UNCATEGORIZED",
    "UNKNOWN_MERCHANT",
    "COLUMN_VARIANTS",
]
