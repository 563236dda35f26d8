"""Transaction categorization: remote model first, keyword rules as fallback.

Public API:
    - :class:`Categorizer`

No side effects occur at import time (no client creation, no environment
reads). Configuration arrives through :class:`CategorizerSettings` or an
explicit provider.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from decimal import Decimal

from .categories import CATEGORIES, Category
from .categorization import parse_categorization_response
from .config import CategorizerSettings
from .logging_setup import get_logger
from .models import CanonicalTransaction, CategorizationResult
from .prompting import build_categorization_prompt
from .providers import ClassificationProvider, create_provider
from .rules import categorize_by_rules

_logger = get_logger("spend_analysis.categorize")


class Categorizer:
    """Assign a category, confidence and explanation to transactions.

    ``categorize`` never raises. With no provider it answers from the keyword
    rules. With a provider it makes exactly one remote call per transaction;
    any failure (transport error, error status, unparseable reply) falls back
    to the rules for that transaction only. There is no retry, backoff or
    caching here; callers wanting throughput fan out across transactions.

    Parameters
    ----------
    settings:
        Provider selector and credential. Ignored when ``provider`` is given.
    provider:
        An explicit :class:`ClassificationProvider`, mainly for tests and
        custom backends.
    taxonomy:
        Categories offered to the model.
    """

    def __init__(
        self,
        settings: CategorizerSettings | None = None,
        *,
        provider: ClassificationProvider | None = None,
        taxonomy: Sequence[Category] = CATEGORIES,
    ) -> None:
        self.settings = settings or CategorizerSettings()
        self.taxonomy = tuple(taxonomy)
        self.provider = provider if provider is not None else create_provider(self.settings)

    @property
    def remote_enabled(self) -> bool:
        return self.provider is not None

    def categorize(
        self,
        merchant: str,
        description: str,
        amount: Decimal | float | int,
    ) -> CategorizationResult:
        if self.provider is None:
            return categorize_by_rules(merchant, description, amount)

        prompt = build_categorization_prompt(
            merchant, description, amount, taxonomy=self.taxonomy
        )
        t0 = time.perf_counter()
        try:
            text = self.provider.classify(prompt)
            result = parse_categorization_response(text, taxonomy=self.taxonomy)
        except Exception as e:  # noqa: BLE001 - every remote failure degrades to rules
            dt_ms = (time.perf_counter() - t0) * 1000.0
            _logger.warning(
                "categorize:remote_failed provider=%s latency_ms=%.2f error=%s: %s",
                self.provider.name,
                dt_ms,
                e.__class__.__name__,
                e,
            )
            return categorize_by_rules(merchant, description, amount)

        _logger.debug(
            "categorize:remote_done provider=%s category=%s confidence=%.2f latency_ms=%.2f",
            self.provider.name,
            result.category,
            result.confidence,
            (time.perf_counter() - t0) * 1000.0,
        )
        return result

    def categorize_transaction(self, tx: CanonicalTransaction) -> CategorizationResult:
        return self.categorize(tx.merchant, tx.description, tx.amount)


__all__ = ["Categorizer"]
