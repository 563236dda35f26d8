"""Keyword rules used when remote classification is unavailable or fails.

Rules are tried in order against ``"<merchant> <description>"`` lower-cased;
the first rule with any keyword present wins. Less accurate than the model,
but it always produces an answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .categories import UNCATEGORIZED
from .models import CategorizationResult


@dataclass(frozen=True, slots=True)
class KeywordRule:
    keywords: tuple[str, ...]
    category: str
    confidence: float
    explanation: str
    subcategory: str | None = None

    def matches(self, text: str) -> bool:
        return any(k in text for k in self.keywords)

    def result(self) -> CategorizationResult:
        return CategorizationResult(
            category=self.category,
            subcategory=self.subcategory,
            confidence=self.confidence,
            explanation=self.explanation,
            source="rules",
        )


KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        keywords=("grocery", "market", "whole foods", "trader joe"),
        category="Groceries",
        confidence=0.7,
        explanation="Keyword match: grocery store",
    ),
    KeywordRule(
        keywords=("restaurant", "cafe", "coffee", "food"),
        category="Dining",
        confidence=0.6,
        explanation="Keyword match: dining establishment",
    ),
    KeywordRule(
        keywords=("gas", "fuel", "shell", "chevron"),
        category="Transport",
        subcategory="Gas",
        confidence=0.7,
        explanation="Keyword match: gas station",
    ),
    KeywordRule(
        keywords=("netflix", "spotify", "subscription", "hulu"),
        category="Subscriptions",
        confidence=0.8,
        explanation="Keyword match: subscription service",
    ),
)


def categorize_by_rules(
    merchant: str,
    description: str,
    amount: Decimal | float | int,
    *,
    rules: tuple[KeywordRule, ...] = KEYWORD_RULES,
) -> CategorizationResult:
    text = f"{merchant} {description}".lower()
    for rule in rules:
        if rule.matches(text):
            return rule.result()

    if amount > 0:
        return CategorizationResult(
            category="Income",
            confidence=0.5,
            explanation="Positive amount suggests income",
            source="rules",
        )
    return CategorizationResult(
        category=UNCATEGORIZED,
        confidence=0.0,
        explanation="No matching rules found",
        source="rules",
    )


__all__ = ["KeywordRule", "KEYWORD_RULES", "categorize_by_rules"]
