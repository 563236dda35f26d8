"""Prompt construction for single-transaction categorization.

The prompt carries three parts: the fixed taxonomy (top-level names plus
subcategories), a few worked examples, and the transaction itself, followed by
the JSON shape the reply must contain.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from .categories import CATEGORIES, Category, category_names


@dataclass(frozen=True, slots=True)
class FewShotExample:
    merchant: str
    description: str
    amount: str
    category: str
    confidence: float
    explanation: str
    subcategory: str | None = None


FEW_SHOT_EXAMPLES: tuple[FewShotExample, ...] = (
    FewShotExample(
        merchant="Whole Foods",
        description="Grocery shopping",
        amount="-87.50",
        category="Groceries",
        confidence=0.95,
        explanation="Clear grocery store purchase",
    ),
    FewShotExample(
        merchant="Netflix",
        description="Monthly subscription",
        amount="-15.99",
        category="Subscriptions",
        subcategory="Streaming",
        confidence=0.99,
        explanation="Recurring streaming service charge",
    ),
    FewShotExample(
        merchant="Shell",
        description="Fuel",
        amount="-45.00",
        category="Transport",
        subcategory="Gas",
        confidence=0.92,
        explanation="Gas station fuel purchase",
    ),
)

_RESPONSE_SHAPE = """{
  "category": "category name",
  "subcategory": "subcategory name or null",
  "confidence": 0.0-1.0,
  "explanation": "brief explanation"
}"""


def _taxonomy_lines(taxonomy: Sequence[Category]) -> list[str]:
    lines: list[str] = []
    for c in taxonomy:
        if c.subcategories:
            lines.append(f"- {c.name} ({', '.join(c.subcategories)})")
        else:
            lines.append(f"- {c.name}")
    return lines


def _example_lines(examples: Sequence[FewShotExample]) -> list[str]:
    lines: list[str] = []
    for ex in examples:
        lines.append(
            f'Merchant: "{ex.merchant}", Description: "{ex.description}", Amount: {ex.amount}'
        )
        verdict = f"Category: {ex.category}"
        if ex.subcategory:
            verdict += f", Subcategory: {ex.subcategory}"
        verdict += f", Confidence: {ex.confidence}, Explanation: {ex.explanation}"
        lines.append(verdict)
        lines.append("")
    return lines


def build_categorization_prompt(
    merchant: str,
    description: str,
    amount: Decimal | float | int,
    *,
    taxonomy: Sequence[Category] = CATEGORIES,
    examples: Sequence[FewShotExample] = FEW_SHOT_EXAMPLES,
) -> str:
    """Return the natural-language prompt for one transaction."""

    names = ", ".join(category_names(taxonomy))
    lines: list[str] = [
        "You are a financial transaction categorizer. Categorize the following "
        f"transaction into one of these categories: {names}.",
        "",
        "Available categories and subcategories:",
        *_taxonomy_lines(taxonomy),
        "",
        "Examples:",
        *_example_lines(examples),
        "Now categorize this transaction:",
        f'Merchant: "{merchant}"',
        f'Description: "{description}"',
        f"Amount: {amount}",
        "",
        "Respond in JSON format:",
        _RESPONSE_SHAPE,
    ]
    return "\n".join(lines)


__all__ = ["FewShotExample", "FEW_SHOT_EXAMPLES", "build_categorization_prompt"]
