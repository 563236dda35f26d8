"""Parsing of free-text model replies into :class:`CategorizationResult`.

Models are asked for a single JSON object but may wrap it in prose or code
fences. Extraction walks each ``{`` in order and lets the JSON decoder consume
one complete value from there, so braces inside string values do not confuse
it. The decoded object is then validated with Pydantic.
"""

from __future__ import annotations

import json
import math
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .categories import CATEGORIES, Category, find_category
from .models import CategorizationResult

DEFAULT_CONFIDENCE = 0.5
DEFAULT_EXPLANATION = "AI categorization"

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first JSON object embedded in ``text``.

    Raises ``ValueError`` when no ``{...}`` span decodes to an object.
    """

    start = text.find("{")
    while start != -1:
        try:
            value, _end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    raise ValueError("No JSON object found in model response")


class _RemoteDecision(BaseModel):
    """Typed view of the model's reply. Extra keys are ignored."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    category: str
    subcategory: str | None = None
    confidence: float = DEFAULT_CONFIDENCE
    explanation: str = DEFAULT_EXPLANATION

    @field_validator("category")
    @classmethod
    def _category_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("category must be a non-empty string")
        return v

    @field_validator("subcategory", mode="before")
    @classmethod
    def _blank_subcategory(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() in {"", "null", "none"}:
            return None
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        # Missing or non-numeric confidence falls back to the default; numbers
        # outside [0, 1] are clamped rather than rejected.
        if isinstance(v, bool) or v is None:
            return DEFAULT_CONFIDENCE
        try:
            fv = float(v)
        except (TypeError, ValueError):
            return DEFAULT_CONFIDENCE
        if math.isnan(fv):
            return DEFAULT_CONFIDENCE
        return max(0.0, min(1.0, fv))

    @field_validator("explanation", mode="before")
    @classmethod
    def _default_explanation(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_EXPLANATION
        return v


def _canonical_names(
    category: str, subcategory: str | None, taxonomy: Sequence[Category]
) -> tuple[str, str | None]:
    # Align casing with the taxonomy when the model echoes a known name.
    known = find_category(category, taxonomy)
    if known is None:
        return category, subcategory
    if subcategory is not None:
        key = subcategory.casefold()
        for sub in known.subcategories:
            if sub.casefold() == key:
                subcategory = sub
                break
    return known.name, subcategory


def parse_categorization_response(
    text: str | None,
    *,
    taxonomy: Sequence[Category] = CATEGORIES,
) -> CategorizationResult:
    """Parse a model reply into a remote-sourced :class:`CategorizationResult`.

    Raises ``ValueError`` when the reply is empty, holds no JSON object, or
    the object lacks a usable ``category``.
    """

    if not text or not text.strip():
        raise ValueError("Empty model response")
    payload = extract_json_object(text)
    try:
        decision = _RemoteDecision.model_validate(payload)
    except ValidationError as e:
        raise ValueError(f"Invalid categorization response: {e}") from e

    category, subcategory = _canonical_names(decision.category, decision.subcategory, taxonomy)
    return CategorizationResult(
        category=category,
        subcategory=subcategory,
        confidence=decision.confidence,
        explanation=decision.explanation,
        source="remote",
    )


__all__ = [
    "DEFAULT_CONFIDENCE",
    "DEFAULT_EXPLANATION",
    "extract_json_object",
    "parse_categorization_response",
]
