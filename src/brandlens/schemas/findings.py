"""Pydantic models for the structured payload of each finding kind.

Models accept the camelCase keys the prompts ask for (``exampleSentence``,
``sourceUrl``) as well as snake_case, and keep any extra keys a provider
chooses to add.  Every field has a default so partially-formed output
still produces a finding.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

IMPACT_ORDER = {"high": 3, "medium": 2, "low": 1}


class FindingPayload(BaseModel):
    """Common configuration for finding payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def _lower_or(default: str, allowed: set[str] | None = None):
    def coerce(v: object) -> str:
        if not isinstance(v, str) or not v.strip():
            return default
        value = v.strip().lower()
        if allowed is not None and value not in allowed:
            return default
        return value
    return coerce


def _as_text(v: object) -> str:
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


def _as_text_list(v: object) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    if isinstance(v, list):
        return [str(item).strip() for item in v if item is not None and str(item).strip()]
    return [str(v)]


class BrandSynopsis(FindingPayload):
    summary: str = ""
    confidence: str = ""  # "high", "medium", "low"
    key_quotes: list[str] = []

    text_fields = field_validator("summary", "confidence", mode="before")(_as_text)
    quote_fields = field_validator("key_quotes", mode="before")(_as_text_list)


class PositioningPillar(FindingPayload):
    name: str = ""
    description: str = ""
    evidence: str = ""
    source_url: str = ""
    confidence: str = ""

    text_fields = field_validator(
        "name", "description", "evidence", "source_url", "confidence", mode="before"
    )(_as_text)


class ToneOfVoice(FindingPayload):
    adjectives: list[str] = []
    example_sentence: str = ""
    reading_level: str = ""
    patterns: list[str] = []

    list_fields = field_validator("adjectives", "patterns", mode="before")(_as_text_list)
    text_fields = field_validator("example_sentence", "reading_level", mode="before")(_as_text)


class BuyerSegment(FindingPayload):
    name: str = ""
    description: str = ""
    reasoning: str = ""
    evidence: str = ""

    text_fields = field_validator("name", "description", "reasoning", "evidence", mode="before")(_as_text)


class AmenityClaim(FindingPayload):
    name: str = ""
    type: str = ""  # "stated" or "implied"
    description: str = ""
    evidence: str = ""

    text_fields = field_validator("name", "type", "description", "evidence", mode="before")(_as_text)


class TrustSignal(FindingPayload):
    type: str = ""  # testimonial, certification, award, data, press, warranty
    description: str = ""
    source: str = ""
    strength: str = ""

    text_fields = field_validator("type", "description", "source", "strength", mode="before")(_as_text)


class HeuristicScore(FindingPayload):
    """One messaging dimension (clarity, specificity, differentiation or trust)."""

    level: str = "medium"
    score: int = 50  # 0-100
    rationale: str = ""
    evidence: list[str] = []
    recommendations: list[str] = []

    level_field = field_validator("level", mode="before")(
        _lower_or("medium", {"low", "medium", "high"})
    )
    text_fields = field_validator("rationale", mode="before")(_as_text)
    list_fields = field_validator("evidence", "recommendations", mode="before")(_as_text_list)

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: object) -> int:
        try:
            value = float(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 50
        if not math.isfinite(value):
            return 50
        return max(0, min(100, int(round(value))))


class Recommendation(FindingPayload):
    title: str = ""
    description: str = ""
    impact: str = "medium"  # "high", "medium", "low"
    effort: str = ""  # "S", "M", "L"
    category: str = ""  # copy, content, proof, structure, faq
    before: str = ""
    after: str = ""
    evidence: str = ""

    impact_field = field_validator("impact", mode="before")(
        _lower_or("medium", set(IMPACT_ORDER))
    )
    text_fields = field_validator(
        "title", "description", "effort", "category", "before", "after", "evidence",
        mode="before",
    )(_as_text)

    @property
    def impact_rank(self) -> int:
        return IMPACT_ORDER.get(self.impact, 0)


FindingValue = (
    BrandSynopsis
    | PositioningPillar
    | ToneOfVoice
    | BuyerSegment
    | AmenityClaim
    | TrustSignal
    | HeuristicScore
    | Recommendation
)


def dump_payload(value: BaseModel) -> dict[str, Any]:
    """Serialise a payload with the camelCase keys used on the wire."""
    return value.model_dump(mode="json", by_alias=True)
