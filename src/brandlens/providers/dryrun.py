"""Dry-run provider — canned, well-formed output with zero API calls."""

from __future__ import annotations

import json
import logging

from brandlens.providers.base import Completion, LLMResponse, ShapeCheck, estimate_tokens
from brandlens.providers.parsing import parse_json_response
from brandlens.schemas.config import ProviderSettings
from brandlens.schemas.entities import AnalysisStep, Provider

logger = logging.getLogger(__name__)

_DRY_RUN_JSON: dict[AnalysisStep, str] = {
    AnalysisStep.BRAND_SYNOPSIS: json.dumps({
        "summary": "A master-planned community offering new homes near trails, parks and "
                   "everyday shopping, built by an established regional builder.",
        "confidence": "medium",
        "keyQuotes": ["Live where every day feels like a getaway"],
    }),
    AnalysisStep.POSITIONING_PILLARS: json.dumps({
        "pillars": [
            {"name": "Outdoor Lifestyle", "description": "Miles of trails and open space",
             "evidence": "Over 12 miles of trails", "sourceUrl": "", "confidence": "high"},
            {"name": "Builder Quality", "description": "Decades of homebuilding experience",
             "evidence": "Building homes since 1985", "sourceUrl": "", "confidence": "medium"},
        ],
    }),
    AnalysisStep.TONE_OF_VOICE: json.dumps({
        "adjectives": ["warm", "aspirational", "welcoming"],
        "exampleSentence": "Come home to more.",
        "readingLevel": "8th grade",
        "patterns": ["Second-person address"],
    }),
    AnalysisStep.BUYER_SEGMENTS: json.dumps({
        "segments": [
            {"name": "Move-up buyers", "description": "Buyers seeking more space",
             "reasoning": "Larger floor plans", "evidence": "Up to 3,400 sq ft"},
        ],
    }),
    AnalysisStep.AMENITIES: json.dumps({
        "amenities": [
            {"name": "Resort-style pool", "type": "stated",
             "description": "Community pool and cabanas", "evidence": "Resort-style pool"},
        ],
    }),
    AnalysisStep.TRUST_SIGNALS: json.dumps({
        "signals": [
            {"type": "award", "description": "Community of the Year",
             "source": "Homepage banner", "strength": "medium"},
        ],
    }),
    AnalysisStep.MESSAGING: json.dumps({
        dimension: {
            "level": "medium", "score": 60, "rationale": "Dry-run placeholder",
            "evidence": [], "recommendations": [],
        }
        for dimension in ("clarity", "specificity", "differentiation", "trust")
    }),
    AnalysisStep.RECOMMENDATIONS: json.dumps({
        "recommendations": [
            {"title": "Quantify the trail network", "description": "Lead with concrete numbers",
             "impact": "high", "effort": "S", "category": "copy",
             "before": "Miles of trails", "after": "12 miles of connected trails", "evidence": ""},
            {"title": "Add homeowner stories", "description": "Publish short testimonials",
             "impact": "medium", "effort": "M", "category": "proof",
             "before": "", "after": "", "evidence": ""},
        ],
    }),
}


def detect_step(prompt: str) -> AnalysisStep:
    """Guess the analysis step from the prompt text.

    Order matters — the recommendations and messaging prompts mention the
    other topics, so they are checked first.
    """
    text = prompt.lower()
    if "concrete recommendations" in text:
        return AnalysisStep.RECOMMENDATIONS
    if "messaging quality" in text:
        return AnalysisStep.MESSAGING
    if "summarize the brand promise" in text:
        return AnalysisStep.BRAND_SYNOPSIS
    if "positioning pillars" in text:
        return AnalysisStep.POSITIONING_PILLARS
    if "tone of voice" in text:
        return AnalysisStep.TONE_OF_VOICE
    if "buyer segments" in text:
        return AnalysisStep.BUYER_SEGMENTS
    if "amenity" in text:
        return AnalysisStep.AMENITIES
    return AnalysisStep.TRUST_SIGNALS


class DryRunProvider:
    """Drop-in replacement for a real provider client that makes zero API calls."""

    def __init__(self, provider: Provider, settings: ProviderSettings) -> None:
        self.provider = provider
        self.settings = settings

    async def analyze(
        self,
        prompt: str,
        config: ProviderSettings | None = None,
        *,
        validate: ShapeCheck | None = None,
    ) -> LLMResponse:
        config = config or self.settings
        step = detect_step(prompt)
        text = _DRY_RUN_JSON[step]
        content = parse_json_response(text)
        if validate is not None:
            validate(content)
        logger.info("[dry-run] %s %s", self.provider.value, step.value)
        completion = Completion(
            text=text,
            input_tokens=estimate_tokens(prompt),
            output_tokens=estimate_tokens(text),
            raw={"dry_run": True, "step": step.value},
        )
        return LLMResponse(
            content=content,
            model=config.model,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            tokens_used=completion.input_tokens + completion.output_tokens,
            cost=0.0,
            raw=completion.raw,
        )
