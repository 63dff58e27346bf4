"""Builds the prompt for each analysis step from scraped pages."""

from __future__ import annotations

import json
import logging
from string import Template
from typing import Any

from pydantic import BaseModel

from brandlens.prompts import templates
from brandlens.prompts.industry import industry_overrides
from brandlens.schemas.entities import AnalysisStep, Industry
from brandlens.schemas.scrape import Page

logger = logging.getLogger(__name__)

GENERIC_PROMPTS: dict[AnalysisStep, str] = {
    AnalysisStep.BRAND_SYNOPSIS: templates.BRAND_SYNOPSIS,
    AnalysisStep.POSITIONING_PILLARS: templates.POSITIONING_PILLARS,
    AnalysisStep.TONE_OF_VOICE: templates.TONE_OF_VOICE,
    AnalysisStep.BUYER_SEGMENTS: templates.BUYER_SEGMENTS,
    AnalysisStep.AMENITIES: templates.AMENITIES,
    AnalysisStep.TRUST_SIGNALS: templates.TRUST_SIGNALS,
    AnalysisStep.MESSAGING: templates.MESSAGING,
    AnalysisStep.RECOMMENDATIONS: templates.RECOMMENDATIONS,
}

# Steps whose output the recommendations prompt receives as context
RECOMMENDATION_INPUTS: dict[AnalysisStep, str] = {
    AnalysisStep.BRAND_SYNOPSIS: "synopsis",
    AnalysisStep.POSITIONING_PILLARS: "pillars",
    AnalysisStep.TONE_OF_VOICE: "tone",
    AnalysisStep.MESSAGING: "messaging",
}


class PromptContext(BaseModel):
    """Shared input for every prompt in one analysis."""

    domain: str
    main_page: Page
    sub_pages: list[Page] = []

    def render_pages(self) -> str:
        return "\n".join(
            f"\n=== {page.url} ===\n{page.content}\n"
            for page in [self.main_page, *self.sub_pages]
        )


class PromptBuilder:
    """Selects the industry override (or generic prompt) and fills it in."""

    def __init__(self, industry: Industry = Industry.RESIDENTIAL_REAL_ESTATE) -> None:
        self.industry = industry
        self._overrides = industry_overrides(industry)
        if not self._overrides:
            logger.debug("No prompt overrides for %s, using generic prompts", industry.value)

    def template_for(self, step: AnalysisStep) -> str:
        return self._overrides.get(step, GENERIC_PROMPTS[step])

    def build(
        self,
        step: AnalysisStep,
        context: PromptContext,
        prior: dict[str, Any] | None = None,
    ) -> str:
        """Render the prompt for ``step``.

        ``prior`` is only used by the recommendations step: a mapping of
        synopsis / pillars / tone / messaging output from earlier steps.
        """
        values = {"domain": context.domain, "pages": context.render_pages()}
        if step is AnalysisStep.RECOMMENDATIONS:
            values["analysis"] = json.dumps(prior or {}, indent=2, ensure_ascii=False)
        return Template(self.template_for(step)).safe_substitute(values)
