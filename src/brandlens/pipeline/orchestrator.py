"""Analysis orchestrator — scrape, fan out to providers, persist findings."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from functools import partial
from typing import Any
from urllib.parse import urlparse

from brandlens.errors import AnalysisCancelled, ScrapeError
from brandlens.pipeline.progress import (
    COMPLETED_PERCENT,
    SCRAPING_PERCENT,
    SOURCES_SAVED_PERCENT,
    ProgressListener,
    ProgressTracker,
)
from brandlens.prompts.builder import RECOMMENDATION_INPUTS, PromptBuilder, PromptContext
from brandlens.providers.base import LLMProvider, LLMResponse
from brandlens.providers.parsing import unwrap_list, unwrap_object
from brandlens.schemas.config import Settings
from brandlens.schemas.entities import (
    ANALYSIS_STEPS,
    SCORE_KINDS,
    AnalysisStep,
    Finding,
    FindingKind,
    LlmRun,
    Project,
    ProjectStatus,
    Provider,
    RunStatus,
    Source,
)
from brandlens.schemas.scrape import ScrapeResult
from brandlens.scraper.base import Scraper, content_hash
from brandlens.store.base import Store

logger = logging.getLogger(__name__)

# Single-object steps map to one finding; list steps explode into one per item
_OBJECT_STEPS: dict[AnalysisStep, FindingKind] = {
    AnalysisStep.BRAND_SYNOPSIS: FindingKind.BRAND_SYNOPSIS,
    AnalysisStep.TONE_OF_VOICE: FindingKind.TONE_OF_VOICE,
}
_LIST_STEPS: dict[AnalysisStep, FindingKind] = {
    AnalysisStep.POSITIONING_PILLARS: FindingKind.POSITIONING_PILLAR,
    AnalysisStep.BUYER_SEGMENTS: FindingKind.BUYER_SEGMENT,
    AnalysisStep.AMENITIES: FindingKind.AMENITY_CLAIM,
    AnalysisStep.TRUST_SIGNALS: FindingKind.TRUST_SIGNAL,
    AnalysisStep.RECOMMENDATIONS: FindingKind.RECOMMENDATION,
}


class ProviderOutcome(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


def extract_findings(step: AnalysisStep, content: Any) -> list[tuple[FindingKind, dict[str, Any]]]:
    """Split one step's parsed output into (kind, payload) pairs.

    Raises ``ModelOutputError`` when a single-object step did not return an
    object.
    """
    if step in _OBJECT_STEPS:
        return [(_OBJECT_STEPS[step], unwrap_object(content))]

    if step is AnalysisStep.MESSAGING:
        scores = unwrap_object(content)
        return [
            (kind, scores[dimension])
            for kind, dimension in SCORE_KINDS.items()
            if isinstance(scores.get(dimension), dict)
        ]

    kind = _LIST_STEPS[step]
    items = []
    for item in unwrap_list(content):
        if isinstance(item, dict):
            items.append((kind, item))
        else:
            logger.warning("Dropping non-object %s item: %r", step.value, item)
    return items


def _domain(url: str) -> str:
    parsed = urlparse(url if "://" in url else f"https://{url}")
    return parsed.hostname or url


class AnalysisOrchestrator:
    """Drives one project from PENDING to COMPLETED or FAILED.

    Flow:
        scrape → save sources → providers run their 8 steps concurrently
        → COMPLETED

    A provider that fails is recorded as one FAILED LlmRun and stops; the
    others carry on.  Scrape failures and unexpected errors mark the
    project FAILED and are re-raised.
    """

    def __init__(
        self,
        store: Store,
        scraper: Scraper,
        providers: dict[Provider, LLMProvider],
        settings: Settings | None = None,
        *,
        listener: ProgressListener | None = None,
    ) -> None:
        self.store = store
        self.scraper = scraper
        self.providers = providers
        self.settings = settings or Settings()
        self.listener = listener

    async def run(self, project_id: str, cancel: asyncio.Event | None = None) -> None:
        project = await self.store.get_project(project_id)
        tracker = ProgressTracker(self.store, project.id, len(self.providers))
        try:
            await self._run(project, tracker, cancel)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.exception("Analysis failed for project %s", project.id)
            await self._mark_failed(project.id, message)
            raise

    async def _mark_failed(self, project_id: str, message: str) -> None:
        current = await self.store.get_project(project_id)
        if current.status.is_terminal:
            return
        await self.store.set_status(project_id, ProjectStatus.FAILED, message)

    async def _run(
        self, project: Project, tracker: ProgressTracker, cancel: asyncio.Event | None
    ) -> None:
        # -- Scrape ---------------------------------------------------------
        if self.listener:
            self.listener.phase("Scraping website")
        await self.store.set_status(project.id, ProjectStatus.SCRAPING, "Scraping website...")
        await tracker.update(SCRAPING_PERCENT, "Scraping website...")

        result = await self.scraper.scrape(project.url)
        if result.error:
            raise ScrapeError(f"Failed to scrape website: {result.error}")
        if result.warning:
            logger.warning("Scrape warning for %s: %s", project.url, result.warning)

        await self._save_sources(project.id, result)
        await tracker.update(
            SOURCES_SAVED_PERCENT, f"Scraped {len(result.pages)} page(s), starting analysis...",
        )

        if cancel and cancel.is_set():
            raise AnalysisCancelled("Analysis cancelled")

        # -- Analyze --------------------------------------------------------
        if self.listener:
            self.listener.phase("Analyzing with " + ", ".join(p.value for p in self.providers))
        await self.store.set_status(project.id, ProjectStatus.ANALYZING)

        context = PromptContext(
            domain=_domain(project.url),
            main_page=result.main_page,
            sub_pages=result.sub_pages,
        )
        builder = PromptBuilder(project.industry)
        outcomes = await asyncio.gather(
            *(
                self._run_provider(project, provider, client, builder, context, tracker, cancel)
                for provider, client in self.providers.items()
            ),
            return_exceptions=True,
        )

        for provider, outcome in zip(self.providers, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("%s task raised outside its step loop: %s", provider.value, outcome)

        if cancel and cancel.is_set():
            raise AnalysisCancelled("Analysis cancelled")

        # -- Done -----------------------------------------------------------
        await self.store.set_status(project.id, ProjectStatus.COMPLETED, "Analysis complete")
        await tracker.update(COMPLETED_PERCENT, "Analysis complete")
        logger.info("Project %s completed", project.id)

    async def _save_sources(self, project_id: str, result: ScrapeResult) -> None:
        for page in result.pages:
            await self.store.add_source(Source(
                project_id=project_id,
                type=page.type,
                url=page.url,
                content_hash=content_hash(page.content),
                text_excerpt=page.excerpt,
                full_content=page.content,
                metadata={"title": page.title, **page.metadata.model_dump()},
            ))

    # ------------------------------------------------------------------
    # Per-provider step loop
    # ------------------------------------------------------------------

    async def _run_provider(
        self,
        project: Project,
        provider: Provider,
        client: LLMProvider,
        builder: PromptBuilder,
        context: PromptContext,
        tracker: ProgressTracker,
        cancel: asyncio.Event | None,
    ) -> ProviderOutcome:
        prior: dict[str, Any] = {}

        for index, step in enumerate(ANALYSIS_STEPS):
            remaining = len(ANALYSIS_STEPS) - index
            if cancel and cancel.is_set():
                logger.info("%s stopped before step %d (cancelled)", provider.value, step.number)
                await tracker.steps_finished(remaining, "Analysis cancelled")
                return ProviderOutcome.CANCELLED

            if self.listener:
                self.listener.step_started(provider, step)
            prompt = builder.build(
                step, context, prior if step is AnalysisStep.RECOMMENDATIONS else None,
            )

            try:
                response = await client.analyze(prompt, validate=partial(extract_findings, step))
                run = self._run_record(project, provider, client, step, response)
                findings = [
                    Finding(
                        project_id=project.id,
                        kind=kind,
                        provider=provider,
                        llm_run_id=run.id,
                        step=step,
                        value=payload,
                        evidence_ref=prompt,
                    )
                    for kind, payload in extract_findings(step, response.content)
                ]
                # The run is only recorded once every finding has validated
                await self.store.add_llm_run(run)
                for finding in findings:
                    await self.store.add_finding(finding)
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                logger.exception("%s failed at step %d (%s)", provider.value, step.number, step.value)
                await self.store.add_llm_run(LlmRun(
                    project_id=project.id,
                    provider=provider,
                    step=step,
                    model=client.settings.model,
                    temperature=client.settings.temperature,
                    max_tokens=client.settings.max_tokens,
                    status=RunStatus.FAILED,
                    error=error,
                ))
                await tracker.steps_finished(remaining, f"{provider.value} failed: {error}")
                if self.listener:
                    self.listener.provider_failed(provider, error)
                return ProviderOutcome.FAILED

            if step in RECOMMENDATION_INPUTS:
                prior[RECOMMENDATION_INPUTS[step]] = response.content
            await tracker.steps_finished(
                1, f"{provider.value}: {step.label} complete ({step.number}/{len(ANALYSIS_STEPS)})",
            )

        if self.listener:
            self.listener.provider_finished(provider)
        return ProviderOutcome.COMPLETED

    @staticmethod
    def _run_record(
        project: Project,
        provider: Provider,
        client: LLMProvider,
        step: AnalysisStep,
        response: LLMResponse,
    ) -> LlmRun:
        return LlmRun(
            project_id=project.id,
            provider=provider,
            step=step,
            model=response.model,
            temperature=client.settings.temperature,
            max_tokens=client.settings.max_tokens,
            raw_response=response.raw,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            tokens_used=response.tokens_used,
            cost=response.cost,
            status=RunStatus.COMPLETED,
        )
