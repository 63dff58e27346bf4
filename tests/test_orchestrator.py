"""Tests for the analysis orchestrator with a fake scraper and providers."""

from __future__ import annotations

import asyncio
import json

import pytest

from brandlens.errors import AnalysisCancelled, ProjectNotFoundError, ScrapeError
from brandlens.pipeline.orchestrator import AnalysisOrchestrator, extract_findings
from brandlens.providers.base import BaseProviderClient, Completion
from brandlens.providers.dryrun import DryRunProvider, detect_step
from brandlens.schemas.config import ProviderSettings, RetryPolicy, Settings
from brandlens.schemas.entities import (
    ALL_PROVIDERS,
    ANALYSIS_STEPS,
    AnalysisStep,
    FindingKind,
    Project,
    ProjectStatus,
    Provider,
    RunStatus,
)
from brandlens.schemas.scrape import ScrapeResult
from brandlens.scraper.base import content_hash, error_result
from brandlens.store.memory import MemoryStore

from fakes import FakeProvider, FakeScraper

# Findings per provider from the canned content: synopsis, 2 pillars, tone,
# segment, amenity, signal, 4 scores, 2 recommendations
FINDINGS_PER_PROVIDER = 13


class RecordingStore(MemoryStore):
    """Remembers every progress percent written."""

    def __init__(self) -> None:
        super().__init__()
        self.percents: list[int] = []

    async def update_progress(self, project_id: str, percent: int, message: str) -> Project:
        self.percents.append(percent)
        return await super().update_progress(project_id, percent, message)


class TestExtractFindings:
    def test_object_step(self) -> None:
        [(kind, payload)] = extract_findings(AnalysisStep.BRAND_SYNOPSIS, {"summary": "s"})
        assert kind is FindingKind.BRAND_SYNOPSIS
        assert payload == {"summary": "s"}

    def test_wrapped_list_step(self) -> None:
        items = extract_findings(AnalysisStep.POSITIONING_PILLARS, {"pillars": [{"name": "a"}, {"name": "b"}]})
        assert [k for k, _ in items] == [FindingKind.POSITIONING_PILLAR] * 2

    def test_non_object_items_are_dropped(self) -> None:
        items = extract_findings(AnalysisStep.TRUST_SIGNALS, [{"type": "award"}, "stray text"])
        assert len(items) == 1

    def test_messaging_yields_one_finding_per_dimension(self) -> None:
        content = {
            "clarity": {"score": 70},
            "specificity": {"score": 40},
            "trust": {"score": 90},
            "differentiation": "n/a",
        }
        kinds = [k for k, _ in extract_findings(AnalysisStep.MESSAGING, content)]
        assert kinds == [FindingKind.CLARITY_SCORE, FindingKind.SPECIFICITY_SCORE, FindingKind.TRUST_SCORE]


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_all_providers_succeed(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider], scrape_result: ScrapeResult, settings: Settings,
    ) -> None:
        await store.create_project(project)
        orchestrator = AnalysisOrchestrator(store, fake_scraper, fake_providers, settings)

        await orchestrator.run(project.id)

        saved = await store.get_project(project.id)
        assert saved.status is ProjectStatus.COMPLETED
        assert saved.progress_percent == 100
        assert saved.progress_message == "Analysis complete"
        assert fake_scraper.calls == [project.url]

        sources = await store.list_sources(project.id)
        assert [s.url for s in sources] == [p.url for p in scrape_result.pages]
        assert sources[0].content_hash == content_hash(scrape_result.main_page.content)
        assert sources[0].metadata["title"] == "Willow Creek"

        runs = await store.list_llm_runs(project.id)
        assert len(runs) == len(ALL_PROVIDERS) * len(ANALYSIS_STEPS)
        assert all(r.status is RunStatus.COMPLETED for r in runs)

        findings = await store.list_findings(project.id)
        assert len(findings) == FINDINGS_PER_PROVIDER * len(ALL_PROVIDERS)
        run_ids = {r.id for r in runs}
        assert all(f.llm_run_id in run_ids for f in findings)

    @pytest.mark.asyncio
    async def test_steps_run_in_order(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider],
    ) -> None:
        await store.create_project(project)
        await AnalysisOrchestrator(store, fake_scraper, fake_providers).run(project.id)

        for provider in fake_providers.values():
            assert provider.steps == list(ANALYSIS_STEPS)

    @pytest.mark.asyncio
    async def test_findings_are_attributed_to_their_provider(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper, settings: Settings,
    ) -> None:
        providers = {
            Provider.OPENAI: FakeProvider(Provider.OPENAI, content={
                AnalysisStep.BRAND_SYNOPSIS: {"summary": "OpenAI view"},
            }),
            Provider.GOOGLE: FakeProvider(Provider.GOOGLE, content={
                AnalysisStep.BRAND_SYNOPSIS: {"summary": "Gemini view"},
            }),
        }
        await store.create_project(project)
        await AnalysisOrchestrator(store, fake_scraper, providers, settings).run(project.id)

        for provider, summary in [(Provider.OPENAI, "OpenAI view"), (Provider.GOOGLE, "Gemini view")]:
            [synopsis] = await store.list_findings(project.id, FindingKind.BRAND_SYNOPSIS, provider)
            assert synopsis.value.summary == summary
            assert synopsis.step is AnalysisStep.BRAND_SYNOPSIS
            run = next(r for r in store.llm_runs if r.id == synopsis.llm_run_id)
            assert run.provider is provider

    @pytest.mark.asyncio
    async def test_recommendations_prompt_carries_prior_steps(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider],
    ) -> None:
        await store.create_project(project)
        await AnalysisOrchestrator(store, fake_scraper, fake_providers).run(project.id)

        prompt = fake_providers[Provider.OPENAI].prompts[-1]
        for key in ('"synopsis"', '"pillars"', '"tone"', '"messaging"'):
            assert key in prompt
        assert '"segments"' not in prompt.split("Current analysis summary:")[1].split("For each")[0]

    @pytest.mark.asyncio
    async def test_progress_never_decreases(
        self, project: Project, fake_scraper: FakeScraper, fake_providers: dict[Provider, FakeProvider],
    ) -> None:
        store = RecordingStore()
        await store.create_project(project)
        await AnalysisOrchestrator(store, fake_scraper, fake_providers).run(project.id)

        assert store.percents[0] == 5
        assert 20 in store.percents
        assert store.percents[-1] == 100
        assert store.percents == sorted(store.percents)


class TestFailures:
    @pytest.mark.asyncio
    async def test_unknown_project(self, store: MemoryStore, fake_scraper: FakeScraper, fake_providers) -> None:
        with pytest.raises(ProjectNotFoundError):
            await AnalysisOrchestrator(store, fake_scraper, fake_providers).run("missing")
        assert fake_scraper.calls == []

    @pytest.mark.asyncio
    async def test_scrape_failure_marks_project_failed(
        self, store: MemoryStore, project: Project, fake_providers: dict[Provider, FakeProvider],
    ) -> None:
        scraper = FakeScraper(error_result(project.url, "HTTP 500: Internal Server Error"))
        await store.create_project(project)

        with pytest.raises(ScrapeError):
            await AnalysisOrchestrator(store, scraper, fake_providers).run(project.id)

        saved = await store.get_project(project.id)
        assert saved.status is ProjectStatus.FAILED
        assert saved.progress_message == "Failed to scrape website: HTTP 500: Internal Server Error"
        assert await store.list_sources(project.id) == []
        assert all(p.steps == [] for p in fake_providers.values())

    @pytest.mark.asyncio
    async def test_one_provider_failing_does_not_stop_the_others(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper, settings: Settings,
    ) -> None:
        providers = {
            Provider.OPENAI: FakeProvider(Provider.OPENAI, fail_at=AnalysisStep.TONE_OF_VOICE),
            Provider.ANTHROPIC: FakeProvider(Provider.ANTHROPIC),
            Provider.GOOGLE: FakeProvider(Provider.GOOGLE),
        }
        await store.create_project(project)

        await AnalysisOrchestrator(store, fake_scraper, providers, settings).run(project.id)

        saved = await store.get_project(project.id)
        assert saved.status is ProjectStatus.COMPLETED
        assert saved.progress_percent == 100

        openai_runs = await store.list_llm_runs(project.id, Provider.OPENAI)
        assert [r.status for r in openai_runs] == [RunStatus.COMPLETED, RunStatus.COMPLETED, RunStatus.FAILED]
        assert openai_runs[-1].step is AnalysisStep.TONE_OF_VOICE
        assert openai_runs[-1].error == "OPENAI unavailable"
        assert providers[Provider.OPENAI].steps[-1] is AnalysisStep.TONE_OF_VOICE

        openai_steps = {f.step for f in await store.list_findings(project.id, provider=Provider.OPENAI)}
        assert openai_steps == {AnalysisStep.BRAND_SYNOPSIS, AnalysisStep.POSITIONING_PILLARS}

        for provider in (Provider.ANTHROPIC, Provider.GOOGLE):
            runs = await store.list_llm_runs(project.id, provider)
            assert len(runs) == len(ANALYSIS_STEPS)

    @pytest.mark.asyncio
    async def test_cancellation(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider],
    ) -> None:
        cancel = asyncio.Event()
        cancel.set()
        await store.create_project(project)

        with pytest.raises(AnalysisCancelled):
            await AnalysisOrchestrator(store, fake_scraper, fake_providers).run(project.id, cancel)

        saved = await store.get_project(project.id)
        assert saved.status is ProjectStatus.FAILED
        assert saved.progress_message == "Analysis cancelled"
        assert all(p.steps == [] for p in fake_providers.values())

    @pytest.mark.asyncio
    async def test_cancel_mid_analysis_stops_providers(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
    ) -> None:
        cancel = asyncio.Event()

        class CancellingProvider(FakeProvider):
            async def analyze(self, prompt, config=None, *, validate=None):
                response = await super().analyze(prompt, config, validate=validate)
                if len(self.steps) == 2:
                    cancel.set()
                return response

        providers = {Provider.OPENAI: CancellingProvider(Provider.OPENAI)}
        await store.create_project(project)

        with pytest.raises(AnalysisCancelled):
            await AnalysisOrchestrator(store, fake_scraper, providers).run(project.id, cancel)

        assert len(providers[Provider.OPENAI].steps) == 2
        assert (await store.get_project(project.id)).status is ProjectStatus.FAILED


class ScriptedClient(BaseProviderClient):
    """Real retry/parse path; replies per step come from a queue, else the canned text."""

    provider = Provider.OPENAI

    def __init__(self, replies: dict[AnalysisStep, list[str]]) -> None:
        super().__init__(Settings().providers[Provider.OPENAI], RetryPolicy(delay_seconds=0))
        self.replies = replies
        self.calls: list[AnalysisStep] = []
        self._canned = DryRunProvider(Provider.OPENAI, self.settings)

    async def _complete(self, prompt: str, config: ProviderSettings) -> Completion:
        step = detect_step(prompt)
        self.calls.append(step)
        queue = self.replies.get(step)
        if queue:
            text = queue.pop(0)
        else:
            text = json.dumps((await self._canned.analyze(prompt)).content)
        return Completion(text=text, input_tokens=10, output_tokens=20)


class TestOutputShape:
    @pytest.mark.asyncio
    async def test_wrong_shape_reply_is_retried(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
    ) -> None:
        client = ScriptedClient({AnalysisStep.BRAND_SYNOPSIS: ['["not", "an", "object"]']})
        await store.create_project(project)

        await AnalysisOrchestrator(store, fake_scraper, {Provider.OPENAI: client}).run(project.id)

        assert (await store.get_project(project.id)).status is ProjectStatus.COMPLETED
        assert client.calls.count(AnalysisStep.BRAND_SYNOPSIS) == 2
        runs = await store.list_llm_runs(project.id, Provider.OPENAI)
        assert len(runs) == len(ANALYSIS_STEPS)
        assert all(r.status is RunStatus.COMPLETED for r in runs)
        synopses = await store.list_findings(project.id, kind=FindingKind.BRAND_SYNOPSIS)
        assert len(synopses) == 1

    @pytest.mark.asyncio
    async def test_persistent_wrong_shape_records_only_a_failed_run(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
    ) -> None:
        client = ScriptedClient({AnalysisStep.BRAND_SYNOPSIS: ["[]", "[]", "[]"]})
        await store.create_project(project)

        await AnalysisOrchestrator(store, fake_scraper, {Provider.OPENAI: client}).run(project.id)

        assert client.calls == [AnalysisStep.BRAND_SYNOPSIS] * 3
        runs = await store.list_llm_runs(project.id, Provider.OPENAI)
        assert [(r.step, r.status) for r in runs] == [(AnalysisStep.BRAND_SYNOPSIS, RunStatus.FAILED)]
        assert await store.list_findings(project.id) == []

    @pytest.mark.asyncio
    async def test_non_finite_score_falls_back_to_neutral(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
    ) -> None:
        client = ScriptedClient({AnalysisStep.MESSAGING: [
            '{"clarity": {"score": Infinity, "level": "high"}, "trust": {"score": NaN}}'
        ]})
        await store.create_project(project)

        await AnalysisOrchestrator(store, fake_scraper, {Provider.OPENAI: client}).run(project.id)

        assert (await store.get_project(project.id)).status is ProjectStatus.COMPLETED
        clarity = await store.list_findings(project.id, kind=FindingKind.CLARITY_SCORE)
        trust = await store.list_findings(project.id, kind=FindingKind.TRUST_SCORE)
        assert [f.value.score for f in clarity + trust] == [50, 50]
