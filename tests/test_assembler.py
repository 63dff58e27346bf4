"""Tests for the report assembler."""

from __future__ import annotations

import pytest

from brandlens.errors import ReportNotReadyError
from brandlens.pipeline.orchestrator import AnalysisOrchestrator
from brandlens.report.assembler import (
    ReportAssembler,
    build_human_vs_llm,
    build_messaging,
    build_overview,
    get_report_by_token,
    rank_recommendations,
    report_data,
)
from brandlens.schemas.config import Settings
from brandlens.schemas.entities import (
    ALL_PROVIDERS,
    AnalysisStep,
    Competitor,
    Finding,
    FindingKind,
    Project,
    ProjectStatus,
    Provider,
)
from brandlens.schemas.report import ConsensusResult
from brandlens.store.memory import MemoryStore

from fakes import FakeProvider, FakeScraper


async def _analyze(store: MemoryStore, project: Project, scraper: FakeScraper, providers, settings: Settings) -> None:
    await store.create_project(project)
    await AnalysisOrchestrator(store, scraper, providers, settings).run(project.id)


def _rec(title: str, impact: str = "medium") -> Finding:
    return Finding(
        project_id="p", kind=FindingKind.RECOMMENDATION, provider=Provider.OPENAI,
        value={"title": title, "impact": impact},
    )


def _score(kind: FindingKind, score: int, rationale: str = "") -> Finding:
    return Finding(project_id="p", kind=kind, provider=Provider.OPENAI, value={"score": score, "rationale": rationale})


class TestSections:
    def test_recommendations_deduped_and_ranked(self) -> None:
        findings = [
            _rec("Add pricing", "low"),
            _rec("Quantify trails", "high"),
            _rec("Add pricing", "high"),
            _rec(""),
            _rec("Tell stories", "medium"),
        ]
        ranked = rank_recommendations(findings)
        assert [(r.title, r.impact) for r in ranked] == [
            ("Quantify trails", "high"),
            ("Tell stories", "medium"),
            ("Add pricing", "low"),
        ]

    def test_recommendations_capped_at_ten(self) -> None:
        assert len(rank_recommendations([_rec(f"Rec {i}") for i in range(15)])) == 10

    def test_messaging_averages_across_providers(self) -> None:
        findings = [
            _score(FindingKind.CLARITY_SCORE, 80, "first rationale"),
            _score(FindingKind.CLARITY_SCORE, 90, "second rationale"),
            _score(FindingKind.SPECIFICITY_SCORE, 50),
            _score(FindingKind.SPECIFICITY_SCORE, 51),
            _score(FindingKind.DIFFERENTIATION_SCORE, 20),
        ]
        messaging = build_messaging(findings)

        assert (messaging.clarity.score, messaging.clarity.level) == (85, "high")
        assert messaging.clarity.rationale == "first rationale"
        assert (messaging.specificity.score, messaging.specificity.level) == (51, "medium")
        assert (messaging.differentiation.score, messaging.differentiation.level) == (20, "low")
        assert messaging.trust.score == 50
        assert messaging.trust.level == "medium"
        assert messaging.trust.rationale == "trust analysis pending"

    def test_overview_without_synopsis(self) -> None:
        overview = build_overview([], ConsensusResult())
        assert "inconclusive" in overview

    def test_overview_mentions_divergent_topics(self) -> None:
        synopsis = Finding(
            project_id="p", kind=FindingKind.BRAND_SYNOPSIS, provider=Provider.OPENAI,
            value={"summary": "Trail-side living."},
        )
        consensus = ConsensusResult.model_validate({
            "divergences": [{"topic": "Tone of Voice", "model_perspectives": []}],
        })
        overview = build_overview([synopsis], consensus)
        assert "Trail-side living." in overview
        assert "Tone of Voice" in overview

    def test_human_statement_alignment_and_gaps(self) -> None:
        project = Project(url="https://x.test", human_brand_statement="Master-planned living, close to TRAILS.")
        consensus = ConsensusResult(common_themes=["master", "planned", "trails", "homes"])

        result = build_human_vs_llm(project, [], consensus)

        assert result is not None
        assert result.alignment == ["master", "planned", "trails"]
        assert result.gaps == ["homes"]
        assert result.llm_consensus == "No consensus summary available."

    def test_no_statement_no_comparison(self) -> None:
        assert build_human_vs_llm(Project(url="https://x.test"), [], ConsensusResult()) is None


class TestReportAssembler:
    @pytest.mark.asyncio
    async def test_requires_completed_project(self, store: MemoryStore, project: Project) -> None:
        await store.create_project(project)
        with pytest.raises(ReportNotReadyError):
            await ReportAssembler(store).assemble(project.id)
        assert store.reports == []

    @pytest.mark.asyncio
    async def test_full_report(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider], settings: Settings,
    ) -> None:
        project = project.model_copy(update={"human_brand_statement": "Homes near trails and parks."})
        await _analyze(store, project, fake_scraper, fake_providers, settings)
        await store.add_competitor(Competitor(project_id=project.id, name="Rival Ranch", axis_x=0.5, axis_y=-0.2))

        report = await ReportAssembler(store, settings).assemble(project.id)
        data = report_data(report)

        assert report.version == 1
        assert len(report.url_token) >= 22
        assert data.url == project.url
        assert [p.provider for p in data.model_perspectives] == list(ALL_PROVIDERS)
        assert data.model_perspectives[0].synopsis.summary.startswith("A master-planned community")
        assert len(data.model_perspectives[0].synopsis.pillars) == 2

        assert data.consensus.agreement_index == 100
        assert data.consensus.divergences == []
        assert data.consensus.common_themes == ["master", "planned", "offering", "homes", "trails"]

        assert [r.title for r in data.recommendations] == ["Quantify the trail network", "Add homeowner stories"]
        assert data.executive_summary.top_actions == data.recommendations
        assert data.messaging.clarity.score == 60

        assert data.positioning.subject.name == "willowcreek.test"
        assert [c.name for c in data.positioning.competitors] == ["Rival Ranch"]
        assert data.positioning.axes.x.label == "Value"

        assert data.human_vs_llm is not None
        assert "homes" in data.human_vs_llm.alignment
        assert "trails" in data.human_vs_llm.alignment

        assert data.metadata.pages_analyzed == 3
        assert data.metadata.cost == pytest.approx(0.24)
        assert data.metadata.providers_completed == list(ALL_PROVIDERS)
        assert data.metadata.providers_failed == []

    @pytest.mark.asyncio
    async def test_failed_provider_is_left_out(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper, settings: Settings,
    ) -> None:
        providers = {
            Provider.OPENAI: FakeProvider(Provider.OPENAI),
            Provider.ANTHROPIC: FakeProvider(Provider.ANTHROPIC, fail_at=AnalysisStep.BRAND_SYNOPSIS),
        }
        await _analyze(store, project, fake_scraper, providers, settings)

        data = report_data(await ReportAssembler(store, settings).assemble(project.id))

        assert [p.provider for p in data.model_perspectives] == [Provider.OPENAI]
        assert data.metadata.providers_completed == [Provider.OPENAI]
        assert data.metadata.providers_failed == [Provider.ANTHROPIC]

    @pytest.mark.asyncio
    async def test_reports_are_frozen_until_regenerated(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider], settings: Settings,
    ) -> None:
        await _analyze(store, project, fake_scraper, fake_providers, settings)
        assembler = ReportAssembler(store, settings)

        first = await assembler.assemble(project.id)
        again = await assembler.assemble(project.id)
        regenerated = await assembler.assemble(project.id, regenerate=True)

        assert again.url_token == first.url_token
        assert len(store.reports) == 2
        assert regenerated.version == 2
        assert regenerated.url_token != first.url_token
        assert (await store.latest_report(project.id)).id == regenerated.id

        found = await get_report_by_token(store, first.url_token)
        assert found is not None and found.version == 1
        assert await get_report_by_token(store, "no-such-token") is None

    @pytest.mark.asyncio
    async def test_status_untouched_by_assembly(
        self, store: MemoryStore, project: Project, fake_scraper: FakeScraper,
        fake_providers: dict[Provider, FakeProvider], settings: Settings,
    ) -> None:
        await _analyze(store, project, fake_scraper, fake_providers, settings)
        await ReportAssembler(store, settings).assemble(project.id)
        assert (await store.get_project(project.id)).status is ProjectStatus.COMPLETED
