"""Report assembler — merges findings and consensus into a token-addressed report."""

from __future__ import annotations

import logging
import math
import re
import secrets
from datetime import datetime, timezone
from urllib.parse import urlparse

from brandlens.consensus import synthesize_findings
from brandlens.errors import ReportNotReadyError
from brandlens.schemas.config import Settings
from brandlens.schemas.entities import (
    ALL_PROVIDERS,
    SCORE_KINDS,
    Competitor,
    Finding,
    FindingKind,
    LlmRun,
    Project,
    ProjectStatus,
    Report,
    RunStatus,
)
from brandlens.schemas.findings import BrandSynopsis, HeuristicScore, Recommendation, ToneOfVoice
from brandlens.schemas.report import (
    CompetitivePosition,
    ConsensusResult,
    ExecutiveSummary,
    GridPoint,
    HumanVsLlm,
    MessagingScores,
    ModelPerspective,
    PositioningGrid,
    ProviderSynopsis,
    ReportData,
    ReportMetadata,
)
from brandlens.store.base import Store

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 10
TOP_ACTIONS = 5


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without a timezone
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _values(findings: list[Finding], kind: FindingKind) -> list:
    return [f.value for f in findings if f.kind is kind]


# ----------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------


def rank_recommendations(findings: list[Finding]) -> list[Recommendation]:
    """Deduplicate by title (first wins), sort by impact, keep the top ten."""
    unique: dict[str, Recommendation] = {}
    for rec in _values(findings, FindingKind.RECOMMENDATION):
        if rec.title and rec.title not in unique:
            unique[rec.title] = rec
    ranked = sorted(unique.values(), key=lambda r: r.impact_rank, reverse=True)
    return ranked[:MAX_RECOMMENDATIONS]


def build_overview(findings: list[Finding], consensus: ConsensusResult) -> str:
    overview = "This AI-powered brand audit reveals several key insights. "
    synopses: list[BrandSynopsis] = _values(findings, FindingKind.BRAND_SYNOPSIS)
    if not synopses:
        return overview + (
            "The analysis was inconclusive, indicating a lack of clear brand messaging on the website."
        )
    overview += f"The consensus view highlights: {synopses[0].summary}"
    if consensus.divergences:
        overview += (
            " However, the models diverge on "
            + ", ".join(d.topic for d in consensus.divergences)
            + ", suggesting opportunities to improve messaging clarity."
        )
    return overview


def build_model_perspectives(findings: list[Finding], runs: list[LlmRun]) -> list[ModelPerspective]:
    perspectives = []
    for provider in ALL_PROVIDERS:
        completed = [r for r in runs if r.provider is provider and r.status is RunStatus.COMPLETED]
        if not completed:
            continue
        own = [f for f in findings if f.provider is provider]
        synopses = _values(own, FindingKind.BRAND_SYNOPSIS)
        tones = _values(own, FindingKind.TONE_OF_VOICE)
        perspectives.append(ModelPerspective(
            provider=provider,
            model=completed[0].model,
            synopsis=ProviderSynopsis(
                summary=synopses[0].summary if synopses else "No synopsis generated.",
                pillars=_values(own, FindingKind.POSITIONING_PILLAR),
                tone_of_voice=tones[0] if tones else ToneOfVoice(),
                segments=_values(own, FindingKind.BUYER_SEGMENT),
                amenities=_values(own, FindingKind.AMENITY_CLAIM),
                trust_signals=_values(own, FindingKind.TRUST_SIGNAL),
            ),
        ))
    return perspectives


def default_score(dimension: str) -> HeuristicScore:
    return HeuristicScore(level="medium", score=50, rationale=f"{dimension} analysis pending")


def build_messaging(findings: list[Finding]) -> MessagingScores:
    """Average each dimension across providers; missing dimensions default to medium/50."""
    scores: dict[str, HeuristicScore] = {}
    for kind, dimension in SCORE_KINDS.items():
        values: list[HeuristicScore] = _values(findings, kind)
        if not values:
            scores[dimension] = default_score(dimension)
            continue
        average = sum(v.score for v in values) / len(values)
        level = "high" if average > 75 else "medium" if average > 50 else "low"
        scores[dimension] = HeuristicScore(
            level=level,
            score=_round(average),
            rationale=values[0].rationale,
            evidence=values[0].evidence,
            recommendations=values[0].recommendations,
        )
    return MessagingScores(**scores)


def build_positioning(project: Project, competitors: list[Competitor], settings: Settings) -> PositioningGrid:
    return PositioningGrid(
        axes=settings.grid,
        subject=CompetitivePosition(
            name=urlparse(project.url).hostname or project.url,
            url=project.url,
            positioning=GridPoint(x=0, y=0),
        ),
        competitors=[
            CompetitivePosition(
                name=c.name, url=c.url, positioning=GridPoint(x=c.axis_x, y=c.axis_y), tagline=c.notes,
            )
            for c in competitors
        ],
    )


def build_human_vs_llm(project: Project, findings: list[Finding], consensus: ConsensusResult) -> HumanVsLlm | None:
    """Compare the customer's own brand statement with the common themes."""
    if not project.human_brand_statement:
        return None
    synopses: list[BrandSynopsis] = _values(findings, FindingKind.BRAND_SYNOPSIS)
    statement = " ".join(re.sub(r"[^\w\s]", " ", project.human_brand_statement.lower()).split())
    alignment, gaps = [], []
    for theme in consensus.common_themes:
        (alignment if re.search(rf"\b{re.escape(theme)}\b", statement) else gaps).append(theme)
    return HumanVsLlm(
        human_statement=project.human_brand_statement,
        llm_consensus=synopses[0].summary if synopses else "No consensus summary available.",
        alignment=alignment,
        gaps=gaps,
    )


def build_metadata(project: Project, pages: int, runs: list[LlmRun]) -> ReportMetadata:
    failed = [p for p in ALL_PROVIDERS if any(r.provider is p and r.status is RunStatus.FAILED for r in runs)]
    completed = [
        p for p in ALL_PROVIDERS
        if p not in failed and any(r.provider is p and r.status is RunStatus.COMPLETED for r in runs)
    ]
    elapsed = _utc(project.updated_at) - _utc(project.created_at)
    return ReportMetadata(
        pages_analyzed=pages,
        tokens_used=sum(r.tokens_used for r in runs),
        cost=sum(r.cost for r in runs),
        processing_time_ms=max(0, int(elapsed.total_seconds() * 1000)),
        providers_completed=completed,
        providers_failed=failed,
    )


# ----------------------------------------------------------------------
# Assembler
# ----------------------------------------------------------------------


class ReportAssembler:
    """Builds and stores reports.

    Reports are frozen: ``assemble`` returns the existing report for a
    project unless ``regenerate`` is set, which stores a new version under
    a fresh token.
    """

    def __init__(self, store: Store, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or Settings()

    async def build(self, project_id: str) -> ReportData:
        """Assemble the report document without storing it."""
        project = await self.store.get_project(project_id)
        if project.status is not ProjectStatus.COMPLETED:
            raise ReportNotReadyError(
                f"Project {project_id} is {project.status.value}; "
                "a report is available once the analysis has completed"
            )

        findings = await self.store.list_findings(project_id)
        runs = await self.store.list_llm_runs(project_id)
        sources = await self.store.list_sources(project_id)
        competitors = await self.store.list_competitors(project_id)

        consensus = synthesize_findings(findings)
        recommendations = rank_recommendations(findings)

        return ReportData(
            project_id=project.id,
            url=project.url,
            region=project.region,
            executive_summary=ExecutiveSummary(
                overview=build_overview(findings, consensus),
                top_actions=recommendations[:TOP_ACTIONS],
            ),
            model_perspectives=build_model_perspectives(findings, runs),
            consensus=consensus,
            positioning=build_positioning(project, competitors, self.settings),
            messaging=build_messaging(findings),
            recommendations=recommendations,
            human_vs_llm=build_human_vs_llm(project, findings, consensus),
            metadata=build_metadata(project, len(sources), runs),
        )

    async def assemble(self, project_id: str, *, regenerate: bool = False) -> Report:
        existing = await self.store.latest_report(project_id)
        if existing is not None and not regenerate:
            return existing

        data = await self.build(project_id)
        report = Report(
            project_id=project_id,
            url_token=secrets.token_urlsafe(16),
            version=existing.version + 1 if existing else 1,
            data=data.model_dump(mode="json", by_alias=True),
        )
        await self.store.add_report(report)
        logger.info("Report v%d stored for project %s", report.version, project_id)
        return report


async def get_report_by_token(store: Store, token: str) -> Report | None:
    """Look a report up by its share token.  No side effects."""
    return await store.get_report_by_token(token)


def report_data(report: Report) -> ReportData:
    return ReportData.model_validate(report.data)
