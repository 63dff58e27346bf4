"""Pydantic models for the assembled report document."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from brandlens.schemas.entities import Provider
from brandlens.schemas.findings import (
    AmenityClaim,
    BuyerSegment,
    HeuristicScore,
    PositioningPillar,
    Recommendation,
    ToneOfVoice,
    TrustSignal,
)


class ModelView(BaseModel):
    """One provider's reading of a contested topic."""

    provider: Provider
    view: str = ""
    evidence: str = ""


class Divergence(BaseModel):
    topic: str
    model_perspectives: list[ModelView] = []
    explanation: str = ""


class ConsensusResult(BaseModel):
    agreement_index: int = 0  # 0-100
    common_themes: list[str] = []
    divergences: list[Divergence] = []


class ExecutiveSummary(BaseModel):
    overview: str = ""
    top_actions: list[Recommendation] = []


class ProviderSynopsis(BaseModel):
    summary: str = ""
    pillars: list[PositioningPillar] = []
    tone_of_voice: ToneOfVoice = ToneOfVoice()
    segments: list[BuyerSegment] = []
    amenities: list[AmenityClaim] = []
    trust_signals: list[TrustSignal] = []


class ModelPerspective(BaseModel):
    provider: Provider
    model: str
    synopsis: ProviderSynopsis = ProviderSynopsis()


class GridAxis(BaseModel):
    label: str
    min: str
    max: str


class GridAxes(BaseModel):
    x: GridAxis = GridAxis(label="Value", min="Attainable", max="Luxury")
    y: GridAxis = GridAxis(label="Style", min="Traditional", max="Modern")


class GridPoint(BaseModel):
    x: float = 0.0
    y: float = 0.0


class CompetitivePosition(BaseModel):
    name: str
    url: str = ""
    positioning: GridPoint = GridPoint()
    tagline: str = ""


class PositioningGrid(BaseModel):
    axes: GridAxes = GridAxes()
    subject: CompetitivePosition
    competitors: list[CompetitivePosition] = []
    white_space: list[str] = []
    claim_overlaps: list[str] = []


class MessagingScores(BaseModel):
    clarity: HeuristicScore
    specificity: HeuristicScore
    differentiation: HeuristicScore
    trust: HeuristicScore


class HumanVsLlm(BaseModel):
    human_statement: str
    llm_consensus: str = ""
    alignment: list[str] = []  # common themes the human statement also makes
    gaps: list[str] = []  # common themes the human statement leaves out


class ReportMetadata(BaseModel):
    pages_analyzed: int = 0
    tokens_used: int = 0
    cost: float = 0.0
    processing_time_ms: int = 0
    providers_completed: list[Provider] = []
    providers_failed: list[Provider] = []


class ReportData(BaseModel):
    """The full assembled report."""

    project_id: str
    url: str
    region: str | None = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    executive_summary: ExecutiveSummary
    model_perspectives: list[ModelPerspective] = []
    consensus: ConsensusResult
    positioning: PositioningGrid
    messaging: MessagingScores
    recommendations: list[Recommendation] = []
    human_vs_llm: HumanVsLlm | None = None
    metadata: ReportMetadata = ReportMetadata()
