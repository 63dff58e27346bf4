"""Persisted entities — Project, Source, LlmRun, Finding, Report, Competitor."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from brandlens.schemas.findings import (
    AmenityClaim,
    BrandSynopsis,
    BuyerSegment,
    FindingValue,
    HeuristicScore,
    PositioningPillar,
    Recommendation,
    ToneOfVoice,
    TrustSignal,
)


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStatus(str, Enum):
    PENDING = "PENDING"
    SCRAPING = "SCRAPING"
    ANALYZING = "ANALYZING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (ProjectStatus.COMPLETED, ProjectStatus.FAILED)

    def can_transition_to(self, target: ProjectStatus) -> bool:
        """Forward-only progression; FAILED is reachable from any non-terminal state."""
        if self.is_terminal:
            return False
        if target is ProjectStatus.FAILED:
            return True
        return _STATUS_ORDER.index(target) == _STATUS_ORDER.index(self) + 1


_STATUS_ORDER = [
    ProjectStatus.PENDING,
    ProjectStatus.SCRAPING,
    ProjectStatus.ANALYZING,
    ProjectStatus.COMPLETED,
]


class Industry(str, Enum):
    RESIDENTIAL_REAL_ESTATE = "RESIDENTIAL_REAL_ESTATE"
    COMMERCIAL_REAL_ESTATE = "COMMERCIAL_REAL_ESTATE"
    HOSPITALITY = "HOSPITALITY"
    HEALTHCARE = "HEALTHCARE"
    FINANCIAL_SERVICES = "FINANCIAL_SERVICES"
    TECHNOLOGY_SAAS = "TECHNOLOGY_SAAS"
    PROFESSIONAL_SERVICES = "PROFESSIONAL_SERVICES"
    RETAIL = "RETAIL"
    EDUCATION = "EDUCATION"
    MANUFACTURING = "MANUFACTURING"
    SENIOR_LIVING = "SENIOR_LIVING"
    MULTIFAMILY = "MULTIFAMILY"


class Provider(str, Enum):
    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    GOOGLE = "GOOGLE"


ALL_PROVIDERS: tuple[Provider, ...] = (Provider.OPENAI, Provider.ANTHROPIC, Provider.GOOGLE)


class RunStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ProviderStatus(str, Enum):
    """Per-provider progress as seen by the status surface."""

    WAITING = "WAITING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class SourceType(str, Enum):
    MAIN_PAGE = "MAIN_PAGE"
    ABOUT = "ABOUT"
    HOMES = "HOMES"
    AMENITIES = "AMENITIES"
    LOCATION = "LOCATION"
    CONTACT = "CONTACT"
    PRESS = "PRESS"
    OTHER = "OTHER"


class AnalysisStep(str, Enum):
    """The eight analysis steps, in the order each provider runs them."""

    BRAND_SYNOPSIS = "brand_synopsis"
    POSITIONING_PILLARS = "positioning_pillars"
    TONE_OF_VOICE = "tone_of_voice"
    BUYER_SEGMENTS = "buyer_segments"
    AMENITIES = "amenities"
    TRUST_SIGNALS = "trust_signals"
    MESSAGING = "messaging"
    RECOMMENDATIONS = "recommendations"

    @property
    def number(self) -> int:
        return ANALYSIS_STEPS.index(self) + 1

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


ANALYSIS_STEPS: tuple[AnalysisStep, ...] = tuple(AnalysisStep)


class FindingKind(str, Enum):
    BRAND_SYNOPSIS = "BRAND_SYNOPSIS"
    POSITIONING_PILLAR = "POSITIONING_PILLAR"
    TONE_OF_VOICE = "TONE_OF_VOICE"
    BUYER_SEGMENT = "BUYER_SEGMENT"
    AMENITY_CLAIM = "AMENITY_CLAIM"
    TRUST_SIGNAL = "TRUST_SIGNAL"
    CLARITY_SCORE = "CLARITY_SCORE"
    SPECIFICITY_SCORE = "SPECIFICITY_SCORE"
    DIFFERENTIATION_SCORE = "DIFFERENTIATION_SCORE"
    TRUST_SCORE = "TRUST_SCORE"
    RECOMMENDATION = "RECOMMENDATION"


SCORE_KINDS: dict[FindingKind, str] = {
    FindingKind.CLARITY_SCORE: "clarity",
    FindingKind.SPECIFICITY_SCORE: "specificity",
    FindingKind.DIFFERENTIATION_SCORE: "differentiation",
    FindingKind.TRUST_SCORE: "trust",
}

PAYLOAD_TYPES: dict[FindingKind, type[BaseModel]] = {
    FindingKind.BRAND_SYNOPSIS: BrandSynopsis,
    FindingKind.POSITIONING_PILLAR: PositioningPillar,
    FindingKind.TONE_OF_VOICE: ToneOfVoice,
    FindingKind.BUYER_SEGMENT: BuyerSegment,
    FindingKind.AMENITY_CLAIM: AmenityClaim,
    FindingKind.TRUST_SIGNAL: TrustSignal,
    FindingKind.CLARITY_SCORE: HeuristicScore,
    FindingKind.SPECIFICITY_SCORE: HeuristicScore,
    FindingKind.DIFFERENTIATION_SCORE: HeuristicScore,
    FindingKind.TRUST_SCORE: HeuristicScore,
    FindingKind.RECOMMENDATION: Recommendation,
}


class Project(BaseModel):
    """One analysis request."""

    id: str = Field(default_factory=_new_id)
    url: str
    industry: Industry = Industry.RESIDENTIAL_REAL_ESTATE
    status: ProjectStatus = ProjectStatus.PENDING
    progress_message: str = ""
    progress_percent: int = 0
    created_by: str | None = None
    email: str | None = None
    region: str | None = None
    human_brand_statement: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Source(BaseModel):
    """One scraped page. Immutable once created."""

    id: str = Field(default_factory=_new_id)
    project_id: str
    type: SourceType = SourceType.OTHER
    url: str
    content_hash: str = ""
    text_excerpt: str = ""
    full_content: str = ""
    metadata: dict[str, Any] = {}
    created_at: datetime = Field(default_factory=_now)

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_other(cls, v: object) -> object:
        if isinstance(v, str) and v not in SourceType.__members__:
            return SourceType.OTHER
        return v


class LlmRun(BaseModel):
    """A record of one call to one provider. Append-only."""

    id: str = Field(default_factory=_new_id)
    project_id: str
    provider: Provider
    step: AnalysisStep | None = None
    model: str
    temperature: float
    max_tokens: int
    raw_response: dict[str, Any] = {}
    input_tokens: int = 0
    output_tokens: int = 0
    tokens_used: int = 0
    cost: float = 0.0
    status: RunStatus = RunStatus.COMPLETED
    error: str | None = None
    created_at: datetime = Field(default_factory=_now)


class Finding(BaseModel):
    """One atomic analytical result, attributed to the run that produced it.

    ``value`` is coerced into the payload model matching ``kind``.
    """

    id: str = Field(default_factory=_new_id)
    project_id: str
    kind: FindingKind
    provider: Provider
    llm_run_id: str | None = None
    step: AnalysisStep | None = None
    value: FindingValue
    evidence_ref: str = ""
    created_at: datetime = Field(default_factory=_now)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_payload(cls, v: object, info: ValidationInfo) -> object:
        kind = info.data.get("kind")
        if kind is None:
            return v
        payload_type = PAYLOAD_TYPES[FindingKind(kind)]
        if isinstance(v, payload_type):
            return v
        if isinstance(v, BaseModel):
            v = v.model_dump(by_alias=True)
        return payload_type.model_validate(v if isinstance(v, dict) else {})


class Competitor(BaseModel):
    """A competitor plotted on the positioning grid."""

    id: str = Field(default_factory=_new_id)
    project_id: str
    name: str
    url: str = ""
    axis_x: float = 0.0
    axis_y: float = 0.0
    notes: str = ""


class Report(BaseModel):
    """The synthesised report, addressed by an unguessable token."""

    id: str = Field(default_factory=_new_id)
    project_id: str
    url_token: str
    is_public: bool = False
    version: int = 1
    data: dict[str, Any]
    created_at: datetime = Field(default_factory=_now)
