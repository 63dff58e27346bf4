"""Industry registry — which verticals are enabled and their prompt overrides."""

from __future__ import annotations

from pydantic import BaseModel

from brandlens.prompts import residential
from brandlens.schemas.entities import AnalysisStep, Industry


class IndustryConfig(BaseModel):
    label: str
    description: str
    enabled: bool = False
    overrides: dict[AnalysisStep, str] = {}


_RESIDENTIAL_OVERRIDES = {
    AnalysisStep.BRAND_SYNOPSIS: residential.BRAND_SYNOPSIS,
    AnalysisStep.POSITIONING_PILLARS: residential.POSITIONING_PILLARS,
    AnalysisStep.BUYER_SEGMENTS: residential.BUYER_SEGMENTS,
    AnalysisStep.AMENITIES: residential.AMENITIES,
    AnalysisStep.TRUST_SIGNALS: residential.TRUST_SIGNALS,
    AnalysisStep.MESSAGING: residential.MESSAGING,
    AnalysisStep.RECOMMENDATIONS: residential.RECOMMENDATIONS,
}

INDUSTRIES: dict[Industry, IndustryConfig] = {
    Industry.RESIDENTIAL_REAL_ESTATE: IndustryConfig(
        label="Residential Real Estate",
        description="New home communities, master-planned developments, single-family residential",
        enabled=True,
        overrides=_RESIDENTIAL_OVERRIDES,
    ),
    Industry.COMMERCIAL_REAL_ESTATE: IndustryConfig(
        label="Commercial Real Estate",
        description="Office buildings, retail centers, industrial properties",
    ),
    Industry.HOSPITALITY: IndustryConfig(
        label="Hospitality", description="Hotels, resorts, vacation rentals",
    ),
    Industry.HEALTHCARE: IndustryConfig(
        label="Healthcare", description="Hospitals, clinics, medical practices",
    ),
    Industry.FINANCIAL_SERVICES: IndustryConfig(
        label="Financial Services", description="Banks, investment firms, insurance companies",
    ),
    Industry.TECHNOLOGY_SAAS: IndustryConfig(
        label="Technology & SaaS", description="Software companies, tech startups, SaaS platforms",
    ),
    Industry.PROFESSIONAL_SERVICES: IndustryConfig(
        label="Professional Services",
        description="Consulting, legal, accounting, marketing agencies",
    ),
    Industry.RETAIL: IndustryConfig(
        label="Retail", description="E-commerce, retail stores, consumer brands",
    ),
    Industry.EDUCATION: IndustryConfig(
        label="Education", description="Schools, universities, online learning platforms",
    ),
    Industry.MANUFACTURING: IndustryConfig(
        label="Manufacturing", description="Industrial manufacturing, B2B products",
    ),
    Industry.SENIOR_LIVING: IndustryConfig(
        label="Senior Living", description="Retirement communities, assisted living facilities",
    ),
    Industry.MULTIFAMILY: IndustryConfig(
        label="Multifamily", description="Apartment communities, rental properties",
    ),
}


def enabled_industries() -> list[Industry]:
    return [industry for industry, config in INDUSTRIES.items() if config.enabled]


def is_industry_enabled(industry: Industry) -> bool:
    return INDUSTRIES[industry].enabled


def industry_overrides(industry: Industry) -> dict[AnalysisStep, str]:
    """Prompt overrides for an industry; disabled industries get none."""
    config = INDUSTRIES[industry]
    return config.overrides if config.enabled else {}
