"""Tests for Markdown and HTML report rendering."""

from __future__ import annotations

from datetime import datetime, timezone

from brandlens.report.html import render_html_report
from brandlens.report.markdown import render_markdown_report, render_report_data
from brandlens.schemas.entities import Provider, Report
from brandlens.schemas.findings import HeuristicScore, Recommendation
from brandlens.schemas.report import (
    CompetitivePosition,
    ConsensusResult,
    Divergence,
    ExecutiveSummary,
    GridPoint,
    HumanVsLlm,
    MessagingScores,
    ModelPerspective,
    ModelView,
    PositioningGrid,
    ProviderSynopsis,
    ReportData,
    ReportMetadata,
)


def _make_data(**overrides) -> ReportData:
    """Build a sample ReportData for testing."""
    recs = [
        Recommendation(title="Quantify the trail network", impact="high", effort="S", category="copy",
                       before="Lots of trails", after="12 miles of trails"),
        Recommendation(title="Add homeowner stories", impact="medium", effort="M", category="proof"),
    ]
    values = dict(
        project_id="p1",
        url="https://willowcreek.test",
        generated_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        executive_summary=ExecutiveSummary(overview="Strong outdoor story.", top_actions=recs),
        model_perspectives=[
            ModelPerspective(
                provider=Provider.OPENAI, model="gpt-4o",
                synopsis=ProviderSynopsis(summary="Trail-side family living."),
            ),
        ],
        consensus=ConsensusResult(
            agreement_index=82,
            common_themes=["trails", "homes"],
            divergences=[Divergence(
                topic="Tone of Voice",
                explanation="Models describe the tone differently",
                model_perspectives=[
                    ModelView(provider=Provider.OPENAI, view="warm, friendly"),
                    ModelView(provider=Provider.GOOGLE, view="formal, polished"),
                ],
            )],
        ),
        positioning=PositioningGrid(
            subject=CompetitivePosition(name="willowcreek.test"),
            competitors=[CompetitivePosition(name="Rival Ranch", positioning=GridPoint(x=0.5, y=-0.25),
                                             tagline="Lakeside")],
        ),
        messaging=MessagingScores(
            clarity=HeuristicScore(score=85, level="high", rationale="Clear headline",
                                   evidence=["Welcome home"], recommendations=["Keep it"]),
            specificity=HeuristicScore(score=40, level="low"),
            differentiation=HeuristicScore(),
            trust=HeuristicScore(score=60),
        ),
        recommendations=recs,
        metadata=ReportMetadata(pages_analyzed=3, tokens_used=12345, cost=0.24, processing_time_ms=4200,
                                providers_completed=[Provider.OPENAI, Provider.GOOGLE],
                                providers_failed=[Provider.ANTHROPIC]),
    )
    values.update(overrides)
    return ReportData(**values)


def _report(data: ReportData, version: int = 1) -> Report:
    return Report(project_id=data.project_id, url_token="tok", version=version,
                  data=data.model_dump(mode="json", by_alias=True))


class TestMarkdown:
    def test_sections(self) -> None:
        md = render_report_data(_make_data())

        assert md.startswith("# Brand Analysis: https://willowcreek.test\n")
        assert "*Generated: 2024-05-01 12:30 UTC*" in md
        assert "## Executive Summary" in md
        assert "1. **Quantify the trail network** (high impact, S effort)" in md
        assert "**Agreement index:** 82/100" in md
        assert "**Common themes:** trails, homes" in md
        assert "#### Tone of Voice" in md
        assert "- **GOOGLE:** formal, polished" in md
        assert "### OPENAI (gpt-4o)" in md
        assert "### Clarity: 85/100" in md
        assert "> Welcome home" in md
        assert "| Rival Ranch | 0.5 | -0.25 | Lakeside |" in md
        assert "- After: 12 miles of trails" in md
        assert "3 page(s) analyzed · 12,345 tokens · $0.2400 · 4.2s" in md
        assert "Providers that failed: ANTHROPIC" in md

    def test_optional_sections_omitted(self) -> None:
        md = render_report_data(_make_data(recommendations=[], model_perspectives=[]))

        assert "## Recommendations" not in md
        assert "## Model Perspectives" not in md
        assert "## Your Statement vs. the Models" not in md

    def test_human_statement(self) -> None:
        hvl = HumanVsLlm(human_statement="Homes near trails.", llm_consensus="Trail-side living.",
                         alignment=["trails"], gaps=["homes"])
        md = render_report_data(_make_data(human_vs_llm=hvl))

        assert "**Your statement:** Homes near trails." in md
        assert "**Missing from your statement:** homes" in md

    def test_from_stored_report(self) -> None:
        md = render_markdown_report(_report(_make_data(), version=3))
        assert "(version 3)" in md
        assert "Quantify the trail network" in md


class TestHtml:
    def test_renders_page(self) -> None:
        html = render_html_report(_report(_make_data()))

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Brand Analysis: https://willowcreek.test</title>" in html
        assert "Agreement index: <strong>82/100</strong>" in html
        assert '<span class="score high">85</span>' in html
        assert "<td>Rival Ranch</td>" in html
        assert "(version" not in html

    def test_escapes_model_text(self) -> None:
        data = _make_data(executive_summary=ExecutiveSummary(overview="<script>alert(1)</script>"))
        html = render_html_report(_report(data))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
