"""Markdown report builder — renders a stored Report to a Markdown document."""

from __future__ import annotations

from brandlens.schemas.entities import Report
from brandlens.schemas.findings import HeuristicScore
from brandlens.schemas.report import PositioningGrid, ReportData

_IMPACT_ICON = {"high": "🔴", "medium": "🟡", "low": "🟢"}
_LEVEL_ICON = {"high": "🟢", "medium": "🟡", "low": "🔴"}


def _render_score(name: str, score: HeuristicScore) -> list[str]:
    icon = _LEVEL_ICON.get(score.level, "⚪")
    lines = [f"### {name.title()}: {score.score}/100 {icon} ({score.level})\n"]
    if score.rationale:
        lines.append(f"{score.rationale}\n")
    for quote in score.evidence:
        lines.append(f"> {quote}")
    if score.evidence:
        lines.append("")
    for rec in score.recommendations:
        lines.append(f"- {rec}")
    if score.recommendations:
        lines.append("")
    return lines


def _render_grid(grid: PositioningGrid) -> list[str]:
    lines = [
        f"*X axis: {grid.axes.x.label} ({grid.axes.x.min} → {grid.axes.x.max}); "
        f"Y axis: {grid.axes.y.label} ({grid.axes.y.min} → {grid.axes.y.max})*\n",
        "| Name | X | Y | Tagline |",
        "|------|---|---|---------|",
        f"| **{grid.subject.name}** | {grid.subject.positioning.x:g} | {grid.subject.positioning.y:g} | |",
    ]
    for comp in grid.competitors:
        lines.append(f"| {comp.name} | {comp.positioning.x:g} | {comp.positioning.y:g} | {comp.tagline} |")
    lines.append("")
    return lines


def render_report_data(data: ReportData, *, version: int = 1) -> str:
    sections: list[str] = []

    sections.append(f"# Brand Analysis: {data.url}\n")
    generated = f"*Generated: {data.generated_at:%Y-%m-%d %H:%M} UTC"
    if version > 1:
        generated += f" (version {version})"
    sections.append(generated + "*\n")

    # Executive summary
    sections.append("## Executive Summary\n")
    sections.append(f"{data.executive_summary.overview}\n")
    if data.executive_summary.top_actions:
        sections.append("### Top Actions\n")
        for i, rec in enumerate(data.executive_summary.top_actions, 1):
            sections.append(f"{i}. **{rec.title}** ({rec.impact} impact, {rec.effort} effort)")
        sections.append("")

    # Consensus
    consensus = data.consensus
    sections.append("## Model Consensus\n")
    sections.append(f"**Agreement index:** {consensus.agreement_index}/100\n")
    if consensus.common_themes:
        sections.append("**Common themes:** " + ", ".join(consensus.common_themes) + "\n")
    if consensus.divergences:
        sections.append("### Divergences\n")
        for div in consensus.divergences:
            sections.append(f"#### {div.topic}\n")
            sections.append(f"{div.explanation}\n")
            for view in div.model_perspectives:
                sections.append(f"- **{view.provider.value}:** {view.view}")
            sections.append("")

    # Per-model
    if data.model_perspectives:
        sections.append("## Model Perspectives\n")
        for perspective in data.model_perspectives:
            synopsis = perspective.synopsis
            sections.append(f"### {perspective.provider.value} ({perspective.model})\n")
            sections.append(f"{synopsis.summary}\n")
            if synopsis.pillars:
                sections.append("**Positioning pillars:**")
                for pillar in synopsis.pillars:
                    sections.append(f"- **{pillar.name}**: {pillar.description}")
                sections.append("")
            if synopsis.tone_of_voice.adjectives:
                sections.append(f"**Tone:** {', '.join(synopsis.tone_of_voice.adjectives)}\n")
            if synopsis.segments:
                sections.append("**Buyer segments:** " + ", ".join(s.name for s in synopsis.segments) + "\n")

    # Messaging
    sections.append("## Messaging Quality\n")
    for name in ("clarity", "specificity", "differentiation", "trust"):
        sections.extend(_render_score(name, getattr(data.messaging, name)))

    # Positioning
    sections.append("## Competitive Positioning\n")
    sections.extend(_render_grid(data.positioning))

    # Recommendations
    if data.recommendations:
        sections.append("## Recommendations\n")
        for i, rec in enumerate(data.recommendations, 1):
            icon = _IMPACT_ICON.get(rec.impact, "⚪")
            sections.append(f"### {i}. {icon} {rec.title}\n")
            sections.append(f"**Impact:** {rec.impact} | **Effort:** {rec.effort} | **Category:** {rec.category}\n")
            if rec.description:
                sections.append(f"{rec.description}\n")
            if rec.before or rec.after:
                sections.append(f"- Before: {rec.before or '—'}")
                sections.append(f"- After: {rec.after or '—'}")
                sections.append("")

    # Human vs LLM
    if data.human_vs_llm:
        hvl = data.human_vs_llm
        sections.append("## Your Statement vs. the Models\n")
        sections.append(f"**Your statement:** {hvl.human_statement}\n")
        sections.append(f"**Model consensus:** {hvl.llm_consensus}\n")
        if hvl.alignment:
            sections.append("**Aligned themes:** " + ", ".join(hvl.alignment) + "\n")
        if hvl.gaps:
            sections.append("**Missing from your statement:** " + ", ".join(hvl.gaps) + "\n")

    # Metadata
    meta = data.metadata
    sections.append("---\n")
    sections.append(
        f"*{meta.pages_analyzed} page(s) analyzed · {meta.tokens_used:,} tokens · "
        f"${meta.cost:.4f} · {meta.processing_time_ms / 1000:.1f}s*"
    )
    if meta.providers_failed:
        sections.append(
            "\n*Providers that failed: " + ", ".join(p.value for p in meta.providers_failed) + "*"
        )

    return "\n".join(sections) + "\n"


def render_markdown_report(report: Report) -> str:
    """Render a stored Report into a Markdown string."""
    return render_report_data(ReportData.model_validate(report.data), version=report.version)
