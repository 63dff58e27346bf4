"""Consensus synthesizer — agreement, common themes and divergences across providers.

Read-only: findings are loaded and compared, never modified.
"""

from __future__ import annotations

import logging
import math
import re
from collections import defaultdict
from itertools import combinations

from brandlens.schemas.entities import Finding, FindingKind, Provider
from brandlens.schemas.findings import BrandSynopsis, PositioningPillar, ToneOfVoice
from brandlens.schemas.report import ConsensusResult, Divergence, ModelView
from brandlens.store.base import Store

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset({
    "about", "their", "which", "would", "there", "these", "those",
    "community", "brand", "offers", "provides", "features",
})
MIN_WORD_LENGTH = 5
MIN_THEME_PROVIDERS = 2
MAX_THEMES = 5
PILLAR_SIMILARITY_THRESHOLD = 0.6
TONE_UNIQUE_RATIO = 0.6
DIVERGENCE_PENALTY = 30

_NON_WORD = re.compile(r"[^\w\s]")


def _normalize(text: str) -> str:
    return " ".join(_NON_WORD.sub(" ", text.lower()).split())


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard index over lower-cased whitespace tokens.  Two empty texts score 1."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    union = words_a | words_b
    if not union:
        return 1.0
    return len(words_a & words_b) / len(union)


def extract_key_phrases(text: str) -> list[str]:
    """Words of five or more letters that aren't stop words, in order."""
    return [
        word for word in _normalize(text).split()
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    ]


def agreement_index(divergence_count: int, total_findings: int) -> int:
    """0-100; 100 with no divergences, 0 when there is nothing to compare."""
    if total_findings == 0:
        return 0
    ratio = divergence_count / max(total_findings / 3, 1)
    score = max(0.0, 100 - ratio * DIVERGENCE_PENALTY)
    return int(math.floor(score + 0.5))


def _by_provider(findings: list[Finding]) -> dict[Provider, list[Finding]]:
    grouped: dict[Provider, list[Finding]] = defaultdict(list)
    for finding in findings:
        grouped[finding.provider].append(finding)
    return grouped


def _of_type(findings: list[Finding], payload_type: type) -> list[Finding]:
    """Findings whose payload is a ``payload_type``; any other payload is skipped."""
    return [f for f in findings if isinstance(f.value, payload_type)]


def common_themes(synopses: list[Finding], pillars: list[Finding]) -> list[str]:
    """Themes stated in the synopses of at least two providers, most common first.

    Candidates are key words from the synopses plus pillar names; a candidate
    counts once per provider whose synopsis contains it as whole words.
    """
    synopses = _of_type(synopses, BrandSynopsis)
    pillars = _of_type(pillars, PositioningPillar)
    candidates: dict[str, None] = {}
    for finding in synopses:
        for word in extract_key_phrases(finding.value.summary):  # type: ignore[union-attr]
            candidates.setdefault(word)
    for finding in pillars:
        name = _normalize(finding.value.name)  # type: ignore[union-attr]
        if name:
            candidates.setdefault(name)

    summaries = {
        provider: " ".join(_normalize(f.value.summary) for f in group)  # type: ignore[union-attr]
        for provider, group in _by_provider(synopses).items()
    }

    counts: list[tuple[str, int]] = []
    for theme in candidates:
        pattern = re.compile(rf"\b{re.escape(theme)}\b")
        count = sum(1 for text in summaries.values() if pattern.search(text))
        if count >= MIN_THEME_PROVIDERS:
            counts.append((theme, count))

    counts.sort(key=lambda item: item[1], reverse=True)
    return [theme for theme, _ in counts[:MAX_THEMES]]


def pillar_divergences(pillars: list[Finding]) -> list[Divergence]:
    """Pillars named by two or more providers whose descriptions disagree."""
    pillars = _of_type(pillars, PositioningPillar)
    by_provider = _by_provider(pillars)
    names: dict[str, None] = {}
    for finding in pillars:
        name = finding.value.name.strip().lower()  # type: ignore[union-attr]
        if name:
            names.setdefault(name)

    divergences = []
    for name in names:
        views: list[ModelView] = []
        for provider, group in by_provider.items():
            match = next(
                (f.value for f in group if f.value.name.strip().lower() == name),  # type: ignore[union-attr]
                None,
            )
            if match is not None:
                views.append(ModelView(provider=provider, view=match.description, evidence=match.evidence))
        if len(views) < 2:
            continue

        lowest = min(jaccard_similarity(a.view, b.view) for a, b in combinations(views, 2))
        if lowest < PILLAR_SIMILARITY_THRESHOLD:
            divergences.append(Divergence(
                topic=f"Positioning: {name}",
                model_perspectives=views,
                explanation=f'Models have different perspectives on "{name}" positioning',
            ))
    return divergences


def tone_divergence(tones: list[Finding]) -> Divergence | None:
    """One divergence when the providers' tone adjectives barely overlap."""
    views: list[ModelView] = []
    adjectives: list[str] = []
    for provider, group in _by_provider(_of_type(tones, ToneOfVoice)).items():
        tone: ToneOfVoice = group[0].value  # type: ignore[assignment]
        views.append(ModelView(
            provider=provider, view=", ".join(tone.adjectives), evidence=tone.example_sentence,
        ))
        adjectives.extend(a.strip().lower() for a in tone.adjectives)

    if len(views) < 2:
        return None
    if len(set(adjectives)) > len(adjectives) * TONE_UNIQUE_RATIO:
        return Divergence(
            topic="Tone of Voice",
            model_perspectives=views,
            explanation="Models perceive different tonal qualities in the brand communication",
        )
    return None


def synthesize_findings(findings: list[Finding]) -> ConsensusResult:
    by_kind: dict[FindingKind, list[Finding]] = defaultdict(list)
    for finding in findings:
        by_kind[finding.kind].append(finding)

    synopses = by_kind[FindingKind.BRAND_SYNOPSIS]
    pillars = by_kind[FindingKind.POSITIONING_PILLAR]

    divergences = pillar_divergences(pillars)
    tone = tone_divergence(by_kind[FindingKind.TONE_OF_VOICE])
    if tone is not None:
        divergences.append(tone)

    return ConsensusResult(
        agreement_index=agreement_index(len(divergences), len(findings)),
        common_themes=common_themes(synopses, pillars),
        divergences=divergences,
    )


async def synthesize(store: Store, project_id: str) -> ConsensusResult:
    findings = await store.list_findings(project_id)
    result = synthesize_findings(findings)
    logger.info(
        "Consensus for %s: agreement %d, %d theme(s), %d divergence(s)",
        project_id, result.agreement_index, len(result.common_themes), len(result.divergences),
    )
    return result
