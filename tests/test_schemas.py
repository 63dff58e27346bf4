"""Tests for entity and finding payload models."""

import pytest
from pydantic import ValidationError

from brandlens.schemas.entities import (
    AnalysisStep,
    Finding,
    FindingKind,
    ProjectStatus,
    Provider,
    Source,
    SourceType,
)
from brandlens.schemas.findings import (
    BrandSynopsis,
    HeuristicScore,
    Recommendation,
    ToneOfVoice,
    dump_payload,
)


class TestProjectStatus:
    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            (ProjectStatus.PENDING, ProjectStatus.SCRAPING, True),
            (ProjectStatus.SCRAPING, ProjectStatus.ANALYZING, True),
            (ProjectStatus.ANALYZING, ProjectStatus.COMPLETED, True),
            (ProjectStatus.PENDING, ProjectStatus.FAILED, True),
            (ProjectStatus.ANALYZING, ProjectStatus.FAILED, True),
            (ProjectStatus.PENDING, ProjectStatus.ANALYZING, False),
            (ProjectStatus.ANALYZING, ProjectStatus.SCRAPING, False),
            (ProjectStatus.COMPLETED, ProjectStatus.FAILED, False),
            (ProjectStatus.FAILED, ProjectStatus.PENDING, False),
        ],
    )
    def test_transitions(self, current: ProjectStatus, target: ProjectStatus, allowed: bool) -> None:
        assert current.can_transition_to(target) is allowed

    def test_terminal(self) -> None:
        assert [s for s in ProjectStatus if s.is_terminal] == [ProjectStatus.COMPLETED, ProjectStatus.FAILED]


class TestAnalysisStep:
    def test_numbering_and_label(self) -> None:
        assert AnalysisStep.BRAND_SYNOPSIS.number == 1
        assert AnalysisStep.RECOMMENDATIONS.number == 8
        assert AnalysisStep.TONE_OF_VOICE.label == "tone of voice"


class TestSource:
    def test_unknown_type_becomes_other(self) -> None:
        source = Source(project_id="p", type="CAREERS", url="https://x.test/jobs")
        assert source.type is SourceType.OTHER

    def test_known_type(self) -> None:
        assert Source(project_id="p", type="PRESS", url="https://x.test").type is SourceType.PRESS


class TestPayloads:
    def test_camel_case_and_snake_case_both_accepted(self) -> None:
        assert ToneOfVoice.model_validate({"exampleSentence": "a"}).example_sentence == "a"
        assert ToneOfVoice.model_validate({"example_sentence": "b"}).example_sentence == "b"

    def test_dump_uses_camel_case(self) -> None:
        dumped = dump_payload(BrandSynopsis(summary="s", key_quotes=["q"]))
        assert dumped["keyQuotes"] == ["q"]
        assert "key_quotes" not in dumped

    def test_extra_keys_are_kept(self) -> None:
        synopsis = BrandSynopsis.model_validate({"summary": "s", "audience": "families"})
        assert dump_payload(synopsis)["audience"] == "families"

    def test_loose_types_are_coerced(self) -> None:
        synopsis = BrandSynopsis.model_validate({"summary": None, "confidence": 3, "keyQuotes": "a, b"})
        assert synopsis.summary == ""
        assert synopsis.confidence == "3"
        assert synopsis.key_quotes == ["a", "b"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(150, 100), (-3, 0), ("72.6", 73), ("n/a", 50), (None, 50),
         (float("inf"), 50), (float("-inf"), 50), (float("nan"), 50), ("Infinity", 50)],
    )
    def test_score_clamped(self, raw: object, expected: int) -> None:
        assert HeuristicScore.model_validate({"score": raw}).score == expected

    def test_level_normalised(self) -> None:
        assert HeuristicScore.model_validate({"level": " High "}).level == "high"
        assert HeuristicScore.model_validate({"level": "extreme"}).level == "medium"

    def test_recommendation_impact(self) -> None:
        assert Recommendation.model_validate({"impact": "HIGH"}).impact_rank == 3
        assert Recommendation.model_validate({"impact": "whenever"}).impact == "medium"
        assert Recommendation().impact_rank == 2


class TestFinding:
    def test_value_coerced_to_kind(self) -> None:
        finding = Finding(
            project_id="p", kind=FindingKind.CLARITY_SCORE, provider=Provider.OPENAI,
            value={"score": 80, "rationale": "clear"},
        )
        assert isinstance(finding.value, HeuristicScore)
        assert finding.value.rationale == "clear"

    def test_non_mapping_value_becomes_defaults(self) -> None:
        finding = Finding(
            project_id="p", kind=FindingKind.RECOMMENDATION, provider=Provider.GOOGLE, value="do better",
        )
        assert finding.value == Recommendation()

    def test_payload_of_another_kind_is_converted(self) -> None:
        finding = Finding(
            project_id="p", kind=FindingKind.BRAND_SYNOPSIS, provider=Provider.ANTHROPIC,
            value=ToneOfVoice(example_sentence="hi"),
        )
        assert isinstance(finding.value, BrandSynopsis)
        assert finding.value.model_extra["exampleSentence"] == "hi"

    def test_provider_required(self) -> None:
        with pytest.raises(ValidationError):
            Finding(project_id="p", kind=FindingKind.BRAND_SYNOPSIS, value={})
