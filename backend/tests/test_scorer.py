import math

import pytest

from conftest import make_scores

from app.interview.scorer import (
    DEFAULT_RECRUITER_WEIGHTS,
    calculate_overall_score,
    clamp_score,
    normalize_weights,
    recompute_display_score,
    round_half_up,
)
from app.models import InterviewResult, QuestionResponse, Recommendation, SubScores


def _result(scores: SubScores) -> InterviewResult:
    return InterviewResult(
        candidate_id="c-test",
        overall_score=calculate_overall_score(scores),
        ai_recommendation=Recommendation.HIRE,
        ai_decision_reason="ok",
        responses=(QuestionResponse(question_id="st1", transcript="answer text", scores=scores),),
        integrity_log=(),
        timestamp="2026-01-01T00:00:00+00:00",
    )


def test_overall_score_matches_documented_example():
    scores = make_scores(
        technical_accuracy=90,
        structural_integrity=80,
        assertiveness_index=70,
        signal_to_noise_ratio=60,
        seniority_alignment=100,
    )
    assert calculate_overall_score(scores) == 85


def test_overall_score_uniform_fallback_is_70():
    assert calculate_overall_score(SubScores.uniform(70.0)) == 70


def test_overall_score_stays_in_range():
    assert calculate_overall_score(SubScores.uniform(0.0)) == 0
    assert calculate_overall_score(SubScores.uniform(100.0)) == 100


def test_round_half_up():
    assert round_half_up(84.5) == 85
    assert round_half_up(84.49) == 84
    assert round_half_up(0.5) == 1


def test_clamp_score_bounds_and_garbage():
    assert clamp_score(150) == 100.0
    assert clamp_score(-3) == 0.0
    assert clamp_score("not a number") == 70.0
    assert clamp_score(float("nan"), default=10.0) == 10.0


def test_normalize_weights_sums_to_one():
    weights = normalize_weights({
        "technical_accuracy": 5,
        "coherence": 3,
        "authenticity": 1,
        "seniority_alignment": 1,
        "unknown": 40,
    })
    assert set(weights) == set(DEFAULT_RECRUITER_WEIGHTS)
    assert math.isclose(sum(weights.values()), 1.0)
    assert math.isclose(weights["technical_accuracy"], 0.5)


def test_normalize_weights_without_positive_mass_uses_defaults():
    assert normalize_weights({"technical_accuracy": 0, "coherence": -2}) == DEFAULT_RECRUITER_WEIGHTS
    assert normalize_weights(None) == DEFAULT_RECRUITER_WEIGHTS


def test_recompute_uses_default_recruiter_weights():
    # 0.5*90 + 0.25*80 + 0.15*95 + 0.1*100 = 89.25
    assert recompute_display_score(_result(make_scores())) == 89


def test_recompute_with_custom_weights_does_not_touch_stored_score():
    result = _result(make_scores())
    stored = result.overall_score

    score = recompute_display_score(result, {"technical_accuracy": 1})
    assert score == 90
    assert result.overall_score == stored


def test_recompute_without_result_is_zero():
    assert recompute_display_score(None) == 0


@pytest.mark.parametrize("field", ["technical_accuracy", "coherence", "authenticity", "seniority_alignment"])
def test_recompute_is_monotonic_in_each_subscore(field):
    low = recompute_display_score(_result(make_scores(**{field: 40.0})))
    high = recompute_display_score(_result(make_scores(**{field: 100.0})))
    assert high >= low
