import json

import pytest

from app.ai_reasoning.collaborator import (
    AUTHENTICITY_BASELINE,
    InterviewCollaborator,
    parse_evaluation,
)
from app.ai_reasoning.llm import CollaboratorError
from app.models import CandidateMetadata, Recommendation, Tonality


def _evaluation_payload(**overrides) -> dict:
    payload = {
        "technicalAccuracy": 88,
        "structuralIntegrity": 76,
        "assertivenessIndex": 64,
        "signalToNoiseRatio": 71,
        "seniorityAlignment": 80,
        "summary": "Solid triage plan.",
        "keyTakeaways": ["Reconciled sources first", "", "Flagged the CEO early"],
        "recommendation": "hire",
        "recommendationReason": "Calm under time pressure.",
        "isAIGenerated": False,
        "speechMetrics": {
            "wpm": 142,
            "fillerWordCount": 3,
            "fillerWords": ["um", "like"],
            "tonality": "Professional",
            "clarityScore": 82,
        },
    }
    payload.update(overrides)
    return payload


def _scripted_llm(*responses):
    calls = []
    queue = list(responses)

    async def _llm(prompt, json_mode=True, **kwargs):
        calls.append({"prompt": prompt, "json_mode": json_mode})
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return _llm, calls


def test_parse_evaluation_maps_fields():
    evaluation = parse_evaluation(_evaluation_payload())

    assert evaluation.recommendation == Recommendation.HIRE
    assert evaluation.scores.technical_accuracy == 88.0
    assert evaluation.scores.coherence == 76.0
    assert evaluation.scores.authenticity == AUTHENTICITY_BASELINE
    assert evaluation.key_takeaways == ("Reconciled sources first", "Flagged the CEO early")
    assert evaluation.speech_metrics.tonality == Tonality.PROFESSIONAL
    assert evaluation.speech_metrics.wpm == 142.0
    assert evaluation.speech_metrics.filler_word_count == 3


def test_parse_evaluation_clamps_out_of_range_scores():
    evaluation = parse_evaluation(_evaluation_payload(technicalAccuracy=140, assertivenessIndex=-20, authenticity=101))

    assert evaluation.scores.technical_accuracy == 100.0
    assert evaluation.scores.assertiveness_index == 0.0
    assert evaluation.scores.authenticity == 100.0


def test_parse_evaluation_rejects_unknown_recommendation():
    with pytest.raises(CollaboratorError):
        parse_evaluation(_evaluation_payload(recommendation="STRONG_HIRE"))


def test_parse_evaluation_requires_core_scores():
    payload = _evaluation_payload()
    payload.pop("seniorityAlignment")
    with pytest.raises(CollaboratorError):
        parse_evaluation(payload)


def test_parse_evaluation_drops_invalid_speech_metrics():
    evaluation = parse_evaluation(_evaluation_payload(speechMetrics={"tonality": "Sleepy", "wpm": 100}))
    assert evaluation.speech_metrics is None


@pytest.mark.parametrize("raw", ["false", "False", "no", 0, 1, None, "yes"])
def test_parse_evaluation_ai_flag_ignores_non_true_values(raw):
    assert parse_evaluation(_evaluation_payload(isAIGenerated=raw)).is_ai_generated is False


@pytest.mark.parametrize("raw", [True, "true", " TRUE "])
def test_parse_evaluation_ai_flag_accepts_true(raw):
    assert parse_evaluation(_evaluation_payload(isAIGenerated=raw)).is_ai_generated is True


@pytest.mark.asyncio
async def test_ghost_account_string_false_is_not_suspicious():
    llm_fn, _ = _scripted_llm(json.dumps({"trustScore": 88, "isSuspicious": "false", "reasoning": "Established."}))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    result = await collaborator.evaluate_ghost_account(
        CandidateMetadata(account_age_years=6, connection_density=40, profile_completion=95)
    )

    assert result.is_suspicious is False


@pytest.mark.asyncio
async def test_evaluate_response_accepts_fenced_json():
    raw = "```json\n" + json.dumps(_evaluation_payload(isAIGenerated=True)) + "\n```"
    llm_fn, calls = _scripted_llm(raw)
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    evaluation = await collaborator.evaluate_response("Question?", "My answer was detailed.", "Senior")

    assert evaluation.is_ai_generated is True
    assert calls[0]["json_mode"] is True
    assert "Senior role" in calls[0]["prompt"]


@pytest.mark.asyncio
async def test_evaluate_response_raises_on_garbage():
    llm_fn, _ = _scripted_llm("I cannot help with that.")
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    with pytest.raises(CollaboratorError):
        await collaborator.evaluate_response("Question?", "answer", "Mid")


@pytest.mark.asyncio
async def test_follow_up_probe_is_plain_text():
    llm_fn, calls = _scripted_llm('  "What did the reconciliation query actually join on?"  ')
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    probe = await collaborator.generate_follow_up_probe("Question?", "answer")

    assert probe == "What did the reconciliation query actually join on?"
    assert calls[0]["json_mode"] is False


@pytest.mark.asyncio
async def test_follow_up_probe_empty_is_an_error():
    llm_fn, _ = _scripted_llm("   ")
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    with pytest.raises(CollaboratorError):
        await collaborator.generate_follow_up_probe("Question?", "answer")


@pytest.mark.asyncio
async def test_feedback_report_parsing():
    llm_fn, _ = _scripted_llm(json.dumps({
        "strengths": ["Metrics-first"],
        "growthAreas": ["Hedging", "Pacing"],
        "careerTips": "Practice the 30-second version.",
    }))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    report = await collaborator.generate_feedback_report("transcript", {"technical_accuracy": 80})

    assert report.strengths == ("Metrics-first",)
    assert report.growth_areas == ("Hedging", "Pacing")
    assert report.career_tips == "Practice the 30-second version."


@pytest.mark.asyncio
async def test_ghost_account_assessment():
    llm_fn, _ = _scripted_llm(json.dumps({"trustScore": 12, "isSuspicious": True, "reasoning": "Fresh account."}))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    result = await collaborator.evaluate_ghost_account(
        CandidateMetadata(account_age_years=0.1, connection_density=0.5, profile_completion=20)
    )

    assert result.trust_score == 12.0
    assert result.is_suspicious is True


@pytest.mark.asyncio
async def test_ghost_account_missing_fields_raise():
    llm_fn, _ = _scripted_llm(json.dumps({"reasoning": "?"}))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    with pytest.raises(CollaboratorError):
        await collaborator.evaluate_ghost_account(
            CandidateMetadata(account_age_years=3, connection_density=5, profile_completion=60)
        )


@pytest.mark.asyncio
async def test_assessment_criteria_normalises_weights():
    llm_fn, _ = _scripted_llm(json.dumps({
        "questions": [
            {"text": "Design a rate limiter.", "category": "System Design", "difficulty": "hard"},
            {"text": ""},
            "not a question",
        ],
        "weights": {"technicalAccuracy": 6, "coherence": 2, "authenticity": 1, "seniorityAlignment": 1},
        "rationale": "Backend heavy.",
    }))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    criteria = await collaborator.generate_assessment_criteria("Backend engineer", "Owns incidents")

    assert [q["text"] for q in criteria["questions"]] == ["Design a rate limiter."]
    assert criteria["weights"]["technical_accuracy"] == pytest.approx(0.6)
    assert sum(criteria["weights"].values()) == pytest.approx(1.0)
    assert criteria["rationale"] == "Backend heavy."


@pytest.mark.asyncio
async def test_assessment_criteria_without_weights():
    llm_fn, _ = _scripted_llm(json.dumps({"questions": [], "rationale": "n/a"}))
    collaborator = InterviewCollaborator(llm_fn=llm_fn)

    criteria = await collaborator.generate_assessment_criteria("job", "ideal")
    assert criteria["weights"] is None
