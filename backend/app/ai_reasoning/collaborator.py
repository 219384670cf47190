"""
Client for the generative-AI collaborator.

Every call builds a prompt, asks the LLM and turns the raw answer into a
domain object. Any failure (transport, unparseable output, missing fields,
unknown enum values) surfaces as CollaboratorError; deciding what to do about
it is the caller's job.
"""

import json
import logging
import re

from app.ai_reasoning.llm import CollaboratorError, call_llm
from app.ai_reasoning.prompts.calibration_prompt import build_calibration_prompt
from app.ai_reasoning.prompts.evaluation_prompt import build_evaluation_prompt
from app.ai_reasoning.prompts.feedback_prompt import build_feedback_prompt
from app.ai_reasoning.prompts.followup_prompt import build_followup_prompt
from app.ai_reasoning.prompts.ghost_account_prompt import build_ghost_account_prompt
from app.interview.scorer import clamp_score, normalize_weights
from app.models import (
    CandidateMetadata,
    Evaluation,
    FeedbackReport,
    GhostAccountAssessment,
    Recommendation,
    SpeechMetrics,
    SubScores,
    Tonality,
)

logger = logging.getLogger("app.ai_reasoning.collaborator")

# Applied when the evaluator does not report authenticity on its own.
AUTHENTICITY_BASELINE = 95.0

_REQUIRED_SCORE_KEYS = (
    "technicalAccuracy",
    "structuralIntegrity",
    "assertivenessIndex",
    "signalToNoiseRatio",
    "seniorityAlignment",
)

_CALIBRATION_WEIGHT_KEYS = {
    "technicalAccuracy": "technical_accuracy",
    "coherence": "coherence",
    "authenticity": "authenticity",
    "seniorityAlignment": "seniority_alignment",
}


def _extract_json_dict(text: str) -> dict | None:
    text = (text or "").strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except Exception:
        pass

    fenced = re.search(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", text, re.IGNORECASE)
    if fenced:
        try:
            parsed = json.loads(fenced.group(1))
            return parsed if isinstance(parsed, dict) else None
        except Exception:
            pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
            return parsed if isinstance(parsed, dict) else None
        except Exception:
            return None

    return None


def _require_dict(raw: str, call_name: str) -> dict:
    parsed = _extract_json_dict(raw)
    if not isinstance(parsed, dict) or not parsed:
        raise CollaboratorError(f"{call_name}: could not parse structured model output")
    return parsed


def _string_list(value) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in value if str(item or "").strip())


def _truthy_flag(value) -> bool:
    # Only a JSON true or the string "true" counts.
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def _parse_speech_metrics(data) -> SpeechMetrics | None:
    if not isinstance(data, dict):
        return None
    try:
        tonality = Tonality(str(data.get("tonality") or ""))
    except ValueError:
        return None
    fillers = _string_list(data.get("fillerWords"))
    try:
        filler_count = int(data.get("fillerWordCount", len(fillers)))
    except (TypeError, ValueError):
        filler_count = len(fillers)
    try:
        wpm = max(0.0, float(data.get("wpm") or 0.0))
    except (TypeError, ValueError):
        wpm = 0.0
    return SpeechMetrics(
        wpm=wpm,
        filler_word_count=max(0, filler_count),
        filler_words=fillers,
        tonality=tonality,
        clarity_score=clamp_score(data.get("clarityScore"), 0.0),
    )


def parse_evaluation(data: dict) -> Evaluation:
    missing = [key for key in _REQUIRED_SCORE_KEYS if data.get(key) is None]
    if missing:
        raise CollaboratorError(f"evaluate_response: missing fields {missing}")

    try:
        recommendation = Recommendation(str(data.get("recommendation") or "").strip().upper())
    except ValueError as exc:
        raise CollaboratorError(f"evaluate_response: bad recommendation {data.get('recommendation')!r}") from exc

    structural = clamp_score(data.get("structuralIntegrity"))
    scores = SubScores(
        technical_accuracy=clamp_score(data.get("technicalAccuracy")),
        structural_integrity=structural,
        assertiveness_index=clamp_score(data.get("assertivenessIndex")),
        signal_to_noise_ratio=clamp_score(data.get("signalToNoiseRatio")),
        seniority_alignment=clamp_score(data.get("seniorityAlignment")),
        coherence=clamp_score(data.get("coherence"), structural) if data.get("coherence") is not None else structural,
        authenticity=(
            clamp_score(data.get("authenticity"), AUTHENTICITY_BASELINE)
            if data.get("authenticity") is not None
            else AUTHENTICITY_BASELINE
        ),
    )

    return Evaluation(
        scores=scores,
        recommendation=recommendation,
        recommendation_reason=str(data.get("recommendationReason") or "").strip(),
        summary=str(data.get("summary") or "").strip(),
        key_takeaways=_string_list(data.get("keyTakeaways")),
        is_ai_generated=_truthy_flag(data.get("isAIGenerated")),
        speech_metrics=_parse_speech_metrics(data.get("speechMetrics")),
    )


class InterviewCollaborator:
    """
    Opaque generative-AI collaborator used by the interview flow and the
    recruiter views.
    """

    def __init__(self, llm_fn=call_llm):
        self._llm = llm_fn

    async def evaluate_response(self, question: str, transcript: str, seniority: str) -> Evaluation:
        raw = await self._llm(build_evaluation_prompt(question, transcript, seniority))
        return parse_evaluation(_require_dict(raw, "evaluate_response"))

    async def generate_follow_up_probe(self, question: str, transcript: str) -> str:
        raw = await self._llm(build_followup_prompt(question, transcript), json_mode=False)
        probe = str(raw or "").strip().strip('"').strip()
        if not probe:
            raise CollaboratorError("generate_follow_up_probe: empty probe")
        return probe

    async def generate_feedback_report(self, transcript: str, scores: dict) -> FeedbackReport:
        raw = await self._llm(build_feedback_prompt(transcript, scores))
        data = _require_dict(raw, "generate_feedback_report")
        return FeedbackReport(
            strengths=_string_list(data.get("strengths")),
            growth_areas=_string_list(data.get("growthAreas")),
            career_tips=str(data.get("careerTips") or "").strip(),
        )

    async def evaluate_ghost_account(self, metadata: CandidateMetadata) -> GhostAccountAssessment:
        raw = await self._llm(
            build_ghost_account_prompt(
                metadata.account_age_years,
                metadata.connection_density,
                metadata.profile_completion,
            )
        )
        data = _require_dict(raw, "evaluate_ghost_account")
        if data.get("trustScore") is None or data.get("isSuspicious") is None:
            raise CollaboratorError("evaluate_ghost_account: missing fields")
        return GhostAccountAssessment(
            trust_score=clamp_score(data.get("trustScore"), 0.0),
            is_suspicious=_truthy_flag(data.get("isSuspicious")),
            reasoning=str(data.get("reasoning") or "").strip(),
        )

    async def generate_assessment_criteria(self, job_context: str, ideal_candidate: str) -> dict:
        raw = await self._llm(build_calibration_prompt(job_context, ideal_candidate))
        data = _require_dict(raw, "generate_assessment_criteria")

        questions = []
        for item in data.get("questions") or []:
            if not isinstance(item, dict) or not str(item.get("text") or "").strip():
                continue
            questions.append({
                "text": str(item.get("text")).strip(),
                "category": str(item.get("category") or "General").strip(),
                "difficulty": str(item.get("difficulty") or "medium").strip(),
            })

        suggested = data.get("weights") if isinstance(data.get("weights"), dict) else {}
        weights = normalize_weights({
            snake: suggested.get(camel)
            for camel, snake in _CALIBRATION_WEIGHT_KEYS.items()
        }) if suggested else None

        return {
            "questions": questions,
            "weights": weights,
            "rationale": str(data.get("rationale") or "").strip(),
        }


interview_collaborator = InterviewCollaborator()
