from app.interview.scorer import DEFAULT_RECRUITER_WEIGHTS, recompute_display_score
from app.models import Candidate

REDACTED_EMAIL = "redacted"


def redacted_name(candidate_id: str) -> str:
    return f"Candidate {str(candidate_id or '')[:4].upper()}"


def build_pipeline(candidates, weights: dict | None = None, blind: bool = False, notified=None) -> list[dict]:
    """
    Rank candidates by their recomputed display score.
    Stored results are never modified; blind mode only changes what is shown.
    """
    active_weights = weights or DEFAULT_RECRUITER_WEIGHTS
    notified = set(notified or ())
    rows = []
    for candidate in candidates:
        rows.append(_pipeline_row(candidate, active_weights, blind, candidate.id in notified))
    rows.sort(key=lambda row: row["display_score"], reverse=True)
    return rows


def _pipeline_row(candidate: Candidate, weights: dict, blind: bool, notified: bool) -> dict:
    result = candidate.results
    return {
        "candidate_id": candidate.id,
        "name": redacted_name(candidate.id) if blind else candidate.name,
        "email": REDACTED_EMAIL if blind else candidate.email,
        "seniority_level": candidate.seniority_level.value,
        "display_score": recompute_display_score(result, weights),
        "stored_score": result.overall_score if result else None,
        "recommendation": result.ai_recommendation.value if result else None,
        "decision_reason": result.ai_decision_reason if result else None,
        "integrity_events": len(result.integrity_log) if result else 0,
        "flags": list(result.responses[0].flags) if result else [],
        "notified": notified,
    }
