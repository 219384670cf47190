import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from app.ai_reasoning.collaborator import interview_collaborator
from app.ai_reasoning.llm import CollaboratorError
from app.interview.scorer import DEFAULT_RECRUITER_WEIGHTS, normalize_weights
from app.models import CandidateMetadata
from app.recruiter.calibration import calibrate
from app.recruiter.pipeline import REDACTED_EMAIL, build_pipeline, redacted_name
from app.recruiter.store import pipeline_store
from app.schemas import CalibrationRequest, GhostCheckRequest, GhostCheckResponse

router = APIRouter()
logger = logging.getLogger("app.api.recruiter")


def _active_weights(overrides: dict) -> dict:
    supplied = {key: value for key, value in overrides.items() if value is not None}
    if supplied:
        return normalize_weights({**DEFAULT_RECRUITER_WEIGHTS, **supplied})
    calibration = pipeline_store.calibration
    if calibration is not None and calibration.weights:
        return normalize_weights(calibration.weights)
    return dict(DEFAULT_RECRUITER_WEIGHTS)


@router.get("/api/recruiter/pipeline")
def recruiter_pipeline(
    blind: bool = False,
    technical_accuracy: float | None = None,
    coherence: float | None = None,
    authenticity: float | None = None,
    seniority_alignment: float | None = None,
):
    weights = _active_weights({
        "technical_accuracy": technical_accuracy,
        "coherence": coherence,
        "authenticity": authenticity,
        "seniority_alignment": seniority_alignment,
    })
    candidates = pipeline_store.list_candidates()
    notified = [c.id for c in candidates if pipeline_store.is_notified(c.id)]
    return {
        "blind": blind,
        "calibrated": pipeline_store.calibration is not None,
        "weights": weights,
        "candidates": build_pipeline(candidates, weights=weights, blind=blind, notified=notified),
    }


@router.get("/api/recruiter/candidates/{candidate_id}")
def recruiter_candidate(candidate_id: str, blind: bool = False):
    candidate = pipeline_store.get_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Unknown candidate")
    return {
        "candidate_id": candidate.id,
        "name": redacted_name(candidate.id) if blind else candidate.name,
        "email": REDACTED_EMAIL if blind else candidate.email,
        "seniority_level": candidate.seniority_level.value,
        "experience_years": candidate.experience_years,
        "notified": pipeline_store.is_notified(candidate.id),
        "result": candidate.results.to_dict() if candidate.results else None,
    }


@router.post("/api/recruiter/calibrate")
async def recruiter_calibrate(payload: CalibrationRequest):
    config = await calibrate(interview_collaborator, payload.job_description, payload.ideal_candidate)
    if config is None:
        return {
            "source": "default",
            "questions": [],
            "weights": dict(DEFAULT_RECRUITER_WEIGHTS),
            "rationale": "",
        }

    pipeline_store.set_calibration(config)
    logger.info("Calibration applied | questions=%s weights=%s", len(config.questions), config.weights)
    return {"source": "calibrated", **asdict(config)}


@router.post("/api/recruiter/candidates/{candidate_id}/schedule")
def schedule_interview(candidate_id: str):
    if pipeline_store.get_candidate(candidate_id) is None:
        raise HTTPException(status_code=404, detail="Unknown candidate")
    newly_notified = pipeline_store.mark_notified(candidate_id)
    return {"candidate_id": candidate_id, "notified": True, "already_notified": not newly_notified}


@router.post("/api/recruiter/ghost-check", response_model=GhostCheckResponse)
async def ghost_check(payload: GhostCheckRequest):
    metadata = CandidateMetadata(
        account_age_years=payload.account_age_years,
        connection_density=payload.connection_density,
        profile_completion=payload.profile_completion,
    )
    try:
        assessment = await interview_collaborator.evaluate_ghost_account(metadata)
    except CollaboratorError as exc:
        logger.warning("Ghost check failed: %s", exc)
        raise HTTPException(status_code=502, detail="Ghost account analysis unavailable")
    return GhostCheckResponse(**asdict(assessment))


@router.get("/api/applications")
def list_applications():
    return {"applications": [asdict(item) for item in pipeline_store.list_applications()]}
