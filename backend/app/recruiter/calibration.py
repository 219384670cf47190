import logging

from app.interview.scorer import DEFAULT_RECRUITER_WEIGHTS
from app.models import CalibrationConfig

logger = logging.getLogger("app.recruiter.calibration")


async def calibrate(collaborator, job_description: str, ideal_candidate: str) -> CalibrationConfig | None:
    """
    Ask the collaborator for screening questions and suggested weights.
    Returns None when inputs are blank or the collaborator fails, which keeps
    the default weights in force.
    """
    if not str(job_description or "").strip() or not str(ideal_candidate or "").strip():
        return None

    try:
        criteria = await collaborator.generate_assessment_criteria(job_description, ideal_candidate)
    except Exception as exc:
        logger.warning("Calibration failed: %s", exc)
        return None

    return CalibrationConfig(
        questions=list(criteria.get("questions") or []),
        weights=dict(criteria.get("weights") or DEFAULT_RECRUITER_WEIGHTS),
        rationale=str(criteria.get("rationale") or ""),
    )
