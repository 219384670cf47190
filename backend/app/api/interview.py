import base64
import binascii
import logging
import uuid
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from app.ai_reasoning.collaborator import interview_collaborator
from app.catalog import MOCK_JOBS, get_job
from app.interview.controller import InterviewSessionController
from app.interview.errors import HardwareNotReadyError, InterviewError, InvalidTransitionError
from app.interview.questions import QUESTION_BANK
from app.interview.recorder import RecordingResult, resolve_transcript
from app.interview.session import session_registry
from app.interview.system_check import ClientReportedMediaDevice, run_system_check
from app.models import Candidate, CandidateMetadata, IntegrityEvent, InterviewResult
from app.recruiter.store import pipeline_store
from app.schemas import (
    AdvanceRequest,
    CandidateIn,
    RecordingSubmission,
    StartInterviewRequest,
    SystemCheckRequest,
)

router = APIRouter()
logger = logging.getLogger("app.api.interview")


def _guest_id() -> str:
    return f"guest-{uuid.uuid4().hex[:9]}"


def build_candidate(payload: CandidateIn | None) -> Candidate:
    data = payload or CandidateIn()
    return Candidate(
        id=str(data.id or "").strip() or _guest_id(),
        name=data.name,
        email=data.email,
        provider=data.provider,
        metadata=CandidateMetadata(
            account_age_years=data.metadata.account_age_years,
            connection_density=data.metadata.connection_density,
            profile_completion=data.metadata.profile_completion,
            is_ghost=data.metadata.is_ghost,
        ),
        experience_years=data.experience_years,
        seniority_level=data.seniority_level,
    )


def on_session_complete(controller: InterviewSessionController, result: InterviewResult) -> None:
    pipeline_store.record_completion(controller.candidate, controller.job_id, result)
    session_registry.mark_inactive(controller.session_id)


def get_controller_or_404(session_id: str) -> InterviewSessionController:
    controller = session_registry.get_controller(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Invalid interview session")
    session_registry.touch(session_id)
    return controller


def raise_for_interview_error(exc: InterviewError):
    if isinstance(exc, (InvalidTransitionError, HardwareNotReadyError)):
        raise HTTPException(status_code=409, detail=str(exc))
    raise HTTPException(status_code=400, detail=str(exc))


@router.get("/api/jobs")
def list_jobs():
    return {"jobs": [asdict(job) for job in MOCK_JOBS]}


@router.get("/api/questions")
def list_questions():
    return {"questions": [asdict(question) for question in QUESTION_BANK]}


@router.post("/api/interview/start")
def start_interview(payload: StartInterviewRequest):
    if payload.job_id and get_job(payload.job_id) is None:
        raise HTTPException(status_code=404, detail="Unknown job")

    controller = InterviewSessionController(
        candidate=build_candidate(payload.candidate),
        collaborator=interview_collaborator,
        on_complete=on_session_complete,
        job_id=payload.job_id,
    )
    session_registry.register(controller.session_id, controller)
    return controller.snapshot()


@router.get("/api/interview/{session_id}")
def get_interview(session_id: str):
    return get_controller_or_404(session_id).snapshot()


@router.post("/api/interview/{session_id}/system-check")
async def system_check(session_id: str, payload: SystemCheckRequest):
    controller = get_controller_or_404(session_id)
    device = ClientReportedMediaDevice(
        granted=payload.media_permission_granted,
        error=payload.media_error or "",
    )
    report = await run_system_check(device, speech_synthesis_available=payload.speech_synthesis_available)
    controller.record_system_check(report)
    return report.to_dict()


@router.post("/api/interview/{session_id}/advance")
def advance_interview(session_id: str, payload: AdvanceRequest):
    controller = get_controller_or_404(session_id)
    actions = {
        "begin_practice": controller.begin_practice,
        "start_practice": controller.start_practice_recording,
        "start_assessment": controller.start_assessment,
    }
    try:
        actions[payload.action]()
    except InterviewError as exc:
        raise_for_interview_error(exc)
    return controller.snapshot()


@router.post("/api/interview/{session_id}/recording")
async def submit_recording(session_id: str, payload: RecordingSubmission):
    controller = get_controller_or_404(session_id)

    video = b""
    if payload.video_b64:
        try:
            video = base64.b64decode(payload.video_b64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f"video_b64 is not valid base64: {exc}")

    recording = RecordingResult(
        video=video,
        transcript=resolve_transcript(payload.transcript),
        integrity_events=tuple(
            IntegrityEvent(timestamp=item.timestamp, type=item.type, severity=item.severity)
            for item in payload.integrity_events
        ),
    )

    if not session_registry.claim_recording(session_id):
        raise HTTPException(status_code=409, detail="A recording is already being processed")
    try:
        await controller.submit_recording(recording)
    except InterviewError as exc:
        raise_for_interview_error(exc)
    finally:
        session_registry.release_recording(session_id)
    return controller.snapshot()
