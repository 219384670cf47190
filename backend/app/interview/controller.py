"""
Interview session controller.

Drives one candidate through a single-question assessment:

    CONTEXT_BRIEF -> (PRACTICE_INTRO -> PRACTICE_RECORDING) -> QUESTION
        -> ANALYZING -> FOLLOW_UP -> ANALYZING -> COMPLETE

Collaborator failures never block the session: a failed evaluation is
replaced by the fallback score set, a failed follow-up probe skips the
follow-up, and a failed feedback report is dropped.
"""

import logging
import random
import time
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from core.logger import log_event
from app.interview.errors import HardwareNotReadyError, InvalidTransitionError
from app.interview.questions import QUESTION_BANK, select_question
from app.interview.recorder import RecordingResult
from app.interview.scorer import FALLBACK_SCORE, calculate_overall_score
from app.interview.system_check import SystemCheckReport
from app.models import (
    Candidate,
    Evaluation,
    FeedbackReport,
    FollowUp,
    InterviewResult,
    QuestionResponse,
    Recommendation,
    SubScores,
)

logger = logging.getLogger("app.interview.controller")

FALLBACK_REASON = "Telemetry sync issue; human review required."
DEFAULT_DECISION_REASON = "Verified technical competency signal."
AI_SIGNAL_FLAG = "AI_SIGNAL_DETECTED"
PRACTICE_PROMPT = "Introduce yourself in one sentence. This practice answer is not scored."


class InterviewPhase(str, Enum):
    CONTEXT_BRIEF = "CONTEXT_BRIEF"
    PRACTICE_INTRO = "PRACTICE_INTRO"
    PRACTICE_RECORDING = "PRACTICE_RECORDING"
    QUESTION = "QUESTION"
    ANALYZING = "ANALYZING"
    FOLLOW_UP = "FOLLOW_UP"
    COMPLETE = "COMPLETE"


def fallback_evaluation() -> Evaluation:
    return Evaluation(
        scores=SubScores.uniform(FALLBACK_SCORE),
        recommendation=Recommendation.MAYBE,
        recommendation_reason=FALLBACK_REASON,
    )


class InterviewSessionController:

    def __init__(
        self,
        candidate: Candidate,
        collaborator,
        question_bank=QUESTION_BANK,
        rng: random.Random | None = None,
        on_complete: Optional[Callable[["InterviewSessionController", InterviewResult], None]] = None,
        session_id: str | None = None,
        job_id: str | None = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.candidate = candidate
        self.job_id = job_id
        self.collaborator = collaborator
        self.on_complete = on_complete

        self.question = select_question(question_bank, rng)
        self.phase = InterviewPhase.CONTEXT_BRIEF
        self.phase_history: list[tuple[str, float]] = [(self.phase.value, time.time())]

        self.system_check: SystemCheckReport | None = None
        self.transcript = ""
        self.evaluation: Evaluation | None = None
        self.follow_up_probe: str | None = None
        self.follow_up_transcript: str | None = None
        self.feedback: FeedbackReport | None = None
        self.integrity_log = []
        self.result: InterviewResult | None = None

        log_event(
            "interview",
            "session_created",
            self.session_id,
            candidate_id=candidate.id,
            question_id=self.question.id,
            seniority=candidate.seniority_level.value,
        )

    # -------------------------
    # HARDWARE GATE
    # -------------------------

    @property
    def hardware_ready(self) -> bool:
        return bool(self.system_check and self.system_check.ready)

    def record_system_check(self, report: SystemCheckReport) -> None:
        self.system_check = report
        log_event("interview", "system_check", self.session_id, ready=report.ready)

    # -------------------------
    # USER-DRIVEN TRANSITIONS
    # -------------------------

    def begin_practice(self) -> None:
        self._require(InterviewPhase.CONTEXT_BRIEF)
        self._require_hardware()
        self._set_phase(InterviewPhase.PRACTICE_INTRO)

    def start_practice_recording(self) -> None:
        self._require(InterviewPhase.PRACTICE_INTRO)
        self._set_phase(InterviewPhase.PRACTICE_RECORDING)

    def complete_practice(self, recording: RecordingResult | None = None) -> None:
        # Practice answers are discarded; they never reach scoring.
        self._require(InterviewPhase.PRACTICE_RECORDING)
        self._set_phase(InterviewPhase.QUESTION)

    def start_assessment(self) -> None:
        self._require(
            InterviewPhase.CONTEXT_BRIEF,
            InterviewPhase.PRACTICE_INTRO,
            InterviewPhase.PRACTICE_RECORDING,
        )
        if self.phase == InterviewPhase.CONTEXT_BRIEF:
            self._require_hardware()
        self._set_phase(InterviewPhase.QUESTION)

    @property
    def active_prompt(self) -> str | None:
        if self.phase in (InterviewPhase.PRACTICE_INTRO, InterviewPhase.PRACTICE_RECORDING):
            return PRACTICE_PROMPT
        if self.phase == InterviewPhase.QUESTION:
            return self.question.text
        if self.phase == InterviewPhase.FOLLOW_UP:
            return self.follow_up_probe
        return None

    @property
    def is_practice(self) -> bool:
        return self.phase == InterviewPhase.PRACTICE_RECORDING

    # -------------------------
    # RECORDING COMPLETION
    # -------------------------

    async def submit_recording(self, recording: RecordingResult) -> InterviewResult | None:
        if self.phase == InterviewPhase.PRACTICE_RECORDING:
            self.complete_practice(recording)
            return None
        if self.phase == InterviewPhase.QUESTION:
            return await self.handle_primary_recording(recording)
        if self.phase == InterviewPhase.FOLLOW_UP:
            return await self.handle_follow_up_recording(recording)
        raise InvalidTransitionError(f"No recording expected in phase {self.phase.value}")

    async def handle_primary_recording(self, recording: RecordingResult) -> InterviewResult | None:
        self._require(InterviewPhase.QUESTION)
        self.transcript = recording.transcript
        self.integrity_log = list(recording.integrity_events)
        self._set_phase(InterviewPhase.ANALYZING)

        try:
            evaluation = await self.collaborator.evaluate_response(
                self.question.text,
                self.transcript,
                self.candidate.seniority_level.value,
            )
        except Exception as exc:
            logger.warning("Evaluation failed for %s: %s", self.session_id, exc)
            log_event("interview", "evaluation_fallback", self.session_id, error=str(exc))
            self.evaluation = fallback_evaluation()
            return self._finalize(self.evaluation)

        self.evaluation = evaluation
        log_event(
            "interview",
            "evaluation_received",
            self.session_id,
            recommendation=evaluation.recommendation.value,
            technical_accuracy=evaluation.scores.technical_accuracy,
        )

        try:
            probe = await self.collaborator.generate_follow_up_probe(self.question.text, self.transcript)
        except Exception as exc:
            logger.warning("Follow-up generation failed for %s: %s", self.session_id, exc)
            log_event("interview", "follow_up_skipped", self.session_id, error=str(exc))
            return self._finalize(evaluation)

        self.follow_up_probe = probe
        self._set_phase(InterviewPhase.FOLLOW_UP)
        log_event("interview", "follow_up_issued", self.session_id, probe=probe)
        return None

    async def handle_follow_up_recording(self, recording: RecordingResult) -> InterviewResult:
        self._require(InterviewPhase.FOLLOW_UP)
        self.follow_up_transcript = recording.transcript
        self.integrity_log.extend(recording.integrity_events)
        self._set_phase(InterviewPhase.ANALYZING)

        try:
            self.feedback = await self.collaborator.generate_feedback_report(
                self._combined_transcript(),
                asdict(self.evaluation.scores),
            )
        except Exception as exc:
            logger.warning("Feedback report failed for %s: %s", self.session_id, exc)

        return self._finalize(self.evaluation, follow_up_text=recording.transcript)

    # -------------------------
    # FINALIZE
    # -------------------------

    def _finalize(self, evaluation: Evaluation, follow_up_text: str | None = None) -> InterviewResult:
        follow_up = None
        if self.follow_up_probe and follow_up_text:
            follow_up = FollowUp(probe=self.follow_up_probe, response=follow_up_text)

        response = QuestionResponse(
            question_id=self.question.id,
            transcript=self.transcript,
            scores=evaluation.scores,
            flags=(AI_SIGNAL_FLAG,) if evaluation.is_ai_generated else (),
            speech_metrics=evaluation.speech_metrics,
            follow_up=follow_up,
        )

        result = InterviewResult(
            candidate_id=self.candidate.id,
            overall_score=calculate_overall_score(evaluation.scores),
            ai_recommendation=evaluation.recommendation,
            ai_decision_reason=evaluation.recommendation_reason or DEFAULT_DECISION_REASON,
            responses=(response,),
            integrity_log=tuple(self.integrity_log),
            timestamp=datetime.now(timezone.utc).isoformat(),
            feedback=self.feedback,
        )

        self.result = result
        self.candidate = self.candidate.with_results(result)
        self._set_phase(InterviewPhase.COMPLETE)
        log_event(
            "interview",
            "session_complete",
            self.session_id,
            overall_score=result.overall_score,
            recommendation=result.ai_recommendation.value,
            integrity_events=len(result.integrity_log),
            follow_up=follow_up is not None,
        )

        if self.on_complete is not None:
            self.on_complete(self, result)
        return result

    # -------------------------
    # HELPERS
    # -------------------------

    def _combined_transcript(self) -> str:
        return (
            f"Question: {self.question.text}\n"
            f"Answer: {self.transcript}\n"
            f"Follow-up: {self.follow_up_probe}\n"
            f"Answer: {self.follow_up_transcript}"
        )

    def _require(self, *phases: InterviewPhase) -> None:
        if self.phase not in phases:
            expected = ", ".join(p.value for p in phases)
            raise InvalidTransitionError(f"Session is in {self.phase.value}; expected {expected}")

    def _require_hardware(self) -> None:
        if not self.hardware_ready:
            raise HardwareNotReadyError("Hardware check has not passed")

    def _set_phase(self, phase: InterviewPhase) -> None:
        logger.info("[SESSION %s] %s -> %s", self.session_id, self.phase.value, phase.value)
        self.phase = phase
        self.phase_history.append((phase.value, time.time()))

    def snapshot(self) -> dict:
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "candidate_id": self.candidate.id,
            "job_id": self.job_id,
            "hardware_ready": self.hardware_ready,
            "question": {
                "id": self.question.id,
                "text": self.question.text,
                "category": self.question.category,
            },
            "prompt": self.active_prompt,
            "follow_up_probe": self.follow_up_probe,
            "result": self.result.to_dict() if self.result else None,
        }
