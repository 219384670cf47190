import uuid
from datetime import datetime, timezone
from threading import Lock

from app.catalog import MOCK_CANDIDATES
from app.models import Application, ApplicationStatus, Candidate, CalibrationConfig, InterviewResult


class PipelineStore:
    """
    In-memory recruiter state: the candidate roster (seeded with mock
    candidates), the append-only application log, the active calibration and
    which candidates have been invited to a live interview.
    """

    def __init__(self, seed=MOCK_CANDIDATES):
        self._lock = Lock()
        self._candidates: list[Candidate] = list(seed or ())
        self._applications: list[Application] = []
        self._notified: set[str] = set()
        self._calibration: CalibrationConfig | None = None

    # ---------- CANDIDATES ----------

    def get_candidate(self, candidate_id: str) -> Candidate | None:
        with self._lock:
            return next((c for c in self._candidates if c.id == candidate_id), None)

    def list_candidates(self) -> list[Candidate]:
        with self._lock:
            return list(self._candidates)

    # ---------- APPLICATIONS ----------

    def record_completion(self, candidate: Candidate, job_id: str | None, result: InterviewResult) -> Application:
        application = Application(
            id=f"app-{uuid.uuid4().hex[:12]}",
            job_id=str(job_id or ""),
            candidate_id=candidate.id,
            status=ApplicationStatus.ASSESSMENT_COMPLETE,
            timestamp=datetime.now(timezone.utc).isoformat(),
            result=result,
        )
        with self._lock:
            self._applications.append(application)
            self._candidates = [c for c in self._candidates if c.id != candidate.id]
            self._candidates.insert(0, candidate)
        return application

    def list_applications(self) -> list[Application]:
        with self._lock:
            return list(reversed(self._applications))

    # ---------- RECRUITER ACTIONS ----------

    def mark_notified(self, candidate_id: str) -> bool:
        with self._lock:
            if candidate_id in self._notified:
                return False
            self._notified.add(candidate_id)
            return True

    def is_notified(self, candidate_id: str) -> bool:
        with self._lock:
            return candidate_id in self._notified

    @property
    def calibration(self) -> CalibrationConfig | None:
        with self._lock:
            return self._calibration

    def set_calibration(self, config: CalibrationConfig | None) -> None:
        with self._lock:
            self._calibration = config


pipeline_store = PipelineStore()
