from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import List, Optional


class SeniorityLevel(str, Enum):
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"
    STAFF = "Staff"


class Recommendation(str, Enum):
    HIRE = "HIRE"
    REJECT = "REJECT"
    MAYBE = "MAYBE"


class IntegrityEventType(str, Enum):
    TAB_SWITCH = "TAB_SWITCH"
    WINDOW_BLUR = "WINDOW_BLUR"
    MOUSE_EXIT = "MOUSE_EXIT"


class Severity(str, Enum):
    LOW = "LOW"
    HIGH = "HIGH"


class ApplicationStatus(str, Enum):
    APPLIED = "APPLIED"
    ASSESSMENT_PENDING = "ASSESSMENT_PENDING"
    ASSESSMENT_COMPLETE = "ASSESSMENT_COMPLETE"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    OFFER = "OFFER"


class Tonality(str, Enum):
    MONOTONE = "Monotone"
    EXPRESSIVE = "Expressive"
    AGGRESSIVE = "Aggressive"
    NERVOUS = "Nervous"
    PROFESSIONAL = "Professional"


# ---------- STATIC CATALOG ----------

@dataclass(frozen=True)
class IRTQuestion:
    id: str
    text: str
    beta: float  # difficulty
    alpha: float  # discrimination
    category: str


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    location: str
    salary: str
    tags: tuple[str, ...]
    description: str
    requirements: str


# ---------- CANDIDATE ----------

@dataclass(frozen=True)
class CandidateMetadata:
    account_age_years: float
    connection_density: float
    profile_completion: float
    is_ghost: Optional[bool] = None


@dataclass(frozen=True)
class Candidate:
    id: str
    name: str
    email: str
    provider: str
    metadata: CandidateMetadata
    experience_years: float
    seniority_level: SeniorityLevel
    results: Optional["InterviewResult"] = None

    def with_results(self, results: "InterviewResult") -> "Candidate":
        if self.results is not None:
            raise ValueError(f"Candidate {self.id} already has interview results")
        return replace(self, results=results)


# ---------- SCORING ----------

@dataclass(frozen=True)
class SubScores:
    technical_accuracy: float
    structural_integrity: float
    assertiveness_index: float
    signal_to_noise_ratio: float
    seniority_alignment: float
    coherence: float
    authenticity: float

    @classmethod
    def uniform(cls, value: float) -> "SubScores":
        return cls(*(value for _ in range(7)))


@dataclass(frozen=True)
class SpeechMetrics:
    wpm: float
    filler_word_count: int
    filler_words: tuple[str, ...]
    tonality: Tonality
    clarity_score: float


@dataclass(frozen=True)
class Evaluation:
    """Structured answer returned by the scoring collaborator."""
    scores: SubScores
    recommendation: Recommendation
    recommendation_reason: str
    summary: str = ""
    key_takeaways: tuple[str, ...] = ()
    is_ai_generated: bool = False
    speech_metrics: Optional[SpeechMetrics] = None


@dataclass(frozen=True)
class FeedbackReport:
    strengths: tuple[str, ...]
    growth_areas: tuple[str, ...]
    career_tips: str


@dataclass(frozen=True)
class GhostAccountAssessment:
    trust_score: float
    is_suspicious: bool
    reasoning: str


# ---------- RESULTS ----------

@dataclass(frozen=True)
class IntegrityEvent:
    timestamp: int  # epoch milliseconds
    type: IntegrityEventType
    severity: Severity


@dataclass(frozen=True)
class FollowUp:
    probe: str
    response: str


@dataclass(frozen=True)
class QuestionResponse:
    question_id: str
    transcript: str
    scores: SubScores
    flags: tuple[str, ...] = ()
    speech_metrics: Optional[SpeechMetrics] = None
    follow_up: Optional[FollowUp] = None


@dataclass(frozen=True)
class InterviewResult:
    candidate_id: str
    overall_score: int
    ai_recommendation: Recommendation
    ai_decision_reason: str
    responses: tuple[QuestionResponse, ...]
    integrity_log: tuple[IntegrityEvent, ...]
    timestamp: str
    feedback: Optional[FeedbackReport] = None

    def __post_init__(self):
        if len(self.responses) != 1:
            raise ValueError("InterviewResult carries exactly one response")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Application:
    id: str
    job_id: str
    candidate_id: str
    status: ApplicationStatus
    timestamp: str
    result: Optional[InterviewResult] = None


@dataclass
class CalibrationConfig:
    questions: List[dict] = field(default_factory=list)
    weights: dict = field(default_factory=dict)
    rationale: str = ""
