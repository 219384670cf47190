from typing import Literal

from pydantic import BaseModel, Field

from app.models import IntegrityEventType, SeniorityLevel, Severity


class CandidateMetadataIn(BaseModel):
    account_age_years: float = Field(default=5, ge=0)
    connection_density: float = Field(default=7, ge=0, le=10)
    profile_completion: float = Field(default=80, ge=0, le=100)
    is_ghost: bool | None = None


class CandidateIn(BaseModel):
    id: str | None = None
    name: str = "Candidate Prototype"
    email: str = "guest@veritas.ai"
    provider: Literal["LinkedIn", "Google"] = "LinkedIn"
    metadata: CandidateMetadataIn = Field(default_factory=CandidateMetadataIn)
    experience_years: float = Field(default=5, ge=0)
    seniority_level: SeniorityLevel = SeniorityLevel.SENIOR


class StartInterviewRequest(BaseModel):
    job_id: str | None = None
    candidate: CandidateIn | None = None


class SystemCheckRequest(BaseModel):
    media_permission_granted: bool
    speech_synthesis_available: bool = True
    media_error: str | None = None


class AdvanceRequest(BaseModel):
    action: Literal["begin_practice", "start_practice", "start_assessment"]


class IntegrityEventIn(BaseModel):
    timestamp: int
    type: IntegrityEventType
    severity: Severity


class RecordingSubmission(BaseModel):
    transcript: str | None = ""
    integrity_events: list[IntegrityEventIn] = Field(default_factory=list)
    video_b64: str | None = None


class CalibrationRequest(BaseModel):
    job_description: str
    ideal_candidate: str


class GhostCheckRequest(BaseModel):
    account_age_years: float = Field(ge=0)
    connection_density: float = Field(ge=0, le=10)
    profile_completion: float = Field(ge=0, le=100)


class GhostCheckResponse(BaseModel):
    trust_score: float
    is_suspicious: bool
    reasoning: str
