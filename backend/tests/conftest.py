import random
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")


def make_scores(**overrides):
    from app.models import SubScores

    values = {
        "technical_accuracy": 90.0,
        "structural_integrity": 80.0,
        "assertiveness_index": 70.0,
        "signal_to_noise_ratio": 60.0,
        "seniority_alignment": 100.0,
        "coherence": 80.0,
        "authenticity": 95.0,
    }
    values.update(overrides)
    return SubScores(**values)


class FakeCollaborator:
    """Scripted stand-in for the generative-AI collaborator."""

    def __init__(
        self,
        evaluation=None,
        probe="Walk me through how you measured the latency improvement.",
        feedback=None,
        fail_evaluation=False,
        fail_probe=False,
        fail_feedback=False,
    ):
        from app.models import Evaluation, FeedbackReport, Recommendation

        self.evaluation = evaluation or Evaluation(
            scores=make_scores(),
            recommendation=Recommendation.HIRE,
            recommendation_reason="Clear ownership and measurable impact.",
            summary="Strong systems answer.",
        )
        self.probe = probe
        self.feedback = feedback or FeedbackReport(
            strengths=("Concrete metrics",),
            growth_areas=("Tighter structure",),
            career_tips="Lead with the outcome.",
        )
        self.fail_evaluation = fail_evaluation
        self.fail_probe = fail_probe
        self.fail_feedback = fail_feedback
        self.calls: list[str] = []

    async def evaluate_response(self, question, transcript, seniority):
        from app.ai_reasoning.llm import CollaboratorError

        self.calls.append("evaluate_response")
        if self.fail_evaluation:
            raise CollaboratorError("evaluation unavailable")
        return self.evaluation

    async def generate_follow_up_probe(self, question, transcript):
        from app.ai_reasoning.llm import CollaboratorError

        self.calls.append("generate_follow_up_probe")
        if self.fail_probe:
            raise CollaboratorError("probe unavailable")
        return self.probe

    async def generate_feedback_report(self, transcript, scores):
        self.calls.append("generate_feedback_report")
        if self.fail_feedback:
            raise RuntimeError("feedback unavailable")
        return self.feedback

    async def evaluate_ghost_account(self, metadata):
        from app.models import GhostAccountAssessment

        self.calls.append("evaluate_ghost_account")
        suspicious = metadata.account_age_years < 1 and metadata.connection_density < 2
        return GhostAccountAssessment(
            trust_score=20.0 if suspicious else 85.0,
            is_suspicious=suspicious,
            reasoning="New account with almost no connections." if suspicious else "Established profile.",
        )

    async def generate_assessment_criteria(self, job_context, ideal_candidate):
        self.calls.append("generate_assessment_criteria")
        return {
            "questions": [
                {"text": "How would you shard a write-heavy table?", "category": "System Design", "difficulty": "hard"},
                {"text": "Tell me about a failed launch.", "category": "Behavioral", "difficulty": "medium"},
                {"text": "How do you pick an SLO?", "category": "Reliability", "difficulty": "medium"},
            ],
            "weights": {
                "technical_accuracy": 0.4,
                "coherence": 0.3,
                "authenticity": 0.2,
                "seniority_alignment": 0.1,
            },
            "rationale": "Role is design-heavy with on-call duties.",
        }


@pytest.fixture
def fake_collaborator() -> FakeCollaborator:
    return FakeCollaborator()


@pytest.fixture
def candidate():
    from app.models import Candidate, CandidateMetadata, SeniorityLevel

    return Candidate(
        id="cand-1234",
        name="Jordan Lee",
        email="jordan@example.com",
        provider="LinkedIn",
        metadata=CandidateMetadata(account_age_years=6, connection_density=7, profile_completion=90),
        experience_years=7,
        seniority_level=SeniorityLevel.SENIOR,
    )


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch):
    """Fresh recruiter store wired into every API module that reads it."""
    from app.api import interview as interview_api
    from app.api import recruiter as recruiter_api
    from app.recruiter.store import PipelineStore

    fresh = PipelineStore()
    monkeypatch.setattr(interview_api, "pipeline_store", fresh)
    monkeypatch.setattr(recruiter_api, "pipeline_store", fresh)
    return fresh
