from app.models import (
    Candidate,
    CandidateMetadata,
    FollowUp,
    InterviewResult,
    Job,
    QuestionResponse,
    Recommendation,
    SeniorityLevel,
    SubScores,
)


MOCK_JOBS: tuple[Job, ...] = (
    Job(
        id="j1",
        title="Senior Data Analyst",
        company="Spotify",
        location="Remote / NY",
        salary="$140k - $180k",
        tags=("SQL", "Tableau", "Python"),
        description="Turn petabytes of listening data into actionable product insights.",
        requirements="Expert SQL, experience with A/B test significance, and ability to push back on stakeholders.",
    ),
    Job(
        id="j2",
        title="Enterprise Account Executive",
        company="Salesforce",
        location="San Francisco / Hybrid",
        salary="$150k Base + $150k OTE",
        tags=("SaaS Sales", "Closing", "Hunter"),
        description="Own the full sales cycle for our Financial Services vertical.",
        requirements="5+ years closing 6-figure deals. MEDDIC methodology preferred.",
    ),
    Job(
        id="j3",
        title="Product Strategist",
        company="McKinsey Digital",
        location="London / Travel",
        salary="$180k - $250k",
        tags=("GTM", "Pricing", "Consulting"),
        description="Define the digital future for Fortune 500 clients.",
        requirements="Strong modeling skills and ability to defend frameworks under pressure.",
    ),
)


def get_job(job_id: str) -> Job | None:
    return next((job for job in MOCK_JOBS if job.id == job_id), None)


def _seed_candidates() -> list[Candidate]:
    result = InterviewResult(
        candidate_id="c1",
        overall_score=92,
        ai_recommendation=Recommendation.HIRE,
        ai_decision_reason="Expert knowledge of distributed consensus; strong communication during follow-up.",
        timestamp="2026-01-12T09:30:00+00:00",
        integrity_log=(),
        responses=(
            QuestionResponse(
                question_id="da1",
                transcript=(
                    "In distributed systems, Redis locks use the Redlock algorithm. During a network partition, "
                    "we require a majority quorum of nodes to maintain safety. I've implemented this in "
                    "high-throughput payment pipelines before..."
                ),
                scores=SubScores(
                    technical_accuracy=95,
                    structural_integrity=90,
                    assertiveness_index=90,
                    signal_to_noise_ratio=90,
                    seniority_alignment=90,
                    coherence=90,
                    authenticity=95,
                ),
                follow_up=FollowUp(
                    probe="How would you handle clock drift between Redis nodes in this scenario?",
                    response=(
                        "Clock drift is mitigated by adding a drift factor to the TTL calculation. If the "
                        "elapsed time + drift exceeds the limit, the lock is invalid."
                    ),
                ),
            ),
        ),
    )
    return [
        Candidate(
            id="c1",
            name="Sarah Chen",
            email="sarah.c@example.com",
            provider="LinkedIn",
            metadata=CandidateMetadata(
                account_age_years=8,
                connection_density=9,
                profile_completion=95,
                is_ghost=False,
            ),
            experience_years=7,
            seniority_level=SeniorityLevel.SENIOR,
            results=result,
        )
    ]


MOCK_CANDIDATES: tuple[Candidate, ...] = tuple(_seed_candidates())
