import random

from app.models import IRTQuestion


# ---------- STATIC QUESTION BANK ----------

QUESTION_BANK: tuple[IRTQuestion, ...] = (
    # Data analyst
    IRTQuestion(
        id="da1",
        text=(
            "You find a significant discrepancy between the marketing dashboard and the sales ledger. "
            "The CEO is presenting in 30 minutes. Walk me through your immediate triage process."
        ),
        beta=0.85,
        alpha=1.2,
        category="Data Integrity",
    ),
    IRTQuestion(
        id="da2",
        text=(
            "Explain how you would handle a dataset where 30% of the demographic fields are NULL, "
            "but you need to segment by region for a critical report."
        ),
        beta=0.75,
        alpha=1.1,
        category="Data Cleaning",
    ),
    IRTQuestion(
        id="da3",
        text=(
            "I don't care about the R-squared value. Tell me, in plain English, why this model predicts "
            "customer churn better than our gut feeling."
        ),
        beta=0.90,
        alpha=1.3,
        category="Communication",
    ),
    # Strategist
    IRTQuestion(
        id="st1",
        text=(
            "We are launching a B2B SaaS product in a saturated market. Do we price for penetration or "
            "skimming? Justify your choice with a specific comparable."
        ),
        beta=0.95,
        alpha=1.4,
        category="GTM Strategy",
    ),
    IRTQuestion(
        id="st2",
        text=(
            "Our CAC has doubled in the last quarter. You have 60 seconds to outline three hypotheses "
            "and how you would validate them."
        ),
        beta=0.85,
        alpha=1.2,
        category="Growth Metrics",
    ),
    # Sales (AE/AM)
    IRTQuestion(
        id="sa1",
        text=(
            'I am a VP of Engineering. I just told you "We are happy with our current solution." '
            "Pivot this objection into a discovery opportunity."
        ),
        beta=0.80,
        alpha=1.1,
        category="Objection Handling",
    ),
    IRTQuestion(
        id="sa2",
        text=(
            "Walk me through a deal you lost. Not one where the budget disappeared, one where you got "
            "outplayed. What happened?"
        ),
        beta=0.85,
        alpha=1.2,
        category="Resilience",
    ),
    IRTQuestion(
        id="sa3",
        text="Stop pitching features. Sell me the problem I don't know I have yet.",
        beta=0.90,
        alpha=1.3,
        category="Discovery",
    ),
)


def select_question(bank=QUESTION_BANK, rng: random.Random | None = None) -> IRTQuestion:
    """Pick one question uniformly at random from the full bank."""
    pool = list(bank or ())
    if not pool:
        raise ValueError("Question bank is empty")
    chooser = rng or random
    return pool[chooser.randrange(len(pool))]
