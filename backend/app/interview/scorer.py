import math

from app.models import InterviewResult, SubScores

# Finalize-time weighting used by the interview session.
SESSION_WEIGHTS = {
    "technical_accuracy": 0.4,
    "structural_integrity": 0.2,
    "assertiveness_index": 0.1,
    "signal_to_noise_ratio": 0.1,
    "seniority_alignment": 0.2,
}

# Recruiter-side display weighting; calibration may replace it.
DEFAULT_RECRUITER_WEIGHTS = {
    "technical_accuracy": 0.5,
    "coherence": 0.25,
    "authenticity": 0.15,
    "seniority_alignment": 0.1,
}

RECRUITER_WEIGHT_KEYS = tuple(DEFAULT_RECRUITER_WEIGHTS)

FALLBACK_SCORE = 70.0


def _safe_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except Exception:
        return default


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value, default: float = FALLBACK_SCORE) -> float:
    number = _safe_float(value, default)
    if math.isnan(number):
        number = default
    return max(0.0, min(100.0, number))


def weighted_sum(scores: SubScores, weights: dict) -> float:
    return sum(_safe_float(getattr(scores, key)) * float(weight) for key, weight in weights.items())


def calculate_overall_score(scores: SubScores) -> int:
    """round(0.4*tech + 0.2*structure + 0.1*assertiveness + 0.1*signal + 0.2*seniority)"""
    return max(0, min(100, round_half_up(weighted_sum(scores, SESSION_WEIGHTS))))


def normalize_weights(weights: dict | None) -> dict:
    """
    Scale recruiter weights so they sum to 1.
    Unknown keys are ignored, missing keys count as zero, and a vector with
    no positive mass falls back to the defaults.
    """
    raw = {key: max(0.0, _safe_float((weights or {}).get(key), 0.0)) for key in RECRUITER_WEIGHT_KEYS}
    total = sum(raw.values())
    if total <= 0.0:
        return dict(DEFAULT_RECRUITER_WEIGHTS)
    return {key: value / total for key, value in raw.items()}


def recompute_display_score(result: InterviewResult | None, weights: dict | None = None) -> int:
    if result is None or not result.responses:
        return 0
    active = normalize_weights(weights) if weights else DEFAULT_RECRUITER_WEIGHTS
    return round_half_up(weighted_sum(result.responses[0].scores, active))
