import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


OPENAI_API_KEY = str(os.getenv("OPENAI_API_KEY") or "").strip()
AI_EVALUATION_MODEL = str(os.getenv("AI_EVALUATION_MODEL") or "gpt-4o-mini").strip()

# Recording timers (seconds)
RECORDING_LIMIT_SEC = max(1, _env_int("RECORDING_LIMIT_SEC", 60))
PREP_COUNTDOWN_SEC = max(0, _env_int("PREP_COUNTDOWN_SEC", 3))
PROCESSING_DELAY_SEC = max(0.0, _env_float("PROCESSING_DELAY_SEC", 1.5))
INTERRUPTION_PROBABILITY = min(1.0, max(0.0, _env_float("INTERRUPTION_PROBABILITY", 0.0)))

SESSION_CLEANUP_TTL_SEC = max(60, _env_int("SESSION_CLEANUP_TTL_SEC", 1800))
SESSION_CLEANUP_INTERVAL_SEC = max(30, _env_int("SESSION_CLEANUP_INTERVAL_SEC", 120))
# Started sessions that never complete are swept after this much idle time.
SESSION_IDLE_TTL_SEC = max(SESSION_CLEANUP_TTL_SEC, _env_int("SESSION_IDLE_TTL_SEC", 7200))

CORS_ALLOW_ORIGINS = [
    item.strip()
    for item in str(os.getenv("CORS_ALLOW_ORIGINS") or "").split(",")
    if item.strip()
] or [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
