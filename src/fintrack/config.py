"""Environment-driven defaults for fintrack."""

import os
from pathlib import Path

DB_PATH_ENV = "FINTRACK_DB_PATH"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_MODEL_ENV = "FINTRACK_OPENAI_MODEL"
CLASSIFIER_TIMEOUT_ENV = "FINTRACK_CLASSIFIER_TIMEOUT"
ACCEPTANCE_THRESHOLD_ENV = "FINTRACK_ACCEPTANCE_THRESHOLD"
LOG_LEVEL_ENV = "FINTRACK_LOG_LEVEL"

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_CLASSIFIER_TIMEOUT = 15.0
DEFAULT_ACCEPTANCE_THRESHOLD = 0.3
DEFAULT_CACHE_TTL_DAYS = 30
DEFAULT_RECATEGORIZE_WORKERS = 4


def default_database_path() -> str:
    """Return the database path from FINTRACK_DB_PATH or ~/.fintrack/fintrack.db."""
    database_path = os.environ.get(DB_PATH_ENV)
    if database_path:
        return database_path

    db_dir = Path.home() / ".fintrack"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "fintrack.db")


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'")


def classifier_timeout() -> float:
    """Request timeout in seconds for the external classifier."""
    return _float_from_env(CLASSIFIER_TIMEOUT_ENV, DEFAULT_CLASSIFIER_TIMEOUT)


def acceptance_threshold() -> float:
    """Minimum confidence for persisting an automatic category during import."""
    return _float_from_env(ACCEPTANCE_THRESHOLD_ENV, DEFAULT_ACCEPTANCE_THRESHOLD)


def openai_model() -> str:
    return os.environ.get(OPENAI_MODEL_ENV) or DEFAULT_OPENAI_MODEL
