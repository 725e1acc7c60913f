"""Runtime settings read from the environment (and a local .env file).

Values are read at call time so tests and long-lived processes pick up changes
made with monkeypatch.setenv or os.environ.
"""
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_STAGE_TIMEOUT_SECONDS = 300.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_BACKOFF_SECONDS = 2.0
DEFAULT_SANITY_API_VERSION = "2024-01-01"


def llm_provider() -> str:
    return os.environ.get("LLM_PROVIDER", "openai").lower()


def stage_timeout_seconds() -> float:
    return float(os.environ.get("STAGE_TIMEOUT_SECONDS", DEFAULT_STAGE_TIMEOUT_SECONDS))


def fetch_timeout_seconds() -> float:
    return float(os.environ.get("FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT_SECONDS))


def max_attempts() -> int:
    return max(1, int(os.environ.get("GENERATION_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)))


def backoff_seconds() -> float:
    return float(os.environ.get("GENERATION_BACKOFF_SECONDS", DEFAULT_BACKOFF_SECONDS))


def sanity_settings() -> dict:
    """Sanity project coordinates. The token is required only for publishing."""
    return {
        "project_id": os.environ.get("SANITY_PROJECT_ID", ""),
        "dataset": os.environ.get("SANITY_DATASET", "production"),
        "token": os.environ.get("SANITY_API_TOKEN", ""),
        "api_version": os.environ.get("SANITY_API_VERSION", DEFAULT_SANITY_API_VERSION),
        "site_base_url": os.environ.get("SITE_BASE_URL", "").rstrip("/"),
    }


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def log_json() -> bool:
    return os.environ.get("LOG_JSON", "").lower() in ("1", "true", "yes")
