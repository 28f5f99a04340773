"""Runtime configuration for the Companion Chat backend."""
import logging
import os

from dotenv import load_dotenv

# Load environment variables from a local .env file if present
load_dotenv()

logger = logging.getLogger(__name__)

DEV_SESSION_SECRET = "dev-session-secret-change-me"


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return float(value)


class Settings:
    """Settings read from the environment at construction time.

    Keyword arguments override environment values, which keeps tests and
    alternative deployments from having to mutate ``os.environ``.
    """

    def __init__(self, **overrides):
        self.environment = os.environ.get("ENVIRONMENT", "development")
        self.database_url = os.environ.get("DATABASE_URL", "sqlite:///./companion_chat.db")
        self.storage_backend = os.environ.get("STORAGE_BACKEND", "database")

        self.session_secret = os.environ.get("SESSION_SECRET", "")
        self.session_cookie_name = os.environ.get("SESSION_COOKIE_NAME", "companion_session")
        self.session_max_age_seconds = _env_int("SESSION_MAX_AGE_SECONDS", 24 * 60 * 60)

        self.frontend_url = os.environ.get("FRONTEND_URL", "http://localhost:5173")
        self.frontend_dir = os.environ.get("FRONTEND_DIR") or None

        self.cohere_api_key = os.environ.get("COHERE_API_KEY") or None
        self.cohere_model = os.environ.get("COHERE_MODEL", "command-r-plus")
        self.cohere_temperature = _env_float("COHERE_TEMPERATURE", 0.7)
        self.cohere_max_tokens = _env_int("COHERE_MAX_TOKENS", 1024)
        self.context_window_size = _env_int("CONTEXT_WINDOW_SIZE", 6)

        self.log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown setting: {key}")
            setattr(self, key, value)

        if not self.session_secret:
            if self.is_production:
                raise RuntimeError("SESSION_SECRET must be set in production")
            logger.warning("SESSION_SECRET not set; using the development default")
            self.session_secret = DEV_SESSION_SECRET

        if self.storage_backend not in ("database", "memory"):
            raise ValueError(f"Unsupported STORAGE_BACKEND: {self.storage_backend}")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
