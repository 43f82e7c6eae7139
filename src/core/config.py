"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Only GEMINI_API_KEY is required. Everything else has a default
suitable for local development.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

# Placeholder value shipped in example .env files
PLACEHOLDER_API_KEY = "YOUR_API_KEY"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        host: Interface the server binds to
        port: Port the server listens on
        gemini_api_key: API key for Google Gemini
        gemini_model: Gemini model identifier
        llm_temperature: Sampling temperature for form conversations
        llm_max_tokens: Maximum response length
        session_max_age_minutes: Age after which the sweep removes a session
        session_sweep_interval_seconds: Scheduled sweep interval (0 disables)
        enable_audit_logging: Log every HTTP request
        cors_origins: Allowed CORS origins
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str

    # Server settings
    host: str
    port: int

    # LLM settings
    gemini_api_key: str
    gemini_model: str
    llm_temperature: float
    llm_max_tokens: int

    # Session settings
    session_max_age_minutes: int
    session_sweep_interval_seconds: int

    # Observability
    enable_audit_logging: bool
    cors_origins: Tuple[str, ...]

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None or (default is None and not value.strip()):
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _parse_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; call get_settings.cache_clear()
    to force a re-read (tests do this after patching the environment).

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If GEMINI_API_KEY is missing or still the placeholder
    """
    api_key = _get_env("GEMINI_API_KEY")
    if api_key.strip() == PLACEHOLDER_API_KEY:
        raise ValueError(
            "GEMINI_API_KEY still holds the placeholder value. "
            "Set a valid Google AI API key."
        )

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "FormAssistant"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),

        # Server
        host=_get_env("HOST", "0.0.0.0"),
        port=int(_get_env("PORT", "3001")),

        # LLM
        gemini_api_key=api_key.strip(),
        gemini_model=_get_env("GEMINI_MODEL", "gemini-2.5-flash"),
        llm_temperature=float(_get_env("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "1000")),

        # Sessions
        session_max_age_minutes=int(_get_env("SESSION_MAX_AGE_MINUTES", "60")),
        session_sweep_interval_seconds=int(_get_env("SESSION_SWEEP_INTERVAL_SECONDS", "0")),

        # Observability
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
        cors_origins=_parse_origins(_get_env("CORS_ORIGINS", "*")),
    )
