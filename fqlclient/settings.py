"""Client settings loaded from the environment.

Every field can be set through an environment variable with the ``FAUNA_``
prefix (``FAUNA_SECRET``, ``FAUNA_ENDPOINT``, ``FAUNA_TIMEOUT_MS``, ...) or a
``.env`` file. Arguments passed to ``Client`` take precedence.
"""

import re
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# URL pattern for HTTP/HTTPS endpoints
_URL_PATTERN = re.compile(r'^https?://[^\s/$.?#].[^\s]*$', re.IGNORECASE)

ENDPOINTS: Dict[str, str] = {
    "cloud": "https://db.fauna.com",
    "preview": "https://db.fauna-preview.com",
    "local": "http://localhost:8443",
    "localhost": "http://localhost:8443",
}


class ClientSettings(BaseSettings):
    """Connection and default query settings."""

    # =========================================================================
    # CONNECTION
    # =========================================================================
    secret: Optional[str] = None
    endpoint: str = ENDPOINTS["cloud"]
    max_conns: int = Field(default=10, ge=1, le=1000)

    # =========================================================================
    # QUERY DEFAULTS (sent as headers on every query)
    # =========================================================================
    timeout_ms: int = Field(default=60_000, ge=1, le=600_000)
    linearized: Optional[bool] = None
    max_contention_retries: Optional[int] = Field(default=None, ge=0)
    query_tags: Optional[Dict[str, str]] = None
    traceparent: Optional[str] = None

    # =========================================================================
    # LOGGING
    # =========================================================================
    log_level: str = "INFO"

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator('endpoint', mode='before')
    @classmethod
    def resolve_endpoint(cls, v: str) -> str:
        """Accept a named endpoint ("cloud", "local", ...) or a URL."""
        if isinstance(v, str) and v in ENDPOINTS:
            return ENDPOINTS[v]
        return v

    @field_validator('endpoint', mode='after')
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate that the endpoint is an HTTP/HTTPS URL."""
        if not _URL_PATTERN.match(v):
            raise ValueError(f"Invalid URL format: {v}. Must be http:// or https://")
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="FAUNA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# =============================================================================
# GLOBAL SETTINGS (Lazy Initialization)
# =============================================================================

_settings: Optional[ClientSettings] = None


def get_settings() -> ClientSettings:
    """Get global settings instance.

    Creates a new ClientSettings instance lazily if none exists.
    Prefer passing settings to Client explicitly for testability.
    """
    global _settings
    if _settings is None:
        _settings = ClientSettings()
    return _settings


def set_settings(settings_instance: ClientSettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings_instance


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces re-creation on next get_settings() call.
    """
    global _settings
    _settings = None


def reload_settings() -> ClientSettings:
    """Reload settings from environment."""
    global _settings
    _settings = ClientSettings()
    return _settings


__all__ = [
    "ENDPOINTS",
    "ClientSettings",
    "get_settings",
    "set_settings",
    "reset_settings",
    "reload_settings",
]
