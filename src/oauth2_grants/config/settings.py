"""Configuration settings for the OAuth2 grant server using Pydantic Settings.

This module provides type-safe configuration management with automatic validation,
environment variable loading, and documentation generation.
"""

import logging
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.constants import (
    ACCESS_TOKEN_LIFETIME_DEFAULT,
    CLIENT_ID_PATTERN_DEFAULT,
    GRANT_TYPE_PATTERN_DEFAULT,
    REFRESH_TOKEN_LIFETIME_DEFAULT,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Central configuration management with Pydantic validation.

    All settings are loaded from environment variables with automatic type conversion
    and validation. Default values are provided for every setting.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
        validate_default=True,
    )

    # ========================================
    # Debug Settings
    # ========================================
    debug: bool = Field(
        default=False,
        alias="OAUTH2_DEBUG",
        description="Enable debug mode with verbose logging",
    )

    # ========================================
    # Grant Settings
    # ========================================
    oauth2_grants: str = Field(
        default="password,refresh_token",
        description="Comma-separated list of enabled grant types",
    )

    oauth2_access_token_lifetime: int | None = Field(
        default=ACCESS_TOKEN_LIFETIME_DEFAULT,
        ge=0,
        description="Access token lifetime in seconds (empty for tokens that never expire)",
    )

    oauth2_refresh_token_lifetime: int | None = Field(
        default=REFRESH_TOKEN_LIFETIME_DEFAULT,
        ge=0,
        description="Refresh token lifetime in seconds (empty for tokens that never expire)",
    )

    oauth2_client_id_regex: str = Field(
        default=CLIENT_ID_PATTERN_DEFAULT,
        description="Case-insensitive pattern a client_id must match",
    )

    oauth2_grant_type_regex: str = Field(
        default=GRANT_TYPE_PATTERN_DEFAULT,
        description="Pattern a grant_type parameter must match",
    )

    oauth2_continue_after_response: bool = Field(
        default=False,
        description="Keep processing the request after the token response is sent",
    )

    # ========================================
    # JWT Token Settings
    # ========================================
    oauth2_jwt_secret_key: str = Field(
        default="change-me-in-production",
        description="Secret key for signing JWT tokens",
    )

    oauth2_jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    oauth2_issuer: str | None = Field(
        default=None,
        description="Issuer claim placed in JWT tokens",
    )

    # ========================================
    # Validators
    # ========================================
    @field_validator(
        "oauth2_access_token_lifetime",
        "oauth2_refresh_token_lifetime",
        mode="before",
    )
    @classmethod
    def empty_lifetime_is_none(cls, v: Any) -> Any:
        """Treat an empty environment value as 'never expires'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ========================================
    # Helper Methods
    # ========================================
    def get_grants_list(self) -> list[str]:
        """Get enabled grant types as a list."""
        return [g.strip() for g in self.oauth2_grants.split(",") if g.strip()]

    def to_dict(self) -> dict[str, Any]:
        """Export settings as a dictionary (safe version without secrets)."""
        return {
            "debug": self.debug,
            "grants": self.get_grants_list(),
            "access_token_lifetime": self.oauth2_access_token_lifetime,
            "refresh_token_lifetime": self.oauth2_refresh_token_lifetime,
            "client_id_regex": self.oauth2_client_id_regex,
            "grant_type_regex": self.oauth2_grant_type_regex,
            "continue_after_response": self.oauth2_continue_after_response,
            "jwt_algorithm": self.oauth2_jwt_algorithm,
            "issuer": self.oauth2_issuer,
        }


# Singleton pattern with proper typing
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
        logger.info("Settings initialized from environment")
        logger.debug("Enabled grants: %s", _settings_instance.get_grants_list())
        if _settings_instance.oauth2_jwt_secret_key == "change-me-in-production":
            logger.warning(
                "OAUTH2_JWT_SECRET_KEY is not set. JWT tokens use an insecure default key.",
            )
    return _settings_instance


def reset_settings() -> None:
    """Reset settings instance (useful for testing)."""
    global _settings_instance
    _settings_instance = None
