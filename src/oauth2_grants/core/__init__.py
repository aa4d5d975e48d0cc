"""Core functionality for the OAuth2 grant server."""

from .constants import (
    EXTENSION_GRANT_PATTERN,
    NO_CACHE_HEADERS,
    PRE_APPROVED_GRANT_TYPE,
    TOKEN_TYPE,
    GrantType,
    TokenKind,
)
from .decorators import track_grant
from .exceptions import (
    INVALID_CLIENT,
    INVALID_GRANT,
    INVALID_REQUEST,
    SERVER_ERROR,
    UNAUTHORIZED_CLIENT,
    ConfigurationError,
    ExtendedGrantError,
    GrantServerError,
    OAuthError,
    error,
)
from .logging import configure_logging, logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ExtendedGrantError",
    "GrantServerError",
    "OAuthError",
    "error",
    "INVALID_CLIENT",
    "INVALID_GRANT",
    "INVALID_REQUEST",
    "SERVER_ERROR",
    "UNAUTHORIZED_CLIENT",
    # Logging
    "configure_logging",
    "logger",
    "track_grant",
    # Constants
    "EXTENSION_GRANT_PATTERN",
    "NO_CACHE_HEADERS",
    "PRE_APPROVED_GRANT_TYPE",
    "TOKEN_TYPE",
    "GrantType",
    "TokenKind",
]
