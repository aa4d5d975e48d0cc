"""Exceptions for the OAuth2 grant server."""

from typing import Any

from .constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_ERROR,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNAUTHORIZED,
)

# ========================================
# Error kinds (RFC 6749 section 5.2)
# ========================================

INVALID_REQUEST = "invalid_request"
INVALID_CLIENT = "invalid_client"
INVALID_GRANT = "invalid_grant"
INVALID_TOKEN = "invalid_token"
UNAUTHORIZED_CLIENT = "unauthorized_client"
UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
SERVER_ERROR = "server_error"

_BAD_REQUEST_KINDS = frozenset(
    {
        INVALID_REQUEST,
        INVALID_CLIENT,
        INVALID_GRANT,
        UNAUTHORIZED_CLIENT,
        UNSUPPORTED_GRANT_TYPE,
    },
)


# ========================================
# Base Exceptions
# ========================================


class GrantServerError(Exception):
    """Base exception for all grant server errors."""


class ConfigurationError(GrantServerError):
    """Configuration is invalid for the requested operation."""


# ========================================
# Protocol Exceptions
# ========================================


class OAuthError(GrantServerError):
    """Tagged protocol error surfaced by the grant pipeline.

    Attributes:
        kind: Error code from the OAuth2 taxonomy or a caller extension
        description: Human readable description (falls back to ``kind``)
        cause: Underlying exception or detail kept for diagnostics
        status_code: Suggested HTTP status for the transport layer
        headers: Suggested extra HTTP response headers
    """

    def __init__(
        self,
        kind: str,
        description: str | None = None,
        cause: Any = None,
    ) -> None:
        self.kind = kind
        self.description = description or kind
        self.cause = cause
        self.headers: dict[str, str] = {}

        if kind == INVALID_CLIENT:
            self.headers["WWW-Authenticate"] = 'Basic realm="Service"'

        if kind in _BAD_REQUEST_KINDS:
            self.status_code = HTTP_BAD_REQUEST
        elif kind == INVALID_TOKEN:
            self.status_code = HTTP_UNAUTHORIZED
        elif kind == SERVER_ERROR:
            self.status_code = HTTP_SERVICE_UNAVAILABLE
        else:
            self.status_code = HTTP_INTERNAL_ERROR

        super().__init__(self.description)

    def to_dict(self) -> dict[str, str]:
        """Render the error as an RFC 6749 error response body."""
        return {"error": self.kind, "error_description": self.description}

    def __repr__(self) -> str:
        return f"OAuthError(kind={self.kind!r}, description={self.description!r})"


class ExtendedGrantError(Exception):
    """Raised by extended grant implementations to control the error taxonomy.

    Args:
        description: Human readable description
        type: Error kind reported to the client (defaults to ``server_error``)
    """

    def __init__(self, description: str, type: str | None = None) -> None:  # noqa: A002
        self.description = description
        self.type = type
        super().__init__(description)


def error(kind: str, message: str | None = None, cause: Any = None) -> OAuthError:
    """Construct a tagged protocol error.

    Args:
        kind: Error kind, e.g. ``invalid_request``
        message: Description, or None to fall back to the kind
        cause: Wrapped underlying failure

    Returns:
        OAuthError ready to be raised
    """
    return OAuthError(kind, message, cause)
