"""Protocol constants for the OAuth2 grant server.

This module collects the literal values shared by the grant pipeline,
the settings layer and the HTTP surface.
"""

from enum import Enum


class GrantType(str, Enum):
    """Built-in RFC 6749 grant types."""

    AUTHORIZATION_CODE = "authorization_code"
    PASSWORD = "password"
    REFRESH_TOKEN = "refresh_token"
    CLIENT_CREDENTIALS = "client_credentials"


class TokenKind(str, Enum):
    """Kinds of token minted by the token lifecycle."""

    ACCESS = "accessToken"
    REFRESH = "refreshToken"


# ========================================
# Grant types
# ========================================

PRE_APPROVED_GRANT_TYPE = "preApproved"

# Extension grant scheme prefix (RFC 6749 section 4.5): letter, then
# [A-Za-z0-9+.-]+, then a colon
EXTENSION_GRANT_PATTERN = r"^[a-zA-Z][a-zA-Z0-9+.-]+:"

# ========================================
# Validation defaults
# ========================================

CLIENT_ID_PATTERN_DEFAULT = r"^[a-z0-9-_]{3,40}$"
GRANT_TYPE_PATTERN_DEFAULT = (
    r"^(authorization_code|password|refresh_token|client_credentials"
    r"|[a-zA-Z][a-zA-Z0-9+.-]+:.+)$"
)

# ========================================
# Lifetimes (seconds)
# ========================================

ACCESS_TOKEN_LIFETIME_DEFAULT = 3600  # 1 hour
REFRESH_TOKEN_LIFETIME_DEFAULT = 1209600  # 2 weeks

# ========================================
# Transport
# ========================================

TOKEN_TYPE = "bearer"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_INTERNAL_ERROR = 500
HTTP_SERVICE_UNAVAILABLE = 503
