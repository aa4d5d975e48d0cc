"""
OAuth2 grant server - token issuance for RFC 6749 grant types.

This package validates token requests, authenticates clients, resolves the
user principal for the requested grant type, and mints and persists access
and refresh tokens through a caller-supplied storage model.
"""

__version__ = "0.1.0"

from .auth import InMemoryGrantModel, JWTTokenGenerator, setup_token_route, token_endpoint
from .config import GrantConfig, LifetimePolicy, Settings, get_settings, reset_settings
from .core import (
    ConfigurationError,
    ExtendedGrantError,
    GrantServerError,
    GrantType,
    OAuthError,
    error,
)
from .grants import (
    Client,
    Generated,
    GrantContext,
    GrantRequest,
    GrantResponse,
    PreApproved,
    PreApprovedGrant,
    Reissued,
    TokenResponse,
    grant,
    pre_approved_grant,
)
from .model import (
    AuthCodeRecord,
    GeneratesTokens,
    GrantModel,
    RefreshTokenRecord,
    RevokesRefreshTokens,
    SupportsExtendedGrant,
)

__all__ = [
    "AuthCodeRecord",
    "Client",
    "ConfigurationError",
    "ExtendedGrantError",
    "Generated",
    "GeneratesTokens",
    "GrantConfig",
    "GrantContext",
    "GrantModel",
    "GrantRequest",
    "GrantResponse",
    "GrantServerError",
    "GrantType",
    "InMemoryGrantModel",
    "JWTTokenGenerator",
    "LifetimePolicy",
    "OAuthError",
    "PreApproved",
    "PreApprovedGrant",
    "RefreshTokenRecord",
    "Reissued",
    "RevokesRefreshTokens",
    "Settings",
    "SupportsExtendedGrant",
    "TokenResponse",
    "__version__",
    "error",
    "get_settings",
    "grant",
    "pre_approved_grant",
    "reset_settings",
    "setup_token_route",
    "token_endpoint",
]
