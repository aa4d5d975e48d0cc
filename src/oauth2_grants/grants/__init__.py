"""OAuth2 grant pipeline: request validation, grant dispatch and token issuance."""

from .context import GrantContext
from .credentials import Client, GrantRequest, extract, parse_basic_auth
from .grant import GRANT_STEPS, grant
from .preapproved import PRE_APPROVED_STEPS, PreApproved, PreApprovedGrant, pre_approved_grant
from .response import GrantResponse, TokenResponse
from .runner import run_steps
from .tokens import Generated, Reissued, Token, generate_token

__all__ = [
    "Client",
    "GRANT_STEPS",
    "Generated",
    "GrantContext",
    "GrantRequest",
    "GrantResponse",
    "PRE_APPROVED_STEPS",
    "PreApproved",
    "PreApprovedGrant",
    "Reissued",
    "Token",
    "TokenResponse",
    "extract",
    "generate_token",
    "grant",
    "parse_basic_auth",
    "pre_approved_grant",
    "run_steps",
]
