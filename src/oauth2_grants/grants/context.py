"""Per-request state threaded through every grant pipeline step."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ..config.grant_config import GrantConfig

if TYPE_CHECKING:
    from ..model.base import GrantModel
    from .credentials import Client, GrantRequest
    from .preapproved import PreApproved
    from .tokens import Token


@dataclass
class GrantContext:
    """Mutable state for one token request.

    ``now`` is captured once when the context is created and every expiry
    computation in the request uses it, so access and refresh tokens get
    consistent lifetimes.
    """

    config: GrantConfig
    request: "GrantRequest | None" = None
    pre_approved: "PreApproved | None" = None
    now: datetime = field(default_factory=lambda: datetime.now(UTC))
    client: "Client | None" = None
    client_model: Any = None
    user: Any = None
    grant_type: str | None = None
    access_token: "Token | str | None" = None
    refresh_token: "Token | str | None" = None

    @property
    def model(self) -> "GrantModel":
        """Storage model handle."""
        return self.config.model
