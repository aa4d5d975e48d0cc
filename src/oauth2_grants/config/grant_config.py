"""Runtime configuration consumed by the grant pipeline.

``Settings`` holds environment defaults; ``GrantConfig`` binds those
defaults to a storage model and token generator for one server instance.
"""

import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, NonNegativeInt, ValidationError

from ..core.constants import (
    ACCESS_TOKEN_LIFETIME_DEFAULT,
    CLIENT_ID_PATTERN_DEFAULT,
    GRANT_TYPE_PATTERN_DEFAULT,
    REFRESH_TOKEN_LIFETIME_DEFAULT,
    GrantType,
)
from ..core.exceptions import ConfigurationError
from .settings import Settings, get_settings

if TYPE_CHECKING:
    from ..grants.context import GrantContext
    from ..grants.tokens import Token
    from ..model.base import GrantModel

TokenGenerator = Callable[["GrantContext", str], Awaitable["Token"]]


class LifetimePolicy(BaseModel):
    """Token lifetime with optional per-client overrides.

    ``None`` anywhere means the token never expires.
    """

    default: int | None = Field(default=None, ge=0)
    per_client: dict[str, NonNegativeInt | None] = Field(default_factory=dict)

    def resolve(self, client_id: str) -> int | None:
        """Return the lifetime in seconds for ``client_id``."""
        if client_id in self.per_client:
            return self.per_client[client_id]
        return self.default

    @classmethod
    def coerce(
        cls, value: "LifetimePolicy | Mapping[str, int | None] | int | None"
    ) -> "LifetimePolicy":
        """Accept a policy, a per-client mapping, a scalar lifetime, or None.

        A mapping sets per-client lifetimes only; clients it does not list
        get tokens that never expire.
        """
        if isinstance(value, LifetimePolicy):
            return value
        if isinstance(value, Mapping):
            try:
                return cls(per_client=dict(value))
            except ValidationError as e:
                msg = f"Invalid per-client token lifetimes: {e}"
                raise ConfigurationError(msg) from e
        if value is not None and not isinstance(value, int):
            msg = f"Token lifetime must be an int, None, a mapping or LifetimePolicy, got {type(value).__name__}"
            raise ConfigurationError(msg)
        if value is not None and value < 0:
            msg = f"Token lifetime cannot be negative: {value}"
            raise ConfigurationError(msg)
        return cls(default=value)


def _compile(pattern: "str | re.Pattern[str]", flags: int = 0) -> "re.Pattern[str]":
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        msg = f"Invalid pattern {pattern!r}: {e}"
        raise ConfigurationError(msg) from e


@dataclass
class GrantConfig:
    """Per-server configuration of the grant pipeline.

    Attributes:
        model: Storage model implementing the grant capabilities
        grants: Enabled grant types; refresh tokens are only issued when
            ``refresh_token`` is listed
        access_token_lifetime: Access token lifetime policy
        refresh_token_lifetime: Refresh token lifetime policy
        client_id_regex: Pattern a client_id must match
        grant_type_regex: Pattern a grant_type parameter must match
        continue_after_response: Keep processing after the response is sent
        token_generator: Token producing coroutine, defaults to random tokens
    """

    model: "GrantModel"
    grants: list[str] = field(
        default_factory=lambda: [GrantType.PASSWORD.value, GrantType.REFRESH_TOKEN.value],
    )
    access_token_lifetime: Any = ACCESS_TOKEN_LIFETIME_DEFAULT
    refresh_token_lifetime: Any = REFRESH_TOKEN_LIFETIME_DEFAULT
    client_id_regex: Any = CLIENT_ID_PATTERN_DEFAULT
    grant_type_regex: Any = GRANT_TYPE_PATTERN_DEFAULT
    continue_after_response: bool = False
    token_generator: TokenGenerator | None = None

    def __post_init__(self) -> None:
        if self.model is None:
            msg = "A storage model is required"
            raise ConfigurationError(msg)

        self.grants = [str(getattr(g, "value", g)) for g in self.grants]
        self.access_token_lifetime = LifetimePolicy.coerce(self.access_token_lifetime)
        self.refresh_token_lifetime = LifetimePolicy.coerce(self.refresh_token_lifetime)
        self.client_id_regex = _compile(self.client_id_regex, re.IGNORECASE)
        self.grant_type_regex = _compile(self.grant_type_regex)

    @property
    def issues_refresh_tokens(self) -> bool:
        """Whether refresh tokens are generated alongside access tokens."""
        return GrantType.REFRESH_TOKEN.value in self.grants

    @classmethod
    def from_settings(
        cls,
        model: "GrantModel",
        settings: Settings | None = None,
        **overrides: Any,
    ) -> "GrantConfig":
        """Build a configuration from environment settings.

        Args:
            model: Storage model
            settings: Settings instance (defaults to the cached singleton)
            **overrides: Field values taking precedence over settings

        Returns:
            Configured GrantConfig
        """
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "grants": settings.get_grants_list(),
            "access_token_lifetime": settings.oauth2_access_token_lifetime,
            "refresh_token_lifetime": settings.oauth2_refresh_token_lifetime,
            "client_id_regex": settings.oauth2_client_id_regex,
            "grant_type_regex": settings.oauth2_grant_type_regex,
            "continue_after_response": settings.oauth2_continue_after_response,
        }
        values.update(overrides)
        return cls(model=model, **values)
