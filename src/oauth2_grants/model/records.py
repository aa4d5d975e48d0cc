"""Shapes of the storage records read by the grant pipeline.

Models may return these pydantic models or plain mappings; mappings are
validated into the models and accept both snake_case and camelCase keys.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _GrantRecord(BaseModel):
    """Common fields of authorization codes and refresh tokens."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    client_id: str = Field(validation_alias=AliasChoices("client_id", "clientId"))
    expires: datetime | None = None
    user: Any = None
    user_id: Any = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId"),
    )

    @field_validator("expires")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Naive timestamps are taken to be UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def resolve_user(self) -> Any:
        """Return ``user`` or a principal built from ``user_id``."""
        if self.user is not None:
            return self.user
        return {"id": self.user_id}


class AuthCodeRecord(_GrantRecord):
    """Authorization code as returned by the storage model."""


class RefreshTokenRecord(_GrantRecord):
    """Refresh token as returned by the storage model."""


def principal_id(user: Any) -> Any:
    """Return the ``id`` of a user principal (mapping or object), or None."""
    if user is None:
        return None
    if isinstance(user, Mapping):
        return user.get("id")
    return getattr(user, "id", None)
