"""Configuration for the OAuth2 grant server."""

from .grant_config import GrantConfig, LifetimePolicy, TokenGenerator
from .settings import Settings, get_settings, reset_settings

__all__ = [
    "GrantConfig",
    "LifetimePolicy",
    "Settings",
    "TokenGenerator",
    "get_settings",
    "reset_settings",
]
