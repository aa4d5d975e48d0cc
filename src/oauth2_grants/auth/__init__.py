"""Storage, token generation and HTTP integration for the grant pipeline."""

from .provider import InMemoryGrantModel
from .routes import grant_request_from_starlette, token_endpoint
from .setup import build_token_route, setup_token_route
from .tokens import JWTTokenGenerator

__all__ = [
    "InMemoryGrantModel",
    "JWTTokenGenerator",
    "build_token_route",
    "grant_request_from_starlette",
    "setup_token_route",
    "token_endpoint",
]
