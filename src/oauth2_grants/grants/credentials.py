"""Extraction of client credentials and grant type from a token request."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..core.constants import FORM_CONTENT_TYPE
from ..core.exceptions import INVALID_CLIENT, INVALID_REQUEST, error
from .context import GrantContext

if TYPE_CHECKING:
    from ..config.grant_config import GrantConfig

logger = logging.getLogger(__name__)

# Basic credentials (RFC 7617)
_BASIC_AUTH_RE = re.compile(r"^ *(?:[Bb][Aa][Ss][Ii][Cc]) +([A-Za-z0-9._~+/-]+=*) *$")
_USER_PASS_RE = re.compile(r"^([^:]*):(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Client:
    """Client identity presented with a request (internal use only)."""

    client_id: str | None
    client_secret: str | None


@dataclass
class GrantRequest:
    """Transport-independent view of a token request.

    Attributes:
        method: HTTP method
        content_type: Content-Type header value (parameters are ignored)
        payload: Decoded form fields
        authorization: Raw Authorization header, if any
        state: Downstream processing state; the pipeline exposes the
            resolved ``user`` and ``oauth`` client record here
    """

    method: str
    content_type: str | None = None
    payload: dict[str, str] = field(default_factory=dict)
    authorization: str | None = None
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def mime_type(self) -> str:
        """Content type without parameters, lower-cased."""
        if not self.content_type:
            return ""
        return self.content_type.split(";", 1)[0].strip().lower()


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Decode a Basic Authorization header into ``(name, password)``.

    Returns None when the header is absent or not valid Basic credentials.
    """
    if not header:
        return None

    match = _BASIC_AUTH_RE.match(header)
    if not match:
        return None

    try:
        decoded = base64.b64decode(match.group(1)).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("Ignoring undecodable Basic credentials")
        return None

    user_pass = _USER_PASS_RE.match(decoded)
    if not user_pass:
        return None
    return user_pass.group(1), user_pass.group(2)


def client_from_basic(request: GrantRequest) -> Client | None:
    """Client credentials from the Authorization header."""
    credentials = parse_basic_auth(request.authorization)
    if credentials is None:
        return None
    return Client(*credentials)


def client_from_body(request: GrantRequest) -> Client:
    """Client credentials from the ``client_id``/``client_secret`` form fields."""
    return Client(request.payload.get("client_id"), request.payload.get("client_secret"))


def validate_client_credentials(client: Client, config: "GrantConfig") -> None:
    """Check the shape of client credentials.

    Raises:
        OAuthError: ``invalid_client`` when the id is missing or malformed,
            or the secret is missing
    """
    if not client.client_id or not config.client_id_regex.fullmatch(client.client_id):
        raise error(INVALID_CLIENT, "Invalid or missing client_id parameter")
    if not client.client_secret:
        raise error(INVALID_CLIENT, "Missing client_secret parameter")


def extract(request: GrantRequest, config: "GrantConfig") -> tuple[Client, str]:
    """Validate a token request and extract its client and grant type.

    Credentials in a Basic Authorization header take precedence over form
    fields (RFC 6749 section 2.3.1).

    Args:
        request: Token request
        config: Grant configuration

    Returns:
        ``(client, grant_type)``

    Raises:
        OAuthError: ``invalid_request`` or ``invalid_client``
    """
    if request.method.lower() != "post" or request.mime_type != FORM_CONTENT_TYPE:
        raise error(
            INVALID_REQUEST,
            "Method must be POST with application/x-www-form-urlencoded encoding",
        )

    grant_type = request.payload.get("grant_type")
    if not grant_type or not config.grant_type_regex.fullmatch(grant_type):
        raise error(INVALID_REQUEST, "Invalid or missing grant_type parameter")

    client = client_from_basic(request) or client_from_body(request)
    validate_client_credentials(client, config)

    return client, grant_type


async def extract_credentials(ctx: GrantContext) -> None:
    """Pipeline step: populate ``ctx.client`` and ``ctx.grant_type``."""
    ctx.client, ctx.grant_type = extract(ctx.request, ctx.config)
