"""
Tests for grants.credentials: request validation and credential extraction.
"""

import base64

import pytest
from grant_test_helpers import CLIENT_ID, CLIENT_SECRET, StubModel, make_request

from oauth2_grants.config import GrantConfig
from oauth2_grants.core.exceptions import OAuthError
from oauth2_grants.grants import grant
from oauth2_grants.grants.credentials import Client, GrantRequest, extract, parse_basic_auth


def basic(name: str, password: str) -> str:
    """Basic Authorization header value."""
    return "Basic " + base64.b64encode(f"{name}:{password}".encode()).decode()


class TestRequestShape:
    """Only form-encoded POST requests are accepted."""

    @pytest.fixture
    def config(self):
        return GrantConfig(model=StubModel())

    def test_rejects_get(self, config):
        """GET requests are invalid_request."""
        with pytest.raises(OAuthError) as exc_info:
            extract(make_request(method="GET", grant_type="password"), config)

        assert exc_info.value.kind == "invalid_request"
        assert "POST" in exc_info.value.description

    def test_rejects_json(self, config):
        """Non form-encoded bodies are invalid_request."""
        with pytest.raises(OAuthError) as exc_info:
            extract(
                make_request(content_type="application/json", grant_type="password"),
                config,
            )

        assert exc_info.value.kind == "invalid_request"

    def test_accepts_lowercase_method_and_charset(self, config):
        """Method case and content type parameters are ignored."""
        request = make_request(
            method="post",
            content_type="application/x-www-form-urlencoded; charset=UTF-8",
            grant_type="password",
        )

        client, grant_type = extract(request, config)

        assert client == Client(CLIENT_ID, CLIENT_SECRET)
        assert grant_type == "password"


class TestGrantTypeParameter:
    """The grant_type parameter must be present and well formed."""

    @pytest.fixture
    def config(self):
        return GrantConfig(model=StubModel())

    def test_missing_grant_type(self, config):
        """A missing grant_type is invalid_request."""
        with pytest.raises(OAuthError) as exc_info:
            extract(make_request(), config)

        assert exc_info.value.kind == "invalid_request"
        assert exc_info.value.description == "Invalid or missing grant_type parameter"

    def test_malformed_grant_type(self, config):
        """A grant_type not matching the pattern is invalid_request."""
        with pytest.raises(OAuthError) as exc_info:
            extract(make_request(grant_type="not a grant"), config)

        assert exc_info.value.kind == "invalid_request"

    @pytest.mark.parametrize("grant_type", ["password\n", "urn:x:y\n"])
    def test_trailing_newline_in_grant_type(self, config, grant_type):
        """The whole grant_type must match, a trailing newline included."""
        with pytest.raises(OAuthError) as exc_info:
            extract(make_request(grant_type=grant_type), config)

        assert exc_info.value.kind == "invalid_request"

    @pytest.mark.parametrize(
        "grant_type",
        [
            "authorization_code",
            "password",
            "refresh_token",
            "client_credentials",
            "urn:custom:foo",
            "http+x.y-z:grant",
        ],
    )
    def test_default_pattern_admits_builtin_and_extension(self, config, grant_type):
        """Built-in names and scheme-prefixed extension grants pass."""
        _, extracted = extract(make_request(grant_type=grant_type), config)

        assert extracted == grant_type

    @pytest.mark.asyncio
    async def test_missing_grant_type_makes_no_storage_calls(self):
        """Extraction fails before any storage operation runs."""
        model = StubModel()
        config = GrantConfig(model=model)

        with pytest.raises(OAuthError) as exc_info:
            await grant(config, make_request())

        assert exc_info.value.kind == "invalid_request"
        assert model.calls == []


class TestClientCredentials:
    """Client credentials come from Basic auth or the body."""

    @pytest.fixture
    def config(self):
        return GrantConfig(model=StubModel())

    def test_credentials_from_body(self, config):
        """client_id and client_secret form fields are used."""
        client, _ = extract(make_request(grant_type="password"), config)

        assert client.client_id == CLIENT_ID
        assert client.client_secret == CLIENT_SECRET

    def test_basic_auth_takes_precedence(self, config):
        """Basic credentials win over body credentials."""
        request = make_request(
            authorization=basic("basic-client", "basic-secret"),
            grant_type="password",
        )

        client, _ = extract(request, config)

        assert client == Client("basic-client", "basic-secret")

    def test_malformed_basic_auth_falls_back_to_body(self, config):
        """Unparseable Basic credentials are ignored."""
        request = make_request(authorization="Basic !!!", grant_type="password")

        client, _ = extract(request, config)

        assert client.client_id == CLIENT_ID

    def test_missing_client_id(self, config):
        """A missing client_id is invalid_client."""
        request = make_request(with_client=False, grant_type="password", client_secret="s")

        with pytest.raises(OAuthError) as exc_info:
            extract(request, config)

        assert exc_info.value.kind == "invalid_client"
        assert exc_info.value.description == "Invalid or missing client_id parameter"

    def test_client_id_must_match_pattern(self, config):
        """client_id values outside the configured pattern are invalid_client."""
        request = make_request(
            with_client=False,
            grant_type="password",
            client_id="x",
            client_secret="secret",
        )

        with pytest.raises(OAuthError) as exc_info:
            extract(request, config)

        assert exc_info.value.kind == "invalid_client"

    @pytest.mark.asyncio
    async def test_trailing_newline_in_client_id(self):
        """A client_id with a trailing newline never reaches storage."""
        model = StubModel()
        request = make_request(
            with_client=False,
            grant_type="password",
            client_id="thom\n",
            client_secret="s",
        )

        with pytest.raises(OAuthError) as exc_info:
            await grant(GrantConfig(model=model), request)

        assert exc_info.value.kind == "invalid_client"
        assert model.calls == []

    def test_client_id_pattern_is_case_insensitive(self, config):
        """The default client_id pattern ignores case."""
        request = make_request(
            with_client=False,
            grant_type="password",
            client_id="THOM-Client_1",
            client_secret="secret",
        )

        client, _ = extract(request, config)

        assert client.client_id == "THOM-Client_1"

    def test_missing_client_secret(self, config):
        """An empty client_secret is invalid_client."""
        request = make_request(
            with_client=False,
            grant_type="password",
            client_id=CLIENT_ID,
            client_secret="",
        )

        with pytest.raises(OAuthError) as exc_info:
            extract(request, config)

        assert exc_info.value.kind == "invalid_client"
        assert exc_info.value.description == "Missing client_secret parameter"

    def test_extraction_is_idempotent(self, config):
        """Replaying extraction on the same request gives the same result."""
        request = make_request(
            authorization=basic("basic-client", "basic-secret"),
            grant_type="urn:custom:foo",
        )

        assert extract(request, config) == extract(request, config)


class TestParseBasicAuth:
    """Basic Authorization header decoding."""

    def test_decodes_credentials(self):
        assert parse_basic_auth(basic("id", "pa:ss")) == ("id", "pa:ss")

    def test_scheme_is_case_insensitive(self):
        header = basic("id", "secret").replace("Basic", "bAsIc")

        assert parse_basic_auth(header) == ("id", "secret")

    @pytest.mark.parametrize("header", [None, "", "Bearer abc", "Basic", "Basic bm9jb2xvbg=="])
    def test_invalid_headers(self, header):
        """Absent, non-Basic or colon-less credentials yield None."""
        assert parse_basic_auth(header) is None


def test_mime_type_strips_parameters():
    request = GrantRequest(method="POST", content_type="Application/X-WWW-Form-Urlencoded; a=b")

    assert request.mime_type == "application/x-www-form-urlencoded"
