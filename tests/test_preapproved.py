"""
Tests for direct grants to pre-approved users.
"""

import pytest
from grant_test_helpers import CLIENT_ID, CLIENT_SECRET, StubModel

from oauth2_grants.config import GrantConfig, LifetimePolicy
from oauth2_grants.core.exceptions import ConfigurationError, OAuthError
from oauth2_grants.grants import PreApproved, PreApprovedGrant, pre_approved_grant

USER = {"id": 42, "username": "sso-user"}


def pre_approved(**overrides):
    values = {"user": USER, "client_id": CLIENT_ID, "client_secret": CLIENT_SECRET}
    values.update(overrides)
    return values


class TestPreApprovedGrant:
    """Token issuance for a user established by the caller."""

    @pytest.mark.asyncio
    async def test_issues_tokens(self, stub_config, stub_model):
        body = await pre_approved_grant(stub_config, pre_approved())

        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 3600
        assert "refresh_token" in body

        token, client_id, _, user, grant_type = stub_model.called("save_access_token")[0]
        assert token == body["access_token"]
        assert client_id == CLIENT_ID
        assert user == USER
        assert grant_type == "preApproved"

    @pytest.mark.asyncio
    async def test_custom_grant_type(self, stub_config, stub_model):
        await pre_approved_grant(stub_config, pre_approved(grant_type="sso"))

        assert stub_model.called("save_access_token")[0][4] == "sso"

    @pytest.mark.asyncio
    async def test_accepts_model_instance(self, stub_config, stub_model):
        body = await PreApprovedGrant(stub_config).issue(PreApproved(**pre_approved()))

        assert stub_model.called("save_refresh_token")[0][0] == body["refresh_token"]

    @pytest.mark.asyncio
    async def test_skips_grant_type_check_and_dispatch(self, stub_config, stub_model):
        await pre_approved_grant(stub_config, pre_approved())

        names = [name for name, _ in stub_model.calls]
        assert names == ["get_client", "save_access_token", "save_refresh_token"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user", [None, {}])
    async def test_missing_user(self, stub_config, stub_model, user):
        with pytest.raises(OAuthError) as exc_info:
            await pre_approved_grant(stub_config, pre_approved(user=user))

        assert exc_info.value.kind == "invalid_grant"
        assert stub_model.calls == []

    @pytest.mark.asyncio
    async def test_invalid_client_id(self, stub_config):
        with pytest.raises(OAuthError) as exc_info:
            await pre_approved_grant(stub_config, pre_approved(client_id="!"))

        assert exc_info.value.kind == "invalid_client"

    @pytest.mark.asyncio
    async def test_unknown_client(self):
        config = GrantConfig(model=StubModel(get_client=None))

        with pytest.raises(OAuthError) as exc_info:
            await pre_approved_grant(config, pre_approved())

        assert exc_info.value.kind == "invalid_client"
        assert exc_info.value.description == "Client credentials are invalid"

    @pytest.mark.asyncio
    async def test_per_client_expires_in(self, stub_model):
        config = GrantConfig(
            model=stub_model,
            access_token_lifetime=LifetimePolicy(default=3600, per_client={CLIENT_ID: 120}),
        )

        body = await pre_approved_grant(config, pre_approved())

        assert body["expires_in"] == 120

    @pytest.mark.asyncio
    async def test_no_refresh_token_when_disabled(self, stub_model):
        config = GrantConfig(model=stub_model, grants=["password"])

        body = await pre_approved_grant(config, pre_approved())

        assert "refresh_token" not in body

    def test_rejects_continue_after_response(self, stub_model):
        config = GrantConfig(model=stub_model, continue_after_response=True)

        with pytest.raises(ConfigurationError):
            PreApprovedGrant(config)
