"""
Tests for environment settings and grant configuration.
"""

import re

import pytest
from grant_test_helpers import StubModel

from oauth2_grants.config import GrantConfig, LifetimePolicy, Settings, get_settings, reset_settings
from oauth2_grants.core.constants import GrantType
from oauth2_grants.core.exceptions import ConfigurationError


class TestSettings:
    """Settings loaded from the environment."""

    def test_defaults(self, monkeypatch):
        for name in ("OAUTH2_GRANTS", "OAUTH2_ACCESS_TOKEN_LIFETIME", "OAUTH2_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.get_grants_list() == ["password", "refresh_token"]
        assert settings.oauth2_access_token_lifetime == 3600
        assert settings.oauth2_refresh_token_lifetime == 1209600
        assert settings.oauth2_continue_after_response is False
        assert settings.debug is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OAUTH2_GRANTS", "password, client_credentials,")
        monkeypatch.setenv("OAUTH2_ACCESS_TOKEN_LIFETIME", "60")
        monkeypatch.setenv("OAUTH2_CONTINUE_AFTER_RESPONSE", "true")
        monkeypatch.setenv("OAUTH2_DEBUG", "true")

        settings = Settings(_env_file=None)

        assert settings.get_grants_list() == ["password", "client_credentials"]
        assert settings.oauth2_access_token_lifetime == 60
        assert settings.oauth2_continue_after_response is True
        assert settings.debug is True

    def test_empty_lifetime_never_expires(self, monkeypatch):
        monkeypatch.setenv("OAUTH2_REFRESH_TOKEN_LIFETIME", "")

        settings = Settings(_env_file=None)

        assert settings.oauth2_refresh_token_lifetime is None

    def test_negative_lifetime_rejected(self, monkeypatch):
        monkeypatch.setenv("OAUTH2_ACCESS_TOKEN_LIFETIME", "-1")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_to_dict_omits_secret(self):
        assert "jwt_secret_key" not in Settings(_env_file=None).to_dict()

    def test_singleton(self):
        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first


class TestLifetimePolicy:
    """Lifetime resolution."""

    def test_override_beats_default(self):
        policy = LifetimePolicy(default=3600, per_client={"thom": 60, "forever": None})

        assert policy.resolve("thom") == 60
        assert policy.resolve("forever") is None
        assert policy.resolve("other") == 3600

    def test_coerce(self):
        assert LifetimePolicy.coerce(60).default == 60
        assert LifetimePolicy.coerce(None).default is None

        policy = LifetimePolicy(default=1)
        assert LifetimePolicy.coerce(policy) is policy

    def test_coerce_mapping_sets_per_client_only(self):
        policy = LifetimePolicy.coerce({"thom": 60, "forever": None})

        assert policy.resolve("thom") == 60
        assert policy.resolve("forever") is None
        assert policy.resolve("other") is None

    def test_coerce_mapping_rejects_negative(self):
        with pytest.raises(ConfigurationError):
            LifetimePolicy.coerce({"thom": -1})

    @pytest.mark.parametrize("value", [-5, "3600", 1.5])
    def test_coerce_rejects(self, value):
        with pytest.raises(ConfigurationError):
            LifetimePolicy.coerce(value)


class TestGrantConfig:
    """Per-server grant configuration."""

    def test_defaults(self):
        config = GrantConfig(model=StubModel())

        assert config.grants == ["password", "refresh_token"]
        assert config.issues_refresh_tokens
        assert config.access_token_lifetime.resolve("any") == 3600
        assert config.continue_after_response is False
        assert config.token_generator is None

    def test_requires_model(self):
        with pytest.raises(ConfigurationError):
            GrantConfig(model=None)

    def test_grant_type_members_normalized(self):
        config = GrantConfig(model=StubModel(), grants=[GrantType.PASSWORD])

        assert config.grants == ["password"]
        assert not config.issues_refresh_tokens

    def test_client_id_pattern_is_case_insensitive(self):
        config = GrantConfig(model=StubModel())

        assert config.client_id_regex.search("THOM")

    def test_compiled_pattern_kept(self):
        pattern = re.compile(r"^client-\d+$")

        config = GrantConfig(model=StubModel(), client_id_regex=pattern)

        assert config.client_id_regex is pattern

    def test_invalid_pattern(self):
        with pytest.raises(ConfigurationError):
            GrantConfig(model=StubModel(), grant_type_regex="(unclosed")

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("OAUTH2_GRANTS", "client_credentials")
        monkeypatch.setenv("OAUTH2_ACCESS_TOKEN_LIFETIME", "120")

        config = GrantConfig.from_settings(StubModel())

        assert config.grants == ["client_credentials"]
        assert config.access_token_lifetime.resolve("thom") == 120

    def test_from_settings_overrides(self, monkeypatch):
        monkeypatch.setenv("OAUTH2_ACCESS_TOKEN_LIFETIME", "120")

        config = GrantConfig.from_settings(StubModel(), access_token_lifetime=None)

        assert config.access_token_lifetime.resolve("thom") is None

    def test_negative_override_rejected(self):
        with pytest.raises(ValueError):
            LifetimePolicy(default=60, per_client={"thom": -1})

    def test_per_client_mapping(self):
        config = GrantConfig(model=StubModel(), access_token_lifetime={"thom": 60})

        assert config.access_token_lifetime.resolve("thom") == 60
        assert config.access_token_lifetime.resolve("other") is None
