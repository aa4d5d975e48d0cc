"""
Shared pytest fixtures for the grant pipeline tests.
"""

from datetime import UTC, datetime, timedelta

import pytest
from grant_test_helpers import CLIENT_ID, CLIENT_SECRET, StubModel

from oauth2_grants.auth.provider import InMemoryGrantModel
from oauth2_grants.config import GrantConfig, reset_settings


@pytest.fixture(autouse=True)
def clean_settings():
    """Make every test load settings fresh."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def stub_model():
    """Stub model with a valid client."""
    return StubModel()


@pytest.fixture
def stub_config(stub_model):
    """Grant configuration over the stub model."""
    return GrantConfig(
        model=stub_model,
        grants=["password", "refresh_token"],
        access_token_lifetime=3600,
        refresh_token_lifetime=1209600,
    )


@pytest.fixture
def memory_model():
    """In-memory model with one client and one user."""
    model = InMemoryGrantModel()
    model.add_client(
        CLIENT_ID,
        CLIENT_SECRET,
        grant_types=[
            "password",
            "refresh_token",
            "authorization_code",
            "client_credentials",
        ],
        user_id="service-user",
    )
    model.add_user(1, "thomseddon", "nightworld")
    return model


@pytest.fixture
def memory_config(memory_model):
    """Grant configuration over the in-memory model."""
    return GrantConfig(
        model=memory_model,
        grants=["password", "refresh_token", "authorization_code", "client_credentials"],
        access_token_lifetime=3600,
        refresh_token_lifetime=1209600,
    )


@pytest.fixture
def past():
    """A timestamp one second ago."""
    return datetime.now(UTC) - timedelta(seconds=1)


@pytest.fixture
def future():
    """A timestamp one hour from now."""
    return datetime.now(UTC) + timedelta(hours=1)
