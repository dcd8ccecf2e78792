"""
Shared pytest fixtures for E-Season tests.

This module provides common fixtures including:
- Auth configuration and fast Argon2 parameters
- An application wired to an in-memory SQLite database
- Helpers to register and log in passengers through the API
"""

from typing import Any, Dict

import pytest
from argon2 import PasswordHasher
from fastapi.testclient import TestClient

from eseason.config.provider import AuthConfig, DatabaseConfig, StaticConfigProvider
from eseason.main import create_app
from eseason.modules.auth.credentials import CredentialModule
from eseason.modules.auth.tokens import TokenModule

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(jwt_secret=TEST_SECRET, token_expire_minutes=60)


@pytest.fixture
def token_module(auth_config) -> TokenModule:
    return TokenModule(auth_config)


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    """Cheap Argon2 parameters so unit tests stay quick."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def credentials(fast_hasher) -> CredentialModule:
    return CredentialModule(fast_hasher)


@pytest.fixture
def config_provider(auth_config) -> StaticConfigProvider:
    return StaticConfigProvider(
        database=DatabaseConfig(url="sqlite://"),
        auth=auth_config,
    )


@pytest.fixture
def app(config_provider):
    return create_app(config_provider)


@pytest.fixture
def client(app):
    """Test client with lifespan (tables created on startup)."""
    with TestClient(app) as test_client:
        yield test_client


def registration_payload(email: str = "alice@example.com", **overrides) -> Dict[str, Any]:
    payload = {
        "name_with_initials": "A. B. Perera",
        "full_name": "Alice Bandara Perera",
        "address": "12 Station Road, Colombo",
        "phone_number": "0771234567",
        "email": email,
        "from_station": "Colombo Fort",
        "to_station": "Kandy",
        "travel_date": "2025-03-15",
        "password": "secret123",
        "confirm_password": "secret123",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def register(client):
    """Register a passenger and return the response data."""

    def _register(email: str = "alice@example.com", **overrides) -> Dict[str, Any]:
        response = client.post(
            "/api/v1/passenger/register", json=registration_payload(email, **overrides)
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(register):
    """Register a passenger and return (passenger_id, headers)."""
    data = register()
    return data["passenger_id"], {"Authorization": f"Bearer {data['token']}"}
