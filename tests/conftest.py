"""Shared test fixtures for the dashboard client test suite."""

import pytest
import responses

from auth.config import AuthConfig
from auth.security_logger import SecurityLogger
from auth.session import SessionStore
from clients.auth_client import AuthApi
from clients.http_client import ApiClient
from clients.kalshi_client import KalshiConnectionApi
from clients.token_store import MemoryTokenStore


# =============================================================================
# TEST CONSTANTS
# =============================================================================

BASE_URL = "http://api.test"

PROFILE_URL = f"{BASE_URL}/api/auth/profile"
LOGIN_URL = f"{BASE_URL}/api/auth/login"
REGISTER_URL = f"{BASE_URL}/api/auth/register"
VERIFY_URL = f"{BASE_URL}/api/kalshi-connection/verify"
CREDENTIALS_URL = f"{BASE_URL}/api/kalshi-connection/credentials"

TEST_TOKEN = "token-abc123"

TEST_USER = {
    "id": 1,
    "username": "bob",
    "email": "bob@example.com",
    "createdAt": "2024-01-01T00:00:00Z",
    "updatedAt": "2024-01-02T00:00:00Z",
}


def profile_body(user: dict | None = None) -> dict:
    """Profile endpoint success envelope."""
    return {"success": True, "data": {"user": user or TEST_USER}}


def auth_body(token: str = TEST_TOKEN, user: dict | None = None) -> dict:
    """Login/register success envelope."""
    return {"success": True, "data": {"token": token, "user": user or TEST_USER}}


# =============================================================================
# HTTP FIXTURES
# =============================================================================


@pytest.fixture
def http():
    """Intercept every requests call. Unregistered URLs raise ConnectionError."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def config() -> AuthConfig:
    return AuthConfig(api_base_url=BASE_URL, request_timeout_seconds=2)


@pytest.fixture
def token_store() -> MemoryTokenStore:
    """Empty in-memory token store."""
    return MemoryTokenStore()


@pytest.fixture
def api_client(config, token_store) -> ApiClient:
    client = ApiClient(config.api_base_url, token_store, timeout_seconds=config.request_timeout_seconds)
    yield client
    client.close()


@pytest.fixture
def auth_api(api_client) -> AuthApi:
    return AuthApi(api_client)


@pytest.fixture
def kalshi_api(api_client) -> KalshiConnectionApi:
    return KalshiConnectionApi(api_client)


@pytest.fixture
def security_logger() -> SecurityLogger:
    return SecurityLogger()


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def store(auth_api, token_store, config, security_logger) -> SessionStore:
    """Uninitialized session store."""
    return SessionStore(auth_api, token_store, config, security_logger)


@pytest.fixture
def logged_in_store(http, store, token_store) -> SessionStore:
    """Store restored from a persisted token for TEST_USER."""
    token_store.set(TEST_TOKEN)
    http.add(responses.GET, PROFILE_URL, json=profile_body(), status=200)
    store.initialize()
    http.reset()
    assert store.is_authenticated
    return store
