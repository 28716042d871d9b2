"""Tests for auth/config.py - client configuration with validation."""

import pytest
from pydantic import ValidationError

from auth.config import AuthConfig


class TestAuthConfigDefaults:
    """Tests that AuthConfig has sensible defaults."""

    def test_token_key_default(self):
        config = AuthConfig()
        assert config.token_key == "token"

    def test_password_length_default(self):
        config = AuthConfig()
        assert config.min_password_length == 6

    def test_navigation_defaults(self):
        config = AuthConfig()
        assert config.login_path == "/login"
        assert config.default_destination == "/markets"


class TestAuthConfigValidation:
    """Tests that AuthConfig enforces validation bounds."""

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            AuthConfig(request_timeout_seconds=0)

    def test_timeout_max_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(request_timeout_seconds=121)

    def test_password_length_min_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(min_password_length=0)

    def test_token_key_not_empty(self):
        with pytest.raises(ValidationError):
            AuthConfig(token_key="")


class TestFromEnv:
    """Tests for environment loading."""

    def test_reads_prefixed_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DASHBOARD_API_BASE_URL", "https://dash.example.com")
        monkeypatch.setenv("DASHBOARD_MIN_PASSWORD_LENGTH", "8")

        config = AuthConfig.from_env(env_file=tmp_path / "missing.env")

        assert config.api_base_url == "https://dash.example.com"
        assert config.min_password_length == 8

    def test_reads_env_file(self, monkeypatch, tmp_path):
        # register a restore-to-absent so the value loaded from the file is undone
        monkeypatch.setenv("DASHBOARD_TOKEN_KEY", "placeholder")
        monkeypatch.delenv("DASHBOARD_TOKEN_KEY")
        env_file = tmp_path / ".env"
        env_file.write_text("DASHBOARD_TOKEN_KEY=dash_token\n")

        config = AuthConfig.from_env(env_file=env_file)

        assert config.token_key == "dash_token"

    def test_invalid_value_raises(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DASHBOARD_REQUEST_TIMEOUT_SECONDS", "-1")

        with pytest.raises(ValidationError):
            AuthConfig.from_env(env_file=tmp_path / "missing.env")
