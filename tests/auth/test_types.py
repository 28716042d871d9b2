"""Tests for auth/types.py - Pydantic models for the session domain."""

import pytest
from pydantic import ValidationError

from auth.types import CredentialLink, LoginRequest, RegisterRequest, SessionState, User
from conftest import TEST_USER


class TestUserValidation:
    """Tests that User accepts backend records."""

    def test_accepts_wire_aliases(self):
        user = User.model_validate(TEST_USER)

        assert user.created_at is not None
        assert user.created_at.year == 2024

    def test_accepts_string_id(self):
        user = User.model_validate({**TEST_USER, "id": "64f0c2"})

        assert user.id == "64f0c2"

    def test_rejects_missing_username(self):
        with pytest.raises(ValidationError):
            User(id=1, email="bob@example.com")

    def test_keeps_unknown_fields(self):
        user = User.model_validate({**TEST_USER, "plan": "pro"})

        assert user.model_dump()["plan"] == "pro"

    def test_private_key_masked(self):
        user = User.model_validate({**TEST_USER, "kalshi_private_key": "-----BEGIN KEY-----"})

        assert "BEGIN" not in repr(user)
        assert user.kalshi_private_key.get_secret_value() == "-----BEGIN KEY-----"


class TestUserMerge:
    """Tests for non-destructive merge."""

    def test_partial_leaves_other_fields(self):
        user = User(id=1, username="bob", email="old")

        merged = user.merged({"email": "x"})

        assert (merged.id, merged.username, merged.email) == (1, "bob", "x")
        assert user.email == "old"

    def test_alias_keys(self):
        user = User.model_validate(TEST_USER)

        merged = user.merged({"updatedAt": "2025-05-05T00:00:00Z"})

        assert merged.updated_at.year == 2025
        assert merged.created_at == user.created_at

    def test_secret_survives_merge(self):
        user = User(id=1, username="bob", email="b", kalshi_private_key="s3cret")

        merged = user.merged({"username": "robert"})

        assert merged.kalshi_private_key.get_secret_value() == "s3cret"


class TestSessionState:
    """isAuthenticated is derived, never stored."""

    def test_empty_token_is_unauthenticated(self):
        state = SessionState(token="", user=User(id=1, username="b", email="e"), is_loading=False)

        assert state.is_authenticated is False

    def test_token_without_user_is_unauthenticated(self):
        assert SessionState(token="t", user=None).is_authenticated is False

    def test_both_present_is_authenticated(self):
        state = SessionState(token="t", user=User(id=1, username="b", email="e"))

        assert state.is_authenticated is True


class TestRequests:
    """Local validation before any request."""

    def test_login_rejects_invalid_email(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="not-an-email", password="secret")

    def test_register_requires_username(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="", email="a@b.com", password="secret")

    def test_credential_link_complete(self):
        assert CredentialLink().complete is False
        assert CredentialLink(access_key_id="k").complete is False
        assert CredentialLink(access_key_id="k", private_key="p").complete is True
