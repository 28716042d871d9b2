"""Pydantic models for the session domain."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr


class User(BaseModel):
    """Sanitized user record as returned by the profile endpoint."""

    id: int | str
    username: str
    email: str
    kalshi_access_key_id: str | None = None
    kalshi_private_key: SecretStr | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def has_linked_credential(self) -> bool:
        return bool(self.kalshi_access_key_id)

    def merged(self, partial: dict[str, Any]) -> "User":
        """Return a copy with ``partial`` merged in.

        Keys may be field names or wire aliases. Fields absent from
        ``partial`` keep their current values.
        """
        data = self.model_dump()
        data.update(_normalize_keys(partial))
        return User.model_validate(data)


def _normalize_keys(partial: dict[str, Any]) -> dict[str, Any]:
    aliases = {
        field.alias: name
        for name, field in User.model_fields.items()
        if field.alias
    }
    return {aliases.get(key, key): value for key, value in partial.items()}


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session.

    ``is_authenticated`` is always derived from token and user, never stored.
    """

    token: str | None = None
    user: User | None = None
    is_loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None


class LoginRequest(BaseModel):
    """Request payload for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Request payload for registration."""

    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    """Request payload for password rotation."""

    currentPassword: str = Field(..., min_length=1)
    newPassword: str


class CredentialLink(BaseModel):
    """Kalshi key pair as held in the linking form."""

    access_key_id: str = ""
    private_key: SecretStr = SecretStr("")

    @property
    def complete(self) -> bool:
        return bool(self.access_key_id) and bool(self.private_key.get_secret_value())


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one credential verification attempt. Never persisted."""

    success: bool
    message: str | None = None
