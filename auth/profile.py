"""Profile and password operations for the logged-in user."""

import logging

from pydantic import ValidationError

from auth.config import AuthConfig
from auth.result import NETWORK_ERROR_MESSAGE, FailureKind, Ok, Result, err
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.session import SessionStore, validation_message
from auth.types import ChangePasswordRequest, User
from clients.auth_client import AuthApi
from clients.http_client import ApiError, TransportError, message_from

logger = logging.getLogger(__name__)

NOT_LOGGED_IN_MESSAGE = "You must be logged in"


class ProfileService:
    """Writes profile changes to the backend, then into the session store."""

    def __init__(
        self,
        auth_api: AuthApi,
        store: SessionStore,
        config: AuthConfig,
        security_logger: SecurityLogger | None = None,
    ):
        self._auth_api = auth_api
        self._store = store
        self._config = config
        self._security_logger = security_logger or SecurityLogger()

    def update_profile(
        self,
        username: str | None = None,
        email: str | None = None,
    ) -> Result[User]:
        """Change username and/or email.

        The backend's returned values win; submitted values are used when
        the response omits them.
        """
        user = self._store.user
        if user is None:
            return err(FailureKind.VALIDATION, NOT_LOGGED_IN_MESSAGE)

        changes = {key: value for key, value in (("username", username), ("email", email)) if value}
        if not changes:
            return err(FailureKind.VALIDATION, "Nothing to update")

        try:
            response = self._auth_api.update_profile(changes)
        except TransportError:
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            return err(FailureKind.REJECTED, e.message or "Failed to update profile")

        if response.body.get("success") is False:
            return err(FailureKind.REJECTED, message_from(response.body) or "Failed to update profile")

        returned = response.data.get("user")
        returned = returned if isinstance(returned, dict) else response.data
        merged = {key: returned.get(key) or value for key, value in changes.items()}

        updated = self._store.update_user(merged)
        if updated is None:
            return err(FailureKind.CANCELLED, "Session ended before the update completed")
        self._security_logger.log(
            SecurityEvent.PROFILE_UPDATED,
            email=updated.email,
            user_id=updated.id,
            details={"fields": sorted(changes)},
        )
        return Ok(updated)

    def change_password(self, current_password: str, new_password: str) -> Result[None]:
        """Rotate the password. Length is checked before any request."""
        if self._store.user is None:
            return err(FailureKind.VALIDATION, NOT_LOGGED_IN_MESSAGE)
        if len(new_password) < self._config.min_password_length:
            return err(
                FailureKind.VALIDATION,
                f"Password must be at least {self._config.min_password_length} characters long",
            )
        try:
            request = ChangePasswordRequest(currentPassword=current_password, newPassword=new_password)
        except ValidationError as e:
            return err(FailureKind.VALIDATION, validation_message(e))

        try:
            response = self._auth_api.change_password(request.currentPassword, request.newPassword)
        except TransportError:
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            return err(FailureKind.REJECTED, e.message or "Failed to change password")

        if response.body.get("success") is False:
            return err(FailureKind.REJECTED, message_from(response.body) or "Failed to change password")

        user = self._store.user
        self._security_logger.log(
            SecurityEvent.PASSWORD_CHANGED,
            email=user.email if user else None,
            user_id=user.id if user else None,
        )
        return Ok(None)
