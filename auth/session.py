"""Session store - single source of truth for who is logged in.

The store owns one immutable SessionState and replaces it wholesale on every
transition, so token and user always change together. Readers take
snapshots through ``state`` or subscribe to transitions; nothing else writes
session data.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable

from pydantic import ValidationError

from auth.config import AuthConfig
from auth.result import NETWORK_ERROR_MESSAGE, FailureKind, Ok, Result, err
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.types import LoginRequest, RegisterRequest, SessionState, User
from clients.auth_client import AuthApi
from clients.http_client import ApiClientError, ApiError, ApiResponse, TransportError, message_from
from clients.token_store import TokenStore, TokenStoreError

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]

BUSY_MESSAGE = "Another sign-in is already in progress"
SAVE_FAILED_MESSAGE = "Could not save your session. Please try again."


def validation_message(error: ValidationError) -> str:
    """First validation problem, phrased for display."""
    first = error.errors()[0]
    field = str(first["loc"][0]) if first.get("loc") else "input"
    if field == "email":
        return "Please enter a valid email address"
    if field in ("password", "currentPassword", "newPassword"):
        return "Password is required"
    if field == "username":
        return "Username is required"
    return f"{field}: {first['msg']}"


def user_from_response(response: ApiResponse) -> User | None:
    """Parse ``{success, data: {user}}``. None when the body does not hold a user."""
    if response.body.get("success") is False:
        return None
    raw = response.data.get("user")
    if not isinstance(raw, dict):
        return None
    try:
        return User.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Discarding malformed user record: {e.error_count()} errors")
        return None


class SessionStore:
    """Session lifecycle: initialize, login/register, logout, merge updates.

    Handles:
    - Restoring a persisted token on startup (never raises)
    - Login/register with a single-in-flight latch
    - Atomic logout
    - Non-destructive user merges
    """

    def __init__(
        self,
        auth_api: AuthApi,
        token_store: TokenStore,
        config: AuthConfig,
        security_logger: SecurityLogger | None = None,
    ):
        self._auth_api = auth_api
        self._token_store = token_store
        self._config = config
        self._security_logger = security_logger or SecurityLogger()
        self._state = SessionState()
        self._listeners: list[Listener] = []
        self._initialized = False
        # login and register write the same slice
        self._auth_latch = threading.Lock()

    # -- reads ---------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, **changes: Any) -> SessionState:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session listener failed")
        return self._state

    # -- lifecycle -----------------------------------------------------------

    def initialize(self) -> SessionState:
        """Restore the session from the persisted token.

        Runs once; later calls return the current state without I/O.
        Every failure ends in the unauthenticated state and is never raised.
        """
        if self._initialized:
            return self._state
        self._initialized = True

        token, user = self._restore()
        return self._commit(token=token, user=user, is_loading=False)

    def _restore(self) -> tuple[str | None, User | None]:
        try:
            stored = self._token_store.get()
        except TokenStoreError as e:
            logger.error(f"Cannot read persisted token: {e}")
            return None, None

        if not stored:
            return None, None

        try:
            user = user_from_response(self._auth_api.get_profile())
        except ApiClientError as e:
            logger.info(f"Persisted token could not be verified: {e}")
            user = None

        if user is None:
            self._discard_token()
            self._security_logger.log(
                SecurityEvent.SESSION_REJECTED,
                details={"reason": "profile_fetch_failed"},
            )
            return None, None

        self._security_logger.log(
            SecurityEvent.SESSION_RESTORED,
            email=user.email,
            user_id=user.id,
        )
        return stored, user

    def _discard_token(self) -> None:
        try:
            self._token_store.remove()
        except TokenStoreError as e:
            logger.error(f"Cannot remove persisted token: {e}")

    def login(self, email: str, password: str) -> Result[User]:
        """Authenticate with email and password.

        On failure the session is unchanged and the Err carries a message
        for display.
        """
        try:
            request = LoginRequest(email=email, password=password)
        except ValidationError as e:
            return err(FailureKind.VALIDATION, validation_message(e))

        return self._authenticate(
            lambda: self._auth_api.login(request.email, request.password),
            fallback_message="Login failed",
            success_event=SecurityEvent.LOGIN_SUCCEEDED,
            failure_event=SecurityEvent.LOGIN_FAILED,
            email=request.email,
        )

    def register(self, username: str, email: str, password: str) -> Result[User]:
        """Create an account and sign in as the new user."""
        if len(password) < self._config.min_password_length:
            return err(
                FailureKind.VALIDATION,
                f"Password must be at least {self._config.min_password_length} characters long",
            )
        try:
            request = RegisterRequest(username=username, email=email, password=password)
        except ValidationError as e:
            return err(FailureKind.VALIDATION, validation_message(e))

        return self._authenticate(
            lambda: self._auth_api.register(request.username, request.email, request.password),
            fallback_message="Registration failed",
            success_event=SecurityEvent.REGISTER_SUCCEEDED,
            failure_event=SecurityEvent.REGISTER_FAILED,
            email=request.email,
        )

    def _authenticate(
        self,
        call: Callable[[], ApiResponse],
        fallback_message: str,
        success_event: SecurityEvent,
        failure_event: SecurityEvent,
        email: str,
    ) -> Result[User]:
        """Shared login/register flow.

        Flow:
        1. Take the single-in-flight latch
        2. Call the endpoint
        3. Persist the returned token
        4. Fetch the canonical profile, falling back to the endpoint's user
        5. Commit token and user in one transition
        """
        if not self._auth_latch.acquire(blocking=False):
            return err(FailureKind.BUSY, BUSY_MESSAGE)

        try:
            try:
                response = call()
            except TransportError:
                self._security_logger.log(failure_event, email=email, details={"reason": "network"})
                return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
            except ApiError as e:
                self._security_logger.log(failure_event, email=email, details={"status": e.status})
                return err(FailureKind.REJECTED, e.message or fallback_message)

            data = response.data
            token = data.get("token")
            if response.body.get("success") is False or not isinstance(token, str) or not token:
                self._security_logger.log(failure_event, email=email, details={"reason": "no_token"})
                return err(FailureKind.REJECTED, message_from(response.body) or fallback_message)

            try:
                self._token_store.set(token)
            except TokenStoreError as e:
                logger.error(f"Cannot persist token: {e}")
                return err(FailureKind.NETWORK, SAVE_FAILED_MESSAGE)

            user = self._fetch_profile() or user_from_response(
                ApiResponse(status=response.status, body={"data": {"user": data.get("user")}})
            )
            if user is None:
                self._discard_token()
                self._security_logger.log(failure_event, email=email, details={"reason": "no_user"})
                return err(FailureKind.REJECTED, fallback_message)

            self._commit(token=token, user=user)
            self._security_logger.log(success_event, email=user.email, user_id=user.id)
            return Ok(user)
        finally:
            self._auth_latch.release()

    def _fetch_profile(self) -> User | None:
        try:
            return user_from_response(self._auth_api.get_profile())
        except ApiClientError as e:
            logger.info(f"Profile fetch after sign-in failed, using sign-in payload: {e}")
            return None

    def logout(self) -> None:
        """Remove the persisted token and clear token and user together."""
        user = self._state.user
        self._discard_token()
        self._commit(token=None, user=None)
        self._security_logger.log(
            SecurityEvent.LOGGED_OUT,
            email=user.email if user else None,
            user_id=user.id if user else None,
        )

    def update_user(self, partial: dict[str, Any]) -> User | None:
        """Merge ``partial`` into the current user.

        No-op returning None when nobody is logged in. Fields absent from
        ``partial`` are never cleared.

        Raises:
            ValidationError: If the merged record is not a valid User
        """
        current = self._state.user
        if current is None:
            return None
        merged = current.merged(partial)
        self._commit(user=merged)
        return merged
