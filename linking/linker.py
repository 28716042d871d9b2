"""Kalshi credential linking state machine.

States: UNLINKED -> VERIFYING -> LINKED, or VERIFYING -> ERROR. ERROR
behaves like UNLINKED for the form (resubmission allowed) and keeps the
entered values for correction.

Each mount starts a new generation. A response that arrives after the
owning view unmounted belongs to an old generation and is dropped without
touching linker or session state.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from pydantic import SecretStr

from auth.result import NETWORK_ERROR_MESSAGE, FailureKind, Ok, Result, err
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.session import SessionStore
from auth.types import CredentialLink, SessionState, VerificationResult
from clients.http_client import ApiClientError, ApiError, TransportError, message_from
from clients.kalshi_client import KalshiConnectionApi
from linking.predicate import is_verification_success

logger = logging.getLogger(__name__)

CONNECTED_MESSAGE = "Kalshi account connected successfully!"
FAILED_MESSAGE = "Failed to connect to Kalshi"
REJECTED_MESSAGE = "Failed to connect to Kalshi. Please check your credentials and try again."
STALE_CREDENTIALS_MESSAGE = "Your Kalshi credentials are no longer valid. Please update them."
ALREADY_LINKED_MESSAGE = "Kalshi account is already connected"
INCOMPLETE_MESSAGE = "Both the API key and the API secret are required"
CANCELLED_MESSAGE = "Verification was cancelled"


class LinkState(Enum):
    UNLINKED = "unlinked"
    VERIFYING = "verifying"
    LINKED = "linked"
    ERROR = "error"


@dataclass(frozen=True)
class LinkMessage:
    """Banner shown above the linking form."""

    level: str  # "success" or "error"
    text: str


class CredentialLinker:
    """Links, verifies and reports the Kalshi credential of the current user."""

    def __init__(
        self,
        kalshi_api: KalshiConnectionApi,
        store: SessionStore,
        security_logger: SecurityLogger | None = None,
    ):
        self._api = kalshi_api
        self._store = store
        self._security_logger = security_logger or SecurityLogger()
        self._credentials = CredentialLink()
        self._state = LinkState.UNLINKED
        self._message: LinkMessage | None = None
        self._last_result: VerificationResult | None = None
        self._generation = 0
        self._mounted = False
        self._unsubscribe = None
        self._verify_latch = threading.Lock()

    @property
    def state(self) -> LinkState:
        return self._state

    @property
    def message(self) -> LinkMessage | None:
        return self._message

    @property
    def credentials(self) -> CredentialLink:
        return self._credentials

    @property
    def last_result(self) -> VerificationResult | None:
        return self._last_result

    @property
    def is_linked(self) -> bool:
        """Verified in this view, or the session user already carries a key."""
        if self._state is LinkState.LINKED:
            return True
        user = self._store.user
        return user is not None and user.has_linked_credential

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def can_submit(self) -> bool:
        """Linking control is enabled only while unlinked with both fields filled."""
        return (
            self._state in (LinkState.UNLINKED, LinkState.ERROR)
            and not self.is_linked
            and self._credentials.complete
        )

    def set_access_key_id(self, value: str) -> None:
        self._credentials = self._credentials.model_copy(update={"access_key_id": value})

    def set_private_key(self, value: str) -> None:
        self._credentials = self._credentials.model_copy(update={"private_key": SecretStr(value)})

    # -- view lifecycle ------------------------------------------------------

    def mount(self) -> LinkState:
        """Start a new generation and run the bootstrap check."""
        if self._mounted:
            self.unmount()
        self._generation += 1
        self._mounted = True
        self._state = LinkState.UNLINKED
        self._message = None
        self._unsubscribe = self._store.subscribe(self._on_session_change)
        self._bootstrap(self._generation)
        return self._state

    def unmount(self) -> None:
        """Drop any in-flight response and stop following the session."""
        self._generation += 1
        self._mounted = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_session_change(self, session: SessionState) -> None:
        if self._state is not LinkState.LINKED:
            return
        if session.user is None or not session.user.has_linked_credential:
            logger.info("Linked credential removed from session, returning to unlinked")
            self._state = LinkState.UNLINKED
            self._message = None

    def _bootstrap(self, generation: int) -> None:
        """Prefill stored credentials and auto-verify when both are present."""
        try:
            response = self._api.credentials()
        except ApiClientError as e:
            logger.warning(f"Kalshi bootstrap error: {e}")
            return

        if generation != self._generation:
            return

        data = response.data
        self._credentials = CredentialLink(
            access_key_id=data.get("kalshi_access_key_id") or "",
            private_key=SecretStr(data.get("kalshi_private_key") or ""),
        )
        if not self._credentials.complete:
            return

        self._verify(generation, failure_message=STALE_CREDENTIALS_MESSAGE)

    # -- verification --------------------------------------------------------

    def verify(self) -> Result[VerificationResult]:
        """Submit the form. Refused once linked, while verifying, or when incomplete."""
        if self.is_linked:
            return err(FailureKind.REJECTED, ALREADY_LINKED_MESSAGE)
        if not self._credentials.complete:
            return err(FailureKind.VALIDATION, INCOMPLETE_MESSAGE)
        return self._verify(self._generation)

    def _verify(
        self,
        generation: int,
        failure_message: str | None = None,
    ) -> Result[VerificationResult]:
        if not self._verify_latch.acquire(blocking=False):
            return err(FailureKind.BUSY, "Verification already in progress")

        previous = self._state, self._message
        try:
            self._state = LinkState.VERIFYING
            self._message = None
            submitted = self._credentials
            private_key = submitted.private_key.get_secret_value()

            kind = FailureKind.REJECTED
            try:
                response = self._api.verify(submitted.access_key_id, private_key)
                status, body = response.status, response.body
                upstream = message_from(body) or FAILED_MESSAGE
            except ApiError as e:
                status, body = e.status, e.body
                upstream = e.message or REJECTED_MESSAGE
            except TransportError:
                status, body = 0, {}
                upstream = NETWORK_ERROR_MESSAGE
                kind = FailureKind.NETWORK

            if generation != self._generation:
                logger.info("Discarding verification response for an unmounted view")
                self._state, self._message = previous
                return err(FailureKind.CANCELLED, CANCELLED_MESSAGE)

            if is_verification_success(status, body):
                return self._link(submitted.access_key_id, private_key)

            text = failure_message or upstream
            self._fail(text)
            return err(kind, text)
        finally:
            self._verify_latch.release()

    def _link(self, access_key_id: str, private_key: str) -> Result[VerificationResult]:
        user = self._store.update_user(
            {
                "kalshi_access_key_id": access_key_id,
                "kalshi_private_key": private_key,
            }
        )
        if user is None:
            self._state = LinkState.UNLINKED
            return err(FailureKind.CANCELLED, "Session ended before the account was linked")

        self._state = LinkState.LINKED
        self._message = LinkMessage("success", CONNECTED_MESSAGE)
        self._last_result = VerificationResult(success=True, message=CONNECTED_MESSAGE)
        self._security_logger.log(
            SecurityEvent.CREDENTIAL_VERIFIED,
            email=user.email,
            user_id=user.id,
        )
        return Ok(self._last_result)

    def _fail(self, text: str) -> None:
        self._state = LinkState.ERROR
        self._message = LinkMessage("error", text)
        self._last_result = VerificationResult(success=False, message=text)
        user = self._store.user
        self._security_logger.log(
            SecurityEvent.CREDENTIAL_REJECTED,
            email=user.email if user else None,
            user_id=user.id if user else None,
        )
