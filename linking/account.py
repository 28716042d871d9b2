"""Connected Kalshi account: status, balance, disconnect."""

import logging
from typing import Any

from auth.result import NETWORK_ERROR_MESSAGE, FailureKind, Ok, Result, err
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.session import SessionStore
from clients.http_client import ApiError, TransportError, message_from
from clients.kalshi_client import KalshiConnectionApi

logger = logging.getLogger(__name__)

# Checked in order; the first key present wins.
BALANCE_KEYS = ("balance", "portfolio_value_cents", "portfolio_value")


class KalshiAccount:
    """Operations on an already linked Kalshi account."""

    def __init__(
        self,
        kalshi_api: KalshiConnectionApi,
        store: SessionStore,
        security_logger: SecurityLogger | None = None,
    ):
        self._api = kalshi_api
        self._store = store
        self._security_logger = security_logger or SecurityLogger()

    def status(self) -> Result[dict[str, Any]]:
        try:
            response = self._api.status()
        except TransportError:
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            return err(FailureKind.REJECTED, e.message or "Failed to fetch connection status")
        return Ok(dict(response.data))

    def balance_cents(self) -> Result[int]:
        """Account balance in cents. Requires a linked credential."""
        user = self._store.user
        if user is None or not user.has_linked_credential:
            return err(FailureKind.VALIDATION, "Connect your Kalshi account to see your balance")

        try:
            response = self._api.balance()
        except TransportError:
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            return err(FailureKind.REJECTED, e.message or "Failed to fetch balance")

        data = response.data
        cents = next((data[key] for key in BALANCE_KEYS if data.get(key) is not None), None)
        if isinstance(cents, float) and cents.is_integer():
            cents = int(cents)
        # bool is an int subclass but never a balance
        if isinstance(cents, bool) or not isinstance(cents, int):
            logger.warning(f"Unparseable balance payload keys: {sorted(data)}")
            return err(FailureKind.REJECTED, "Unable to parse balance")
        return Ok(cents)

    def disconnect(self) -> Result[None]:
        """Unlink the account and clear the credential from the session user."""
        try:
            response = self._api.disconnect()
        except TransportError:
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            return err(FailureKind.REJECTED, e.message or "Failed to disconnect")

        if response.body.get("success") is False:
            return err(FailureKind.REJECTED, message_from(response.body) or "Failed to disconnect")

        user = self._store.update_user({"kalshi_access_key_id": None, "kalshi_private_key": None})
        self._security_logger.log(
            SecurityEvent.CREDENTIAL_DISCONNECTED,
            email=user.email if user else None,
            user_id=user.id if user else None,
        )
        return Ok(None)
