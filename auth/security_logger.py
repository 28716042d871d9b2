"""Security event logging for the session audit trail.

Events go to the ``security`` logger with structured extras, and the most
recent ones are kept in memory for the settings view. Secrets (passwords,
private keys, tokens) are never recorded.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger("security")


class SecurityEvent(Enum):
    """Session and credential event types."""

    SESSION_RESTORED = "session_restored"
    SESSION_REJECTED = "session_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    REGISTER_SUCCEEDED = "register_succeeded"
    REGISTER_FAILED = "register_failed"
    LOGGED_OUT = "logged_out"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    CREDENTIAL_VERIFIED = "credential_verified"
    CREDENTIAL_REJECTED = "credential_rejected"
    CREDENTIAL_DISCONNECTED = "credential_disconnected"


_FAILURE_EVENTS = {
    SecurityEvent.SESSION_REJECTED,
    SecurityEvent.LOGIN_FAILED,
    SecurityEvent.REGISTER_FAILED,
    SecurityEvent.CREDENTIAL_REJECTED,
}


class SecurityLogger:
    """Append-only security event logger with a bounded in-memory tail."""

    def __init__(self, max_events: int = 200):
        self._events: deque[dict[str, Any]] = deque(maxlen=max_events)

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        user_id: int | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record a security event."""
        record = {
            "event_type": event.value,
            "email": email,
            "user_id": str(user_id) if user_id is not None else None,
            "details": details,
            "created_at": datetime.now(timezone.utc),
        }
        self._events.append(record)

        level = logging.WARNING if event in _FAILURE_EVENTS else logging.INFO
        logger.log(
            level,
            f"{event.value} email={email} user_id={record['user_id']}",
            extra={"security_event": record},
        )

    def get_recent_events(
        self,
        email: str | None = None,
        event_type: SecurityEvent | None = None,
        limit: int = 100,
    ) -> list[dict]:
        """Most recent events first, with optional filters."""
        matches = [
            event
            for event in reversed(self._events)
            if (email is None or event["email"] == email)
            and (event_type is None or event["event_type"] == event_type.value)
        ]
        return matches[:limit]
