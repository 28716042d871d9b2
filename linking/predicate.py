"""Verification success predicate for Kalshi credential checks.

The verify endpoint reports success in several shapes depending on which
upstream path handled the request. Any one of them is accepted as proof,
but only once the generic failure signals have been ruled out.
"""

from typing import Any, Mapping

CONNECTED_STATUS = "connected"


def verification_payload(body: Mapping[str, Any]) -> Mapping[str, Any]:
    """The ``data`` envelope when present, else the body itself."""
    inner = body.get("data")
    return inner if isinstance(inner, Mapping) else body


def is_verification_success(status: int, body: Mapping[str, Any] | None) -> bool:
    """Decide whether a verify response proves the credential works.

    Checked in order:
    1. HTTP status must be 2xx.
    2. The body must not say ``success: false``.
    3. At least one positive signal in the payload:
       ``isConnectionSuccessful is True``, ``kalshi_status == "connected"``,
       or a nested ``user`` object.

    A 2xx response with none of the positive signals is a failure.
    """
    if not 200 <= status < 300:
        return False

    body = body or {}
    if body.get("success") is False:
        return False

    payload = verification_payload(body)
    if payload.get("isConnectionSuccessful") is True:
        return True
    if payload.get("kalshi_status") == CONNECTED_STATUS:
        return True
    return isinstance(payload.get("user"), Mapping)
