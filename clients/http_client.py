"""
Thin HTTP client for the dashboard backend.

Attaches the persisted bearer token when present. Fail-fast: connection
failures raise TransportError, non-2xx responses raise ApiError. Callers
above this layer convert both into Result values.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from clients.token_store import TokenStore, TokenStoreError

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Base class for backend request failures."""


class TransportError(ApiClientError):
    """Request could not complete (connection refused, timeout, bad JSON)."""


class ApiError(ApiClientError):
    """
    Backend answered with a non-2xx status.

    Carries the decoded body so callers can surface the upstream message.
    """

    def __init__(self, status: int, message: str | None, body: dict | None = None):
        self.status = status
        self.message = message
        self.body = body or {}
        super().__init__(f"HTTP {status}: {message or 'no message'}")


@dataclass
class ApiResponse:
    """Decoded 2xx response."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def data(self) -> Any:
        """The ``data`` envelope if the backend used one, else the body."""
        inner = self.body.get("data")
        return inner if isinstance(inner, dict) else self.body


def message_from(body: Any) -> str | None:
    """Extract a human-readable message from an error payload."""
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"] or None
    if isinstance(error, str) and error:
        return error
    return None


class ApiClient:
    """
    Backend client with bearer-token attachment.

    Usage:
        client = ApiClient("http://localhost:5000", token_store)
        response = client.request("GET", "/api/auth/profile")
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Args:
            base_url: Backend base URL (e.g., http://localhost:5000)
            token_store: Where the bearer token is persisted
            timeout_seconds: Per-request timeout

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._token_store = token_store
        self._session = session or requests.Session()

    def _headers(self, auth: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if auth:
            try:
                token = self._token_store.get()
            except TokenStoreError as e:
                raise TransportError(f"Cannot read session token: {e}") from e
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json_body: dict | None = None,
        params: dict | None = None,
        auth: bool = True,
    ) -> ApiResponse:
        """
        Send a request and decode the JSON body.

        Raises:
            TransportError: Connection failure, timeout, unreadable token, or undecodable body
            ApiError: Non-2xx status
        """
        url = f"{self.base_url}{path}"

        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=self._headers(auth),
                timeout=self.timeout_seconds,
            )
        except (requests.exceptions.RequestException, ConnectionError) as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Connection failed: {e}")

        body = self._decode(response)

        if not 200 <= response.status_code < 300:
            message = message_from(body)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(response.status_code, message, body)

        return ApiResponse(status=response.status_code, body=body)

    def _decode(self, response: requests.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            if response.ok:
                logger.error(f"Backend returned invalid JSON: {response.text[:200]}")
                raise TransportError("Invalid response from server")
            return {}
        return body if isinstance(body, dict) else {"data": body}

    def get(self, path: str, params: dict | None = None, auth: bool = True) -> ApiResponse:
        return self.request("GET", path, params=params, auth=auth)

    def post(self, path: str, json_body: dict, auth: bool = True) -> ApiResponse:
        return self.request("POST", path, json_body=json_body, auth=auth)

    def put(self, path: str, json_body: dict) -> ApiResponse:
        return self.request("PUT", path, json_body=json_body)

    def delete(self, path: str) -> ApiResponse:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._session.close()
