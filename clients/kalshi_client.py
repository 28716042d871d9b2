"""Endpoints under /api/kalshi-connection. All require the bearer token."""

from clients.http_client import ApiClient, ApiResponse


class KalshiConnectionApi:
    """Linked Kalshi account endpoints."""

    BASE_PATH = "/api/kalshi-connection"

    def __init__(self, client: ApiClient):
        self._client = client

    def verify(self, access_key_id: str, private_key: str) -> ApiResponse:
        return self._client.post(
            f"{self.BASE_PATH}/verify",
            {
                "kalshi_access_key_id": access_key_id,
                "kalshi_private_key": private_key,
            },
        )

    def status(self) -> ApiResponse:
        return self._client.get(f"{self.BASE_PATH}/status")

    def credentials(self) -> ApiResponse:
        """Stored raw credential values, used to prefill the linking form."""
        return self._client.get(f"{self.BASE_PATH}/credentials")

    def disconnect(self) -> ApiResponse:
        return self._client.delete(f"{self.BASE_PATH}/disconnect")

    def balance(self) -> ApiResponse:
        """Account balance in cents."""
        return self._client.get(f"{self.BASE_PATH}/balance")
