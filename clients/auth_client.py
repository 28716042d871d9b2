"""Endpoints under /api/auth."""

from clients.http_client import ApiClient, ApiResponse


class AuthApi:
    """Account endpoints. Login and register are sent without a bearer token."""

    BASE_PATH = "/api/auth"

    def __init__(self, client: ApiClient):
        self._client = client

    def register(self, username: str, email: str, password: str) -> ApiResponse:
        return self._client.post(
            f"{self.BASE_PATH}/register",
            {"username": username, "email": email, "password": password},
            auth=False,
        )

    def login(self, email: str, password: str) -> ApiResponse:
        return self._client.post(
            f"{self.BASE_PATH}/login",
            {"email": email, "password": password},
            auth=False,
        )

    def get_profile(self) -> ApiResponse:
        return self._client.get(f"{self.BASE_PATH}/profile")

    def update_profile(self, changes: dict) -> ApiResponse:
        return self._client.put(f"{self.BASE_PATH}/profile", changes)

    def change_password(self, current_password: str, new_password: str) -> ApiResponse:
        return self._client.put(
            f"{self.BASE_PATH}/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
        )
