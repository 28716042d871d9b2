"""Dashboard client configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "DASHBOARD_"


class AuthConfig(BaseModel):
    """
    Client configuration.

    Durations are in seconds. Paths are view-layer locations, not URLs.
    """

    # Backend
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the dashboard backend",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Per-request timeout",
        gt=0,
        le=120,
    )

    # Token persistence
    token_key: str = Field(
        default="token",
        description="Well-known key the bearer token is persisted under",
        min_length=1,
    )
    token_store_url: str = Field(
        default=str(Path.home() / ".kalshi-dashboard" / "session.json"),
        description="redis:// URL selects Valkey, anything else is a file path",
    )

    # Validation
    min_password_length: int = Field(
        default=6,
        description="Checked locally before register/change-password requests",
        ge=1,
        le=128,
    )

    # Navigation
    login_path: str = Field(default="/login")
    default_destination: str = Field(
        default="/markets",
        description="Where to go after login when no location was captured",
    )

    # Markets
    markets_page_size: int = Field(default=12, ge=1, le=1000)

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "AuthConfig":
        """
        Build config from DASHBOARD_* environment variables.

        A .env file (explicit path, or discovered from the working directory)
        is loaded first; real environment variables take precedence.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)
