"""
Valkey (Redis-compatible) client for shared token persistence.

Simple wrapper around redis-py. Fail-fast: raises on connection failure,
never returns fallback values.
"""

import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible client for Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set("key", "value")
        value = client.get("key")  # Returns None if missing
    """

    def __init__(self, url: str):
        """
        Initialize Valkey connection.

        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)

        Raises:
            redis.ConnectionError: If connection fails
        """
        self._client = redis.from_url(url, decode_responses=True)
        # Verify connectivity immediately (fail-fast)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def get(self, key: str) -> str | None:
        """
        Get value by key.

        Returns None if key doesn't exist (not an error).
        Raises on connection failure.
        """
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        """Set key to value with no expiry."""
        self._client.set(key, value)

    def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        return self._client.delete(key) > 0

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")
