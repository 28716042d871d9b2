"""Persistence for the single bearer token.

Exactly one value is persisted, under one well-known key. It is read at
initialization and removed on logout or failed re-verification.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

import redis

from clients.valkey_client import ValkeyClient

logger = logging.getLogger(__name__)


class TokenStoreError(Exception):
    """Persisted token could not be read or written."""


class TokenStore(Protocol):
    """Where the bearer token lives between runs."""

    key: str

    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def remove(self) -> None: ...


class MemoryTokenStore:
    """Process-local store. Nothing survives a restart."""

    def __init__(self, key: str = "token", token: str | None = None):
        self.key = key
        self._values: dict[str, str] = {}
        if token:
            self._values[key] = token

    def get(self) -> str | None:
        return self._values.get(self.key)

    def set(self, token: str) -> None:
        self._values[self.key] = token

    def remove(self) -> None:
        self._values.pop(self.key, None)


class FileTokenStore:
    """
    JSON file store.

    Other keys in the file are preserved; only ``key`` is read or written.
    """

    def __init__(self, path: Path, key: str = "token"):
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt token file {self.path}: {e}")
            return {}
        except OSError as e:
            raise TokenStoreError(f"Cannot read {self.path}: {e}")
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data))
        except OSError as e:
            raise TokenStoreError(f"Cannot write {self.path}: {e}")

    def get(self) -> str | None:
        value = self._read().get(self.key)
        return value if isinstance(value, str) and value else None

    def set(self, token: str) -> None:
        data = self._read()
        data[self.key] = token
        self._write(data)

    def remove(self) -> None:
        data = self._read()
        if self.key in data:
            del data[self.key]
            self._write(data)


class ValkeyTokenStore:
    """Token shared through Valkey, e.g. between a CLI and a local UI."""

    KEY_PREFIX = "dashboard:"

    def __init__(self, valkey: ValkeyClient, key: str = "token"):
        self._valkey = valkey
        self.key = key

    def _key(self) -> str:
        return f"{self.KEY_PREFIX}{self.key}"

    def get(self) -> str | None:
        try:
            return self._valkey.get(self._key())
        except redis.RedisError as e:
            raise TokenStoreError(f"Valkey read failed: {e}")

    def set(self, token: str) -> None:
        try:
            self._valkey.set(self._key(), token)
        except redis.RedisError as e:
            raise TokenStoreError(f"Valkey write failed: {e}")

    def remove(self) -> None:
        try:
            self._valkey.delete(self._key())
        except redis.RedisError as e:
            raise TokenStoreError(f"Valkey delete failed: {e}")


def create_token_store(url: str, key: str = "token") -> TokenStore:
    """Pick a backend from a config URL (redis:// or rediss:// selects Valkey)."""
    if url.startswith(("redis://", "rediss://", "valkey://")):
        return ValkeyTokenStore(ValkeyClient(url.replace("valkey://", "redis://", 1)), key=key)
    return FileTokenStore(Path(url).expanduser(), key=key)
