"""Tests for token persistence backends."""

import json
from unittest.mock import Mock, patch

import pytest
import redis

from clients.token_store import (
    FileTokenStore,
    MemoryTokenStore,
    TokenStoreError,
    ValkeyTokenStore,
    create_token_store,
)
from clients.valkey_client import ValkeyClient


class TestMemoryTokenStore:
    def test_roundtrip_and_remove(self):
        store = MemoryTokenStore()

        store.set("T")
        assert store.get() == "T"

        store.remove()
        assert store.get() is None

    def test_remove_missing_is_safe(self):
        MemoryTokenStore().remove()


class TestFileTokenStore:
    """Test the JSON file backend."""

    def test_missing_file_is_empty(self, tmp_path):
        store = FileTokenStore(tmp_path / "session.json")

        assert store.get() is None

    def test_persists_under_key(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        FileTokenStore(path, key="token").set("T")

        assert json.loads(path.read_text()) == {"token": "T"}
        assert FileTokenStore(path, key="token").get() == "T"

    def test_preserves_other_keys(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"theme": "dark"}))
        store = FileTokenStore(path)

        store.set("T")
        store.remove()

        assert json.loads(path.read_text()) == {"theme": "dark"}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")

        assert FileTokenStore(path).get() is None

    def test_non_string_value_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"token": 42}))

        assert FileTokenStore(path).get() is None


class TestValkeyTokenStore:
    """Test the Valkey backend against a mocked ValkeyClient."""

    @pytest.fixture
    def valkey(self):
        return Mock(spec=ValkeyClient)

    def test_prefixed_key(self, valkey):
        valkey.get.return_value = "T"
        store = ValkeyTokenStore(valkey, key="token")

        assert store.get() == "T"
        valkey.get.assert_called_once_with("dashboard:token")

    def test_set_and_remove(self, valkey):
        store = ValkeyTokenStore(valkey)

        store.set("T")
        store.remove()

        valkey.set.assert_called_once_with("dashboard:token", "T")
        valkey.delete.assert_called_once_with("dashboard:token")

    def test_redis_errors_are_wrapped(self, valkey):
        valkey.get.side_effect = redis.ConnectionError("down")

        with pytest.raises(TokenStoreError):
            ValkeyTokenStore(valkey).get()


class TestCreateTokenStore:
    def test_file_path(self, tmp_path):
        store = create_token_store(str(tmp_path / "s.json"), key="k")

        assert isinstance(store, FileTokenStore)
        assert store.key == "k"

    def test_redis_url(self):
        with patch("clients.valkey_client.redis.from_url") as from_url:
            store = create_token_store("redis://localhost:6379/0")

        assert isinstance(store, ValkeyTokenStore)
        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
        from_url.return_value.ping.assert_called_once()

    def test_valkey_scheme(self):
        with patch("clients.valkey_client.redis.from_url") as from_url:
            create_token_store("valkey://cache:6379/1")

        from_url.assert_called_once_with("redis://cache:6379/1", decode_responses=True)
