"""Tests for ValkeyClient - thin redis-py wrapper, redis mocked."""

from unittest.mock import patch

import pytest
import redis

from clients.valkey_client import ValkeyClient


@pytest.fixture
def redis_mock():
    with patch("clients.valkey_client.redis.from_url") as from_url:
        yield from_url.return_value


class TestValkeyClient:
    def test_pings_on_connect(self, redis_mock):
        ValkeyClient("redis://localhost:6379/0")

        redis_mock.ping.assert_called_once()

    def test_connect_failure_propagates(self, redis_mock):
        redis_mock.ping.side_effect = redis.ConnectionError("refused")

        with pytest.raises(redis.ConnectionError):
            ValkeyClient("redis://localhost:6379/0")

    def test_set_has_no_expiry(self, redis_mock):
        client = ValkeyClient("redis://localhost:6379/0")

        client.set("k", "v")

        redis_mock.set.assert_called_once_with("k", "v")
        redis_mock.setex.assert_not_called()

    def test_delete_reports_existence(self, redis_mock):
        redis_mock.delete.return_value = 0
        client = ValkeyClient("redis://localhost:6379/0")

        assert client.delete("missing") is False
