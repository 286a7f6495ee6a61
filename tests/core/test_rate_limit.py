"""
Unit tests for the login rate limiter.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from schoolbase.core.rate_limit import RateLimitExceeded, check_rate_limit, login_rate_limit


def _request(ip: str = "10.0.0.1", forwarded: str | None = None):
    request = MagicMock()
    request.headers = {"x-forwarded-for": forwarded} if forwarded else {}
    request.client.host = ip
    return request


class TestMemoryFallback:
    @pytest.mark.asyncio
    async def test_blocks_after_limit(self):
        with patch("schoolbase.core.rate_limit.get_redis", return_value=None):
            results = [await check_rate_limit("rate_limit:test:ip", 3, 60) for _ in range(4)]

        assert results == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        with patch("schoolbase.core.rate_limit.get_redis", return_value=None):
            assert await check_rate_limit("rate_limit:a", 1, 60) is True
            assert await check_rate_limit("rate_limit:b", 1, 60) is True
            assert await check_rate_limit("rate_limit:a", 1, 60) is False


class TestRedisBackend:
    @pytest.mark.asyncio
    async def test_uses_sorted_set_count(self):
        client = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
        client.pipeline.return_value = pipe

        with patch("schoolbase.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("rate_limit:x", 5, 60) is False

        pipe.zcard.assert_called_once_with("rate_limit:x")

    @pytest.mark.asyncio
    async def test_redis_error_falls_back_to_memory(self):
        client = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=ConnectionError("down"))
        client.pipeline.return_value = pipe

        with patch("schoolbase.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("rate_limit:y", 1, 60) is True
            assert await check_rate_limit("rate_limit:y", 1, 60) is False


class TestLoginRateLimitDependency:
    @pytest.mark.asyncio
    async def test_raises_429(self):
        dependency = login_rate_limit("student-login", limit=1, window_seconds=30)
        with patch("schoolbase.core.rate_limit.get_redis", return_value=None):
            await dependency(_request())
            with pytest.raises(RateLimitExceeded) as exc_info:
                await dependency(_request())

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "30"

    @pytest.mark.asyncio
    async def test_forwarded_header_does_not_change_key(self):
        dependency = login_rate_limit("student-login", limit=1, window_seconds=30)
        with patch("schoolbase.core.rate_limit.get_redis", return_value=None):
            await dependency(_request(forwarded="1.1.1.1"))
            with pytest.raises(RateLimitExceeded):
                await dependency(_request(forwarded="2.2.2.2"))

    @pytest.mark.asyncio
    async def test_limits_per_peer_address(self):
        dependency = login_rate_limit("student-login", limit=1, window_seconds=30)
        with patch("schoolbase.core.rate_limit.get_redis", return_value=None):
            await dependency(_request(ip="10.0.0.1"))
            await dependency(_request(ip="10.0.0.2"))
