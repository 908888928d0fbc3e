import pytest
from unittest.mock import AsyncMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError

from catalog_ingest.config import Settings
from catalog_ingest.core.exceptions import QuotaExceededError
from catalog_ingest.services.quota_manager import KEY_TTL_SECONDS, QuotaManager, create_redis_client


@pytest.mark.asyncio
async def test_local_reservations_without_redis():
    """Units are counted in-process when Redis is not configured."""
    manager = QuotaManager(daily_limit=150)

    assert await manager.reserve(QuotaManager.COST_SEARCH) == 50

    assert await manager.usage() == 100
    assert await manager.remaining() == 50
    assert manager.spent == 100


@pytest.mark.asyncio
async def test_reserve_over_budget_takes_nothing():
    manager = QuotaManager(daily_limit=100)
    await manager.reserve(60)

    with pytest.raises(QuotaExceededError):
        await manager.reserve(QuotaManager.COST_SEARCH)

    assert await manager.usage() == 60
    assert manager.spent == 60
    assert await manager.reserve(40) == 0


@pytest.mark.asyncio
async def test_redis_reservation_is_awaited():
    """QuotaManager awaits the async Redis client."""
    mock_redis = AsyncMock()
    mock_redis.incrby.return_value = 101

    manager = QuotaManager(redis_client=mock_redis, daily_limit=9000)

    assert await manager.reserve(QuotaManager.COST_SEARCH) == 8899
    key = mock_redis.incrby.await_args.args[0]
    assert key.startswith("quota:youtube:")
    mock_redis.incrby.assert_awaited_with(key, 100)
    mock_redis.expire.assert_awaited_with(key, KEY_TTL_SECONDS)

    await manager.close()
    mock_redis.aclose.assert_awaited()


@pytest.mark.asyncio
async def test_redis_over_budget_gives_units_back():
    mock_redis = AsyncMock()
    mock_redis.incrby.side_effect = [9050, 8950]

    manager = QuotaManager(redis_client=mock_redis, daily_limit=9000)

    with pytest.raises(QuotaExceededError):
        await manager.reserve(QuotaManager.COST_SEARCH)

    key = mock_redis.incrby.await_args_list[0].args[0]
    assert mock_redis.incrby.await_args_list[1].args == (key, -100)
    assert manager.spent == 0


@pytest.mark.asyncio
async def test_shared_usage_read_from_redis():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = "8990"

    manager = QuotaManager(redis_client=mock_redis, daily_limit=9000)

    assert await manager.remaining() == 10


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_local():
    mock_redis = AsyncMock()
    mock_redis.incrby.side_effect = RedisConnectionError("down")

    manager = QuotaManager(redis_client=mock_redis, daily_limit=9000)
    await manager.reserve(5)
    await manager.reserve(5)

    assert await manager.usage() == 10
    assert mock_redis.incrby.await_count == 1


def test_no_redis_client_without_url():
    assert create_redis_client(Settings(_env_file=None, redis_url="")) is None


def test_redis_client_from_url():
    with patch("catalog_ingest.services.quota_manager.redis.from_url") as from_url:
        client = create_redis_client(Settings(_env_file=None, redis_url="redis://localhost:6379/0"))

    assert client is from_url.return_value
    assert from_url.call_args.args[0] == "redis://localhost:6379/0"
