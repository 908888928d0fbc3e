"""
Quota Manager Service

Keeps a seeding run inside the YouTube Data API daily unit budget.

Units are reserved before a request goes out, since YouTube bills a call
whether or not it succeeds. With Redis the counter is shared by every
run against the same API project; without it each process counts alone.
"""

from datetime import datetime
from typing import Dict, Optional
from zoneinfo import ZoneInfo

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import Settings, get_settings
from ..core.logging import get_logger
from ..core.exceptions import QuotaExceededError

logger = get_logger(__name__)

# YouTube resets project quota at midnight Pacific time
QUOTA_TIMEZONE = ZoneInfo("America/Los_Angeles")
KEY_TTL_SECONDS = 2 * 86400


def create_redis_client(settings: Settings) -> Optional[redis.Redis]:
    """Build an async Redis client, or None when Redis is not configured."""
    if not settings.redis_url:
        logger.debug("redis_not_configured")
        return None

    return redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )


class QuotaManager:
    """
    Daily unit budget for one API project.

    YouTube Data API: 10,000 units/day
    - search.list: 100 units
    - playlists / playlistItems / videos list: 1 unit per request

    The default limit of 9,000 leaves room for other clients of the project.
    """

    COST_SEARCH = 100
    COST_LIST = 1

    def __init__(
        self,
        redis_client=None,
        daily_limit: Optional[int] = None,
        bucket: str = "youtube",
    ):
        self.redis = redis_client
        self.daily_limit = daily_limit or get_settings().youtube_daily_quota_limit
        self.bucket = bucket
        self.spent = 0  # units reserved by this process
        self._local_usage: Dict[str, int] = {}

    def _day_key(self) -> str:
        day = datetime.now(QUOTA_TIMEZONE).strftime("%Y-%m-%d")
        return f"quota:{self.bucket}:{day}"

    async def _add(self, key: str, amount: int) -> int:
        """Add to the day's counter and return the new total."""
        if self.redis:
            try:
                total = await self.redis.incrby(key, amount)
                if amount > 0:
                    await self.redis.expire(key, KEY_TTL_SECONDS)
                return int(total)
            except RedisError as e:
                # Counting continues in-process for the rest of the run
                logger.warning("quota_redis_unavailable", error=str(e))
                self.redis = None

        total = self._local_usage.get(key, 0) + amount
        self._local_usage[key] = total
        return total

    async def usage(self) -> int:
        """Units used today."""
        key = self._day_key()
        if self.redis:
            try:
                value = await self.redis.get(key)
                return int(value) if value else 0
            except RedisError as e:
                logger.warning("quota_redis_unavailable", error=str(e))
                self.redis = None
        return self._local_usage.get(key, 0)

    async def remaining(self) -> int:
        """Units left today."""
        return max(0, self.daily_limit - await self.usage())

    async def reserve(self, cost: int) -> int:
        """
        Take `cost` units from today's budget before making a request.

        The increment and the limit check are one Redis round trip, so
        overlapping runs cannot both take the last units.

        Returns:
            Units left after the reservation

        Raises:
            QuotaExceededError: budget too small; nothing is taken
        """
        key = self._day_key()
        total = await self._add(key, cost)
        if total > self.daily_limit:
            await self._add(key, -cost)
            logger.error(
                "quota_exceeded",
                bucket=self.bucket,
                used=total - cost,
                limit=self.daily_limit,
                requested=cost,
            )
            raise QuotaExceededError(self.bucket)

        self.spent += cost
        return self.daily_limit - total

    async def close(self):
        if self.redis:
            try:
                await self.redis.aclose()
            except RedisError as e:
                logger.warning("redis_close_failed", error=str(e))
