"""
Catalog Seeder

Process entry points. Configuration comes only from the environment
(or .env); there are no command-line arguments.

Exit status: 0 on completion (per-channel failures are logged), non-zero
when the catalog store is unreachable or required settings are missing.
"""

import asyncio
import sys
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from .config import Settings, get_settings
from .core.exceptions import CatalogIngestException, ConfigurationError
from .core.logging import get_logger, setup_logging
from .jobs.seeder import SeederJob
from .jobs.status_refresh import StatusRefreshJob
from .jobs.thumbnail_fill import ThumbnailFillJob
from .services.firestore_service import FirestoreCatalogStore
from .services.quota_manager import QuotaManager, create_redis_client
from .services.youtube_api import YouTubeAPIService

logger = get_logger(__name__)

JobFactory = Callable[[Settings, FirestoreCatalogStore, YouTubeAPIService], Awaitable[object]]


async def run_with_resources(
    job: JobFactory,
    settings: Settings,
    store: Optional[FirestoreCatalogStore] = None,
):
    """
    Connect the store and the API client, run `job`, then release both.

    Raises:
        ConfigurationError: no YouTube API key
        StoreConnectionError: the catalog store is unreachable
    """
    if not settings.youtube_api_key:
        raise ConfigurationError("YOUTUBE_API_KEY")

    store = store or FirestoreCatalogStore(settings)
    await store.connect()

    quota_manager = None
    youtube = None
    try:
        quota_manager = QuotaManager(
            create_redis_client(settings),
            daily_limit=settings.youtube_daily_quota_limit,
        )
        youtube = YouTubeAPIService(settings, quota_manager=quota_manager)
        return await job(settings, store, youtube)
    finally:
        if youtube is not None:
            await youtube.close()
        if quota_manager is not None:
            await quota_manager.close()
        await store.close()


async def _seed(settings, store, youtube):
    return await SeederJob(settings, store, youtube).run()


async def _refresh_status(settings, store, youtube):
    return await StatusRefreshJob(settings, store, youtube).run()


async def _fill_thumbnails(settings, store, youtube):
    return await ThumbnailFillJob(settings, store, youtube).run()


def _run(job: JobFactory) -> int:
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.critical("invalid_settings", error=str(e))
        return ConfigurationError("environment").exit_code

    setup_logging(settings, job=job.__name__.lstrip("_"))
    try:
        asyncio.run(run_with_resources(job, settings))
    except CatalogIngestException as e:
        logger.critical("job_aborted", error=e.message)
        return e.exit_code
    return 0


def main():
    """Full seeding run."""
    sys.exit(_run(_seed))


def refresh_status():
    """Re-check embeddable/privacy/region status of stored episodes."""
    sys.exit(_run(_refresh_status))


def fill_thumbnails():
    """Fill missing episode thumbnails through oEmbed."""
    sys.exit(_run(_fill_thumbnails))


if __name__ == "__main__":
    main()
