"""
Catalog Seeder Job

Runs the full ingestion pass:
1. Optional, confirmed purge of externally-sourced series
2. Baseline genres when the catalog has none
3. Channel ingestion for every configured channel query
4. Genre backfill
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List

from ..config import Settings
from ..core.logging import get_logger
from ..models.catalog import Provenance
from ..services.catalog_writer import CatalogWriter
from ..services.genre_classifier import BASELINE_GENRES
from ..services.youtube_api import YouTubeAPIService
from .channel_ingestor import ChannelIngestor, IngestReport
from .genre_backfill import GenreBackfiller, GenreBackfillResult

logger = get_logger(__name__)


def ask_yes_no(question: str, input_fn: Callable[[str], str] = input) -> bool:
    """Prompt on the terminal. Only 'y' or 'yes' confirms; anything else is no."""
    try:
        answer = input_fn(f"{question} (y/N): ")
    except EOFError:
        return False
    return str(answer or "").strip().lower() in ("y", "yes")


@dataclass
class SeederSummary:
    purged: int = 0
    channels: List[IngestReport] = field(default_factory=list)
    backfill: Dict[str, GenreBackfillResult] = field(default_factory=dict)
    duration_seconds: float = 0.0
    quota_spent: int = 0
    quota_remaining: int = 0


class SeederJob:
    """
    Sequences one complete seeding run.

    Args:
        settings: Explicit configuration for this run
        store: Connected catalog store
        youtube: YouTube client
        input_fn: Terminal input used for the reset confirmation
    """

    def __init__(
        self,
        settings: Settings,
        store,
        youtube: YouTubeAPIService,
        input_fn: Callable[[str], str] = input,
    ):
        self.settings = settings
        self.store = store
        self.youtube = youtube
        self.input_fn = input_fn
        self.writer = CatalogWriter(store)
        self.ingestor = ChannelIngestor(youtube, self.writer, settings)
        self.backfiller = GenreBackfiller(store, self.ingestor, settings)

    async def maybe_reset(self) -> int:
        """Purge external series, but only after explicit confirmation."""
        if not self.settings.offer_reset:
            return 0

        confirmed = ask_yes_no(
            f"Delete existing series with source == '{Provenance.EXTERNAL.value}' before seeding?",
            self.input_fn,
        )
        if not confirmed:
            logger.info("reset_declined")
            return 0

        deleted = await self.store.delete_series_by_provenance(Provenance.EXTERNAL.value)
        logger.warning("reset_completed", deleted=deleted)
        return deleted

    async def ensure_baseline_genres(self) -> int:
        """Create the baseline taxonomy when no genres exist yet."""
        existing = await self.store.list_genres()
        if existing:
            return 0

        created = await self.writer.ensure_genres(BASELINE_GENRES)
        logger.info("baseline_genres_created", count=len(created))
        return len(created)

    async def run(self) -> SeederSummary:
        logger.info("seeder_job_started", channels=len(self.settings.channel_queries))
        start_time = datetime.now(timezone.utc)
        summary = SeederSummary()

        summary.purged = await self.maybe_reset()
        await self.ensure_baseline_genres()

        for query in self.settings.channel_queries:
            try:
                summary.channels.append(await self.ingestor.ingest_channel(query))
            except Exception as e:
                logger.error("channel_failed", channel=query, error=str(e), exc_info=True)
            await asyncio.sleep(self.settings.request_delay_seconds)

        summary.backfill = await self.backfiller.run()

        summary.duration_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()
        quota = self.youtube.quota_manager
        summary.quota_spent = quota.spent
        summary.quota_remaining = await quota.remaining()
        logger.info(
            "seeder_job_completed",
            duration_seconds=summary.duration_seconds,
            episodes_added=sum(r.episodes_added for r in summary.channels),
            quota_spent=summary.quota_spent,
            quota_remaining=summary.quota_remaining,
        )
        return summary
