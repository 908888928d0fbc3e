"""
Episode Status Refresh Job

Re-fetches embeddable / privacy / region status for stored episodes that
are missing any of those fields and writes it to every series that holds
the episode.
"""

from dataclasses import dataclass
from typing import List

from ..config import Settings
from ..core.logging import get_logger
from ..models.catalog import Episode, Provenance, Series
from ..services.catalog_writer import CatalogWriter, STATUS_FIELDS
from ..services.youtube_api import YouTubeAPIService

logger = get_logger(__name__)

_STATUS_ATTRS = {
    "embeddable": "embeddable",
    "privacyStatus": "privacy_status",
    "regionRestriction": "region_restriction",
}


@dataclass
class StatusRefreshResult:
    candidates: int = 0
    fetched: int = 0
    series_updated: int = 0


def _is_stale(video: Episode) -> bool:
    """
    True when a status field was never stored.

    A stored null regionRestriction means "unrestricted" and is not stale.
    """
    for name in STATUS_FIELDS:
        attr = _STATUS_ATTRS[name]
        if attr not in video.model_fields_set:
            return True
    return video.embeddable is None or video.privacy_status is None

def collect_stale_video_ids(series_list: List[Series], limit: int) -> List[str]:
    """Unique episode ids with any status field unset, capped at `limit`."""
    video_ids: List[str] = []
    seen = set()
    for series in series_list:
        for video in series.videos:
            if video.youtube_id in seen:
                continue
            if _is_stale(video):
                seen.add(video.youtube_id)
                video_ids.append(video.youtube_id)
    return video_ids[:limit]


class StatusRefreshJob:
    """Batch status refresh over external series."""

    def __init__(self, settings: Settings, store, youtube: YouTubeAPIService):
        self.settings = settings
        self.store = store
        self.youtube = youtube
        self.writer = CatalogWriter(store)

    async def run(self) -> StatusRefreshResult:
        result = StatusRefreshResult()
        series_list = await self.store.list_series(Provenance.EXTERNAL.value)
        video_ids = collect_stale_video_ids(
            series_list, self.settings.max_status_refresh_videos
        )
        result.candidates = len(video_ids)
        logger.info("status_refresh_started", videos=len(video_ids))

        if not video_ids:
            return result

        for video in await self.youtube.fetch_videos(video_ids):
            result.fetched += 1
            try:
                result.series_updated += await self.writer.refresh_episode_status(video)
            except Exception as e:
                logger.error("status_refresh_failed", video_id=video.video_id, error=str(e))
                continue
            logger.debug(
                "status_refreshed",
                video_id=video.video_id,
                embeddable=video.embeddable,
                privacy=video.privacy_status,
            )

        logger.info(
            "status_refresh_completed",
            candidates=result.candidates,
            fetched=result.fetched,
            series_updated=result.series_updated,
        )
        return result
