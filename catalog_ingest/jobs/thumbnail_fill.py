"""
Thumbnail Fill Job

Fills episodes that have no thumbnails using YouTube oEmbed, which costs
no Data API quota. Episodes oEmbed refuses (private, members-only) stay
empty; clients fall back to img.youtube.com.
"""

from dataclasses import dataclass

from ..config import Settings
from ..core.logging import get_logger
from ..models.catalog import Provenance
from ..services.youtube_api import YouTubeAPIService

logger = get_logger(__name__)


@dataclass
class ThumbnailFillResult:
    series_checked: int = 0
    series_updated: int = 0
    thumbnails_filled: int = 0


class ThumbnailFillJob:

    def __init__(self, settings: Settings, store, youtube: YouTubeAPIService):
        self.settings = settings
        self.store = store
        self.youtube = youtube

    async def run(self) -> ThumbnailFillResult:
        result = ThumbnailFillResult()

        for series in await self.store.list_series(Provenance.EXTERNAL.value):
            missing = [video for video in series.videos if not video.thumbnails]
            if not missing:
                continue
            result.series_checked += 1

            changed = False
            for video in missing:
                url = await self.youtube.fetch_oembed_thumbnail(video.youtube_id)
                if not url:
                    continue
                video.thumbnails = {"default": {"url": url}}
                result.thumbnails_filled += 1
                changed = True

            if changed:
                await self.store.save_series(series)
                result.series_updated += 1
                logger.info("series_thumbnails_filled", series=series.name)

        logger.info(
            "thumbnail_fill_completed",
            checked=result.series_checked,
            updated=result.series_updated,
            filled=result.thumbnails_filled,
        )
        return result
