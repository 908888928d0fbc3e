"""
Catalog Writer

Idempotent upsert-merge of playlist episodes into Series documents.

Re-running the seeder over the same playlists converges: episodes are
deduplicated on their YouTube id and genres are unioned.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..core.logging import get_logger
from ..models.catalog import Episode, Provenance, Series, normalize_genre_name
from ..models.youtube import VideoMetadata

logger = get_logger(__name__)

STATUS_FIELDS = ("embeddable", "privacyStatus", "regionRestriction")


@dataclass
class UpsertResult:
    """Outcome of one upsert. A no-op leaves every field falsy."""
    created: bool = False
    updated: bool = False
    added: int = 0

    @property
    def changed(self) -> bool:
        return self.created or self.updated


def _region_dict(video: VideoMetadata) -> Optional[Dict[str, List[str]]]:
    if video.region_restriction is None:
        return None
    return video.region_restriction.model_dump(exclude_none=True)


def build_episodes(videos: Iterable[VideoMetadata], season: int = 1) -> List[Episode]:
    """
    Turn filtered metadata into episodes numbered 1..N.

    Numbering follows the order given, which must already be the final
    filtered playlist order.
    """
    episodes = []
    for position, video in enumerate(videos, start=1):
        episodes.append(Episode(
            youtube_id=video.video_id,
            title=video.title or f"Episode {position}",
            season=season,
            episode=position,
            duration=video.duration_seconds,
            published_at=video.published_at,
            thumbnails=video.thumbnails,
            embeddable=video.embeddable,
            privacy_status=video.privacy_status,
            region_restriction=_region_dict(video),
        ))
    return episodes


def status_fields(video: VideoMetadata) -> Dict[str, object]:
    """Refreshable status fields of a video, keyed like the stored episode."""
    return {
        "embeddable": video.embeddable,
        "privacyStatus": video.privacy_status,
        "regionRestriction": _region_dict(video),
    }


def _unseen(episodes: Iterable[Episode], known_ids: set) -> List[Episode]:
    """Episodes whose id is not in known_ids, first occurrence wins."""
    fresh = []
    for episode in episodes:
        if episode.youtube_id in known_ids:
            continue
        known_ids.add(episode.youtube_id)
        fresh.append(episode)
    return fresh


class CatalogWriter:
    """
    Writes series and genres through the catalog store.

    Args:
        store: FirestoreCatalogStore (or any object with the same methods)
    """

    def __init__(self, store):
        self.store = store

    async def ensure_genres(self, names: Iterable[str]) -> List[str]:
        """
        Find-or-create each genre, returning ids in first-seen order.

        Names are normalized first, so "Action", "action " and "ACTION"
        all resolve to the single genre "action".
        """
        genre_ids: List[str] = []
        seen = set()
        for name in names:
            normalized = normalize_genre_name(name)
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            genre_ids.append(await self.store.upsert_genre(normalized))
        return genre_ids

    async def upsert_series(
        self,
        name: str,
        detail: str,
        year: Optional[int],
        genre_ids: List[str],
        episodes: List[Episode],
        provenance: str = Provenance.EXTERNAL.value,
    ) -> UpsertResult:
        """
        Create a series or merge new episodes into the existing one.

        An empty episode list writes nothing.
        """
        if not episodes:
            logger.warning("series_upsert_skipped_no_episodes", series=name)
            return UpsertResult()

        existing = await self.store.find_series(name, provenance)

        if existing is None:
            series = Series(
                name=name,
                detail=detail,
                year=year,
                genre=list(dict.fromkeys(genre_ids)),
                videos=_unseen(episodes, set()),
                source=provenance,
            )
            await self.store.save_series(series)
            logger.info("series_created", series=name, episodes=len(series.videos))
            return UpsertResult(created=True, added=len(series.videos))

        new_episodes = _unseen(episodes, set(existing.episode_ids))

        merged_genres = list(dict.fromkeys([*existing.genre, *genre_ids]))
        genres_changed = merged_genres != existing.genre
        detail_changed = not existing.detail and bool(detail)

        if not new_episodes and not genres_changed and not detail_changed:
            logger.info("series_unchanged", series=name)
            return UpsertResult()

        existing.videos.extend(new_episodes)
        existing.genre = merged_genres
        if detail_changed:
            existing.detail = detail
        existing.updated_at = datetime.now(timezone.utc)

        await self.store.save_series(existing)
        logger.info("series_updated", series=name, added=len(new_episodes))
        return UpsertResult(updated=True, added=len(new_episodes))

    async def refresh_episode_status(self, video: VideoMetadata) -> int:
        """Update status fields of this video in every series holding it."""
        return await self.store.update_episode_fields(video.video_id, status_fields(video))

