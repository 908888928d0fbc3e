"""
Genre Backfill

Tops up genres that channel ingestion left with fewer than the minimum
number of series, by searching playlists with progressively broader
queries.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from structlog.contextvars import bound_contextvars

from ..config import Settings, get_settings
from ..core.logging import get_logger
from ..models.catalog import Genre, Provenance
from ..models.youtube import PlaylistRef
from .channel_ingestor import ChannelIngestor

logger = get_logger(__name__)

QUERY_TEMPLATES = (
    "{genre} anime official playlist",
    "{genre} anime playlist",
    "{genre} anime full episodes official",
    "{genre} anime full episodes",
)


def build_queries(genre_name: str) -> List[str]:
    """Search queries for a genre, most specific first."""
    return [template.format(genre=genre_name) for template in QUERY_TEMPLATES]


@dataclass
class GenreBackfillResult:
    genre: str
    initial_count: int
    needed: int = 0
    seeded: int = 0
    playlists_tried: int = 0

    @property
    def satisfied(self) -> bool:
        return self.seeded >= self.needed


class GenreBackfiller:
    """
    Ensures each genre reaches a minimum number of external series.

    Shortfalls are logged and left; they never stop the run.
    """

    def __init__(
        self,
        store,
        ingestor: ChannelIngestor,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.ingestor = ingestor
        self.youtube = ingestor.youtube
        self.min_per_genre = self.settings.min_episodes_per_genre
        self.min_playable = self.settings.min_playable_episodes

    async def run(self) -> Dict[str, GenreBackfillResult]:
        """Backfill every genre in the catalog."""
        genres = await self.store.list_genres()
        results: Dict[str, GenreBackfillResult] = {}

        logger.info("genre_backfill_started", genres=len(genres), minimum=self.min_per_genre)

        for genre in genres:
            with bound_contextvars(genre=genre.name):
                try:
                    results[genre.name] = await self.backfill_genre(genre)
                except Exception as e:
                    logger.error("genre_backfill_failed", error=str(e), exc_info=True)

        short = [name for name, r in results.items() if not r.satisfied]
        logger.info("genre_backfill_completed", genres=len(results), short=len(short))
        return results

    async def backfill_genre(self, genre: Genre) -> GenreBackfillResult:
        count = await self.store.count_series_with_genre(genre.id, Provenance.EXTERNAL.value)
        result = GenreBackfillResult(genre=genre.name, initial_count=count)
        logger.info("genre_count", count=count)

        if count >= self.min_per_genre:
            return result

        result.needed = self.min_per_genre - count
        tried: Set[str] = set()

        for query in build_queries(genre.name):
            if result.seeded >= result.needed:
                break

            playlists = await self.youtube.search(
                query,
                kind="playlist",
                max_results=self.settings.max_additional_searches_per_genre,
            )
            for playlist in playlists:
                if result.seeded >= result.needed:
                    break
                if playlist.playlist_id in tried:
                    continue
                tried.add(playlist.playlist_id)
                result.playlists_tried += 1

                if await self._try_playlist(playlist, genre, query):
                    result.seeded += 1

        if not result.satisfied:
            logger.warning(
                "genre_backfill_short",
                minimum=self.min_per_genre,
                current=count + result.seeded,
                tried=result.playlists_tried,
            )
        return result

    async def _try_playlist(self, playlist: PlaylistRef, genre: Genre, query: str) -> bool:
        """Ingest one search hit for this genre. True if it counts toward the deficit."""
        try:
            outcome = await self.ingestor.process_playlist(
                playlist,
                playlist.channel_title or "search",
                genre_names=[genre.name],
                min_episodes=self.min_playable,
            )
        except Exception as e:
            logger.error(
                "backfill_playlist_failed",
                playlist=playlist.playlist_id,
                error=str(e),
                exc_info=True,
            )
            return False

        if outcome.upserted:
            logger.info("genre_seeded", playlist=playlist.playlist_id, query=query)
            return True

        logger.info(
            "backfill_playlist_rejected",
            playlist=playlist.playlist_id,
            kept=outcome.kept,
        )
        return False
