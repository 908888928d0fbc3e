"""
Channel Ingestion

Turns an official channel's playlists into catalog series.

Per channel query:
RESOLVE_CHANNEL -> LIST_PLAYLISTS -> per playlist
FETCH_ITEMS -> FETCH_METADATA -> FILTER -> UPSERT
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from structlog.contextvars import bound_contextvars

from ..config import Settings, get_settings
from ..core.exceptions import ChannelNotFoundError
from ..core.logging import get_logger
from ..models.catalog import Provenance
from ..models.youtube import ChannelRef, PlaylistRef, VideoMetadata
from ..services.catalog_writer import CatalogWriter, UpsertResult, build_episodes
from ..services.genre_classifier import classify_title
from ..services.playability import FilterResult, PlayabilityFilter
from ..services.youtube_api import YouTubeAPIService

logger = get_logger(__name__)

# Generic channel playlists that are not a single show
EXCLUDED_PLAYLIST_MARKERS = ("uploads", "upload", "mixed")


@dataclass
class PlaylistOutcome:
    """What happened to one playlist."""
    playlist_id: str
    title: str
    candidates: int = 0
    kept: int = 0
    relaxed: bool = False
    upsert: Optional[UpsertResult] = None

    @property
    def upserted(self) -> bool:
        return self.upsert is not None and self.upsert.changed


@dataclass
class IngestReport:
    """Summary of one channel query."""
    query: str
    channel_id: Optional[str] = None
    playlists_seen: int = 0
    playlists_upserted: int = 0
    playlists_skipped: int = 0
    episodes_added: int = 0


def build_series_name(playlist_title: str, channel_title: str, max_length: int = 200) -> str:
    return f"{playlist_title} — {channel_title}"[:max_length]


def select_playlists(playlists: List[PlaylistRef]) -> List[PlaylistRef]:
    """
    Drop generic uploads/mixed playlists.

    If that would leave nothing, keep the full list instead: channels
    name their playlists in many ways.
    """
    filtered = [
        p for p in playlists
        if not any(marker in p.title.lower() for marker in EXCLUDED_PLAYLIST_MARKERS)
    ]
    return filtered or list(playlists)


class ChannelIngestor:
    """
    Ingests playlists of channels found by name.

    A channel that cannot be resolved, or a playlist that fails, is logged
    and skipped; siblings are still processed.
    """

    def __init__(
        self,
        youtube: YouTubeAPIService,
        writer: CatalogWriter,
        settings: Optional[Settings] = None,
        playability: Optional[PlayabilityFilter] = None,
    ):
        self.settings = settings or get_settings()
        self.youtube = youtube
        self.writer = writer
        self.playability = playability or PlayabilityFilter(
            target_region=self.settings.target_region,
            min_playable=self.settings.min_playable_episodes,
        )

    async def resolve_channel(self, query: str) -> ChannelRef:
        """
        Find a channel by name, preferring an exact (case-insensitive)
        title match over search ranking.

        Raises:
            ChannelNotFoundError: search returned nothing
        """
        channels = await self.youtube.search(query, kind="channel", max_results=5)
        if not channels:
            raise ChannelNotFoundError(query)

        wanted = query.strip().lower()
        chosen = next(
            (c for c in channels if c.title.strip().lower() == wanted),
            channels[0],
        )
        logger.info("channel_resolved", channel_id=chosen.channel_id, title=chosen.title)
        return chosen

    async def fetch_playable(self, playlist_id: str) -> FilterResult:
        """
        Fetch a playlist's videos and keep the playable ones in playlist order.

        Metadata may come back unordered or partial; ids without metadata
        are dropped.
        """
        items = await self.youtube.list_playlist_items(
            playlist_id, self.settings.max_videos_per_playlist
        )
        video_ids = list(dict.fromkeys(item.video_id for item in items))
        if not video_ids:
            return FilterResult()

        metadata = await self.youtube.fetch_videos(video_ids)
        by_id = {video.video_id: video for video in metadata}
        ordered: List[VideoMetadata] = [by_id[vid] for vid in video_ids if vid in by_id]

        if len(ordered) < len(video_ids):
            logger.info(
                "playlist_metadata_partial",
                requested=len(video_ids),
                received=len(ordered),
            )

        return self.playability.apply(ordered)

    async def process_playlist(
        self,
        playlist: PlaylistRef,
        channel_title: str,
        genre_names: Optional[List[str]] = None,
        min_episodes: int = 1,
    ) -> PlaylistOutcome:
        """
        Run one playlist through fetch, filter and upsert.

        Args:
            playlist: Playlist to ingest
            channel_title: Used in the series name
            genre_names: Genres to link; inferred from the title when None
            min_episodes: Skip the upsert below this many playable videos
        """
        title = playlist.title or "Playlist"
        outcome = PlaylistOutcome(playlist_id=playlist.playlist_id, title=title)

        with bound_contextvars(playlist=playlist.playlist_id):
            result = await self.fetch_playable(playlist.playlist_id)
            outcome.candidates = result.candidate_count
            outcome.kept = len(result.episodes)
            outcome.relaxed = result.relaxed

            if outcome.kept == 0 or outcome.kept < min_episodes:
                logger.info(
                    "playlist_skipped_insufficient",
                    title=title,
                    candidates=outcome.candidates,
                    kept=outcome.kept,
                )
                return outcome

            genres = genre_names if genre_names is not None else classify_title(title)
            genre_ids = await self.writer.ensure_genres(genres)

            outcome.upsert = await self.writer.upsert_series(
                name=build_series_name(title, channel_title, self.settings.series_name_max_length),
                detail=f"Imported playlist {title} from {channel_title}",
                year=datetime.now(timezone.utc).year,
                genre_ids=genre_ids,
                episodes=build_episodes(result.episodes),
                provenance=Provenance.EXTERNAL.value,
            )
            logger.info(
                "playlist_processed",
                title=title,
                candidates=outcome.candidates,
                kept=outcome.kept,
                relaxed=outcome.relaxed,
                added=outcome.upsert.added,
            )
            return outcome

    async def ingest_channel(self, query: str) -> IngestReport:
        """Ingest every show playlist of the channel matching `query`."""
        report = IngestReport(query=query)

        with bound_contextvars(channel=query):
            try:
                channel = await self.resolve_channel(query)
            except ChannelNotFoundError:
                logger.warning("channel_not_resolved")
                return report
            report.channel_id = channel.channel_id

            playlists = await self.youtube.list_playlists(
                channel.channel_id, self.settings.max_playlists_per_channel
            )
            selected = select_playlists(playlists)
            logger.info("playlists_listed", found=len(playlists), selected=len(selected))

            for playlist in selected:
                report.playlists_seen += 1
                try:
                    outcome = await self.process_playlist(
                        playlist, playlist.channel_title or channel.title or query
                    )
                except Exception as e:
                    logger.error(
                        "playlist_failed",
                        playlist=playlist.playlist_id,
                        error=str(e),
                        exc_info=True,
                    )
                    report.playlists_skipped += 1
                    continue

                if outcome.upsert is None:
                    report.playlists_skipped += 1
                else:
                    report.playlists_upserted += int(outcome.upserted)
                    report.episodes_added += outcome.upsert.added

            logger.info(
                "channel_ingested",
                playlists=report.playlists_seen,
                upserted=report.playlists_upserted,
                skipped=report.playlists_skipped,
                episodes_added=report.episodes_added,
            )
        return report
