"""
Pytest Fixtures

Shared fakes and fixtures for testing.
"""

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

from catalog_ingest.config import Settings
from catalog_ingest.models.catalog import Genre, Series, normalize_genre_name
from catalog_ingest.models.youtube import PlaylistItem, PlaylistRef, RegionRestriction, VideoMetadata
from catalog_ingest.services.quota_manager import QuotaManager


class FakeCatalogStore:
    """In-memory stand-in for FirestoreCatalogStore."""

    def __init__(self):
        self.genres: Dict[str, Genre] = {}
        self.series: Dict[tuple, Series] = {}
        self.saves = 0
        self.connected = False

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def upsert_genre(self, name: str) -> str:
        normalized = normalize_genre_name(name)
        doc_id = normalized.replace("/", "-")
        self.genres.setdefault(doc_id, Genre(id=doc_id, name=normalized))
        return doc_id

    async def list_genres(self) -> List[Genre]:
        return list(self.genres.values())

    async def find_series(self, name: str, provenance: str = "youtube") -> Optional[Series]:
        series = self.series.get((provenance, name))
        return series.model_copy(deep=True) if series else None

    async def save_series(self, series: Series):
        self.saves += 1
        self.series[(series.source, series.name)] = series.model_copy(deep=True)

    async def list_series(self, provenance: str = "youtube") -> List[Series]:
        return [
            s.model_copy(deep=True)
            for (source, _), s in self.series.items()
            if source == provenance
        ]

    async def count_series_with_genre(self, genre_id: str, provenance: str = "youtube") -> int:
        return sum(
            1 for (source, _), s in self.series.items()
            if source == provenance and genre_id in s.genre
        )

    async def delete_series_by_provenance(self, provenance: str = "youtube") -> int:
        doomed = [key for key in self.series if key[0] == provenance]
        for key in doomed:
            del self.series[key]
        return len(doomed)

    async def update_episode_fields(self, video_id: str, fields: Dict[str, Any]) -> int:
        updated = 0
        for key, series in self.series.items():
            if video_id not in series.episode_ids:
                continue
            data = series.to_document()
            for video in data["videos"]:
                if video["youtubeId"] == video_id:
                    video.update(fields)
            self.series[key] = Series.from_document(data)
            updated += 1
        return updated


def make_video(
    video_id: str,
    title: str = "",
    description: str = "",
    embeddable: bool = True,
    privacy_status: str = "public",
    allowed: Optional[List[str]] = None,
    blocked: Optional[List[str]] = None,
    duration_seconds: int = 1440,
) -> VideoMetadata:
    region = None
    if allowed is not None or blocked is not None:
        region = RegionRestriction(allowed=allowed, blocked=blocked)
    return VideoMetadata(
        video_id=video_id,
        title=title or f"Video {video_id}",
        description=description,
        duration_seconds=duration_seconds,
        embeddable=embeddable,
        privacy_status=privacy_status,
        region_restriction=region,
    )


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, with no request delay."""
    return Settings(
        _env_file=None,
        youtube_api_key="test-key",
        request_delay_seconds=0,
        target_region="IN",
        channel_queries=["Muse Asia"],
    )


@pytest.fixture
def store() -> FakeCatalogStore:
    return FakeCatalogStore()


@pytest.fixture
def mock_youtube():
    """YouTubeAPIService double with every network call stubbed."""
    youtube = AsyncMock()
    youtube.search.return_value = []
    youtube.list_playlists.return_value = []
    youtube.list_playlist_items.return_value = []
    youtube.fetch_videos.return_value = []
    youtube.fetch_oembed_thumbnail.return_value = None
    youtube.quota_manager = QuotaManager(daily_limit=9000)
    return youtube


def stub_playlist(mock_youtube, videos: List[VideoMetadata]):
    """Make the mocked client serve one playlist made of `videos`."""
    mock_youtube.list_playlist_items.return_value = [
        PlaylistItem(video_id=v.video_id, position=i) for i, v in enumerate(videos)
    ]
    mock_youtube.fetch_videos.return_value = list(videos)


def playlist(playlist_id: str, title: str, channel_title: str = "Muse Asia") -> PlaylistRef:
    return PlaylistRef(playlist_id=playlist_id, title=title, channel_title=channel_title)
