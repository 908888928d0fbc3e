"""
YouTube API Service

Rate-limited client for the YouTube Data API v3. Responses are
normalized here into canonical records; nothing downstream reads raw
API JSON.
"""

import asyncio
from typing import Any, Dict, List, Optional, Union
import httpx

from ..config import Settings, get_settings
from ..core.exceptions import QuotaExceededError
from ..core.logging import get_logger
from ..models.youtube import (
    ChannelRef,
    PlaylistItem,
    PlaylistRef,
    RegionRestriction,
    VideoMetadata,
)
from .duration import parse_duration
from .quota_manager import QuotaManager

logger = get_logger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"

SearchResult = Union[ChannelRef, PlaylistRef]


class YouTubeAPIService:
    """
    YouTube Data API v3 client for catalog seeding.

    Every request is followed by a fixed delay and no two requests are
    ever in flight at once. Failed pages or batches are logged and come
    back empty so a run keeps whatever it already collected.
    """

    PAGE_SIZE = 50
    VIDEO_BATCH_SIZE = 50  # videos.list accepts at most 50 ids

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        quota_manager: Optional[QuotaManager] = None,
    ):
        self.settings = settings or get_settings()
        self.api_key = self.settings.youtube_api_key
        self.delay = self.settings.request_delay_seconds
        self.quota_manager = quota_manager or QuotaManager(
            daily_limit=self.settings.youtube_daily_quota_limit
        )
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds
        )

        if not self.api_key:
            logger.warning("youtube_api_key_not_set")

    async def close(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "YouTubeAPIService":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _get(
        self, endpoint: str, params: Dict[str, Any], cost: int
    ) -> Optional[Dict[str, Any]]:
        """
        Issue one GET against the Data API.

        Returns the decoded body, or None when the call failed for any
        reason (quota, transport, status, bad JSON).
        """
        try:
            await self.quota_manager.reserve(cost)
        except QuotaExceededError:
            logger.warning("youtube_quota_exhausted", endpoint=endpoint)
            return None

        try:
            response = await self.client.get(
                f"{YOUTUBE_API_BASE}/{endpoint}",
                params={**params, "key": self.api_key},
            )

            if response.status_code != 200:
                logger.warning(
                    "youtube_request_failed",
                    endpoint=endpoint,
                    status=response.status_code,
                )
                return None

            data = response.json()
            if not isinstance(data, dict):
                logger.warning("youtube_unexpected_body", endpoint=endpoint)
                return None
            return data

        except (httpx.HTTPError, ValueError) as e:
            logger.error("youtube_request_error", endpoint=endpoint, error=str(e))
            return None
        finally:
            # Be gentle with quota between calls
            await asyncio.sleep(self.delay)

    async def _paginate(
        self, endpoint: str, params: Dict[str, Any], cap: int, cost: int
    ) -> List[Dict[str, Any]]:
        """Collect raw items across pages until the token runs out or cap is hit."""
        items: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        while len(items) < cap:
            page_params = {**params, "maxResults": min(self.PAGE_SIZE, cap - len(items))}
            if page_token:
                page_params["pageToken"] = page_token

            data = await self._get(endpoint, page_params, cost)
            if data is None:
                break

            items.extend(data.get("items") or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return items[:cap]

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def search(
        self, query: str, kind: str = "channel", max_results: int = 5
    ) -> List[SearchResult]:
        """
        Search channels or playlists by free text.

        Args:
            query: Search text
            kind: "channel" or "playlist"
            max_results: Maximum number of results to return

        Returns:
            ChannelRef or PlaylistRef records, in API ranking order
        """
        if kind not in ("channel", "playlist"):
            raise ValueError(f"Unsupported search kind: {kind}")

        raw_items = await self._paginate(
            "search",
            {"part": "snippet", "q": query, "type": kind},
            cap=max_results,
            cost=QuotaManager.COST_SEARCH,
        )

        results: List[SearchResult] = []
        for item in raw_items:
            normalized = self._normalize_search_item(item, kind)
            if normalized is not None:
                results.append(normalized)

        logger.debug("youtube_search_done", query=query, kind=kind, count=len(results))
        return results

    async def list_playlists(self, channel_id: str, max_results: int = 10) -> List[PlaylistRef]:
        """List a channel's playlists (paginated, capped)."""
        raw_items = await self._paginate(
            "playlists",
            {"part": "snippet,contentDetails", "channelId": channel_id},
            cap=max_results,
            cost=QuotaManager.COST_LIST,
        )

        playlists = []
        for item in raw_items:
            snippet = item.get("snippet") or {}
            playlist_id = item.get("id")
            if not isinstance(playlist_id, str) or not playlist_id:
                continue
            playlists.append(PlaylistRef(
                playlist_id=playlist_id,
                title=snippet.get("title") or "",
                channel_title=snippet.get("channelTitle") or "",
            ))
        return playlists

    async def list_playlist_items(
        self, playlist_id: str, max_results: int = 50
    ) -> List[PlaylistItem]:
        """List playlist entries in playlist order (paginated, capped)."""
        raw_items = await self._paginate(
            "playlistItems",
            {"part": "snippet,contentDetails", "playlistId": playlist_id},
            cap=max_results,
            cost=QuotaManager.COST_LIST,
        )

        entries = []
        for item in raw_items:
            snippet = item.get("snippet") or {}
            details = item.get("contentDetails") or {}
            video_id = details.get("videoId") or (snippet.get("resourceId") or {}).get("videoId")
            if not video_id:
                continue
            entries.append(PlaylistItem(
                video_id=video_id,
                title=snippet.get("title") or "",
                position=snippet.get("position"),
            ))
        return entries

    async def fetch_videos(self, video_ids: List[str]) -> List[VideoMetadata]:
        """
        Fetch metadata for many videos, 50 ids per request.

        Response order is not guaranteed and ids that failed or no
        longer exist are simply absent.
        """
        results: List[VideoMetadata] = []

        for i in range(0, len(video_ids), self.VIDEO_BATCH_SIZE):
            batch = video_ids[i:i + self.VIDEO_BATCH_SIZE]
            data = await self._get(
                "videos",
                {"part": "snippet,contentDetails,status", "id": ",".join(batch)},
                cost=QuotaManager.COST_LIST,
            )
            if data is None:
                logger.warning("video_batch_skipped", batch_start=i, batch_size=len(batch))
                continue

            for item in data.get("items") or []:
                video = self._normalize_video(item)
                if video is not None:
                    results.append(video)

        return results

    async def fetch_oembed_thumbnail(self, video_id: str) -> Optional[str]:
        """
        Look up a thumbnail through oEmbed (no Data API quota).

        Members-only or private videos 404 here; that is not an error.
        """
        try:
            response = await self.client.get(
                YOUTUBE_OEMBED_URL,
                params={
                    "url": f"https://www.youtube.com/watch?v={video_id}",
                    "format": "json",
                },
            )
            if response.status_code != 200:
                logger.debug("oembed_not_available", video_id=video_id, status=response.status_code)
                return None
            return response.json().get("thumbnail_url")
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("oembed_failed", video_id=video_id, error=str(e))
            return None
        finally:
            await asyncio.sleep(self.delay)

    # =========================================================================
    # NORMALIZATION
    # =========================================================================

    def _normalize_search_item(
        self, item: Dict[str, Any], kind: str
    ) -> Optional[SearchResult]:
        """
        Map a search result to a canonical record.

        search.list returns ids as {"kind": ..., "channelId": ...}; some
        callers and older fixtures carry the id on the snippet or as a
        plain string.
        """
        raw_id = item.get("id")
        snippet = item.get("snippet") or {}
        id_key = "channelId" if kind == "channel" else "playlistId"

        if isinstance(raw_id, dict):
            resource_id = raw_id.get(id_key)
        else:
            resource_id = raw_id
        if not resource_id and kind == "channel":
            resource_id = snippet.get("channelId")
        if not resource_id:
            return None

        if kind == "channel":
            return ChannelRef(
                channel_id=resource_id,
                title=snippet.get("title") or snippet.get("channelTitle") or "",
            )
        return PlaylistRef(
            playlist_id=resource_id,
            title=snippet.get("title") or "",
            channel_title=snippet.get("channelTitle") or "",
        )

    def _normalize_video(self, item: Dict[str, Any]) -> Optional[VideoMetadata]:
        video_id = item.get("id")
        if not isinstance(video_id, str) or not video_id:
            return None

        snippet = item.get("snippet") or {}
        details = item.get("contentDetails") or {}
        status = item.get("status") or {}

        restriction = details.get("regionRestriction")
        region = None
        if isinstance(restriction, dict) and (
            "allowed" in restriction or "blocked" in restriction
        ):
            region = RegionRestriction(
                allowed=restriction.get("allowed"),
                blocked=restriction.get("blocked"),
            )

        return VideoMetadata(
            video_id=video_id,
            title=snippet.get("title") or "",
            description=snippet.get("description") or "",
            published_at=snippet.get("publishedAt"),
            thumbnails=snippet.get("thumbnails") or {},
            duration_seconds=parse_duration(details.get("duration")),
            embeddable=bool(status.get("embeddable")),
            privacy_status=status.get("privacyStatus") or "public",
            region_restriction=region,
        )
