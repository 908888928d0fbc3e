"""
YouTube Resource Models

Canonical records produced by the API client. Every upstream response
shape is normalized into one of these before it leaves the client.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


class RegionRestriction(BaseModel):
    """Country allow-list or block-list attached to a video."""
    allowed: Optional[List[str]] = None
    blocked: Optional[List[str]] = None

    def is_eligible(self, region: str) -> bool:
        """
        Check whether a region can play the video.

        Both lists apply: the region must not be blocked and, when an
        allow-list is present, must be on it.
        """
        region = region.upper()
        if self.blocked is not None and region in {code.upper() for code in self.blocked}:
            return False
        if self.allowed is not None and region not in {code.upper() for code in self.allowed}:
            return False
        return True


class ChannelRef(BaseModel):
    """Channel resolved from a search result."""
    channel_id: str
    title: str = ""


class PlaylistRef(BaseModel):
    """Playlist from a channel listing or a playlist search."""
    playlist_id: str
    title: str = ""
    channel_title: str = ""


class PlaylistItem(BaseModel):
    """Single entry of a playlist, in playlist order."""
    video_id: str
    title: str = ""
    position: Optional[int] = None


class VideoMetadata(BaseModel):
    """
    Video details merged from the snippet, contentDetails and status parts.
    """
    video_id: str
    title: str = ""
    description: str = ""
    published_at: Optional[str] = None
    thumbnails: Dict[str, Any] = Field(default_factory=dict)
    duration_seconds: int = 0
    embeddable: bool = False
    privacy_status: str = "public"
    region_restriction: Optional[RegionRestriction] = None

    model_config = ConfigDict(populate_by_name=True)
