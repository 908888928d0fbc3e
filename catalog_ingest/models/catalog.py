"""
Catalog Models

Series, Episode and Genre documents as stored in Firestore.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Provenance(str, Enum):
    """How a series entered the catalog."""
    EXTERNAL = "youtube"
    TMDB = "tmdb"
    OTHER = "other"


class Episode(BaseModel):
    """
    One playable video inside a series.

    `youtube_id` is the dedup key and never changes once stored.
    """
    youtube_id: str = Field(..., alias="youtubeId", description="YouTube video ID")
    title: str = Field(..., description="Display title")
    season: int = Field(default=1)
    episode: int = Field(default=1, description="Position in the ingested batch")
    duration: int = Field(default=0, description="Duration in seconds")
    published_at: Optional[str] = Field(None, alias="publishedAt")
    thumbnails: Dict[str, Any] = Field(default_factory=dict)
    embeddable: Optional[bool] = None
    privacy_status: Optional[str] = Field(None, alias="privacyStatus")
    region_restriction: Optional[Dict[str, List[str]]] = Field(None, alias="regionRestriction")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class Series(BaseModel):
    """
    Catalog entry built from one playlist.

    Unique per (name, source). Rating fields belong to the review flow
    and are only carried through.
    """
    name: str
    detail: str = ""
    year: Optional[int] = None
    genre: List[str] = Field(default_factory=list, description="Genre document IDs")
    videos: List[Episode] = Field(default_factory=list)
    source: Provenance = Field(default=Provenance.EXTERNAL)
    rating: float = Field(default=0.0)
    num_reviews: int = Field(default=0, alias="numReviews")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    @property
    def episode_ids(self) -> List[str]:
        return [video.youtube_id for video in self.videos]

    def to_document(self) -> Dict[str, Any]:
        """Serialize for Firestore, including the episode id index."""
        data = self.model_dump(by_alias=True)
        data["episodeIds"] = self.episode_ids
        return data

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Series":
        data = dict(data)
        data.pop("episodeIds", None)
        return cls.model_validate(data)


class Genre(BaseModel):
    """Normalized genre tag. Knows nothing about the series using it."""
    id: str
    name: str


def normalize_genre_name(name: str) -> str:
    """Lower-case and trim a genre name."""
    return str(name or "").strip().lower()
