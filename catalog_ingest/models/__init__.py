"""Pydantic models for the catalog seeder."""

from .catalog import Episode, Genre, Provenance, Series, normalize_genre_name
from .youtube import ChannelRef, PlaylistItem, PlaylistRef, RegionRestriction, VideoMetadata

__all__ = [
    "Episode",
    "Genre",
    "Provenance",
    "Series",
    "normalize_genre_name",
    "ChannelRef",
    "PlaylistItem",
    "PlaylistRef",
    "RegionRestriction",
    "VideoMetadata",
]
