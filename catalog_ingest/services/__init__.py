"""Services for fetching, filtering and storing catalog content."""

from .catalog_writer import CatalogWriter, UpsertResult, build_episodes
from .duration import parse_duration
from .firestore_service import FirestoreCatalogStore
from .genre_classifier import BASELINE_GENRES, FALLBACK_GENRE, classify_title
from .playability import FilterResult, PlayabilityFilter
from .quota_manager import QuotaManager, create_redis_client
from .youtube_api import YouTubeAPIService

__all__ = [
    "CatalogWriter",
    "UpsertResult",
    "build_episodes",
    "parse_duration",
    "FirestoreCatalogStore",
    "BASELINE_GENRES",
    "FALLBACK_GENRE",
    "classify_title",
    "FilterResult",
    "PlayabilityFilter",
    "QuotaManager",
    "create_redis_client",
    "YouTubeAPIService",
]
