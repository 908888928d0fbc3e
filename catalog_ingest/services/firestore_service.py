"""
Firestore Service

Catalog store boundary. Exposes only what the seeder needs: find,
atomic upsert-by-key, and multi-document episode updates.

Collections used:
- series/{sha1(source:name)}: Series documents with embedded videos
- genres/{normalized name}: Genre documents
"""

import hashlib
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import AlreadyExists, GoogleAPICallError
from google.cloud.firestore_v1.base_query import FieldFilter

from ..config import Settings, get_settings
from ..core.exceptions import StoreConnectionError
from ..core.logging import get_logger
from ..models.catalog import Genre, Provenance, Series, normalize_genre_name

logger = get_logger(__name__)

SERIES_COLLECTION = "series"
GENRES_COLLECTION = "genres"

# Firestore caps batched writes at 500 operations
BATCH_LIMIT = 500


def initialize_firebase(settings: Settings):
    """
    Initialize Firebase Admin SDK with credentials from multiple sources.

    Priority:
    1. Local file path (FIREBASE_CREDENTIALS_PATH)
    2. JSON from environment variable (GOOGLE_APPLICATION_CREDENTIALS_JSON)
    3. Default credentials (for Google Cloud environments)
    """
    if firebase_admin._apps:
        return

    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    cred_path = settings.firebase_credentials_path

    # Option 1: Local credentials file
    if cred_path and os.path.exists(cred_path):
        logger.info("firebase_credentials_file", path=cred_path)
        firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        return

    # Option 2: Credentials JSON from environment variable
    creds_json = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON")
    if creds_json:
        try:
            creds_dict = json.loads(creds_json)
        except ValueError as e:
            raise StoreConnectionError(f"invalid GOOGLE_APPLICATION_CREDENTIALS_JSON: {e}")
        logger.info("firebase_credentials_env")
        firebase_admin.initialize_app(credentials.Certificate(creds_dict), options)
        return

    # Option 3: Default credentials (Google Cloud environments)
    logger.info("firebase_default_credentials")
    firebase_admin.initialize_app(options=options)


def series_document_id(name: str, provenance: str) -> str:
    """Deterministic document id for a (name, source) pair."""
    return hashlib.sha1(f"{provenance}:{name}".encode("utf-8")).hexdigest()


def genre_document_id(normalized_name: str) -> str:
    """Firestore ids cannot contain '/'."""
    return normalized_name.replace("/", "-")


class FirestoreCatalogStore:
    """
    Firestore-backed catalog store.

    Series ids are derived from (source, name) and genre ids from the
    normalized name, so find-or-create cannot produce duplicates even
    when two runs overlap.
    """

    def __init__(self, settings: Optional[Settings] = None, db=None):
        self.settings = settings or get_settings()
        self.db = db

    async def connect(self):
        """
        Open the Firestore client and prove it can read.

        Raises:
            StoreConnectionError: credentials or connectivity failure
        """
        if self.db is None:
            try:
                initialize_firebase(self.settings)
                self.db = firestore.client()
            except StoreConnectionError:
                raise
            except Exception as e:
                raise StoreConnectionError(str(e)) from e

        try:
            list(self.db.collection(GENRES_COLLECTION).limit(1).stream())
        except Exception as e:
            raise StoreConnectionError(str(e)) from e

        logger.info("catalog_store_connected")

    async def close(self):
        if self.db is not None:
            try:
                self.db.close()
            except Exception as e:
                logger.warning("catalog_store_close_failed", error=str(e))
            self.db = None
        logger.info("catalog_store_closed")

    # =========================================================================
    # GENRES
    # =========================================================================

    async def upsert_genre(self, name: str) -> str:
        """
        Find-or-create a genre atomically.

        create() fails server-side when the document exists, so concurrent
        runs cannot both create the same genre.

        Returns:
            Genre document id
        """
        normalized = normalize_genre_name(name)
        doc_id = genre_document_id(normalized)
        doc_ref = self.db.collection(GENRES_COLLECTION).document(doc_id)

        try:
            doc_ref.create({
                "name": normalized,
                "createdAt": datetime.now(timezone.utc),
            })
            logger.info("genre_created", genre=normalized)
        except AlreadyExists:
            pass

        return doc_id

    async def list_genres(self) -> List[Genre]:
        docs = self.db.collection(GENRES_COLLECTION).stream()
        return [
            Genre(id=doc.id, name=(doc.to_dict() or {}).get("name", doc.id))
            for doc in docs
        ]

    # =========================================================================
    # SERIES
    # =========================================================================

    async def find_series(
        self, name: str, provenance: str = Provenance.EXTERNAL.value
    ) -> Optional[Series]:
        doc_id = series_document_id(name, provenance)
        doc = self.db.collection(SERIES_COLLECTION).document(doc_id).get()
        if not doc.exists:
            return None
        return Series.from_document(doc.to_dict())

    async def save_series(self, series: Series):
        """Write a whole series document (create or overwrite)."""
        doc_id = series_document_id(series.name, series.source)
        self.db.collection(SERIES_COLLECTION).document(doc_id).set(series.to_document())

    async def list_series(
        self, provenance: str = Provenance.EXTERNAL.value
    ) -> List[Series]:
        docs = (
            self.db.collection(SERIES_COLLECTION)
            .where(filter=FieldFilter("source", "==", provenance))
            .stream()
        )
        return [Series.from_document(doc.to_dict()) for doc in docs]

    async def count_series_with_genre(
        self, genre_id: str, provenance: str = Provenance.EXTERNAL.value
    ) -> int:
        docs = (
            self.db.collection(SERIES_COLLECTION)
            .where(filter=FieldFilter("source", "==", provenance))
            .where(filter=FieldFilter("genre", "array_contains", genre_id))
            .select(["name"])
            .stream()
        )
        return sum(1 for _ in docs)

    async def delete_series_by_provenance(
        self, provenance: str = Provenance.EXTERNAL.value
    ) -> int:
        """Delete every series with the given source. Returns deleted count."""
        docs = (
            self.db.collection(SERIES_COLLECTION)
            .where(filter=FieldFilter("source", "==", provenance))
            .select(["name"])
            .stream()
        )

        deleted = 0
        batch = self.db.batch()
        pending = 0
        for doc in docs:
            batch.delete(doc.reference)
            pending += 1
            deleted += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                batch = self.db.batch()
                pending = 0
        if pending:
            batch.commit()

        logger.info("series_deleted", source=provenance, count=deleted)
        return deleted

    async def update_episode_fields(self, video_id: str, fields: Dict[str, Any]) -> int:
        """
        Set fields on the episode with this id in every series holding it.

        Firestore has no positional array update, so each matching
        document gets its videos array rewritten inside one batch.

        Returns:
            Number of series documents updated
        """
        docs = (
            self.db.collection(SERIES_COLLECTION)
            .where(filter=FieldFilter("episodeIds", "array_contains", video_id))
            .stream()
        )

        batch = self.db.batch()
        updated = 0
        for doc in docs:
            data = doc.to_dict() or {}
            videos = data.get("videos") or []
            for video in videos:
                if video.get("youtubeId") == video_id:
                    video.update(fields)
            batch.update(doc.reference, {
                "videos": videos,
                "updatedAt": datetime.now(timezone.utc),
            })
            updated += 1

        if updated:
            try:
                batch.commit()
            except GoogleAPICallError as e:
                logger.error("episode_update_failed", video_id=video_id, error=str(e))
                return 0

        return updated
