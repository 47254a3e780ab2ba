"""JSON file implementation of RatingRepository.

Layout (one document, user-nested map encoding)::

    {"ratings": {"<user_id>": {"<rating id>": {...rating...}}}}

Writes are whole-document: the new document goes to a temporary file in the
same directory which then replaces the original, so the file on disk is
always either the old or the new snapshot. The in-memory mirror is replaced
only after the durable write succeeded, and never mutated in place.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

from animerate.constants import RATINGS_DOCUMENT_KEY
from animerate.core.exceptions import StorageError, ValidationError
from animerate.domain.entities.anime_rating import AnimeRating
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.infrastructure.persistence.concurrency import hold_lock, run_with_retries

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Dict[str, AnimeRating]]


class JsonFileRatingRepository(RatingRepository):
    """Rating store persisted to a single JSON file."""

    backend_name = "file"

    def __init__(
        self,
        file_path: str,
        lock_timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 0.05,
    ):
        """Initialize the file store.

        Args:
            file_path: Path of the JSON document. Created on first write.
            lock_timeout: Seconds to wait for the writer lock
            retry_attempts: Attempts for each read or write of the file
            retry_base_delay: First backoff delay in seconds
        """
        self.file_path = Path(file_path)
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._retry_attempts = retry_attempts
        self._retry_base_delay = retry_base_delay
        self._snapshot: Optional[Snapshot] = None

        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"JSON rating store using {self.file_path}")

    # ------------------------------------------------------------------ reads

    def _read_document(self) -> Snapshot:
        """Load the document from disk. A missing file is an empty store."""
        if not self.file_path.exists():
            return {}

        def read() -> str:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return f.read()

        content = run_with_retries(
            read,
            operation=f"read ratings file {self.file_path}",
            attempts=self._retry_attempts,
            base_delay=self._retry_base_delay,
        )
        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Ratings file is corrupted: {e}")

        if not isinstance(data, dict):
            raise StorageError("Ratings file must contain a JSON object")
        users = data.get(RATINGS_DOCUMENT_KEY, {})
        if not isinstance(users, dict):
            raise StorageError(
                f"Ratings file uses an unsupported encoding: '{RATINGS_DOCUMENT_KEY}' must be an object"
            )

        snapshot: Snapshot = {}
        for user_key, records in users.items():
            if not isinstance(records, dict):
                raise StorageError(f"Ratings of user {user_key} must be an object keyed by rating id")
            try:
                snapshot[str(user_key)] = {
                    rating_id: AnimeRating.from_dict(record) for rating_id, record in records.items()
                }
            except (ValidationError, TypeError, AttributeError) as e:
                raise StorageError(f"Ratings file contains an invalid rating for user {user_key}: {e}")
        return snapshot

    def _current(self) -> Snapshot:
        """Return the mirror, loading it on first use. Caller holds the lock."""
        if self._snapshot is None:
            self._snapshot = self._read_document()
            logger.debug(f"Loaded {sum(len(r) for r in self._snapshot.values())} ratings from {self.file_path}")
        return self._snapshot

    # ----------------------------------------------------------------- writes

    def _write_document(self, snapshot: Snapshot) -> None:
        """Atomically replace the file with ``snapshot``."""
        data = {
            RATINGS_DOCUMENT_KEY: {
                user_key: {rating_id: rating.to_dict() for rating_id, rating in records.items()}
                for user_key, records in snapshot.items()
            }
        }
        payload = json.dumps(data, indent=2, ensure_ascii=False)

        def write() -> None:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.file_path.name}.", suffix=".tmp", dir=str(self.file_path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.file_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

        run_with_retries(
            write,
            operation=f"write ratings file {self.file_path}",
            attempts=self._retry_attempts,
            base_delay=self._retry_base_delay,
        )

    # ------------------------------------------------------------- interface

    async def save(self, rating: AnimeRating, user_id: int) -> AnimeRating:
        """Insert or replace a rating and rewrite the file."""
        self.validate_record(rating)
        user_key = str(user_id)
        with hold_lock(self._lock, self._lock_timeout, "save rating"):
            current = self._current()
            user_ratings = dict(current.get(user_key, {}))
            stored = self.prepare_for_save(rating, user_ratings.get(rating.id))
            user_ratings[stored.id] = stored

            updated = dict(current)
            updated[user_key] = user_ratings
            self._write_document(updated)
            self._snapshot = updated
        logger.debug(f"Saved rating {stored.id} for user {user_id} to {self.file_path}")
        return stored

    async def list(self, user_id: int) -> List[AnimeRating]:
        """List all ratings of a user."""
        snapshot = self._snapshot
        if snapshot is None:
            with hold_lock(self._lock, self._lock_timeout, "load ratings"):
                snapshot = self._current()
        return list(snapshot.get(str(user_id), {}).values())

    async def get_by_id(self, rating_id: str, user_id: int) -> Optional[AnimeRating]:
        snapshot = self._snapshot
        if snapshot is None:
            with hold_lock(self._lock, self._lock_timeout, "load ratings"):
                snapshot = self._current()
        return snapshot.get(str(user_id), {}).get(rating_id)

    async def delete_by_id(self, rating_id: str, user_id: int) -> bool:
        """Delete a rating and rewrite the file; False when it was not stored."""
        user_key = str(user_id)
        with hold_lock(self._lock, self._lock_timeout, "delete rating"):
            current = self._current()
            if rating_id not in current.get(user_key, {}):
                return False

            user_ratings = dict(current[user_key])
            del user_ratings[rating_id]
            updated = dict(current)
            updated[user_key] = user_ratings
            self._write_document(updated)
            self._snapshot = updated
        logger.debug(f"Deleted rating {rating_id} for user {user_id} from {self.file_path}")
        return True

    def close(self) -> None:
        """Drop the mirror; the next call reloads from disk."""
        with hold_lock(self._lock, self._lock_timeout, "close rating store"):
            self._snapshot = None
