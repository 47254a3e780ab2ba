"""In-memory implementation of RatingRepository.
Can replace any RatingRepository; contents live for the process lifetime."""
import logging
import threading
from typing import Dict, List, Optional

from animerate.domain.entities.anime_rating import AnimeRating
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.infrastructure.persistence.concurrency import hold_lock

logger = logging.getLogger(__name__)


class InMemoryRatingRepository(RatingRepository):
    """Ratings kept in a nested dict ``user_id -> rating id -> rating``."""

    backend_name = "memory"

    def __init__(self, lock_timeout: float = 10.0):
        self._ratings: Dict[int, Dict[str, AnimeRating]] = {}
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout

    async def save(self, rating: AnimeRating, user_id: int) -> AnimeRating:
        """Insert or replace a rating."""
        with hold_lock(self._lock, self._lock_timeout, "save rating"):
            self.validate_record(rating)
            user_ratings = self._ratings.setdefault(user_id, {})
            stored = self.prepare_for_save(rating, user_ratings.get(rating.id))
            user_ratings[stored.id] = stored
        logger.debug(f"Saved rating {stored.id} for user {user_id}")
        return stored

    async def list(self, user_id: int) -> List[AnimeRating]:
        """List all ratings of a user."""
        with hold_lock(self._lock, self._lock_timeout, "list ratings"):
            return list(self._ratings.get(user_id, {}).values())

    async def get_by_id(self, rating_id: str, user_id: int) -> Optional[AnimeRating]:
        """Find one rating of a user."""
        with hold_lock(self._lock, self._lock_timeout, "load rating"):
            return self._ratings.get(user_id, {}).get(rating_id)

    async def delete_by_id(self, rating_id: str, user_id: int) -> bool:
        """Delete a rating; False when it was not stored."""
        with hold_lock(self._lock, self._lock_timeout, "delete rating"):
            removed = self._ratings.get(user_id, {}).pop(rating_id, None)
        if removed is not None:
            logger.debug(f"Deleted rating {rating_id} for user {user_id}")
        return removed is not None

    def close(self) -> None:
        with hold_lock(self._lock, self._lock_timeout, "close rating store"):
            self._ratings.clear()
