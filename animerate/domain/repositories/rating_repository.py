"""Rating repository interface - abstraction for rating persistence."""
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from animerate.core.exceptions import StorageError
from animerate.domain.entities.anime_rating import AnimeRating, ensure_utc, utcnow
from animerate.domain.services.aggregation import compute_overall_rating
from animerate.domain.services.rating_builder import require_anime_id, require_text


class RatingRepository(ABC):
    """Repository interface for AnimeRating, keyed by ``(user_id, rating.id)``.

    Every backend must behave identically: ``save`` upserts, ``list`` returns
    an empty list for unknown users, ``delete_by_id`` reports absence with
    ``False`` instead of raising.
    """

    backend_name = "abstract"

    @abstractmethod
    async def save(self, rating: AnimeRating, user_id: int) -> AnimeRating:
        """Insert or replace ``rating`` and return the stored record."""
        pass

    @abstractmethod
    async def list(self, user_id: int) -> List[AnimeRating]:
        """List every rating of ``user_id`` in unspecified order."""
        pass

    @abstractmethod
    async def delete_by_id(self, rating_id: str, user_id: int) -> bool:
        """Delete a rating. Returns False when it did not exist."""
        pass

    async def get_by_id(self, rating_id: str, user_id: int) -> Optional[AnimeRating]:
        """Find one rating of ``user_id``."""
        for rating in await self.list(user_id):
            if rating.id == rating_id:
                return rating
        return None

    def close(self) -> None:
        """Release held resources. Safe to call more than once."""

    @staticmethod
    def ensure_identity(rating: AnimeRating) -> str:
        """Return the rating id or raise StorageError when it is missing."""
        rating_id = getattr(rating, "id", None)
        if not isinstance(rating_id, str) or not rating_id.strip():
            raise StorageError("Cannot save a rating without an id")
        return rating_id

    @staticmethod
    def validate_record(rating: AnimeRating) -> str:
        """Check identity and required fields before anything is written.

        Raises:
            StorageError: If the rating has no id
            ValidationError: If the anime id, title or image is missing
        """
        rating_id = RatingRepository.ensure_identity(rating)
        require_anime_id(rating.anime_id)
        require_text(rating.anime_title, "animeTitle")
        require_text(rating.anime_image, "animeImage")
        return rating_id

    @staticmethod
    def prepare_for_save(
        rating: AnimeRating,
        existing: Optional[AnimeRating],
        now: Optional[datetime] = None,
    ) -> AnimeRating:
        """Stamp a rating for persistence.

        Keeps the first ``created_at``, refreshes ``updated_at`` (never moving
        it backwards) and recomputes ``overall_rating`` from the categories.

        Raises:
            StorageError: If the rating has no id
            ValidationError: If a required field is missing
        """
        RatingRepository.validate_record(rating)
        now = now or utcnow()
        updated_at = max(now, ensure_utc(rating.updated_at)) if rating.updated_at else now
        created_at = existing.created_at if existing is not None else (ensure_utc(rating.created_at) if rating.created_at else now)
        return replace(
            rating,
            created_at=created_at,
            updated_at=updated_at,
            overall_rating=compute_overall_rating(rating.category_values()),
        )
