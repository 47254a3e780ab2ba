"""Use case: list the ratings of a user."""
from typing import List

from animerate.domain.entities.anime_rating import AnimeRating
from animerate.domain.repositories.rating_repository import RatingRepository


class ListRatingsUseCase:
    """Return a user's ratings, most recently updated first."""

    def __init__(self, rating_repository: RatingRepository):
        self._rating_repo = rating_repository

    async def execute(self, user_id: int) -> List[AnimeRating]:
        ratings = await self._rating_repo.list(user_id)
        return sorted(ratings, key=lambda r: (r.updated_at, r.id), reverse=True)
