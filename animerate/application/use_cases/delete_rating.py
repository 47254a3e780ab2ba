"""Use case: delete a rating by id."""
import logging

from animerate.domain.repositories.rating_repository import RatingRepository

logger = logging.getLogger(__name__)


class DeleteRatingUseCase:
    def __init__(self, rating_repository: RatingRepository):
        self._rating_repo = rating_repository

    async def execute(self, rating_id: str, user_id: int) -> bool:
        """Returns False when the rating did not exist."""
        removed = await self._rating_repo.delete_by_id(rating_id, user_id)
        if removed:
            logger.info(f"Deleted rating {rating_id}")
        return removed
