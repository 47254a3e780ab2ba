"""Use case: recommend anime related to what the user liked."""
import logging
from typing import List, Optional, Sequence

from animerate.application.dto.catalog_dto import CatalogAnime
from animerate.application.ports.catalog import CatalogProvider
from animerate.core.exceptions import ValidationError
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.domain.services.recommendation_seeds import recommendation_seed_ids

logger = logging.getLogger(__name__)


class GetRecommendationsUseCase:
    """Thin proxy over the catalog provider's random-pick recommendations."""

    def __init__(self, catalog_provider: CatalogProvider, rating_repository: RatingRepository):
        self._catalog = catalog_provider
        self._rating_repo = rating_repository

    async def execute(
        self,
        user_id: int,
        anime_ids: Optional[Sequence[int]] = None,
        limit: int = 10,
    ) -> List[CatalogAnime]:
        """Recommend anime.

        Args:
            user_id: Whose ratings seed the pick when ``anime_ids`` is None
            anime_ids: Explicit seed ids
            limit: Maximum number of results

        Raises:
            ValidationError: If explicit ``anime_ids`` are given but empty
        """
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        if anime_ids is None:
            anime_ids = recommendation_seed_ids(await self._rating_repo.list(user_id))
            if not anime_ids:
                logger.debug(f"No highly rated anime for user {user_id}, nothing to recommend")
                return []
        elif not anime_ids:
            raise ValidationError("No valid anime IDs provided")

        return await self._catalog.recommend(list(anime_ids), limit=limit)
