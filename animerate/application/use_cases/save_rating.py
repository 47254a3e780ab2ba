"""Use case: create or update a rating."""
import logging
from dataclasses import replace
from typing import Optional

from animerate.application.ports.catalog import CatalogProvider
from animerate.core.exceptions import ValidationError
from animerate.domain.entities.anime_rating import AnimeRating, RatingDraft, has_rated_category
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.domain.services.rating_builder import build_rating

logger = logging.getLogger(__name__)


class SaveRatingUseCase:
    """Build a rating from submitted input and upsert it.

    An existing rating with the same id keeps its ``id`` and ``created_at``.
    When the title or image snapshot is missing it is copied from the
    catalog provider, if one is available.
    """

    def __init__(
        self,
        rating_repository: RatingRepository,
        catalog_provider: Optional[CatalogProvider] = None,
        require_rated_category: bool = False,
    ):
        self._rating_repo = rating_repository
        self._catalog = catalog_provider
        self._require_rated_category = require_rated_category

    async def _with_catalog_snapshot(self, draft: RatingDraft) -> RatingDraft:
        if self._catalog is None or (draft.anime_title and draft.anime_image):
            return draft
        if isinstance(draft.anime_id, bool) or not isinstance(draft.anime_id, int):
            return draft

        anime = await self._catalog.get_details(draft.anime_id)
        logger.debug(f"Snapshotting catalog entry {anime.id} into rating")
        return replace(
            draft,
            anime_title=draft.anime_title or anime.title,
            anime_image=draft.anime_image or anime.image_url,
        )

    async def execute(self, draft: RatingDraft, user_id: int) -> AnimeRating:
        """Validate, build and persist a rating.

        Raises:
            ValidationError: Invalid input; nothing is written
            StorageError: The store could not persist the rating
        """
        existing = None
        if draft.id is not None and str(draft.id).strip():
            existing = await self._rating_repo.get_by_id(str(draft.id).strip(), user_id)

        draft = await self._with_catalog_snapshot(draft)
        rating = build_rating(draft, existing)

        if self._require_rated_category and not has_rated_category(rating.categories):
            raise ValidationError("Rate at least one category before saving")

        saved = await self._rating_repo.save(rating, user_id)
        logger.info(f"{'Updated' if existing else 'Created'} rating {saved.id} for anime {saved.anime_id}")
        return saved
