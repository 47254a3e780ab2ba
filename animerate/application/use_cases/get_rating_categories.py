"""Use cases: fetch the rating category catalog, optionally prefilled."""
from typing import List, Optional

from animerate.application.ports.catalog import CategoryCatalog
from animerate.domain.entities.anime_rating import (
    RatingCategoryBase,
    RatingCategoryValue,
    map_base_categories,
)
from animerate.domain.repositories.rating_repository import RatingRepository


class GetRatingCategoriesUseCase:
    def __init__(self, category_catalog: CategoryCatalog):
        self._catalog = category_catalog

    def execute(self) -> List[RatingCategoryBase]:
        return self._catalog.load()


class GetRatingFormCategoriesUseCase:
    """Catalog categories with the values of an existing rating.

    Categories the rating does not score start at zero; scored categories no
    longer in the catalog are left out.
    """

    def __init__(self, category_catalog: CategoryCatalog, rating_repository: RatingRepository):
        self._catalog = category_catalog
        self._rating_repo = rating_repository

    async def execute(self, rating_id: str, user_id: int) -> Optional[List[RatingCategoryValue]]:
        """Returns None when the rating does not exist."""
        rating = await self._rating_repo.get_by_id(rating_id, user_id)
        if rating is None:
            return None
        existing_values = {category.id: category.value for category in rating.categories}
        return map_base_categories(self._catalog.load(), existing_values)
