"""Dependency injection for FastAPI routes.

Resources are built once in the application lifespan and kept on
``app.state``; these providers hand them to the routes.
"""
from typing import Optional

from fastapi import Depends, Request

from animerate.application.ports.catalog import CatalogProvider, CategoryCatalog
from animerate.application.use_cases.browse_catalog import GetAnimeDetailsUseCase, SearchAnimeUseCase
from animerate.application.use_cases.delete_rating import DeleteRatingUseCase
from animerate.application.use_cases.get_rating_categories import (
    GetRatingCategoriesUseCase,
    GetRatingFormCategoriesUseCase,
)
from animerate.application.use_cases.get_recommendations import GetRecommendationsUseCase
from animerate.application.use_cases.list_ratings import ListRatingsUseCase
from animerate.application.use_cases.save_rating import SaveRatingUseCase
from animerate.config import Settings
from animerate.core.exceptions import CatalogError
from animerate.domain.repositories.rating_repository import RatingRepository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rating_repository(request: Request) -> RatingRepository:
    return request.app.state.rating_repository


def get_category_catalog(request: Request) -> CategoryCatalog:
    return request.app.state.category_catalog


def get_catalog_provider(request: Request) -> Optional[CatalogProvider]:
    return getattr(request.app.state, "catalog_provider", None)


def require_catalog_provider(
    provider: Optional[CatalogProvider] = Depends(get_catalog_provider),
) -> CatalogProvider:
    if provider is None:
        raise CatalogError("Catalog provider is not configured", 503)
    return provider


def get_current_user_id(settings: Settings = Depends(get_app_settings)) -> int:
    """The single implicit user until authentication exists."""
    return settings.DEFAULT_USER_ID


def get_save_rating_use_case(
    repository: RatingRepository = Depends(get_rating_repository),
    provider: Optional[CatalogProvider] = Depends(get_catalog_provider),
    settings: Settings = Depends(get_app_settings),
) -> SaveRatingUseCase:
    return SaveRatingUseCase(
        repository,
        catalog_provider=provider,
        require_rated_category=settings.REQUIRE_RATED_CATEGORY,
    )


def get_list_ratings_use_case(
    repository: RatingRepository = Depends(get_rating_repository),
) -> ListRatingsUseCase:
    return ListRatingsUseCase(repository)


def get_delete_rating_use_case(
    repository: RatingRepository = Depends(get_rating_repository),
) -> DeleteRatingUseCase:
    return DeleteRatingUseCase(repository)


def get_rating_categories_use_case(
    catalog: CategoryCatalog = Depends(get_category_catalog),
) -> GetRatingCategoriesUseCase:
    return GetRatingCategoriesUseCase(catalog)


def get_rating_form_categories_use_case(
    catalog: CategoryCatalog = Depends(get_category_catalog),
    repository: RatingRepository = Depends(get_rating_repository),
) -> GetRatingFormCategoriesUseCase:
    return GetRatingFormCategoriesUseCase(catalog, repository)


def get_search_anime_use_case(
    provider: CatalogProvider = Depends(require_catalog_provider),
) -> SearchAnimeUseCase:
    return SearchAnimeUseCase(provider)


def get_anime_details_use_case(
    provider: CatalogProvider = Depends(require_catalog_provider),
) -> GetAnimeDetailsUseCase:
    return GetAnimeDetailsUseCase(provider)


def get_recommendations_use_case(
    provider: CatalogProvider = Depends(require_catalog_provider),
    repository: RatingRepository = Depends(get_rating_repository),
) -> GetRecommendationsUseCase:
    return GetRecommendationsUseCase(provider, repository)
