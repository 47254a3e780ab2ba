"""Catalog proxy routes: search, details and recommendations."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from animerate.api.dependencies import (
    get_anime_details_use_case,
    get_app_settings,
    get_current_user_id,
    get_recommendations_use_case,
    get_search_anime_use_case,
)
from animerate.api.v1.schemas.catalog_schemas import (
    CatalogAnimeSchema,
    CatalogSearchResponseSchema,
    RecommendationsResponseSchema,
)
from animerate.application.use_cases.browse_catalog import GetAnimeDetailsUseCase, SearchAnimeUseCase
from animerate.application.use_cases.get_recommendations import GetRecommendationsUseCase
from animerate.config import Settings

router = APIRouter(tags=["catalog"])


def parse_anime_ids(raw: Optional[str]) -> Optional[List[int]]:
    """Parse ``"1,2,x"`` into ``[1, 2]``; None when the parameter is absent."""
    if raw is None:
        return None
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            ids.append(int(part))
    return ids


@router.get("/anime/search", response_model=CatalogSearchResponseSchema)
async def search_anime(
    query: str = Query("", description="Title to search for"),
    page: int = 1,
    limit: Optional[int] = None,
    settings: Settings = Depends(get_app_settings),
    use_case: SearchAnimeUseCase = Depends(get_search_anime_use_case),
):
    """Search the anime catalog."""
    result = await use_case.execute(query, page=page, limit=limit or settings.SEARCH_PAGE_SIZE)
    return CatalogSearchResponseSchema.from_dto(result)


@router.get("/anime/{anime_id}", response_model=CatalogAnimeSchema)
async def get_anime_details(
    anime_id: int,
    use_case: GetAnimeDetailsUseCase = Depends(get_anime_details_use_case),
):
    """Full details of one catalog entry."""
    return CatalogAnimeSchema.from_dto(await use_case.execute(anime_id))


@router.get("/recommendations", response_model=RecommendationsResponseSchema)
async def get_recommendations(
    anime_ids: Optional[str] = Query(None, alias="animeIds"),
    limit: Optional[int] = None,
    user_id: int = Depends(get_current_user_id),
    settings: Settings = Depends(get_app_settings),
    use_case: GetRecommendationsUseCase = Depends(get_recommendations_use_case),
):
    """
    Random-pick recommendations.

    Seeds from ``animeIds`` when given, otherwise from the user's highly
    rated anime.
    """
    recommendations = await use_case.execute(
        user_id,
        anime_ids=parse_anime_ids(anime_ids),
        limit=limit or settings.RECOMMENDATION_LIMIT,
    )
    return RecommendationsResponseSchema(
        recommendations=[CatalogAnimeSchema.from_dto(a) for a in recommendations]
    )
