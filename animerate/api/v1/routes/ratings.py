"""Rating API routes - thin layer delegating to use cases."""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from animerate.api.dependencies import (
    get_current_user_id,
    get_delete_rating_use_case,
    get_list_ratings_use_case,
    get_rating_categories_use_case,
    get_rating_form_categories_use_case,
    get_save_rating_use_case,
)
from animerate.api.v1.schemas.rating_schemas import (
    AnimeRatingRequestSchema,
    AnimeRatingSchema,
    RatingCategoriesResponseSchema,
    RatingFormCategoriesResponseSchema,
)
from animerate.application.use_cases.delete_rating import DeleteRatingUseCase
from animerate.application.use_cases.get_rating_categories import (
    GetRatingCategoriesUseCase,
    GetRatingFormCategoriesUseCase,
)
from animerate.application.use_cases.list_ratings import ListRatingsUseCase
from animerate.application.use_cases.save_rating import SaveRatingUseCase

router = APIRouter(tags=["ratings"])


@router.post("/ratings", response_model=AnimeRatingSchema)
async def save_rating(
    payload: AnimeRatingRequestSchema,
    user_id: int = Depends(get_current_user_id),
    use_case: SaveRatingUseCase = Depends(get_save_rating_use_case),
):
    """
    Create or update a rating.

    The overall rating is recomputed from the categories; a submitted
    ``overallRating`` is ignored.
    """
    rating = await use_case.execute(payload.to_draft(), user_id)
    return AnimeRatingSchema.from_entity(rating)


@router.get("/ratings", response_model=List[AnimeRatingSchema])
async def list_ratings(
    user_id: int = Depends(get_current_user_id),
    use_case: ListRatingsUseCase = Depends(get_list_ratings_use_case),
):
    """List the current user's ratings, most recently updated first."""
    ratings = await use_case.execute(user_id)
    return [AnimeRatingSchema.from_entity(r) for r in ratings]


@router.delete("/ratings/{rating_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating(
    rating_id: str,
    user_id: int = Depends(get_current_user_id),
    use_case: DeleteRatingUseCase = Depends(get_delete_rating_use_case),
):
    """Delete a rating. 404 when it does not exist."""
    if not await use_case.execute(rating_id, user_id):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Rating not found"})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/rating-categories", response_model=RatingCategoriesResponseSchema)
def get_rating_categories(
    use_case: GetRatingCategoriesUseCase = Depends(get_rating_categories_use_case),
):
    """Category catalog that drives the rating form."""
    return RatingCategoriesResponseSchema.from_entities(use_case.execute())


@router.get("/ratings/{rating_id}/categories", response_model=RatingFormCategoriesResponseSchema)
async def get_rating_form_categories(
    rating_id: str,
    user_id: int = Depends(get_current_user_id),
    use_case: GetRatingFormCategoriesUseCase = Depends(get_rating_form_categories_use_case),
):
    """Category catalog prefilled with an existing rating's values, for editing it."""
    categories = await use_case.execute(rating_id, user_id)
    if categories is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Rating not found"})
    return RatingFormCategoriesResponseSchema.from_entities(categories)
