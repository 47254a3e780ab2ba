"""Pydantic schemas for catalog proxy responses."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage


class CatalogAnimeSchema(BaseModel):
    """Catalog entry."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    image_url: str = Field(alias="imageUrl")
    type: Optional[str] = None
    episodes: Optional[int] = None
    year: Optional[int] = None
    score: Optional[float] = None
    synopsis: Optional[str] = None
    genres: List[str] = []
    studios: List[str] = []

    @classmethod
    def from_dto(cls, anime: CatalogAnime) -> "CatalogAnimeSchema":
        return cls(
            id=anime.id,
            title=anime.title,
            image_url=anime.image_url,
            type=anime.type,
            episodes=anime.episodes,
            year=anime.year,
            score=anime.score,
            synopsis=anime.synopsis,
            genres=anime.genres,
            studios=anime.studios,
        )


class PaginationSchema(BaseModel):
    """Pagination metadata."""
    model_config = ConfigDict(populate_by_name=True)

    last_visible_page: int = Field(alias="lastVisiblePage")
    has_next_page: bool = Field(alias="hasNextPage")


class CatalogSearchResponseSchema(BaseModel):
    """Response for the search endpoint."""
    data: List[CatalogAnimeSchema]
    pagination: PaginationSchema

    @classmethod
    def from_dto(cls, page: CatalogSearchPage) -> "CatalogSearchResponseSchema":
        return cls(
            data=[CatalogAnimeSchema.from_dto(a) for a in page.results],
            pagination=PaginationSchema(
                last_visible_page=page.last_visible_page,
                has_next_page=page.has_next_page,
            ),
        )


class RecommendationsResponseSchema(BaseModel):
    """Response for the recommendations endpoint."""
    recommendations: List[CatalogAnimeSchema]
