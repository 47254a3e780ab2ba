"""Pydantic schemas for the ratings API (camelCase on the wire)."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from animerate.domain.entities.anime_rating import (
    AnimeRating,
    RatingCategoryBase,
    RatingCategoryValue,
    RatingDraft,
)


class RatingCategorySchema(BaseModel):
    """Category catalog entry."""
    id: str
    name: str
    description: str = ""


class RatingCategoriesResponseSchema(BaseModel):
    """Response for the category catalog endpoint."""
    categories: List[RatingCategorySchema]

    @classmethod
    def from_entities(cls, categories: List[RatingCategoryBase]) -> "RatingCategoriesResponseSchema":
        return cls(categories=[RatingCategorySchema(**c.to_dict()) for c in categories])


class RatingCategoryValueSchema(BaseModel):
    """A scored category; ranges are checked by the domain."""
    id: str
    name: str = ""
    description: str = ""
    value: float


class RatingFormCategoriesResponseSchema(BaseModel):
    """Catalog categories prefilled with the values of one rating."""
    categories: List[RatingCategoryValueSchema]

    @classmethod
    def from_entities(cls, categories: List[RatingCategoryValue]) -> "RatingFormCategoriesResponseSchema":
        return cls(categories=[RatingCategoryValueSchema(**c.to_dict()) for c in categories])


class AnimeRatingRequestSchema(BaseModel):
    """Create-or-update payload. Only the anime identity is required."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    anime_id: Optional[int] = Field(None, alias="animeId")
    anime_title: Optional[str] = Field(None, alias="animeTitle")
    anime_image: Optional[str] = Field(None, alias="animeImage")
    categories: List[RatingCategoryValueSchema] = []
    # Informational only: the server recomputes the overall rating and owns the timestamps.
    overall_rating: Optional[float] = Field(None, alias="overallRating")
    notes: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    def to_draft(self) -> RatingDraft:
        return RatingDraft(
            id=self.id,
            anime_id=self.anime_id,
            anime_title=self.anime_title,
            anime_image=self.anime_image,
            categories=[c.model_dump() for c in self.categories],
            overall_rating=self.overall_rating,
            notes=self.notes,
        )


class AnimeRatingSchema(BaseModel):
    """A persisted rating."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    anime_id: int = Field(alias="animeId")
    anime_title: str = Field(alias="animeTitle")
    anime_image: str = Field(alias="animeImage")
    categories: List[RatingCategoryValueSchema]
    overall_rating: float = Field(alias="overallRating")
    notes: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_entity(cls, rating: AnimeRating) -> "AnimeRatingSchema":
        return cls.model_validate(rating.to_dict())
