"""Anime rating domain entities - pure business logic."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from animerate.constants import CATEGORY_SCALE_MAX
from animerate.core.exceptions import ValidationError
from animerate.domain.value_objects.star_value import validate_star_value


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any, field_name: str) -> datetime:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp, got {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp, got {value!r}")


@dataclass(frozen=True)
class RatingCategoryBase:
    """One entry of the shared category catalog."""
    id: str
    name: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RatingCategoryBase":
        if not isinstance(data, Mapping):
            raise ValidationError(f"Category must be an object, got {data!r}")
        category_id = data.get("id")
        name = data.get("name")
        if not isinstance(category_id, str) or not category_id.strip():
            raise ValidationError("Category id is required")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"Category '{category_id}' is missing a name")
        description = data.get("description") or ""
        return cls(id=category_id, name=name, description=str(description))


@dataclass(frozen=True)
class RatingCategoryValue:
    """A category scored 0-10 in half steps."""
    id: str
    name: str
    description: str
    value: float

    def __post_init__(self):
        """Validate category identity and value."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValidationError("Category id is required")
        object.__setattr__(
            self,
            "value",
            validate_star_value(self.value, CATEGORY_SCALE_MAX, label=f"Category '{self.id}' value"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RatingCategoryValue":
        if isinstance(data, RatingCategoryValue):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError(f"Category must be an object, got {data!r}")
        if "value" not in data:
            raise ValidationError(f"Category '{data.get('id')}' is missing a value")
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            value=data["value"],
        )


def parse_categories(items: Optional[Iterable[Any]]) -> Tuple[RatingCategoryValue, ...]:
    """Build category values, rejecting duplicate ids."""
    if items is None:
        return ()
    if isinstance(items, (str, bytes, Mapping)):
        raise ValidationError("categories must be a list")
    categories = tuple(RatingCategoryValue.from_dict(item) for item in items)
    seen = set()
    for category in categories:
        if category.id in seen:
            raise ValidationError(f"Duplicate category id '{category.id}'")
        seen.add(category.id)
    return categories


def has_rated_category(categories: Iterable[RatingCategoryValue]) -> bool:
    """True when at least one category carries a non-zero value."""
    return any(category.value > 0 for category in categories)


def map_base_categories(
    base_categories: Iterable[RatingCategoryBase],
    existing_values: Optional[Mapping[str, float]] = None,
) -> List[RatingCategoryValue]:
    """Turn catalog entries into category values, prefilled from ``existing_values`` or zero."""
    existing_values = existing_values or {}
    return [
        RatingCategoryValue(
            id=base.id,
            name=base.name,
            description=base.description,
            value=existing_values.get(base.id, 0.0),
        )
        for base in base_categories
    ]


@dataclass(frozen=True)
class AnimeRating:
    """A user's multi-category rating of one anime.

    Attributes:
        id: Opaque unique identifier (sole identity within a user's ratings)
        anime_id: Catalog id of the rated anime
        anime_title: Title snapshot taken when the rating was created
        anime_image: Image URL snapshot taken when the rating was created
        categories: Scored categories
        overall_rating: 0-5 aggregate derived from ``categories``
        created_at: Set once on first insert
        updated_at: Refreshed on every write
        notes: Free-text notes
    """
    id: str
    anime_id: int
    anime_title: str
    anime_image: str
    categories: Tuple[RatingCategoryValue, ...]
    overall_rating: float
    created_at: datetime
    updated_at: datetime
    notes: Optional[str] = None

    def category_values(self) -> List[float]:
        return [category.value for category in self.categories]

    def to_dict(self) -> dict:
        """Convert to the camelCase wire/storage representation."""
        result = {
            "id": self.id,
            "animeId": self.anime_id,
            "animeTitle": self.anime_title,
            "animeImage": self.anime_image,
            "categories": [category.to_dict() for category in self.categories],
            "overallRating": self.overall_rating,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.notes is not None:
            result["notes"] = self.notes
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnimeRating":
        """Create an AnimeRating from its stored representation.

        Raises:
            ValidationError: If required fields are missing or invalid
        """
        required_fields = {
            "id", "animeId", "animeTitle", "animeImage",
            "categories", "overallRating", "createdAt", "updatedAt",
        }
        missing_fields = required_fields - set(data.keys())
        if missing_fields:
            raise ValidationError(f"Missing required fields: {sorted(missing_fields)}")

        anime_id = data["animeId"]
        if isinstance(anime_id, bool) or not isinstance(anime_id, int):
            raise ValidationError(f"animeId must be an integer, got {anime_id!r}")

        return cls(
            id=str(data["id"]),
            anime_id=anime_id,
            anime_title=data["animeTitle"],
            anime_image=data["animeImage"],
            categories=parse_categories(data["categories"]),
            overall_rating=float(data["overallRating"]),
            created_at=parse_timestamp(data["createdAt"], "createdAt"),
            updated_at=parse_timestamp(data["updatedAt"], "updatedAt"),
            notes=data.get("notes"),
        )


@dataclass
class RatingDraft:
    """Unvalidated rating input as submitted by a caller.

    Every field is optional; ``build_rating`` decides what is required.
    """
    id: Optional[str] = None
    anime_id: Optional[int] = None
    anime_title: Optional[str] = None
    anime_image: Optional[str] = None
    categories: List[Any] = field(default_factory=list)
    overall_rating: Optional[float] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RatingDraft":
        """Read a camelCase payload."""
        return cls(
            id=data.get("id"),
            anime_id=data.get("animeId"),
            anime_title=data.get("animeTitle"),
            anime_image=data.get("animeImage"),
            categories=list(data.get("categories") or []),
            overall_rating=data.get("overallRating"),
            notes=data.get("notes"),
        )
