"""Rating construction and normalization.

``build_rating`` is the only way submitted input becomes an ``AnimeRating``:
identity fields are checked, category values validated, and the overall
rating recomputed from the categories. A caller-supplied overall rating is
ignored.
"""
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from animerate.constants import OVERALL_SCALE_MAX
from animerate.core.exceptions import ValidationError
from animerate.domain.entities.anime_rating import (
    AnimeRating,
    RatingDraft,
    ensure_utc,
    parse_categories,
    utcnow,
)
from animerate.domain.services.aggregation import compute_overall_rating
from animerate.domain.value_objects.star_value import validate_star_value


def new_rating_id() -> str:
    """Generate an opaque unique rating id."""
    return uuid.uuid4().hex


def require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_anime_id(value: Any) -> int:
    if value is None:
        raise ValidationError("animeId is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"animeId must be an integer, got {value!r}")
    if value <= 0:
        raise ValidationError(f"animeId must be positive, got {value}")
    return value


def build_rating(
    draft: Union[RatingDraft, Mapping[str, Any]],
    existing: Optional[AnimeRating] = None,
    now: Optional[datetime] = None,
) -> AnimeRating:
    """Validate ``draft`` and build a complete rating.

    Args:
        draft: Submitted input (a RatingDraft or a camelCase mapping)
        existing: The stored rating being edited, if any. Its ``id`` and
            ``created_at`` are carried over. Otherwise ``created_at`` is ``now``;
            a submitted ``createdAt`` is ignored.
        now: Clock override, defaults to the current UTC time

    Returns:
        A fully populated AnimeRating

    Raises:
        ValidationError: On missing identity fields or out-of-range values
    """
    if isinstance(draft, Mapping):
        draft = RatingDraft.from_dict(draft)
    now = ensure_utc(now) if now is not None else utcnow()

    anime_id = require_anime_id(draft.anime_id)
    anime_title = require_text(draft.anime_title, "animeTitle")
    anime_image = require_text(draft.anime_image, "animeImage")
    categories = parse_categories(draft.categories)

    overall_rating = compute_overall_rating(category.value for category in categories)
    validate_star_value(overall_rating, OVERALL_SCALE_MAX, label="Overall rating")

    if draft.notes is not None and not isinstance(draft.notes, str):
        raise ValidationError("notes must be a string")

    if existing is not None:
        rating_id = existing.id
        created_at = existing.created_at
    else:
        submitted_id = str(draft.id).strip() if draft.id is not None else ""
        rating_id = submitted_id or new_rating_id()
        created_at = now

    return AnimeRating(
        id=rating_id,
        anime_id=anime_id,
        anime_title=anime_title,
        anime_image=anime_image,
        categories=categories,
        overall_rating=overall_rating,
        created_at=created_at,
        updated_at=now,
        notes=draft.notes,
    )
