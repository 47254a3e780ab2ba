"""Selection of rated anime used to seed recommendations."""
from typing import Iterable, List

from animerate.constants import RECOMMENDATION_MAX_SEED_IDS, RECOMMENDATION_SEED_THRESHOLD
from animerate.domain.entities.anime_rating import AnimeRating


def recommendation_seed_ids(
    ratings: Iterable[AnimeRating],
    threshold: float = RECOMMENDATION_SEED_THRESHOLD,
    max_ids: int = RECOMMENDATION_MAX_SEED_IDS,
) -> List[int]:
    """Anime ids of ratings at or above ``threshold``, most recent first, unique."""
    liked = sorted(
        (r for r in ratings if r.overall_rating >= threshold),
        key=lambda r: r.updated_at,
        reverse=True,
    )
    return list(dict.fromkeys(r.anime_id for r in liked))[:max_ids]
