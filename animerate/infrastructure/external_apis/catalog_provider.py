"""Catalog provider backed by Jikan (search, details) and AniList (recommendations)."""
import asyncio
import logging
import random
from typing import List, Optional, Sequence

from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage
from animerate.core.exceptions import CatalogError
from animerate.infrastructure.external_apis.anilist_client import AniListClient
from animerate.infrastructure.external_apis.jikan_client import JikanClient

logger = logging.getLogger(__name__)


class JikanCatalogProvider:
    """CatalogProvider implementation.

    Recommendations are a random pick: one genre of the given anime (or one
    of their titles when no genre is known) is searched on AniList.
    """

    def __init__(self, jikan: JikanClient, anilist: AniListClient, rng: Optional[random.Random] = None):
        self._jikan = jikan
        self._anilist = anilist
        self._rng = rng or random.Random()

    async def search(self, query: str, page: int = 1, limit: int = 12) -> CatalogSearchPage:
        return await self._jikan.search(query, page=page, limit=limit)

    async def get_details(self, anime_id: int) -> CatalogAnime:
        return await self._jikan.get_details(anime_id)

    async def recommend(self, anime_ids: Sequence[int], limit: int = 10) -> List[CatalogAnime]:
        if not anime_ids:
            return []

        entries = [e for e in await asyncio.gather(*(self._jikan.find(i) for i in anime_ids)) if e]
        if not entries:
            raise CatalogError("Could not find titles for any of the provided anime IDs", 404)

        genres = list(dict.fromkeys(g for entry in entries for g in entry.genres))
        if genres:
            search_query = self._rng.choice(genres)
        else:
            search_query = self._rng.choice([entry.title for entry in entries])
        logger.info(f"Using search query for recommendations: {search_query}")

        excluded = set(anime_ids)
        candidates = await self._anilist.search_media(search_query, per_page=limit + len(excluded))
        return [c for c in candidates if c.id not in excluded][:limit]
