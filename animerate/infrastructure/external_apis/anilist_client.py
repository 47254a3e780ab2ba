"""AniList GraphQL client used for recommendations."""
import logging
from typing import Any, List

import httpx

from animerate.application.dto.catalog_dto import CatalogAnime
from animerate.core.exceptions import CatalogError
from animerate.infrastructure.external_apis.http_client import to_catalog_status

logger = logging.getLogger(__name__)

MEDIA_SEARCH_QUERY = """
query ($search: String, $perPage: Int) {
  Page(page: 1, perPage: $perPage) {
    media(type: ANIME, search: $search) {
      id
      idMal
      title { romaji english }
      coverImage { large medium }
      format
      episodes
      genres
      averageScore
      description
      startDate { year }
      studios { nodes { name } }
    }
  }
}
"""


def parse_anilist_media(media: Any) -> CatalogAnime:
    """Map an AniList media object to CatalogAnime (MAL id as identity).

    AniList scores on 0-100, the catalog uses MAL's 0-10.
    """
    title = media.get("title") or {}
    cover = media.get("coverImage") or {}
    start = media.get("startDate") or {}
    studios = (media.get("studios") or {}).get("nodes") or []
    average = media.get("averageScore")
    return CatalogAnime(
        id=media["idMal"],
        title=title.get("english") or title.get("romaji") or "",
        image_url=cover.get("large") or cover.get("medium") or "",
        type=media.get("format"),
        episodes=media.get("episodes"),
        year=start.get("year"),
        score=average / 10 if average is not None else None,
        synopsis=media.get("description"),
        genres=list(media.get("genres") or []),
        studios=[s["name"] for s in studios if isinstance(s, dict) and s.get("name")],
    )


class AniListClient:
    """Client for the AniList GraphQL API."""

    def __init__(self, http_client: httpx.AsyncClient, api_url: str = "https://graphql.anilist.co"):
        self._http = http_client
        self.api_url = api_url

    async def search_media(self, search: str, per_page: int = 10) -> List[CatalogAnime]:
        """Search anime; entries without a MAL id are dropped."""
        try:
            response = await self._http.post(
                self.api_url,
                json={"query": MEDIA_SEARCH_QUERY, "variables": {"search": search, "perPage": per_page}},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error calling AniList API: {e}")
            raise CatalogError(f"Recommendation request failed: {e}", to_catalog_status(e))
        except ValueError as e:
            logger.error(f"AniList API returned invalid JSON: {e}")
            raise CatalogError("Invalid API response format", 502)

        try:
            media = payload["data"]["Page"]["media"]
        except (KeyError, TypeError):
            raise CatalogError("Invalid API response format", 502)

        return [parse_anilist_media(m) for m in media if isinstance(m, dict) and m.get("idMal")]
