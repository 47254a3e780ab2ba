"""Jikan (MyAnimeList) API client for search and details."""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage
from animerate.core.exceptions import CatalogError
from animerate.infrastructure.external_apis.http_client import to_catalog_status

logger = logging.getLogger(__name__)

HTTP_RATE_LIMIT = 429


def parse_jikan_anime(data: Any) -> CatalogAnime:
    """Map a Jikan anime object to CatalogAnime.

    Raises:
        CatalogError: If mal_id, title or the jpg image are missing
    """
    if not isinstance(data, dict):
        raise CatalogError("Invalid API response format: anime entry is not an object", 502)
    try:
        images = data.get("images") or {}
        jpg = images.get("jpg") or {}
        image_url = jpg.get("large_image_url") or jpg.get("image_url")
        anime_id = data["mal_id"]
        title = data["title"]
    except (KeyError, AttributeError) as e:
        raise CatalogError(f"Invalid API response format: missing {e}", 502)
    if not isinstance(anime_id, int) or not isinstance(title, str) or not image_url:
        raise CatalogError("Invalid API response format: incomplete anime entry", 502)

    aired = data.get("aired") or {}
    year = data.get("year")
    if year is None and isinstance(aired.get("from"), str) and aired["from"][:4].isdigit():
        year = int(aired["from"][:4])

    return CatalogAnime(
        id=anime_id,
        title=title,
        image_url=image_url,
        type=data.get("type"),
        episodes=data.get("episodes"),
        year=year,
        score=data.get("score"),
        synopsis=data.get("synopsis"),
        genres=[g["name"] for g in data.get("genres") or [] if isinstance(g, dict) and g.get("name")],
        studios=[s["name"] for s in data.get("studios") or [] if isinstance(s, dict) and s.get("name")],
    )


class JikanClient:
    """Client for the Jikan v4 REST API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.jikan.moe/v4",
        request_delay: float = 0.3,
        details_delay: float = 1.0,
        rate_limit_retry_delay: float = 2.0,
    ):
        self._http = http_client
        self.base_url = base_url.rstrip("/")
        self.request_delay = request_delay
        self.details_delay = details_delay
        self.rate_limit_retry_delay = rate_limit_retry_delay

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, delay: Optional[float] = None) -> Any:
        """GET ``path``; retries once after a longer pause when rate limited."""
        url = f"{self.base_url}{path}"
        pause = self.request_delay if delay is None else delay
        if pause:
            await asyncio.sleep(pause)

        try:
            response = await self._http.get(url, params=params)
            if response.status_code == HTTP_RATE_LIMIT:
                logger.info(f"Rate limited by Jikan API on {path}, retrying in {self.rate_limit_retry_delay}s")
                await asyncio.sleep(self.rate_limit_retry_delay)
                response = await self._http.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error calling Jikan API {path}: {e}")
            raise CatalogError(f"Catalog request failed: {e}", to_catalog_status(e))
        except ValueError as e:
            logger.error(f"Jikan API returned invalid JSON for {path}: {e}")
            raise CatalogError("Invalid API response format", 502)

    async def search(self, query: str, page: int = 1, limit: int = 12) -> CatalogSearchPage:
        """Search anime by title."""
        payload = await self._get(
            "/anime",
            params={"q": query, "page": page, "limit": limit, "sfw": "true"},
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise CatalogError("Invalid API response format", 502)

        pagination = payload.get("pagination") or {}
        return CatalogSearchPage(
            results=[parse_jikan_anime(item) for item in payload["data"]],
            last_visible_page=pagination.get("last_visible_page", page),
            has_next_page=bool(pagination.get("has_next_page", False)),
        )

    async def get_details(self, anime_id: int) -> CatalogAnime:
        """Full details of one anime."""
        payload = await self._get(f"/anime/{anime_id}/full", delay=self.details_delay)
        if not isinstance(payload, dict):
            raise CatalogError("Invalid API response format", 502)
        return parse_jikan_anime(payload.get("data"))

    async def find(self, anime_id: int) -> Optional[CatalogAnime]:
        """Basic entry of one anime, or None when it cannot be fetched."""
        try:
            payload = await self._get(f"/anime/{anime_id}", delay=0)
            return parse_jikan_anime(payload.get("data") if isinstance(payload, dict) else None)
        except CatalogError as e:
            logger.warning(f"Could not fetch anime {anime_id}: {e.message}")
            return None
