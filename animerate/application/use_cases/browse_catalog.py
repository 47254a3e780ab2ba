"""Use cases: search the catalog and fetch anime details."""
from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage
from animerate.application.ports.catalog import CatalogProvider
from animerate.core.exceptions import ValidationError


class SearchAnimeUseCase:
    def __init__(self, catalog_provider: CatalogProvider, max_page_size: int = 25):
        self._catalog = catalog_provider
        self._max_page_size = max_page_size

    async def execute(self, query: str, page: int = 1, limit: int = 12) -> CatalogSearchPage:
        """Search by title.

        Raises:
            ValidationError: If the query is blank or paging is out of range
        """
        if not query or not query.strip():
            raise ValidationError("Query parameter is required")
        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= limit <= self._max_page_size:
            raise ValidationError(f"limit must be between 1 and {self._max_page_size}")
        return await self._catalog.search(query.strip(), page=page, limit=limit)


class GetAnimeDetailsUseCase:
    def __init__(self, catalog_provider: CatalogProvider):
        self._catalog = catalog_provider

    async def execute(self, anime_id: int) -> CatalogAnime:
        if anime_id <= 0:
            raise ValidationError("Anime ID is required")
        return await self._catalog.get_details(anime_id)
