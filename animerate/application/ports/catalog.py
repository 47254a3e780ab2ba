"""Catalog provider interface.

Implementations return data already shaped as catalog DTOs so they can be
swapped without changing application logic.
"""
from typing import List, Protocol, Sequence

from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage


class CatalogProvider(Protocol):
    async def search(self, query: str, page: int = 1, limit: int = 12) -> CatalogSearchPage:
        """Search the catalog by free text."""

    async def get_details(self, anime_id: int) -> CatalogAnime:
        """Return one entry; raises CatalogError when it cannot be fetched."""

    async def recommend(self, anime_ids: Sequence[int], limit: int = 10) -> List[CatalogAnime]:
        """Return entries related to ``anime_ids``, excluding them."""


class CategoryCatalog(Protocol):
    def load(self) -> list:
        """Return the current list of RatingCategoryBase."""
