"""
Pytest configuration and shared fixtures for backend tests.

This module provides test fixtures for:
- Rating repositories (memory, JSON file, SQLite) behind one parametrized fixture
- FastAPI test client with a fake catalog provider
- Test data factories
"""

import asyncio
import os
from typing import Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from animerate.api.dependencies import get_catalog_provider
from animerate.application.dto.catalog_dto import CatalogAnime, CatalogSearchPage
from animerate.config import Settings
from animerate.core.exceptions import CatalogError
from animerate.domain.services.rating_builder import build_rating
from animerate.infrastructure.persistence.db import create_db_engine
from animerate.infrastructure.persistence.repositories.in_memory_rating_repository import (
    InMemoryRatingRepository,
)
from animerate.infrastructure.persistence.repositories.json_file_rating_repository import (
    JsonFileRatingRepository,
)
from animerate.infrastructure.persistence.repositories.sqlalchemy_rating_repository import (
    SQLAlchemyRatingRepository,
)
from animerate.main import create_app

BACKENDS = ["memory", "file", "db"]


# ==============================================================================
# ASYNC SUPPORT
# ==============================================================================

@pytest.fixture
def run():
    """Run a coroutine to completion from a synchronous test."""
    return asyncio.run


# ==============================================================================
# REPOSITORY FIXTURES
# ==============================================================================

def build_repository(backend: str, tmp_path, name: str = "ratings"):
    """Construct a fresh rating repository of the given backend."""
    if backend == "memory":
        return InMemoryRatingRepository(lock_timeout=5)
    if backend == "file":
        return JsonFileRatingRepository(
            str(tmp_path / f"{name}.json"), lock_timeout=5, retry_base_delay=0
        )
    if backend == "db":
        engine = create_db_engine(f"sqlite:///{tmp_path / f'{name}.db'}")
        return SQLAlchemyRatingRepository(engine, lock_timeout=5, retry_base_delay=0, owns_engine=True)
    raise ValueError(backend)


@pytest.fixture
def repository_factory(tmp_path):
    """Factory building repositories; closes them after the test."""
    created = []

    def factory(backend: str, name: str = "ratings"):
        repository = build_repository(backend, tmp_path, name)
        created.append(repository)
        return repository

    yield factory

    for repository in created:
        repository.close()


@pytest.fixture(params=BACKENDS)
def rating_repository(request, repository_factory):
    """Every test using this fixture runs once per storage backend."""
    return repository_factory(request.param)


# ==============================================================================
# TEST DATA FACTORIES
# ==============================================================================

def rating_payload(
    rating_id: Optional[str] = "r1",
    anime_id: int = 42,
    values: Optional[Dict[str, float]] = None,
    **extra,
) -> dict:
    """camelCase rating payload as the presentation layer sends it."""
    values = {"story": 8, "art": 6} if values is None else values
    payload = {
        "id": rating_id,
        "animeId": anime_id,
        "animeTitle": f"Anime {anime_id}",
        "animeImage": f"https://cdn.example.com/anime/{anime_id}.jpg",
        "categories": [
            {"id": key, "name": key.title(), "description": f"{key} quality", "value": value}
            for key, value in values.items()
        ],
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_rating():
    """Build a validated AnimeRating."""
    def factory(rating_id: Optional[str] = "r1", anime_id: int = 42, values=None, **extra):
        return build_rating(rating_payload(rating_id, anime_id, values, **extra))

    return factory


# ==============================================================================
# CATALOG FIXTURES
# ==============================================================================

class FakeCatalogProvider:
    """In-process CatalogProvider used by API and use case tests."""

    def __init__(self):
        self.recommend_calls: List[Sequence[int]] = []
        self.search_calls: List[tuple] = []

    async def search(self, query: str, page: int = 1, limit: int = 12) -> CatalogSearchPage:
        self.search_calls.append((query, page, limit))
        return CatalogSearchPage(
            results=[self._anime(1), self._anime(2)],
            last_visible_page=3,
            has_next_page=True,
        )

    async def get_details(self, anime_id: int) -> CatalogAnime:
        if anime_id == 404:
            raise CatalogError("Not Found", 404)
        return self._anime(anime_id)

    async def recommend(self, anime_ids: Sequence[int], limit: int = 10) -> List[CatalogAnime]:
        self.recommend_calls.append(list(anime_ids))
        return [self._anime(1000 + i) for i in range(min(limit, 2))]

    @staticmethod
    def _anime(anime_id: int) -> CatalogAnime:
        return CatalogAnime(
            id=anime_id,
            title=f"Catalog Anime {anime_id}",
            image_url=f"https://cdn.example.com/catalog/{anime_id}.jpg",
            type="TV",
            episodes=12,
            genres=["Adventure", "Fantasy"],
        )


@pytest.fixture
def fake_catalog():
    return FakeCatalogProvider()


# ==============================================================================
# API FIXTURES
# ==============================================================================

@pytest.fixture
def api_settings(tmp_path):
    """Settings for an isolated app instance."""
    return Settings(
        STORAGE_BACKEND="memory",
        RATINGS_FILE_PATH=str(tmp_path / "ratings.json"),
        DATABASE_URL=f"sqlite:///{tmp_path / 'animerate.db'}",
        CATEGORIES_FILE_PATH=str(tmp_path / "missing-categories.json"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(api_settings, fake_catalog):
    """FastAPI test client backed by the configured store and a fake catalog."""
    app = create_app(api_settings)
    app.dependency_overrides[get_catalog_provider] = lambda: fake_catalog

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
