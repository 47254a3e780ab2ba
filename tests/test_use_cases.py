"""Tests for application use cases."""
from dataclasses import replace
from datetime import timedelta

import pytest

from animerate.core.exceptions import CatalogError, ValidationError
from animerate.domain.entities.anime_rating import RatingDraft
from animerate.application.use_cases.browse_catalog import GetAnimeDetailsUseCase, SearchAnimeUseCase
from animerate.application.use_cases.delete_rating import DeleteRatingUseCase
from animerate.application.use_cases.get_rating_categories import GetRatingFormCategoriesUseCase
from animerate.application.use_cases.get_recommendations import GetRecommendationsUseCase
from animerate.application.use_cases.list_ratings import ListRatingsUseCase
from animerate.application.use_cases.save_rating import SaveRatingUseCase
from animerate.infrastructure.categories.json_category_catalog import JsonCategoryCatalog
from animerate.infrastructure.persistence.repositories.in_memory_rating_repository import (
    InMemoryRatingRepository,
)
from tests.conftest import rating_payload


@pytest.fixture
def repository():
    return InMemoryRatingRepository()


class TestSaveRating:

    def test_creates_rating(self, run, repository):
        saved = run(SaveRatingUseCase(repository).execute(RatingDraft.from_dict(rating_payload()), 1))

        assert saved.overall_rating == 3.5
        assert run(repository.list(1)) == [saved]

    def test_update_keeps_identity_and_creation_time(self, run, repository):
        use_case = SaveRatingUseCase(repository)
        first = run(use_case.execute(RatingDraft.from_dict(rating_payload()), 1))

        second = run(use_case.execute(
            RatingDraft.from_dict(rating_payload(values={"story": 10}, createdAt="2000-01-01T00:00:00Z")), 1
        ))

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.overall_rating == 5.0
        assert len(run(repository.list(1))) == 1

    def test_invalid_input_writes_nothing(self, run, repository):
        draft = RatingDraft.from_dict(rating_payload(values={"story": 11}))

        with pytest.raises(ValidationError):
            run(SaveRatingUseCase(repository).execute(draft, 1))
        assert run(repository.list(1)) == []

    def test_missing_snapshot_is_filled_from_catalog(self, run, repository, fake_catalog):
        draft = RatingDraft.from_dict(rating_payload(animeTitle=None, animeImage=""))

        saved = run(SaveRatingUseCase(repository, fake_catalog).execute(draft, 1))

        assert saved.anime_title == "Catalog Anime 42"
        assert saved.anime_image == "https://cdn.example.com/catalog/42.jpg"

    def test_missing_snapshot_without_catalog(self, run, repository):
        draft = RatingDraft.from_dict(rating_payload(animeTitle=None))

        with pytest.raises(ValidationError, match="animeTitle is required"):
            run(SaveRatingUseCase(repository).execute(draft, 1))

    def test_unrated_categories_allowed_by_default(self, run, repository):
        draft = RatingDraft.from_dict(rating_payload(values={"story": 0}))
        assert run(SaveRatingUseCase(repository).execute(draft, 1)).overall_rating == 0

    def test_rated_category_can_be_required(self, run, repository):
        use_case = SaveRatingUseCase(repository, require_rated_category=True)

        with pytest.raises(ValidationError, match="at least one category"):
            run(use_case.execute(RatingDraft.from_dict(rating_payload(values={"story": 0})), 1))
        assert run(use_case.execute(RatingDraft.from_dict(rating_payload(values={"story": 0.5})), 1))


def test_list_ratings_newest_first(run, repository, make_rating):
    old = make_rating("old")
    new = replace(make_rating("new"), updated_at=old.updated_at + timedelta(hours=1))
    run(repository.save(new, 1))
    run(repository.save(old, 1))

    assert [r.id for r in run(ListRatingsUseCase(repository).execute(1))] == ["new", "old"]


def test_delete_rating(run, repository, make_rating):
    run(repository.save(make_rating("a"), 1))
    use_case = DeleteRatingUseCase(repository)

    assert run(use_case.execute("a", 1)) is True
    assert run(use_case.execute("a", 1)) is False


class TestRatingFormCategories:

    def test_prefills_catalog_with_rating_values(self, run, repository, make_rating, tmp_path):
        run(repository.save(make_rating("r1", values={"story": 8, "art": 6}), 1))
        use_case = GetRatingFormCategoriesUseCase(JsonCategoryCatalog(str(tmp_path / "none.json")), repository)

        categories = run(use_case.execute("r1", 1))

        values = {c.id: c.value for c in categories}
        assert values == {"story": 8.0, "animation": 0.0, "characters": 0.0, "sound": 0.0, "enjoyment": 0.0}
        assert categories[0].name == "Story"

    def test_unknown_rating(self, run, repository, tmp_path):
        use_case = GetRatingFormCategoriesUseCase(JsonCategoryCatalog(str(tmp_path / "none.json")), repository)
        assert run(use_case.execute("missing", 1)) is None


class TestBrowseCatalog:

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query(self, run, fake_catalog, query):
        with pytest.raises(ValidationError, match="Query parameter is required"):
            run(SearchAnimeUseCase(fake_catalog).execute(query))
        assert fake_catalog.search_calls == []

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 26)])
    def test_paging_bounds(self, run, fake_catalog, page, limit):
        with pytest.raises(ValidationError):
            run(SearchAnimeUseCase(fake_catalog).execute("frieren", page=page, limit=limit))

    def test_search_strips_query(self, run, fake_catalog):
        page = run(SearchAnimeUseCase(fake_catalog).execute("  frieren ", page=2, limit=5))

        assert fake_catalog.search_calls == [("frieren", 2, 5)]
        assert page.has_next_page

    def test_details(self, run, fake_catalog):
        assert run(GetAnimeDetailsUseCase(fake_catalog).execute(5)).id == 5
        with pytest.raises(CatalogError):
            run(GetAnimeDetailsUseCase(fake_catalog).execute(404))


class TestRecommendations:

    def test_explicit_ids(self, run, repository, fake_catalog):
        results = run(GetRecommendationsUseCase(fake_catalog, repository).execute(1, [3, 4], limit=5))

        assert len(results) == 2
        assert fake_catalog.recommend_calls == [[3, 4]]

    def test_explicit_empty_ids(self, run, repository, fake_catalog):
        with pytest.raises(ValidationError, match="No valid anime IDs provided"):
            run(GetRecommendationsUseCase(fake_catalog, repository).execute(1, []))

    def test_seeds_from_liked_ratings(self, run, repository, fake_catalog, make_rating):
        liked = make_rating("liked", anime_id=10, values={"story": 8})
        newer = replace(make_rating("newer", anime_id=20, values={"story": 10}),
                        updated_at=liked.updated_at + timedelta(hours=1))
        run(repository.save(liked, 1))
        run(repository.save(newer, 1))
        run(repository.save(make_rating("meh", anime_id=30, values={"story": 6}), 1))

        run(GetRecommendationsUseCase(fake_catalog, repository).execute(1))

        assert fake_catalog.recommend_calls == [[20, 10]]

    def test_nothing_liked(self, run, repository, fake_catalog, make_rating):
        run(repository.save(make_rating(values={"story": 2}), 1))

        assert run(GetRecommendationsUseCase(fake_catalog, repository).execute(1)) == []
        assert fake_catalog.recommend_calls == []
