"""Tests specific to the JSON file rating store."""
import json
import os

import pytest

from animerate.core.exceptions import StorageError
from animerate.infrastructure.persistence.repositories.json_file_rating_repository import (
    JsonFileRatingRepository,
)


@pytest.fixture
def ratings_file(tmp_path):
    return tmp_path / "store" / "ratings.json"


@pytest.fixture
def repository(ratings_file):
    repository = JsonFileRatingRepository(str(ratings_file), lock_timeout=5, retry_base_delay=0)
    yield repository
    repository.close()


def temp_files(ratings_file):
    return [p for p in ratings_file.parent.iterdir() if p.name.endswith(".tmp")]


class TestFileLayout:

    def test_missing_file_is_an_empty_store(self, run, repository, ratings_file):
        assert run(repository.list(1)) == []
        assert not ratings_file.exists()

    def test_empty_file_is_an_empty_store(self, run, repository, ratings_file):
        ratings_file.write_text("")
        assert run(repository.list(1)) == []

    def test_document_is_nested_by_user_and_id(self, run, repository, ratings_file, make_rating):
        run(repository.save(make_rating("r1", anime_id=10), 1))
        run(repository.save(make_rating("r2", anime_id=20), 7))

        data = json.loads(ratings_file.read_text(encoding="utf-8"))

        assert set(data) == {"ratings"}
        assert set(data["ratings"]) == {"1", "7"}
        record = data["ratings"]["1"]["r1"]
        assert record["animeId"] == 10
        assert record["overallRating"] == 3.5
        assert record["categories"][0] == {
            "id": "story", "name": "Story", "description": "story quality", "value": 8.0,
        }

    def test_reload_in_new_instance(self, run, repository, ratings_file, make_rating):
        stored = run(repository.save(make_rating("r1"), 1))

        reopened = JsonFileRatingRepository(str(ratings_file))

        assert run(reopened.list(1)) == [stored]

    def test_close_reloads_from_disk(self, run, repository, ratings_file, make_rating):
        run(repository.save(make_rating("r1"), 1))
        ratings_file.write_text(json.dumps({"ratings": {}}))

        repository.close()

        assert run(repository.list(1)) == []


class TestCorruptFiles:

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            json.dumps({"ratings": []}),
            json.dumps({"ratings": {"1": [{"id": "r1"}]}}),
            json.dumps({"ratings": {"1": {"r1": {"id": "r1"}}}}),
        ],
    )
    def test_unreadable_document_raises_storage_error(self, run, repository, ratings_file, content):
        ratings_file.write_text(content)

        with pytest.raises(StorageError):
            run(repository.list(1))

    def test_corrupt_file_is_not_overwritten(self, run, repository, ratings_file, make_rating):
        ratings_file.write_text("{not json")

        with pytest.raises(StorageError):
            run(repository.save(make_rating(), 1))
        assert ratings_file.read_text() == "{not json"


class TestAtomicWrites:

    def test_failed_replace_keeps_previous_snapshot(
        self, run, repository, ratings_file, make_rating, monkeypatch
    ):
        run(repository.save(make_rating("r1"), 1))
        before = ratings_file.read_text(encoding="utf-8")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(StorageError, match="disk full"):
            run(repository.save(make_rating("r2"), 1))

        assert ratings_file.read_text(encoding="utf-8") == before
        assert temp_files(ratings_file) == []
        assert [r.id for r in run(repository.list(1))] == ["r1"]

    def test_failed_delete_keeps_rating(self, run, repository, ratings_file, make_rating, monkeypatch):
        run(repository.save(make_rating("r1"), 1))

        def failing_replace(src, dst):
            raise OSError("read-only")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(StorageError):
            run(repository.delete_by_id("r1", 1))

        assert [r.id for r in run(repository.list(1))] == ["r1"]

    def test_transient_failure_is_retried(self, run, repository, ratings_file, make_rating, monkeypatch):
        real_replace = os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError("resource busy")
            return real_replace(src, dst)

        monkeypatch.setattr(os, "replace", flaky_replace)

        stored = run(repository.save(make_rating("r1"), 1))

        assert len(calls) == 2
        assert temp_files(ratings_file) == []
        monkeypatch.undo()
        reopened = JsonFileRatingRepository(str(ratings_file))
        assert run(reopened.list(1)) == [stored]
