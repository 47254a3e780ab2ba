"""Tests for store locking, retries and backend selection."""
import threading

import pytest

from animerate.config import Settings
from animerate.core.exceptions import StorageError
from animerate.infrastructure.persistence.concurrency import hold_lock, run_with_retries
from animerate.infrastructure.persistence.factory import create_repositories


def test_hold_lock_times_out():
    lock = threading.Lock()
    lock.acquire()
    try:
        with pytest.raises(StorageError, match="Timed out waiting to save rating"):
            with hold_lock(lock, 0.01, "save rating"):
                pass
    finally:
        lock.release()


def test_hold_lock_releases_on_error():
    lock = threading.Lock()

    with pytest.raises(RuntimeError):
        with hold_lock(lock, 1, "save rating"):
            raise RuntimeError("boom")

    assert not lock.locked()


def test_run_with_retries_recovers():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise OSError("busy")
        return "ok"

    assert run_with_retries(flaky, "read file", attempts=3, base_delay=0) == "ok"
    assert len(attempts) == 3


def test_run_with_retries_gives_up():
    def broken():
        raise OSError("gone")

    with pytest.raises(StorageError, match="Could not read file: gone") as exc_info:
        run_with_retries(broken, "read file", attempts=2, base_delay=0)
    assert isinstance(exc_info.value.__cause__, OSError)


def test_run_with_retries_ignores_other_errors():
    def broken():
        raise KeyError("x")

    with pytest.raises(KeyError):
        run_with_retries(broken, "read file", attempts=3, base_delay=0)


@pytest.mark.parametrize(
    "backend, rating_store, user_store",
    [
        ("memory", "InMemoryRatingRepository", "InMemoryUserRepository"),
        ("file", "JsonFileRatingRepository", "InMemoryUserRepository"),
        ("db", "SQLAlchemyRatingRepository", "SQLAlchemyUserRepository"),
    ],
)
def test_create_repositories(tmp_path, backend, rating_store, user_store):
    settings = Settings(
        STORAGE_BACKEND=backend,
        RATINGS_FILE_PATH=str(tmp_path / "ratings.json"),
        DATABASE_URL=f"sqlite:///{tmp_path / 'animerate.db'}",
    )

    ratings, users = create_repositories(settings)
    try:
        assert type(ratings).__name__ == rating_store
        assert type(users).__name__ == user_store
        assert ratings.backend_name == backend
    finally:
        ratings.close()
