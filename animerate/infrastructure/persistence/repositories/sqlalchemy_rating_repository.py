"""SQLAlchemy implementation of RatingRepository."""
import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from animerate.core.exceptions import StorageError, ValidationError
from animerate.domain.entities.anime_rating import AnimeRating as AnimeRatingEntity
from animerate.domain.entities.anime_rating import ensure_utc, parse_categories
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.infrastructure.persistence import models
from animerate.infrastructure.persistence.concurrency import hold_lock, run_with_retries
from animerate.infrastructure.persistence.db import create_session_factory, init_db

logger = logging.getLogger(__name__)


def _to_db_time(value: datetime) -> datetime:
    """Store timestamps as naive UTC."""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _to_entity(row: models.Rating) -> AnimeRatingEntity:
    try:
        categories = parse_categories(row.categories or [])
    except ValidationError as e:
        raise StorageError(f"Stored rating {row.id} has invalid categories: {e}")
    return AnimeRatingEntity(
        id=row.id,
        anime_id=row.anime_id,
        anime_title=row.anime_title,
        anime_image=row.anime_image,
        categories=categories,
        overall_rating=float(row.overall_rating),
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        notes=row.notes,
    )


def _apply(row: models.Rating, rating: AnimeRatingEntity) -> None:
    row.anime_id = rating.anime_id
    row.anime_title = rating.anime_title
    row.anime_image = rating.anime_image
    row.categories = [category.to_dict() for category in rating.categories]
    row.overall_rating = rating.overall_rating
    row.notes = rating.notes
    row.created_at = _to_db_time(rating.created_at)
    row.updated_at = _to_db_time(rating.updated_at)


class SQLAlchemyRatingRepository(RatingRepository):
    """Rating repository using SQLAlchemy, one transaction per call."""

    backend_name = "db"

    def __init__(
        self,
        engine: Engine,
        lock_timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 0.05,
        owns_engine: bool = False,
    ):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._retry_attempts = retry_attempts
        self._retry_base_delay = retry_base_delay
        self._owns_engine = owns_engine

        init_db(engine)
        logger.info(f"SQL rating store using {engine.url.render_as_string(hide_password=True)}")

    def _run(self, operation: str, work):
        """Run ``work(session)`` inside a transaction with bounded retries."""
        def attempt():
            with self._session_factory() as session:
                with session.begin():
                    return work(session)

        try:
            return run_with_retries(
                attempt,
                operation=operation,
                attempts=self._retry_attempts,
                base_delay=self._retry_base_delay,
                retry_on=(OperationalError,),
            )
        except SQLAlchemyError as e:
            logger.error(f"{operation} failed: {e}")
            raise StorageError(f"Could not {operation}: {e}") from e

    async def save(self, rating: AnimeRatingEntity, user_id: int) -> AnimeRatingEntity:
        """Insert or replace a rating."""
        self.validate_record(rating)

        def work(session):
            row = session.get(models.Rating, (user_id, rating.id))
            existing = _to_entity(row) if row is not None else None
            stored = self.prepare_for_save(rating, existing)
            if row is None:
                row = models.Rating(user_id=user_id, id=stored.id)
                session.add(row)
            _apply(row, stored)
            return stored

        with hold_lock(self._lock, self._lock_timeout, "save rating"):
            stored = self._run("save rating", work)
        logger.debug(f"Saved rating {stored.id} for user {user_id}")
        return stored

    async def list(self, user_id: int) -> List[AnimeRatingEntity]:
        """List all ratings of a user."""
        def work(session):
            rows = session.execute(
                select(models.Rating).where(models.Rating.user_id == user_id)
            ).scalars().all()
            return [_to_entity(row) for row in rows]

        return self._run("list ratings", work)

    async def get_by_id(self, rating_id: str, user_id: int) -> Optional[AnimeRatingEntity]:
        def work(session):
            row = session.get(models.Rating, (user_id, rating_id))
            return _to_entity(row) if row is not None else None

        return self._run("load rating", work)

    async def delete_by_id(self, rating_id: str, user_id: int) -> bool:
        """Delete a rating; False when it was not stored."""
        def work(session):
            row = session.get(models.Rating, (user_id, rating_id))
            if row is None:
                return False
            session.delete(row)
            return True

        with hold_lock(self._lock, self._lock_timeout, "delete rating"):
            removed = self._run("delete rating", work)
        if removed:
            logger.debug(f"Deleted rating {rating_id} for user {user_id}")
        return removed

    def close(self) -> None:
        if self._owns_engine:
            self.engine.dispose()
