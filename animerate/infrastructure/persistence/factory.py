"""Construction of the configured persistence backends."""
import logging
from typing import Tuple

from animerate.config import Settings
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.domain.repositories.user_repository import UserRepository
from animerate.infrastructure.persistence.db import create_db_engine
from animerate.infrastructure.persistence.repositories.in_memory_rating_repository import (
    InMemoryRatingRepository,
)
from animerate.infrastructure.persistence.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from animerate.infrastructure.persistence.repositories.json_file_rating_repository import (
    JsonFileRatingRepository,
)
from animerate.infrastructure.persistence.repositories.sqlalchemy_rating_repository import (
    SQLAlchemyRatingRepository,
)
from animerate.infrastructure.persistence.repositories.sqlalchemy_user_repository import (
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)


def create_repositories(settings: Settings) -> Tuple[RatingRepository, UserRepository]:
    """Build the rating and user repositories selected by ``STORAGE_BACKEND``.

    - memory: process-local dictionaries (default, fast tests/dev)
    - file: ratings in a JSON document, users in memory
    - db: both in the relational database at DATABASE_URL
    """
    backend = settings.STORAGE_BACKEND
    logger.info(f"Using '{backend}' rating storage backend")

    if backend == "db":
        engine = create_db_engine(settings.DATABASE_URL)
        ratings = SQLAlchemyRatingRepository(
            engine,
            lock_timeout=settings.STORAGE_LOCK_TIMEOUT_SECONDS,
            retry_attempts=settings.STORAGE_RETRY_ATTEMPTS,
            retry_base_delay=settings.STORAGE_RETRY_BASE_DELAY_SECONDS,
            owns_engine=True,
        )
        return ratings, SQLAlchemyUserRepository(engine)

    if backend == "file":
        ratings = JsonFileRatingRepository(
            settings.RATINGS_FILE_PATH,
            lock_timeout=settings.STORAGE_LOCK_TIMEOUT_SECONDS,
            retry_attempts=settings.STORAGE_RETRY_ATTEMPTS,
            retry_base_delay=settings.STORAGE_RETRY_BASE_DELAY_SECONDS,
        )
        return ratings, InMemoryUserRepository()

    if backend == "memory":
        ratings = InMemoryRatingRepository(lock_timeout=settings.STORAGE_LOCK_TIMEOUT_SECONDS)
        return ratings, InMemoryUserRepository()

    raise ValueError(f"Unknown storage backend '{backend}'")
