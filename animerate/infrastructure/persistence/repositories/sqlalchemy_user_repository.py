"""SQLAlchemy implementation of UserRepository."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from animerate.core.exceptions import ValidationError
from animerate.domain.entities.user import User as UserEntity
from animerate.domain.repositories.user_repository import UserRepository
from animerate.infrastructure.persistence import models
from animerate.infrastructure.persistence.db import create_session_factory, init_db


def _to_entity(row: models.User) -> UserEntity:
    return UserEntity(id=row.id, username=row.username, password=row.password)


class SQLAlchemyUserRepository(UserRepository):
    """User repository using SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._session_factory = create_session_factory(engine)
        init_db(engine)

    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        with self._session_factory() as session:
            row = session.get(models.User, user_id)
            return _to_entity(row) if row else None

    async def get_by_username(self, username: str) -> Optional[UserEntity]:
        with self._session_factory() as session:
            row = session.execute(
                select(models.User).where(models.User.username == username)
            ).scalar_one_or_none()
            return _to_entity(row) if row else None

    async def create(self, user: UserEntity) -> UserEntity:
        if not user.is_valid():
            raise ValidationError("Invalid user")
        row = models.User(id=user.id, username=user.username, password=user.password)
        with self._session_factory() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise ValidationError(f"User with username '{user.username}' already exists")
            session.refresh(row)
            return _to_entity(row)
