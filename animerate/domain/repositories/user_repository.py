"""User repository interface - abstraction for data access."""
from abc import ABC, abstractmethod
from typing import Optional

from animerate.domain.entities.user import User


class UserRepository(ABC):
    """Repository interface for User entity."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user."""
        pass
