"""In-memory implementation of UserRepository."""
from typing import Dict, Optional

from animerate.core.exceptions import ValidationError
from animerate.domain.entities.user import User
from animerate.domain.repositories.user_repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """In-memory user storage with sequential ids."""

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._next_id = 1

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        return next((u for u in self._users.values() if u.username == username), None)

    async def create(self, user: User) -> User:
        """Create new user."""
        if not user.is_valid():
            raise ValidationError("Invalid user")
        if await self.get_by_username(user.username) is not None:
            raise ValidationError(f"User with username '{user.username}' already exists")

        # Assign ID if not set
        if user.id is None:
            user.id = self._next_id
        elif user.id in self._users:
            raise ValidationError(f"User with id {user.id} already exists")
        self._next_id = max(self._next_id, user.id + 1)

        self._users[user.id] = user
        return user
