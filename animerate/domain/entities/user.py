"""User domain entity."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """User domain entity. Ratings are namespaced by ``id``."""
    id: Optional[int]
    username: str
    password: str

    def is_valid(self) -> bool:
        """Validate user business rules."""
        return bool(
            self.username and
            self.username.strip() and
            self.password
        )
