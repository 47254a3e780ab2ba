"""Repository interfaces."""
from animerate.domain.repositories.rating_repository import RatingRepository
from animerate.domain.repositories.user_repository import UserRepository

__all__ = [
    "RatingRepository",
    "UserRepository",
]
