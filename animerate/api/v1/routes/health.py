"""Health check endpoint."""
from typing import Dict

from fastapi import APIRouter, Depends

from animerate.api.dependencies import get_rating_repository
from animerate.domain.repositories.rating_repository import RatingRepository

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check(
    repository: RatingRepository = Depends(get_rating_repository),
) -> Dict[str, str]:
    """Lightweight liveness check; reports the active storage backend."""
    return {"status": "ok", "storage_backend": repository.backend_name}
