"""HTTP client construction for outbound catalog calls."""
import logging

import httpx

from animerate.config import Settings

logger = logging.getLogger(__name__)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the pooled client shared by the catalog clients.

    Owned by the application lifespan, closed at shutdown.
    """
    client = httpx.AsyncClient(
        timeout=settings.API_TIMEOUT_SECONDS,
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )
    logger.info(f"HTTP client initialized: timeout={settings.API_TIMEOUT_SECONDS}s")
    return client


def to_catalog_status(error: httpx.HTTPError) -> int:
    """HTTP status to report for a failed upstream call."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return 502
