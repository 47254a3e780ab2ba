import logging
import secrets
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from animerate.api.v1.routes.anime import router as anime_router
from animerate.api.v1.routes.health import router as health_router
from animerate.api.v1.routes.ratings import router as ratings_router
from animerate.config import Settings, get_settings
from animerate.core.exceptions import CatalogError, StorageError, ValidationError
from animerate.core.logging import configure_logging
from animerate.domain.entities.user import User
from animerate.domain.repositories.user_repository import UserRepository
from animerate.infrastructure.categories.json_category_catalog import JsonCategoryCatalog
from animerate.infrastructure.external_apis.anilist_client import AniListClient
from animerate.infrastructure.external_apis.catalog_provider import JikanCatalogProvider
from animerate.infrastructure.external_apis.http_client import create_http_client
from animerate.infrastructure.external_apis.jikan_client import JikanClient
from animerate.infrastructure.persistence.factory import create_repositories

logger = logging.getLogger(__name__)

STORAGE_FAILURE_MESSAGE = "Could not save or load your ratings right now. Please try again later."


async def ensure_default_user(user_repository: UserRepository, settings: Settings) -> User:
    """Create the implicit user ratings are namespaced under, if missing."""
    user = await user_repository.get_by_id(settings.DEFAULT_USER_ID)
    if user is None:
        user = await user_repository.create(
            User(
                id=settings.DEFAULT_USER_ID,
                username=settings.DEFAULT_USERNAME,
                password=secrets.token_urlsafe(32),
            )
        )
        logger.info(f"Created default user '{user.username}' ({user.id})")
    return user


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build process-lifetime resources on startup and release them on shutdown."""
    settings: Settings = app.state.settings
    logger.info("Starting up application...")

    rating_repository, user_repository = create_repositories(settings)
    app.state.rating_repository = rating_repository
    app.state.user_repository = user_repository
    app.state.category_catalog = JsonCategoryCatalog(settings.CATEGORIES_FILE_PATH)

    http_client = create_http_client(settings)
    app.state.catalog_provider = JikanCatalogProvider(
        JikanClient(
            http_client,
            base_url=settings.JIKAN_API_BASE_URL,
            request_delay=settings.CATALOG_REQUEST_DELAY_SECONDS,
            details_delay=settings.CATALOG_DETAILS_DELAY_SECONDS,
            rate_limit_retry_delay=settings.CATALOG_RATE_LIMIT_RETRY_SECONDS,
        ),
        AniListClient(http_client, api_url=settings.ANILIST_API_URL),
    )

    try:
        await ensure_default_user(user_repository, settings)
        yield
    finally:
        logger.info("Shutting down application...")
        await http_client.aclose()
        rating_repository.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to JSON responses with human-readable messages."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": f"Invalid input: {exc.message}"},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid input", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": STORAGE_FAILURE_MESSAGE},
        )

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError):
        return JSONResponse(
            status_code=exc.status_code or status.HTTP_502_BAD_GATEWAY,
            content={"message": exc.message},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create FastAPI application and include routers."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="animerate",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(ratings_router, prefix="/api")
    app.include_router(anime_router, prefix="/api")
    app.include_router(health_router)
    return app


app = create_app()
