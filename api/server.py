"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (store, feed and OAuth clients)
- Route registration
- Session and CORS middleware
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from api.routes import auth_router, health_router, proxy_router, records_router
from core.config import Settings, get_settings
from core.errors import RecordsError, StoreError
from core.identity import SessionIdentityProvider
from core.logging import configure_logging, get_logger
from core.storage import create_record_repository
from manager.record_service import RecordService
from tools.feed_api import FeedClient
from tools.google_oauth import GoogleOAuthClient


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: connect the record store, build the service and clients.
    Shutdown: close the store and the outbound HTTP client.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info(
        "Starting space dashboard API...",
        storage_backend=settings.storage_backend,
    )

    repository = create_record_repository(settings)
    await repository.setup()

    app.state.record_service = RecordService(repository, settings)
    app.state.identity_provider = SessionIdentityProvider()
    app.state.feed_client = FeedClient(
        nasa_api_key=settings.nasa_api_key,
        openweather_api_key=settings.openweather_api_key,
        timeout_s=settings.feed_timeout_seconds,
    )
    app.state.oauth_client = GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_callback_url,
    )

    logger.info(
        "Space dashboard API started",
        host=settings.server_host,
        port=settings.server_port,
        storage_backend=settings.storage_backend,
    )

    yield

    logger.info("Shutting down space dashboard API...")
    await app.state.feed_client.close()
    await repository.close()
    logger.info("Space dashboard API stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Pass ``settings`` to
    run against an explicit configuration instead of the environment.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Space Dashboard API",
        description=(
            "Saves and edits snapshots of the NASA, weather and space news "
            "feeds for logged-in users, and proxies the feeds themselves."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        same_site="lax",
        https_only=not settings.is_development,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(proxy_router)
    app.include_router(records_router)

    @app.exception_handler(RecordsError)
    async def records_error_handler(request: Request, exc: RecordsError):
        if isinstance(exc, StoreError):
            logger.error(
                "Store error",
                path=request.url.path,
                method=request.method,
                error=exc.message,
                exc_info=exc,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": f"Server error: {exc.message}"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "api.server:app",
        host=_settings.server_host,
        port=_settings.server_port,
        reload=_settings.debug,
    )
