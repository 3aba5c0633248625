"""FastAPI application factory.

Wires the lifecycle manager to a request-scoped database session and maps
service errors onto HTTP status codes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Generator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from mediadesk import __version__
from mediadesk.core.config import Settings
from mediadesk.core.errors import (
    ConsistencyWarning,
    NotFoundError,
    StorageError,
    ValidationError,
)
from mediadesk.db.repo import DbSession
from mediadesk.db.session import init_db, open_session
from mediadesk.db.store import SqlRequestStore
from mediadesk.lifecycle.manager import RequestLifecycleManager

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = open_session(request.app.state.settings)
    try:
        yield session
    finally:
        session.close()


def get_manager(session: DbSession = Depends(get_db_session)) -> RequestLifecycleManager:
    """Dependency to get a lifecycle manager bound to the request's session."""
    return RequestLifecycleManager(SqlRequestStore(session))


# ============================================================================
# Error translation
# ============================================================================


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc), "fields": exc.fields})


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": "Invalid request body."})


async def _not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    label = "Closed request" if exc.request_set == "closed" else "Request"
    return JSONResponse(status_code=404, content={"detail": f"{label} not found."})


async def _consistency_warning(request: Request, exc: ConsistencyWarning) -> JSONResponse:
    logger.error("Partial move on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "request_id": exc.request_id, "duplicated": True},
    )


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Storage failure."})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional settings; read from the environment when omitted.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_db(settings)
        logger.info("Database ready at %s", settings.db_path)
        yield

    app = FastAPI(
        title="mediadesk API",
        description="Media request tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # ConsistencyWarning subclasses StorageError; Starlette picks the most
    # specific handler by walking the exception's MRO.
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(NotFoundError, _not_found_error)
    app.add_exception_handler(ConsistencyWarning, _consistency_warning)
    app.add_exception_handler(StorageError, _storage_error)

    from mediadesk.api.routes import closed_requests, open_requests

    app.include_router(open_requests.router, prefix="/api")
    app.include_router(closed_requests.router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    # Mounted last so API routes take precedence over the catch-all
    public_dir = Path(settings.public_dir)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")

    return app


# Default app instance
app = create_app()
