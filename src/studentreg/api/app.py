"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studentreg.api.models import ErrorResponse
from studentreg.api.routes import health, students
from studentreg.config import Settings
from studentreg.logging import sanitize_for_log
from studentreg.registration import ConflictError, ValidationError, create_password_context
from studentreg.student_store import StoreError, StudentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"
INVALID_BODY_MESSAGE = "invalid request body"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the student store at startup and close it at shutdown.

    A store passed to create_app() belongs to the caller and is left open.
    """
    settings: Settings = app.state.settings
    owns_store = app.state.student_store is None
    if owns_store:
        app.state.student_store = StudentStore(settings.db_path)
        logger.info("Student store opened at %s", settings.db_path)
    app.state.password_context = create_password_context(settings.bcrypt_rounds)

    yield

    if owns_store:
        app.state.student_store.close()
        app.state.student_store = None
        logger.info("Student store closed")


def _add_client_routes(app: FastAPI, static_dir: Path) -> None:
    """Serve the browser client, falling back to index.html for unknown paths."""
    root = static_dir.resolve()
    index = root / "index.html"

    @app.get("/{full_path:path}", include_in_schema=False)
    async def client_files(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)
        if not index.is_file():
            raise StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        return FileResponse(index)


def create_app(
    settings: Settings | None = None,
    store: StudentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Server settings. Defaults to Settings.from_env().
        store: Already opened store to use instead of opening settings.db_path.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Student Registration API",
        description="Registers students with validated, uniquely-emailed records",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.student_store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, _exc: RequestValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(_request: Request, exc: ConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        cause = exc.__cause__ if exc.__cause__ is not None else exc
        logger.error(
            "Store error in %s %s: %s",
            request.method,
            request.url.path,
            sanitize_for_log(str(cause)),
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error in %s %s: %s",
            request.method,
            request.url.path,
            sanitize_for_log(repr(exc)),
            exc_info=exc,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

    # Include routers
    app.include_router(students.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    if settings.static_dir:
        static_dir = Path(settings.static_dir)
        if static_dir.is_dir():
            _add_client_routes(app, static_dir)
        else:
            logger.warning("Static directory %s does not exist, client not served", static_dir)

    return app
