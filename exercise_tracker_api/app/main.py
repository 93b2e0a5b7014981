"""
Main entrypoint for the Exercise Tracker API.

``create_app`` builds the FastAPI application: it sets up logging,
constructs the store and the user service, registers error handlers
and mounts the versioned routers.  A module‑level ``app`` is created
at import time so it can be served directly::

    uvicorn exercise_tracker_api.app.main:app --reload

Tests pass their own ``ExerciseStore`` to ``create_app`` instead of
using the one configured through ``DATABASE_URL``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import ExerciseStore
from .core.exceptions import NotFound, StoreError
from .core.logging_config import setup_logging
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def create_app(store: Optional[ExerciseStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[ExerciseStore]
        Store to serve requests from.  Defaults to one built from
        ``settings``.

    Returns
    -------
    FastAPI
        A configured application whose schema is created on startup.
    """
    setup_logging(settings.log_level, settings.log_file)

    if store is None:
        store = ExerciseStore.from_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app.state.store.init_db()
        except StoreError:
            logger.exception("Error initializing the database at %s", app.state.store.database_path)
            raise
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.user_service = UserService(store)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies and query parameters are plain 400s here.
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request parameters"},
        )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
