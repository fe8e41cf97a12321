"""FastAPI web server for the task tracker."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import Settings
from ..errors import TaskTrackerError
from ..service import TaskService
from ..store import TaskRepository, open_store
from .models import ServiceInfo
from .task_api import create_task_router


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TaskRepository] = None,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Runtime settings; defaults are used when omitted.
        store: Task collection to serve.  Opened from ``settings.store_url``
            when omitted.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or Settings()
    if store is None:
        store = open_store(settings.store_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.service.store.close()

    app = FastAPI(
        title="Task Tracker",
        description="REST API for creating, searching, and updating tasks",
        version=__version__,
        lifespan=lifespan,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # one service (and store handle) per app, living as long as the process
    app.state.settings = settings
    app.state.service = TaskService(store)

    def _get_service() -> TaskService:
        return app.state.service

    # ------------------------------------------------------------------
    # Error handlers: every failure is rendered as {"error": message}
    # ------------------------------------------------------------------

    @app.exception_handler(TaskTrackerError)
    async def _tracker_error(request: Request, exc: TaskTrackerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.opt(exception=exc).error("{} {} failed", request.method, request.url.path)
        else:
            logger.warning("{} {} -> {}: {}", request.method, request.url.path, exc.status_code, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_error(exc)
        logger.warning("{} {} -> 400: {}", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error("{} {} failed", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal Server Error"})

    @app.get("/", response_model=ServiceInfo)
    async def root() -> ServiceInfo:
        """Root endpoint."""
        return ServiceInfo(name="Task Tracker", version=__version__, status="running")

    app.include_router(create_task_router(_get_service))

    return app
