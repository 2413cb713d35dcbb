"""
Student Roster Admin API - Main Application

FastAPI backend with:
- PostgreSQL (any SQLAlchemy URL) for administrators and students
- JWT bearer authentication for administrators
- Student CRUD, search/filter, CSV import/export

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.core.container import build_container
from app.core.exceptions import RosterError, Unauthenticated
from app.core.logging_config import setup_logging
from app.db.postgres import mask_url
from app.schemas.schemas import ApiResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.error(message).model_dump(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as the {success, message, data} envelope."""

    @app.exception_handler(RosterError)
    async def roster_error_handler(request: Request, exc: RosterError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return _envelope(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        return _envelope(400, "Invalid request data: " + "; ".join(problems))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and all its collaborators."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting roster API against %s", mask_url(settings.sqlalchemy_url))
        container.database.create_all()
        yield
        container.database.dispose()

    app = FastAPI(
        title="Student Roster Admin API",
        description="""
    Administrative backend for a student roster.

    ## Features
    - **Authentication**: admins register and log in for a JWT bearer token
    - **Students**: CRUD, paginated search and level filter
    - **CSV**: bulk import and full export
    """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/api/health", tags=["Health"])
    def health_check():
        """Report whether the database is reachable."""
        connected = container.database.ping()
        return ApiResponse.ok(
            {"status": "healthy", "database": "connected" if connected else "disconnected"}
        )

    return app


app = create_app()
