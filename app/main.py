from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AppError, InternalError
from app.db.async_session import AsyncDatabaseManager
from app.services.attachments import AttachmentManager
from app.services.auth import AuthService
from app.utils.logger import api_logger

logger = logging.getLogger(__name__)


def _format_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Map the application's error taxonomy onto HTTP responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, InternalError):
            logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}")
            message = InternalError.default_message
        else:
            message = exc.message
        return JSONResponse(status_code=exc.status_code, content={"detail": message}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _format_validation_error(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": InternalError.default_message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build an application bound to ``settings``.

    Each application owns its database manager, auth service and attachment
    manager, so several apps (e.g. one per test) never share state.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting up {settings.PROJECT_NAME}...")
        Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        if settings.AUTO_CREATE_TABLES:
            await app.state.db_manager.create_tables()
        api_logger.success("Application ready", context="startup", upload_dir=settings.UPLOAD_DIR)

        yield

        logger.info(f"Shutting down {settings.PROJECT_NAME}...")
        await app.state.db_manager.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_manager = AsyncDatabaseManager(settings.DATABASE_URL, echo=settings.DB_ECHO)
    app.state.auth_service = AuthService(settings)
    app.state.attachments = AttachmentManager.from_settings(settings)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS,
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router)

    # The directory is created in lifespan, not at import time
    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()
