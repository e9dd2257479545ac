"""Production dashboard API: clients, projects, tasks, team members and their attachments."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from src.core.attachments.router import router as attachments_router
from src.core.config import settings
from src.core.exceptions import AppException
from src.core.exceptions.handlers import (
    app_exception_handler,
    http_exception_handler,
    sqlalchemy_db_error_handler,
    validation_exception_handler,
)
from src.core.logging_config import configure_logging
from src.modules.clients.router import router as clients_router
from src.modules.projects.router import router as projects_router
from src.modules.tasks.router import router as tasks_router
from src.modules.users.router import router as users_router

API_PREFIX = "/api/v1"
VERSION = "0.1.0"

ROUTERS = (
    clients_router,
    projects_router,
    tasks_router,
    users_router,
    attachments_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.use_s3:
        logger.info("Attachments stored in bucket %s", settings.s3_bucket)
    else:
        settings.storage_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Attachments stored in %s", settings.storage_dir.resolve())
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Studio Dashboard",
        description="Production management API for a video production agency",
        version=VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_db_error_handler)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
