from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from tasklist.config import Settings, load_settings
from tasklist.domain.errors import StorageError, ValidationError
from tasklist.infra.db import StorageContext
from tasklist.infra.repository import TaskRepository
from tasklist.services.task_service import TaskService

from .routes import error_response, router

logger = logging.getLogger(__name__)


async def _validation_error_handler(request: Request, exc: ValidationError):
    return error_response(400, str(exc))


async def _request_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
    return error_response(400, message)


async def _storage_error_handler(request: Request, exc: StorageError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Storage error.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = StorageContext(settings.database_url)
        app.state.storage = storage
        app.state.task_service = TaskService(TaskRepository(storage))
        try:
            yield
        finally:
            await storage.dispose()

    app = FastAPI(
        title="Task List API",
        version="1.0.0",
        lifespan=lifespan,
        redoc_url=None,
    )
    app.state.settings = settings

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(RequestValidationError, _request_error_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)
    app.include_router(router)
    return app
