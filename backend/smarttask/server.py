import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smarttask.api import api_router
from smarttask.core.config import Settings, settings as default_settings
from smarttask.core.database import Storage
from smarttask.core.logging_setup import setup_logging
from smarttask.services import TaskServiceError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return _error(exc.status_code, str(message), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed input is the client's problem; not logged as a failure
    for err in exc.errors():
        if "title" in err.get("loc", ()):
            return _error(400, "Title is required")
    return _error(400, "Invalid request body")


async def service_exception_handler(request: Request, exc: TaskServiceError):
    logger.error("Error handling %s %s: %s", request.method, request.url.path, exc)
    return _error(500, "Internal server error")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)
    storage = storage or Storage(settings.database_url, echo=settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.init_db()
        yield
        storage.dispose()

    app = FastAPI(title="SmartTask AI", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(TaskServiceError, service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(api_router)
    return app
