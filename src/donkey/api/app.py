"""FastAPI application factory."""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import donkey
from donkey._donkey import Donkey
from donkey.fs.exceptions import ERR_BAD_OR_MISSING_FIELD, DonkeyError

from .routes import router

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig

logger = logging.getLogger(__name__)


def _field_name(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
    return ".".join(loc) or "body"


def create_app(config: DonkeyConfig | None = None, service: Donkey | None = None) -> FastAPI:
    """Build the API around *service* (or a new ``Donkey`` for *config*).

    The store is provisioned (tables, service account, home and trash
    roots) when the app is created.
    """
    if service is None:
        service = Donkey(config)
        service.provision()

    app = FastAPI(
        title="Donkey",
        description="Filesystem trash, restore and sharing endpoints",
        version=donkey.__version__,
    )
    app.state.donkey = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.time()
        logger.info(
            "Request started: %s %s user=%s [request_id=%s]",
            request.method,
            request.url.path,
            request.query_params.get("user", "anonymous"),
            request_id,
        )
        response = await call_next(request)
        logger.info(
            "Request completed: %s %s status=%d duration=%.3fs [request_id=%s]",
            request.method,
            request.url.path,
            response.status_code,
            time.time() - start,
            request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DonkeyError)
    async def donkey_error_handler(request: Request, exc: DonkeyError):
        request_id = getattr(request.state, "request_id", "unknown")
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "%s: %s [request_id=%s] path=%s",
            exc.error_code,
            exc.message,
            request_id,
            request.url.path,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = [_field_name(e) for e in exc.errors()]
        logger.warning(
            "Bad request [request_id=%s] path=%s fields=%s",
            getattr(request.state, "request_id", "unknown"),
            request.url.path,
            fields,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error_code": ERR_BAD_OR_MISSING_FIELD, "fields": fields},
        )

    @app.get("/")
    def root():
        return {"status": "running", "service": "donkey", "version": donkey.__version__}

    app.include_router(router)
    return app
