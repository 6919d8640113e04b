"""
FastAPI middleware for logging, metrics, and error handling.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from ..logging_config import bind_request_context, clear_request_context

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def setup_logging_middleware(app: FastAPI) -> None:
    """
    Setup request/response logging middleware.

    Every log line emitted while serving a request carries its request_id
    (taken from the X-Request-ID header or generated), which is echoed back
    in the response headers.
    """

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        clear_request_context()
        bind_request_context(request_id=request_id, path=request.url.path)

        logger.info(
            "request_started",
            method=request.method,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                process_time_ms=round((time.time() - start_time) * 1000, 2),
                error=str(e),
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "request_completed",
            method=request.method,
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response


def setup_error_handling_middleware(app: FastAPI) -> None:
    """
    Setup global error handling middleware.

    Catches unhandled exceptions and returns the same error body shape as
    the endpoints ({"success": false, "error": ...}).
    """

    @app.middleware("http")
    async def handle_errors(request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "unhandled_exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "detail": str(e) if app.debug else "An unexpected error occurred",
                },
            )


def setup_metrics_middleware(app: FastAPI) -> None:
    """
    Setup basic metrics middleware.

    Logs endpoint, status code and duration of every request at debug level.
    """

    @app.middleware("http")
    async def collect_metrics(request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)

        logger.debug(
            "request_metrics",
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            duration_seconds=time.time() - start_time,
        )

        return response
