"""JSON logs with structlog, one ``request_completed`` line per HTTP request.

Every line carries the service name plus whatever the middleware bound for
the current request (ids from ``X-Request-ID``/``X-Trace-ID`` and the SDK
identifier the browser sends in ``X-Client-Info``).
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Optional, Union
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog


CLIENT_INFO_HEADER = "X-Client-Info"
REQUEST_ID_HEADER = "X-Request-ID"
TRACE_ID_HEADER = "X-Trace-ID"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    service_name: str,
    level: Union[int, str, None] = None,
) -> structlog.stdlib.BoundLogger:
    """Route structlog through stdlib logging as JSON and return the service logger."""
    if not logging.root.handlers:
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_resolve_level(level))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return get_logger(service=service_name)


def get_logger(**initial_values) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger().bind(**initial_values)


class RequestContextLogMiddleware(BaseHTTPMiddleware):
    """Bind request ids to the log context and log how each request ended."""

    def __init__(self, app, *, logger: Optional[structlog.stdlib.BoundLogger] = None) -> None:
        super().__init__(app)
        self._logger = logger or get_logger()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            trace_id=request.headers.get(TRACE_ID_HEADER) or request_id,
            client_info=request.headers.get(CLIENT_INFO_HEADER),
            client_ip=request.client.host if request.client else None,
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._logger.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            self._logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
