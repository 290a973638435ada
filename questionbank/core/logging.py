"""Structured logging for the question bank.

Every log line emitted while a request is handled carries that request's
``request_id``, ``method`` and ``path``; the id is taken from the incoming
``X-Request-ID`` header when present and echoed back on the response.
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from typing import Any, Awaitable, Callable

import structlog
from starlette.requests import Request
from starlette.responses import Response

from questionbank.config.settings import get_settings

REQUEST_ID_HEADER = "X-Request-ID"

# Loggers that drown out the application's own events at INFO.
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx")


def _renderer(debug: bool) -> list[Any]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging() -> None:
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            *_renderer(settings.debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    # Request lines come from bind_request_context instead.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


logger = get_logger(__name__)


async def bind_request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    structlog.contextvars.clear_contextvars()
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(
        request_id=request_id, method=request.method, path=request.url.path
    )
    start = time.perf_counter()
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "request_completed",
        status=response.status_code,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return response
