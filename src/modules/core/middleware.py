"""Request correlation for structured logs.

Every request gets an id, taken from ``X-Request-ID`` when the client
sends a usable one and generated otherwise.  The id is bound into
structlog's contextvars, so service and repository log lines emitted
while serving the request carry ``correlation_id``, and is echoed back
in the ``X-Request-ID`` response header.
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

HEADER = "X-Request-ID"
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

logger = structlog.get_logger(__name__)


def _incoming_id(request: HttpRequest) -> str:
    candidate = request.META.get("HTTP_X_REQUEST_ID", "").strip()
    if candidate and _VALID_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _incoming_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        started = time.monotonic()
        logger.info("request.started", method=request.method, path=request.path)
        response = self.get_response(request)
        elapsed_ms = round((time.monotonic() - started) * 1000, 2)

        logger.info(
            "request.finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=elapsed_ms,
        )
        response[HEADER] = cid
        structlog.contextvars.unbind_contextvars("correlation_id")
        return response
