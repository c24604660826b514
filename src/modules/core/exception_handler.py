"""DRF exception handler producing a single error envelope.

Every error response has the shape::

    {
        "type": "client_error" | "validation_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": null}]
    }

Domain errors from the service layer are mapped by base class; DRF's own
exceptions (auth, parse, serializer validation) keep their status code.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import (
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    TransactionError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_DOMAIN_STATUS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def _error(code: str, detail: str, attr: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr, **extra}


def _flatten(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten nested DRF ``ErrorDetail`` structures into a list of errors."""
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            child = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child = attr
            errors.extend(_flatten(value, child))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            child = attr
            if isinstance(value, (dict, list)) and attr is not None:
                child = f"{attr}.{index}"
            errors.extend(_flatten(value, child))
        return errors
    code = getattr(detail, "code", "error")
    return [_error(str(code), str(detail), attr)]


def _domain_response(exc: DomainError) -> Response:
    if isinstance(exc, TransactionError):
        if exc.retryable:
            response = Response(
                {
                    "type": "server_error",
                    "errors": [_error(exc.code, "Concurrent update conflict, retry the request.")],
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
            response["Retry-After"] = "1"
            return response
        return Response(
            {"type": "server_error", "errors": [_error(exc.code, "Transaction failed.")]},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    for base, http_status in _DOMAIN_STATUS:
        if isinstance(exc, base):
            break
    else:
        http_status = status.HTTP_400_BAD_REQUEST

    error_type = "validation_error" if isinstance(exc, ValidationError) else "client_error"
    return Response(
        {"type": error_type, "errors": [_error(exc.code, exc.message, **exc.extra())]},
        status=http_status,
    )


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Entry point configured as ``REST_FRAMEWORK['EXCEPTION_HANDLER']``."""
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=exc.__class__.__name__,
            detail=exc.message,
            view=view_name,
        )
        return _domain_response(exc)

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                err["type"],
                err["msg"],
                ".".join(str(part) for part in err["loc"]) or None,
            )
            for err in exc.errors()
        ]
        return Response(
            {"type": "validation_error", "errors": errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        # Unhandled: let Django's 500 machinery log and render it.
        return None

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
        errors = _flatten(exc.detail)
    else:
        error_type = "client_error" if response.status_code < 500 else "server_error"
        errors = _flatten(getattr(exc, "detail", str(exc)))

    response.data = {"type": error_type, "errors": errors}
    return response
