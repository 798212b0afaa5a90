"""Error Handlers: map every exception that escapes a route to the JSON envelope.

Invariants:
    - GraphLedgerError renders its own to_response() with its own http_status
    - RequestValidationError renders field-level details with 400
    - Anything else is a 500 that never leaks internals
    - 4xx are logged as warnings, 5xx as errors (with traceback for unhandled ones)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from graphledger.core.errors import ErrorCategory, ErrorSeverity, GraphLedgerError

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: GraphLedgerError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level, f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected payload on {request.url.path}: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=jsonable_encoder(details),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc, extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
        "An unexpected error occurred", ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GraphLedgerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _envelope(
    status_code: int, code: str, message: str,
    category: ErrorCategory, severity: ErrorSeverity, **extra: object,
) -> JSONResponse:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
        **extra,
    }
    return JSONResponse(status_code=status_code, content={"error": body})
