"""Exception handlers producing the uniform error body

Every error response has ``statusCode``, ``message``, ``error``, ``path`` and
``timestamp``; domain errors may merge extra keys into it.
"""

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_response(
    request: Request,
    status_code: int,
    message: Any,
    error: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = {
        "statusCode": status_code,
        "message": message,
        "error": error or _phrase(status_code),
        "path": request.url.path,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if extra:
        body.update(extra)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s in %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return error_response(request, exc.status_code, exc.message, exc.error, exc.payload)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return error_response(request, 400, messages)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error in %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(request, 409, "Resource already exists or violates a constraint")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions with an error id and answer 500"""
    error_id = id(exc)
    logger.error(
        "Unhandled exception [%s] in %s %s: %s",
        error_id, request.method, request.url.path, exc,
        exc_info=exc,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return error_response(request, 500, "Internal server error", extra={"error_id": error_id})


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
