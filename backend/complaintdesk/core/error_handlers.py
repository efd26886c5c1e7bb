"""
Exception handlers - every error leaves the API as ``{"error": "<message>"}``.

No tracebacks, SQL, or internal identifiers are ever put in the body.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaintdesk.core.exceptions import ComplaintDeskError, DependencyError
from complaintdesk.core.logging_config import logger

GENERIC_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Turn pydantic's error list into one human-readable sentence"""
    if not errors:
        return "Invalid request"

    first = errors[0]
    error_type = first.get("type", "")
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]

    if error_type == "json_invalid":
        return "Request body must be valid JSON"

    if error_type == "missing" and not loc:
        return "Request body is required"

    if error_type == "value_error":
        # Raised by our own validators; the message is already user-facing
        ctx_error = first.get("ctx", {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)

    message = first.get("msg", "Invalid value")
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


async def complaintdesk_error_handler(request: Request, exc: ComplaintDeskError) -> JSONResponse:
    if isinstance(exc, DependencyError):
        logger.error(
            f"Dependency failure on {request.method} {request.url.path}: {exc.details}",
            extra={"event_type": "dependency_error", **exc.details},
        )
        return error_response(exc.status_code, GENERIC_ERROR_MESSAGE)

    return error_response(exc.status_code, exc.message)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, describe_validation_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Global exception: {exc}", exc_info=True)
    return error_response(500, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ComplaintDeskError, complaintdesk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
