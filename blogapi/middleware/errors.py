"""Centralized exception handlers.

Every failure becomes ``{"message", "code", "stack"}``; ``stack`` is only
filled outside production.
"""
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogapi.config import settings
from blogapi.logging_config import get_logger
from blogapi.services.errors import ServiceError

logger = get_logger("blogapi.errors")

_STATUS_TO_CODE = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    500: "server_error",
}


def _stack(exc: Exception) -> str | None:
    if settings.is_production:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_response(
    status_code: int,
    message: str,
    exc: Exception,
    code: str | None = None,
    details=None,
) -> JSONResponse:
    body = {
        "message": message,
        "code": code or _STATUS_TO_CODE.get(status_code, "server_error"),
        "stack": _stack(exc),
    }
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for service, validation, routing and unexpected errors."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            "%s %s -> %d %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.error_code,
            exc.message,
        )
        return error_response(exc.status_code, exc.message, exc, code=exc.error_code, details=exc.detail)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else "Invalid request data"
        logger.warning("%s %s -> 400 validation: %s", request.method, request.url.path, message)
        details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]
        return error_response(400, message, exc, code="validation_error", details=details)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("%s %s -> 409 integrity: %s", request.method, request.url.path, exc.orig)
        return error_response(409, "Resource conflicts with an existing record", exc, code="conflict")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, f"Route not found - {request.url.path}", exc, code="route_not_found")
        return error_response(exc.status_code, str(exc.detail), exc)

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        message = "Internal server error" if settings.is_production else str(exc)
        return error_response(500, message, exc, code="server_error")
