import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.dashtact.core.error_catalog import AppError, ErrorCatalog, ErrorDefinition

logger = logging.getLogger(__name__)

# Framework-raised HTTP errors, e.g. a missing bearer token or an unknown route.
_HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _json_safe(value):
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def error_response(
    code: str,
    message: str,
    details: object,
    trace_id: str,
    status_code: int,
    headers: dict | None = None,
) -> JSONResponse:
    """Every error body has the same four keys."""
    return JSONResponse(
        status_code=status_code,
        content={"code": code, "message": message, "details": details, "trace_id": trace_id},
        headers=headers,
    )


def _respond(request: Request, exc: Exception, code: str, message: str, details, status_code: int, headers=None):
    request.state.error_code = code
    request.state.error_class = exc.__class__.__name__
    return error_response(code, message, details, getattr(request.state, "trace_id", ""), status_code, headers)


def _respond_with(request: Request, exc: Exception, definition: ErrorDefinition, details: object):
    return _respond(request, exc, definition.code, definition.message, details, definition.status_code)


async def handle_app_error(request: Request, exc: AppError):
    return _respond_with(request, exc, exc.error, exc.details)


async def handle_http_exception(request: Request, exc: HTTPException):
    detail = exc.detail
    message = "HTTP error" if detail is None else str(detail)
    details = None
    if isinstance(detail, dict):
        message = str(detail.get("message", message))
        details = {key: value for key, value in detail.items() if key != "message"} or None
    elif isinstance(detail, list):
        details = {"errors": detail}
    code = _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return _respond(request, exc, code, message, details, exc.status_code, getattr(exc, "headers", None))


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        errors.append(
            {
                "field": ".".join(str(part) for part in loc if part not in {"body", "query", "path", "header"}) or None,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
                "loc": _json_safe(loc),
                "input": _json_safe(error.get("input")),
            }
        )
    return _respond_with(request, exc, ErrorCatalog.VALIDATION_ERROR, {"errors": errors})


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"trace_id": getattr(request.state, "trace_id", "")})
    return _respond_with(request, exc, ErrorCatalog.INTERNAL_ERROR, {"type": exc.__class__.__name__})


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
