# cartify/core/errors.py
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """
    Base class for domain errors raised by services.

    Still an HTTPException, so routers and services can raise it the
    same way they raise plain HTTP errors; `kind` tells callers which
    branch of the error taxonomy they hit.
    """

    kind = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, extra: dict[str, Any] | None = None):
        super().__init__(status_code=self.status_code, detail=message)
        self.extra = extra or {}


class ValidationFailed(AppError):
    kind = "validation"


class MalformedItems(AppError):
    kind = "malformed_items"


class InsufficientStock(AppError):
    kind = "insufficient_stock"


class Conflict(AppError):
    """Duplicate unique field (email, name)."""

    kind = "conflict"


class PriceChanged(AppError):
    """Cart snapshot no longer matches the catalog; client must re-confirm."""

    kind = "price_changed"
    status_code = status.HTTP_409_CONFLICT


class NotFound(AppError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(AppError):
    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AppError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


_KIND_BY_STATUS = {
    400: "validation",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def _body(message: Any, kind: str, **extra: Any) -> dict[str, Any]:
    body = {"success": False, "message": message, "kind": kind}
    body.update(extra)
    return jsonable_encoder(body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.detail, exc.kind, **exc.extra),
        headers=getattr(exc, "headers", None),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(message, _KIND_BY_STATUS.get(exc.status_code, "error")),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Missing / malformed input is a 400 in this API, not FastAPI's 422.
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_body(message, "validation", errors=errors),
    )


async def server_fault_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body("Something went wrong!", "server_fault"),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Route every failure through the JSON {message, kind} shape."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, server_fault_handler)
