from collections.abc import Mapping, Sequence
from typing import Any, cast
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel

from app.core.logging import get_logger


# ---- Domain errors ----

class CatalogError(Exception):
    """Base class for errors the API turns into a status code and message."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "catalog_error"
    default_message: str = "Catalog error"

    def __init__(self, message: str | None = None):
        self.message: str = message or self.default_message
        super().__init__(self.message)


class BookValidationError(CatalogError, ValueError):
    """A required field is missing or malformed."""

    status_code = HTTP_400_BAD_REQUEST
    error_type = "validation_error"

    def __init__(self, field: str, reason: str):
        self.field: str = field
        self.reason: str = reason
        super().__init__(f"{field} {reason}")


class DuplicateBookError(CatalogError):
    status_code = HTTP_409_CONFLICT
    error_type = "duplicate_resource"
    default_message = "The book already exists in the database"


class BookNotFoundError(CatalogError):
    status_code = HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Book not found"


class InvalidQueryError(CatalogError):
    status_code = HTTP_400_BAD_REQUEST
    error_type = "invalid_input"
    default_message = "Invalid query parameter"


class StoreError(CatalogError):
    """The persistent store failed; the cause is logged, never returned."""

    error_type = "store_error"
    default_message = "Database error"


class GenerationFailedError(CatalogError):
    """The text provider failed; opaque to the caller."""

    error_type = "generation_failed"
    default_message = "Error generating description from AI."


# ---- Response envelope ----

class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    message: str
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }


def _error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: dict[str, object] | None = None,
) -> JSONResponse:
    body = ErrorEnvelope(
        message=message,
        error=ErrorBody(type=error_type, message=message, details=details),
        meta=_build_meta(request),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                ctx["error"] = str(ctx["error"])
            serialized_error["ctx"] = ctx
        serialized_errors.append(serialized_error)
    return serialized_errors


def _first_error_message(errors: Sequence[Mapping[Any, Any]]) -> str:
    """Human-readable summary of the first validation error."""
    if not errors:
        return "Invalid request payload"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg", "is invalid"))
    # pydantic prefixes messages raised from validators
    msg = msg.removeprefix("Value error, ")
    if loc and not msg.startswith(loc[-1]):
        return f"{'.'.join(loc)}: {msg}"
    return msg


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        logger = get_logger(__name__, request)
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s: %s", exc.error_type, exc.message)
        else:
            logger.info("%s: %s", exc.error_type, exc.message)

        details: dict[str, object] | None = None
        if isinstance(exc, BookValidationError):
            details = {"field": exc.field, "reason": exc.reason}
        return _error_response(request, exc.status_code, exc.error_type, exc.message, details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        message = exc.detail if isinstance(exc.detail, str) and exc.detail else "HTTP error"
        return _error_response(request, exc.status_code, "http_error", message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        errors = exc.errors()
        return _error_response(
            request,
            HTTP_400_BAD_REQUEST,
            "validation_error",
            _first_error_message(errors),
            {"errors": _serialize_validation_errors(errors)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _error_response(
            request, HTTP_500_INTERNAL_SERVER_ERROR, "server_error", "Internal Server Error"
        )
