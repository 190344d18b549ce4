# catalog/core/errors.py
"""
Error taxonomy and the JSON envelope every error response uses.

Services raise the `CatalogError` subclasses below exactly where they
would raise a plain `HTTPException`; the handlers registered by
`register_exception_handlers` render them as

    {"success": false, "message": "...", "errors": [...]}
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogError(HTTPException):
    """Base class for errors surfaced to the client in the envelope."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.message,
            headers=headers,
        )
        self.errors = errors


class ValidationFailed(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation error"


class BadRequest(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


class Conflict(CatalogError):
    # Duplicate unique fields are reported as a plain client error.
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Duplicate value for a unique field"


class MissingToken(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"


class InvalidCredentials(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthorized(CatalogError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"


class Forbidden(CatalogError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Admin access required"


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class InternalError(CatalogError):
    pass


def envelope(
    message: str,
    errors: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def validation_errors(exc_errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """
    Flatten pydantic error dicts into [{field, message}] pairs.

    The leading location segment ("body", "query", "path") is dropped so
    `("body", "specifications", "season")` becomes "specifications.season".
    """
    out: list[dict[str, str]] = []
    for err in exc_errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        message = str(err.get("msg", "Invalid value"))
        # pydantic prefixes custom ValueError messages
        message = message.removeprefix("Value error, ")
        out.append({"field": ".".join(loc) or "body", "message": message})
    return out


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the failed constraint is a UNIQUE one (Postgres or SQLite)."""
    if getattr(exc.orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


def render(exc: CatalogError) -> JSONResponse:
    """Serialize a taxonomy error into the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(str(exc.detail), exc.errors),
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach envelope-rendering handlers for every error family."""

    def internal(exc: Exception, message: str) -> JSONResponse:
        return render(InternalError(str(exc) if debug else message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if isinstance(exc, CatalogError):
            return render(exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        in_query = any(e.get("loc", ("",))[0] in {"query", "path"} for e in errors)
        message = "Query validation error" if in_query else None
        return render(ValidationFailed(message, errors=validation_errors(list(errors))))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        if is_unique_violation(exc):
            logger.warning("Unique violation on %s %s: %s", request.method, request.url.path, exc.orig)
            return render(Conflict())
        logger.exception("Integrity error on %s %s", request.method, request.url.path)
        return internal(exc, "Database error")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return internal(exc, "Database error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return internal(exc, InternalError.message)
