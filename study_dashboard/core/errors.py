"""Error taxonomy and the JSON exception handlers installed on the app.

Every error body carries a human-readable ``message``. Validation errors add an
``errors`` list of ``{field, message}``; conflicts add ``field`` and
``error: "duplicate"``. Unexpected errors are logged with a short ``log_id``
and returned with a generic message so internals never leak.
"""
import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.details}


class ValidationError(DashboardError):
    """Input failed a schema or business constraint (400)."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: list[dict[str, str]] | None = None):
        super().__init__(message, {"errors": errors or []})

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, [{"field": field, "message": message}])


class ConflictError(DashboardError):
    """Unique constraint hit, e.g. duplicate subject name (409)."""

    status_code = 409

    def __init__(self, message: str, field: str | None = None):
        details: dict[str, Any] = {"error": "duplicate"}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(DashboardError):
    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")


class AuthError(DashboardError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        # drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in err.get("loc", ())][1:]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return errors


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    if isinstance(exc, ConflictError):
        logger.warning("Conflict on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": _field_errors(exc)},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_id = uuid.uuid4().hex[:8]
    logger.exception("Unhandled error [%s] on %s %s", log_id, request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "log_id": log_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DashboardError, dashboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
