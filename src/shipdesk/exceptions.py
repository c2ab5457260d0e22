"""Error taxonomy and handlers mapping it onto the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ShipdeskError(Exception):
    """Base class for errors reported to the caller as ``success: false``."""

    code = "shipdesk_error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShipdeskError):
    """A required field is missing or a value is malformed."""

    code = "validation_error"
    default_message = "Invalid input"


class ConflictError(ShipdeskError):
    """Uniqueness or referential-integrity violation."""

    code = "conflict"
    default_message = "Conflicting data"


class NotFoundError(ShipdeskError):
    """The operation targets a record that does not exist."""

    code = "not_found"
    default_message = "Record not found"

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InternalError(ShipdeskError):
    """Storage failure. The message never carries internal detail."""

    code = "internal_error"
    default_message = "Internal error, please retry later"


class AuthenticationError(ShipdeskError):
    code = "not_authenticated"
    default_message = "Please log in first"


class PermissionDeniedError(ShipdeskError):
    code = "permission_denied"
    default_message = "You are not allowed to use this function"


class TrackingLookupError(ShipdeskError):
    """The tracking upstream could not be reached or answered garbage."""

    code = "tracking_failed"
    default_message = "Tracking lookup failed, please retry later"


class TrackingUnavailableError(ShipdeskError):
    """The tracking upstream answered but has no traces for the number."""

    code = "tracking_unavailable"
    default_message = "No tracking information available"


def error_body(message: str, code: str) -> dict[str, object]:
    return {"success": False, "message": message, "code": code}


def register_exception_handlers(app: FastAPI) -> None:
    """Register shipdesk exception handlers on a FastAPI app.

    Failures are reported in the response envelope, not through the HTTP
    status: every handler answers 200 with ``success: false``.

    Handler order:
    1. ShipdeskError and subclasses -> their own code and message
    2. RequestValidationError -> ``validation_error``
    3. Exception -> ``internal_error`` with a generic message
    """

    @app.exception_handler(ShipdeskError)
    async def _shipdesk_error(
        request: Request,
        exc: ShipdeskError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=200,
            content=error_body(exc.message, exc.code),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        if errors:
            location = ".".join(
                str(part) for part in errors[0].get("loc", ())[1:]
            )
            message = f"Invalid value for {location or 'request'}"
        else:
            message = ValidationError.default_message
        return JSONResponse(
            status_code=200,
            content=error_body(message, ValidationError.code),
        )

    @app.exception_handler(Exception)
    async def _unexpected_error(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=200,
            content=error_body(
                InternalError.default_message, InternalError.code
            ),
        )
