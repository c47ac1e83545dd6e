"""Exception handlers rendering every failure as the JSON error envelope."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prompt_registry.application.dto.envelope_models import ErrorBody, ErrorEnvelope
from prompt_registry.domain.errors import (
    AccountDeactivatedError,
    AuthenticationError,
    ConflictError,
    DuplicateEmailError,
    EntityNotFoundError,
    ForbiddenError,
    NoActiveVersionError,
    ValidationFailedError,
)
from prompt_registry.infrastructure.http.request_logging import (
    REQUEST_ID_HEADER,
    REQUEST_ID_STATE_KEY,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    ValidationFailedError: 400,
    DuplicateEmailError: 400,
    AuthenticationError: 401,
    AccountDeactivatedError: 403,
    ForbiddenError: 403,
    EntityNotFoundError: 404,
    NoActiveVersionError: 404,
    ConflictError: 409,
}


def build_error_response(
    *,
    status_code: int,
    message: str,
    error: BaseException | None = None,
    expose_stack: bool = False,
) -> JSONResponse:
    """Render one envelope response; the stack is attached only when exposed."""

    stack = None
    if expose_stack and error is not None:
        stack = "".join(traceback.format_exception(error))
    envelope = ErrorEnvelope(error=ErrorBody(message=message, stack=stack))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


def format_validation_errors(error: RequestValidationError) -> str:
    """Flatten FastAPI validation details into one readable message."""

    parts: list[str] = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail.get("loc", ()) if item != "body")
        message = str(detail.get("msg", "invalid value"))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def install_error_handlers(app: FastAPI, *, expose_error_stack: bool) -> None:
    """Register envelope handlers for domain, framework and unexpected errors."""

    async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, EntityNotFoundError):
            logger.debug(
                "entity_not_found kind=%s entity_id=%s reason=%s path=%s",
                exc.kind.value,
                exc.entity_id,
                exc.reason.value,
                request.url.path,
            )
        return build_error_response(
            status_code=status_code,
            message=str(exc),
            error=exc,
            expose_stack=expose_error_stack,
        )

    async def handle_request_validation(request: Request, exc: Exception) -> JSONResponse:
        assert isinstance(exc, RequestValidationError)
        return build_error_response(
            status_code=400,
            message=format_validation_errors(exc),
            error=exc,
            expose_stack=expose_error_stack,
        )

    async def handle_http_exception(request: Request, exc: Exception) -> JSONResponse:
        assert isinstance(exc, StarletteHTTPException)
        if exc.status_code == 404:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return build_error_response(
            status_code=exc.status_code,
            message=message,
            error=exc,
            expose_stack=expose_error_stack,
        )

    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        request_id = request.scope.get("state", {}).get(REQUEST_ID_STATE_KEY)
        logger.exception(
            "unhandled_request_error request_id=%s method=%s path=%s",
            request_id,
            request.method,
            request.url.path,
        )
        response = build_error_response(
            status_code=500,
            message=INTERNAL_ERROR_MESSAGE,
            error=exc,
            expose_stack=expose_error_stack,
        )
        if request_id is not None:
            response.headers[REQUEST_ID_HEADER.decode("ascii")] = request_id
        return response

    for error_type in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)


def _status_for(error: Exception) -> int:
    for error_type in type(error).__mro__:
        status_code = _STATUS_BY_ERROR.get(error_type)
        if status_code is not None:
            return status_code
    return 500
