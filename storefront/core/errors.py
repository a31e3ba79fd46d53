"""Application error taxonomy and the handlers that render the error envelope."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that reach the client as ``{message, errorType, status}``."""

    status_code: int = 500
    error_type: str = "AppError"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 422
    error_type = "ValidationError"


class NotFoundError(AppError):
    status_code = 404
    error_type = "NotFoundError"


class AuthError(AppError):
    status_code = 401
    error_type = "AuthError"


class ConflictError(AppError):
    status_code = 409
    error_type = "ConflictError"


class ProcessorError(AppError):
    """The payment processor rejected an operation.

    Carries the processor's own message and HTTP status.
    """

    status_code = 400
    error_type = "ProcessorError"

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message, status_code)
        self.code = code


def error_body(message: str, error_type: str, status: int) -> dict[str, Any]:
    return {"message": message, "errorType": error_type, "status": status}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_type, exc.status_code),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=422,
        content=error_body(", ".join(messages), ValidationError.error_type, 422),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "HTTPError", exc.status_code),
        headers=exc.headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "InternalError", 500),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
