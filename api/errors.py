"""Global exception handlers: the one place error kinds become HTTP statuses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from core.exceptions import ErrorKind, ServiceError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_TOKEN: 400,
    ErrorKind.INTERNAL: 500,
}

CODE_BY_KIND = {
    ErrorKind.VALIDATION: ErrorCodes.VALIDATION_ERROR,
    ErrorKind.CONFLICT: ErrorCodes.ALREADY_EXISTS,
    ErrorKind.UNAUTHORIZED: ErrorCodes.NOT_AUTHENTICATED,
    ErrorKind.NOT_FOUND: ErrorCodes.NOT_FOUND,
    ErrorKind.INVALID_TOKEN: ErrorCodes.INVALID_TOKEN,
    ErrorKind.INTERNAL: ErrorCodes.INTERNAL_ERROR,
}


def service_error_response(exc: ServiceError) -> JSONResponse:
    """Translate a flow error into its HTTP response."""
    if exc.kind is ErrorKind.INTERNAL:
        message = INTERNAL_ERROR_MESSAGE
    else:
        message = exc.message
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content=error_response(CODE_BY_KIND[exc.kind], message, exc.errors),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.kind is ErrorKind.INTERNAL:
            logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}")
        return service_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return service_error_response(ValidationError.from_pydantic(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            code, message = ErrorCodes.NOT_FOUND, "Resource not found"
        else:
            code, message = ErrorCodes.INVALID_REQUEST, str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_response(ErrorCodes.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE),
        )
