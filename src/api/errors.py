"""Map domain exceptions to HTTP responses.

Every error body has the same shape: ``{"message": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.model.errors import (
    DomainError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    SessionDestroyError,
    StorageError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Exception type -> (status code, fixed message or None to use the exception's own)
EXCEPTION_STATUS_MAP = {
    UnauthenticatedError: (status.HTTP_401_UNAUTHORIZED, "Not authenticated"),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
    DuplicateEmailError: (status.HTTP_400_BAD_REQUEST, "Email already exists"),
    ValidationError: (status.HTTP_400_BAD_REQUEST, None),
    NotFoundError: (status.HTTP_404_NOT_FOUND, None),
    SessionDestroyError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Logout failed"),
    StorageError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error"),
}


def _lookup(exc: DomainError) -> tuple[int, str]:
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            status_code, message = EXCEPTION_STATUS_MAP[cls]
            return status_code, message or exc.message
    return status.HTTP_400_BAD_REQUEST, exc.message


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code, message = _lookup(exc)
    if status_code >= 500:
        logger.error("Request failed", extra={"path": request.url.path, "error": type(exc).__name__})
    return JSONResponse(status_code=status_code, content={"message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
