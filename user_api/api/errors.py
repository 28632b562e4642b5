"""Exception handlers that render every failure as an error envelope."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.exceptions import (
    ApiError,
    AuthServiceError,
    DomainError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenConfigurationError,
    TokenExpiredError,
    TokenError,
    TokenPayloadError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserServiceError,
)
from user_api.schemas.common import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)

EXCEPTION_MAPPING: dict[type[DomainError], tuple[int, str]] = {
    UserNotFoundError: (status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND"),
    UserAlreadyExistsError: (status.HTTP_409_CONFLICT, "USER_ALREADY_EXISTS"),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS"),
    UserServiceError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "USER_SERVICE_ERROR"),
    AuthServiceError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "AUTH_SERVICE_ERROR"),
    TokenExpiredError: (status.HTTP_401_UNAUTHORIZED, "TOKEN_EXPIRED"),
    InvalidTokenError: (status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN"),
    TokenPayloadError: (status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN_PAYLOAD"),
    TokenConfigurationError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR"),
    TokenError: (status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN"),
}

HTTP_STATUS_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}

GENERIC_SERVER_ERROR = "Internal server error"


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build an error envelope and log it."""
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {status_code} {code}: {message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {status_code} {code}: {message}")

    body = ErrorResponse(
        error=ErrorBody(code=code, message=message, details=details),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def lookup_domain_error(exc: DomainError) -> tuple[int, str]:
    """Find the status and code for a domain error, honouring subclassing."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_MAPPING:
            return EXCEPTION_MAPPING[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(request, exc.status_code, exc.code, exc.message, exc.details)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code, code = lookup_domain_error(exc)
    return error_response(request, status_code, code, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures field by field."""
    details = []
    for err in exc.errors():
        # Drop the leading location ("body", "path", "query")
        location = [str(part) for part in err.get("loc", ())[1:]]
        details.append(
            {
                "field": ".".join(location),
                "message": err.get("msg", ""),
                "code": err.get("type", ""),
            }
        )
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return error_response(request, exc.status_code, code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler. Hides the real message in production."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    settings = request.app.state.settings
    message = GENERIC_SERVER_ERROR if settings.is_production else str(exc) or GENERIC_SERVER_ERROR
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error-envelope handlers to the app."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
