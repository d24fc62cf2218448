"""Translate domain exceptions into ``{"error": ...}`` JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from djibgo.modules.accounts import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    IdentityStoreError,
    InvalidCredentialsError,
    PasswordPolicyError,
    TemporaryPasswordExpiredError,
)
from djibgo.modules.deliveries import DeliveryLogError
from djibgo.modules.profiles import ProfileStoreError
from djibgo.modules.temporary_credentials import (
    AccountLookupError,
    IssuanceConflictError,
    IssuanceFailedError,
    LookupFailedError,
    MissingFieldError,
    PhoneMismatchError,
)

logger = logging.getLogger(__name__)

INVALID_BODY = "Corps de requête invalide"
INTERNAL_ERROR = "Erreur interne du serveur"

STATUS_BY_EXCEPTION: dict[type[Exception], int] = {
    MissingFieldError: status.HTTP_400_BAD_REQUEST,
    PhoneMismatchError: status.HTTP_400_BAD_REQUEST,
    PasswordPolicyError: status.HTTP_400_BAD_REQUEST,
    AccountLookupError: status.HTTP_404_NOT_FOUND,
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
    AccountAlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    TemporaryPasswordExpiredError: status.HTTP_401_UNAUTHORIZED,
    LookupFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    IssuanceFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

STORE_FAILURES = (IdentityStoreError, ProfileStoreError, DeliveryLogError)


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = STATUS_BY_EXCEPTION[type(exc)]
    return error_response(status_code, str(exc))


async def _conflict_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, IssuanceConflictError)
    return error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        headers={"Retry-After": str(exc.retry_after)},
    )


async def _store_failure_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or INTERNAL_ERROR)


async def _validation_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("Rejected malformed body on %s: %s", request.url.path, exc)
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    headers = None
    # Runs in ServerErrorMiddleware, outside CORSMiddleware.
    if "*" in getattr(request.app.state, "cors_allow_origins", ()):
        headers = {"Access-Control-Allow-Origin": "*"}
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, headers=headers)


async def _http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StarletteHTTPException)
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class in STATUS_BY_EXCEPTION:
        app.add_exception_handler(exc_class, _domain_error_handler)
    app.add_exception_handler(IssuanceConflictError, _conflict_handler)
    for exc_class in STORE_FAILURES:
        app.add_exception_handler(exc_class, _store_failure_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = ["error_response", "register_exception_handlers"]
