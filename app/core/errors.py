"""
Typed application errors and the single place that classifies failures.

Handlers never match on error strings themselves: they run their body inside
``error_boundary`` and let ``classify_error`` decide which ``AppError``
variant (and therefore which HTTP status and user-safe message) a failure
becomes. FastAPI exception handlers installed by ``install_error_handlers``
render the variants as JSON.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Oops! Something went wrong. Please try again in a moment."
STORE_UNAVAILABLE_MESSAGE = "Database connection error. Please check the database configuration."
INVALID_INPUT_MESSAGE = "Invalid input. Please check your data and try again."

_CONNECTION_ERROR_MARKERS = (
    "connect econnrefused",
    "connection refused",
    "could not connect",
    "timeout",
    "timed out",
)


class AppError(Exception):
    status_code: int = 500
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None, *, cause: BaseException | None = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized action."


class ValidationFailed(AppError):
    status_code = 400
    default_message = INVALID_INPUT_MESSAGE


class NotFound(AppError):
    status_code = 404
    default_message = "Requested entity was not found."


class Conflict(AppError):
    status_code = 409
    default_message = "Entity already exists."


class StoreUnavailable(AppError):
    status_code = 500
    default_message = STORE_UNAVAILABLE_MESSAGE


class Unknown(AppError):
    status_code = 500
    default_message = GENERIC_ERROR_MESSAGE


def is_connection_error(exc: BaseException) -> bool:
    if isinstance(exc, (PoolTimeoutError, DisconnectionError, TimeoutError, ConnectionError)):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _CONNECTION_ERROR_MARKERS)


def classify_error(exc: BaseException) -> AppError:
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, IntegrityError):
        return Conflict(cause=exc)
    if is_connection_error(exc):
        return StoreUnavailable(cause=exc)
    if isinstance(exc, (OperationalError, InterfaceError)) and getattr(exc, "connection_invalidated", False):
        return StoreUnavailable(cause=exc)
    return Unknown(cause=exc)


@contextmanager
def error_boundary(action: str) -> Iterator[None]:
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        error = classify_error(exc)
        logger.exception("%s failed: %s", action, type(error).__name__)
        raise error from exc


def error_payload(error: AppError) -> dict:
    payload: dict = {"message": error.message}
    if error.cause is not None and not settings.is_production:
        payload["error"] = str(error.cause)
    return payload


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        return JSONResponse(error_payload(exc), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"message": INVALID_INPUT_MESSAGE}, status_code=400)
