"""
API error kinds and the storage-error translator.

Three kinds reach clients:
- NotFound         -> 404
- ValidationError  -> 422, body {"errors": {field: [message, ...]}}
- InternalError    -> 500, no internal detail in the body

Storage failures are translated with a declarative constraint table
({constraint_name: (field, message)}). A violation of a listed constraint
becomes a ValidationError; every other storage failure becomes an
InternalError with the original exception kept as `__cause__`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

import asyncpg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500

ConstraintTable = Mapping[str, tuple[str, str]]

# Failures raised by the driver or the pool while running a statement.
STORAGE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


class ApiError(Exception):
    status_code = HTTP_500

    def body(self) -> dict:
        return {"errors": {"server": ["internal server error"]}}


class NotFound(ApiError):
    status_code = HTTP_404

    def __init__(self, resource: str = "resource") -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource

    def body(self) -> dict:
        return {"errors": {self.resource: ["not found"]}}


class ValidationError(ApiError):
    status_code = HTTP_422

    def __init__(self, errors: Mapping[str, list[str]]) -> None:
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(f"validation failed: {sorted(self.errors)}")

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})

    def body(self) -> dict:
        return {"errors": self.errors}


class InternalError(ApiError):
    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)


def translate_storage_error(exc: BaseException, constraints: ConstraintTable | None = None) -> ApiError:
    """
    Map a raw storage failure to an API error.

    Pure: no logging, no I/O. API errors pass through unchanged.
    """
    if isinstance(exc, ApiError):
        return exc

    if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
        constraint_name = getattr(exc, "constraint_name", None)
        mapping = (constraints or {}).get(constraint_name or "")
        if mapping is not None:
            field, message = mapping
            return ValidationError.single(field, message)

    error = InternalError()
    error.__cause__ = exc
    return error


@contextmanager
def storage_errors(constraints: ConstraintTable | None = None) -> Iterator[None]:
    """
    Translate storage failures raised inside the block.

        with storage_errors({"users_email_key": ("email", "already taken")}):
            await repository.insert_user(pool, ...)
    """
    try:
        yield
    except STORAGE_ERRORS as exc:
        raise translate_storage_error(exc, constraints) from exc


def _validation_key(loc: tuple | list) -> str:
    # ("body", "email") -> "email"; ("query", "limit") -> "limit"
    if not loc:
        return "request"
    return str(loc[-1])


def request_validation_errors(exc: RequestValidationError) -> ValidationError:
    errors: dict[str, list[str]] = {}
    for item in exc.errors():
        key = _validation_key(item.get("loc") or ())
        errors.setdefault(key, []).append(str(item.get("msg") or "invalid"))
    return ValidationError(errors)


def _error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.body())


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFound)
    async def handle_not_found(request: Request, exc: NotFound) -> JSONResponse:
        logger.info("not_found path=%s", request.url.path)
        return _error_response(exc)

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("validation_failed path=%s fields=%s", request.url.path, ",".join(sorted(exc.errors)))
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = request_validation_errors(exc)
        logger.info("request_invalid path=%s fields=%s", request.url.path, ",".join(sorted(error.errors)))
        return _error_response(error)

    @app.exception_handler(InternalError)
    async def handle_internal(request: Request, exc: InternalError) -> JSONResponse:
        cause = exc.__cause__
        logger.error(
            "internal_error path=%s cause=%s",
            request.url.path,
            type(cause).__name__ if cause is not None else "none",
            exc_info=cause if cause is not None else exc,
        )
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected_error path=%s type=%s", request.url.path, type(exc).__name__)
        return _error_response(InternalError())
