from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.utils.base import ErrorCode


logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for every error a handler turns into a JSON response."""

    status_code: int = 400
    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, *, status_code: int | None = None, error: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict:
        body: dict[str, Any] = {"success": False, "message": self.message, "code": self.code.value}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationFailed(AppError):
    status_code = 400
    code = ErrorCode.VALIDATION_ERROR


class NotFound(AppError):
    # The auth flows report missing users and stale tokens as plain 400s
    status_code = 400
    code = ErrorCode.NOT_FOUND


class Conflict(AppError):
    status_code = 400
    code = ErrorCode.CONFLICT


class Unauthenticated(AppError):
    status_code = 401
    code = ErrorCode.UNAUTHENTICATED


class InternalError(AppError):
    status_code = 500
    code = ErrorCode.INTERNAL_ERROR

    @classmethod
    def wrap(cls, message: str, exc: BaseException) -> "InternalError":
        return cls(message, error=str(exc) or exc.__class__.__name__)


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in exc.errors()]
    error = ValidationFailed("Invalid request body", error={"fields": [f for f in fields if f]})
    return JSONResponse(status_code=error.status_code, content=error.to_body())
