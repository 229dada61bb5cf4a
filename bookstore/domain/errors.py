# bookstore/domain/errors.py
from typing import Any


class AppError(Exception):
    """Blad biznesowy: status HTTP + kod maszynowy + opcjonalne szczegoly."""

    status: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(AppError):
    status = 400
    code = "VALIDATION_FAILED"


class UnauthorizedError(AppError):
    status = 401
    code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    status = 403
    code = "FORBIDDEN"


class NotFoundError(AppError):
    status = 404
    code = "RESOURCE_NOT_FOUND"


class DuplicateResourceError(AppError):
    status = 409
    code = "DUPLICATE_RESOURCE"


class UnprocessableError(AppError):
    status = 422
    code = "UNPROCESSABLE_ENTITY"
