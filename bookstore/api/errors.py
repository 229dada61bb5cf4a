# bookstore/api/errors.py
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookstore.data.database import utcnow
from bookstore.domain.errors import AppError
from bookstore.domain.schemas import ErrorResponse
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(request: Request, status: int, code: str, message: str, details: Any = None) -> JSONResponse:
    body = ErrorResponse(
        timestamp=utcnow(),
        path=request.url.path,
        status=status,
        code=code,
        message=message,
        details=details,
    )
    return JSONResponse(status_code=status, content=jsonable_encoder(body.model_dump(by_alias=True)))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.code} {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.code} {exc.message}")
    return error_response(request, exc.status, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path}: invalid request {details}")
    return error_response(request, 400, "VALIDATION_FAILED", "Request validation failed", details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # pelny traceback tylko w logach
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}")
    return error_response(request, 500, "INTERNAL_SERVER_ERROR", "An unexpected error occurred")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
