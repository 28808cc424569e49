"""Translate every failure into the JSON error envelope."""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_api.core.logging import get_logger
from product_api.errors import NotFoundError, StorageError, ValidationError
from product_api.schemas import ErrorEnvelope, field_errors

logger = get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Dict[str, str]]] = None,
) -> JSONResponse:
    body = ErrorEnvelope(message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _requested_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await validation_error_handler(request, ValidationError(field_errors(exc.errors())))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    # Root cause is already logged by the repository layer.
    logger.error("%s requestId=%s", exc, getattr(request.state, "request_id", None))
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 405 means the path exists but not for this method: still no route.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_404_NOT_FOUND, f"Route {_requested_path(request)} not found")
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception requestId=%s", request_id)
    response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    # runs in ServerErrorMiddleware, outside RequestIdMiddleware
    if request_id:
        response.headers["X-Request-Id"] = request_id
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
