"""
Exception handlers translating admin API errors into JSON responses.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from adminapi_core.domain.exceptions import (
    AdminApiError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    SystemReservedError,
    ValidationError,
)

STATUS_CODES: dict[type[AdminApiError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    SystemReservedError: 400,
    InvalidReferenceError: 400,
    ConflictError: 409,
}


def status_code_for(error: AdminApiError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


async def admin_api_error_handler(request: Request, exc: AdminApiError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Register error handlers with the FastAPI app."""
    app.add_exception_handler(AdminApiError, admin_api_error_handler)
