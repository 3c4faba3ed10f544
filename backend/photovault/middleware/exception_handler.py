"""Exception handlers for structured error responses."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DatabaseError, PhotoVaultException, ValidationError

logger = logging.getLogger(__name__)


async def photovault_exception_handler(request: Request, exc: PhotoVaultException) -> JSONResponse:
    """Log the error with request context and render ``exc.to_dict()``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"PhotoVaultException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Map raw database errors to DATABASE_ERROR without leaking driver text."""
    logger.error(
        "Unhandled database error",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return await photovault_exception_handler(request, DatabaseError())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies and parameters as 400 VALIDATION_ERROR."""
    problems = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    first = problems[0] if problems else {"loc": [], "msg": "Invalid request"}
    field = ".".join(part for part in first["loc"] if part not in ("body", "query", "path")) or None

    error = ValidationError(first["msg"], field=field)
    error.details["errors"] = problems
    return await photovault_exception_handler(request, error)
