"""
Error Handlers

Every failure leaves the API as the same envelope:
{"success": false, "message": ..., "error": {"code": ..., "details": ...}}
"""

from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...domain.errors import DomainError
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


def _envelope(message: str, code: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error": {"code": code, "details": details}
    }


def _headers() -> Dict[str, str]:
    return {"X-Correlation-Id": get_correlation_id() or ""}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """
    Handle domain errors (validation, not found, upstream, integrity).

    Client errors are logged as warnings, server-side ones as errors.
    """
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"Domain error: {exc.error_code} - {exc.message}",
        extra={"error_code": exc.error_code}
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=jsonable_encoder(exc.to_dict()),
        headers=_headers()
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request bodies, params and headers that fail validation"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"Validation error: path={request.url.path}, method={request.method}, errors={errors}",
        extra={"error_code": "VALIDATION_ERROR"}
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope("Request validation failed", "VALIDATION_ERROR", {"errors": errors}),
        headers=_headers()
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything unexpected; the stack trace goes to the error log"""
    logger.error(f"Unexpected error: {exc}", exc_info=True, extra={"error_code": "INTERNAL_ERROR"})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "An unexpected error occurred",
            "INTERNAL_ERROR",
            {"hint": "Check server logs for details"}
        ),
        headers=_headers()
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
