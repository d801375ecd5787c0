"""
Global error handlers - one JSON envelope for every failure.

MarketHTTPException -> {"error": {code, kind, message}, "path"}
HTTPException       -> same envelope, code derived from the status
RequestValidation   -> 422 with field-level details
Everything else     -> 500 "internal"; store details are logged, never returned
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auction_house.core.errors import ErrorKind, MarketError, MarketHTTPException

logger = logging.getLogger(__name__)


def _envelope(request: Request, error: dict) -> dict:
    return {"error": error, "path": str(request.url.path)}


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(MarketHTTPException)
    async def market_error_handler(request: Request, exc: MarketHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(request, exc.error.to_response()),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(request, {"code": f"http_{exc.status_code}", "message": exc.detail}),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=_envelope(
                request,
                {
                    "code": "invalid_request",
                    "kind": ErrorKind.VALIDATION.value,
                    "message": "Validation error",
                    "details": details,
                },
            ),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error on %s", request.url.path)
        return JSONResponse(
            status_code=MarketError.INTERNAL.http_status,
            content=_envelope(request, MarketError.INTERNAL.to_response()),
        )
