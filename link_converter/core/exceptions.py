from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from link_converter.core.responses import SafeJSONResponse
from link_converter.schemas.common import error_response

logger = logging.getLogger(__name__)


class ApiException(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


class UpstreamShopeeException(ApiException):
    """Failure talking to the Shopee affiliate GraphQL API."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        upstream: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, code=code, message=message, details=upstream)
        self.upstream = upstream or {}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiException)
    async def _api_exception(_: Request, exc: ApiException) -> SafeJSONResponse:
        return SafeJSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, code=exc.code, details=exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation(_: Request, exc: RequestValidationError) -> SafeJSONResponse:
        return SafeJSONResponse(
            status_code=400,
            content=error_response(
                "Request validation failed",
                code="validation_error",
                details={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException) -> SafeJSONResponse:
        # Wrong method on a known path is reported like an unknown path.
        if exc.status_code in (404, 405):
            return SafeJSONResponse(status_code=404, content=error_response("Route not found", path=request.url.path))
        return SafeJSONResponse(status_code=exc.status_code, content=error_response(str(exc.detail), code="http_error"))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> SafeJSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return SafeJSONResponse(
            status_code=500,
            content=error_response("Internal server error", code="internal_server_error"),
        )
