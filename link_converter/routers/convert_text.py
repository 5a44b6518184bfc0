from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError

from link_converter.core.exceptions import ApiException
from link_converter.core.responses import SafeJSONResponse
from link_converter.schemas.common import ErrorBody
from link_converter.schemas.conversion import ConvertTextRequest, TextConversion
from link_converter.services.link_conversion_service import LinkConversionService

logger = logging.getLogger(__name__)

CONVERT_TEXT_PATHS = (
    "/convert-text",
    "/api/convert-text",
    "/.netlify/functions/api/convert-text",
)


def parse_convert_request(raw_body: bytes) -> ConvertTextRequest:
    """Decode a request body sent with any content type (JSON, text/plain, ...)."""
    if not raw_body.strip():
        return ConvertTextRequest()

    try:
        body = json.loads(raw_body)
    except ValueError as exc:
        logger.warning("JSON parse error: %s", exc)
        raise ApiException(status_code=400, code="invalid_json", message="Invalid JSON body", details=str(exc)) from exc

    try:
        return ConvertTextRequest.model_validate(body)
    except ValidationError as exc:
        raise ApiException(
            status_code=400,
            code="validation_error",
            message="Request validation failed",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def create_convert_text_router(service: LinkConversionService) -> APIRouter:
    router = APIRouter(tags=["convert-text"])

    async def convert_text(request: Request) -> TextConversion:
        payload = parse_convert_request(await request.body())
        return await service.convert_text(payload.text, payload.subIds)

    for path in CONVERT_TEXT_PATHS:
        router.add_api_route(
            path,
            convert_text,
            methods=["POST"],
            response_model=TextConversion,
            response_class=SafeJSONResponse,
            response_model_exclude_unset=True,
            responses={400: {"model": ErrorBody}, 404: {"model": ErrorBody}},
            include_in_schema=path == CONVERT_TEXT_PATHS[0],
        )

    return router
