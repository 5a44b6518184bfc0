from __future__ import annotations

from typing import Any

import httpx

from link_converter.core.config import Settings
from link_converter.core.exceptions import UpstreamShopeeException
from link_converter.services.shopee_graphql_builder import compact_json
from link_converter.services.shopee_signing import build_shopee_signature

# Shopee GraphQL extension codes worth telling apart in the logs.
UPSTREAM_ERROR_CODES = {
    10020: "shopee_auth_error",
    10030: "shopee_rate_limited",
}


class ShopeeClient:
    """Signed GraphQL transport for the Shopee affiliate open API."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def execute(self, *, query: str, operation: str) -> dict[str, Any]:
        # Lone surrogates from the request text become JSON \u escapes, so the
        # encoded body is always valid UTF-8 and is exactly what gets signed.
        payload = compact_json({"query": query}).encode("utf-8", errors="backslashreplace")
        signed = build_shopee_signature(
            app_id=self.settings.shopee_app_id,
            app_secret=self.settings.shopee_app_secret,
            payload_json=payload.decode("utf-8"),
        )
        headers = {
            "Content-Type": "application/json",
            "Authorization": signed.authorization_header,
        }

        try:
            async with httpx.AsyncClient(timeout=self.settings.shopee_timeout_seconds) as client:
                response = await client.post(
                    self.settings.shopee_graphql_url,
                    content=payload,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise UpstreamShopeeException(
                status_code=502,
                code="shopee_network_error",
                message="Failed to communicate with Shopee API",
                upstream={"operation": operation, "reason": str(exc)},
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamShopeeException(
                status_code=502,
                code="shopee_invalid_response",
                message="Shopee API returned invalid JSON",
                upstream={"operation": operation, "httpStatus": response.status_code},
            ) from exc

        if not response.is_success:
            raise UpstreamShopeeException(
                status_code=502,
                code="shopee_http_error",
                message="Shopee API returned unexpected HTTP status",
                upstream={"operation": operation, "httpStatus": response.status_code},
            )

        if not isinstance(body, dict):
            raise UpstreamShopeeException(
                status_code=502,
                code="shopee_invalid_response",
                message="Shopee API returned unexpected payload type",
                upstream={"operation": operation},
            )

        errors = body.get("errors")
        if errors is not None:
            raise _graphql_error(errors, operation=operation)

        data = body.get("data")
        if not isinstance(data, dict):
            raise UpstreamShopeeException(
                status_code=502,
                code="shopee_missing_data",
                message="Shopee API response missing data field",
                upstream={"operation": operation},
            )
        return data


def _graphql_error(errors: Any, *, operation: str) -> UpstreamShopeeException:
    first_error = errors[0] if isinstance(errors, list) and errors else {}
    if isinstance(first_error, dict):
        message = first_error.get("message", "Shopee GraphQL error")
        extensions = first_error.get("extensions") or {}
    else:
        message = str(first_error)
        extensions = {}
    upstream_code = extensions.get("code") if isinstance(extensions, dict) else None
    upstream_message = extensions.get("message") if isinstance(extensions, dict) else None
    upstream = {"operation": operation, "code": upstream_code, "message": upstream_message or message}
    code = UPSTREAM_ERROR_CODES.get(upstream_code) if isinstance(upstream_code, int) else None
    return UpstreamShopeeException(
        status_code=502,
        code=code or "shopee_upstream_error",
        message="Shopee API returned an error",
        upstream=upstream,
    )
