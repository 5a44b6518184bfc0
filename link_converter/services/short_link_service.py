from __future__ import annotations

import logging
from collections.abc import Iterable

from link_converter.constants.graphql_queries import GENERATE_SHORT_LINK_OPERATION
from link_converter.core.exceptions import UpstreamShopeeException
from link_converter.services.shopee_client import ShopeeClient
from link_converter.services.shopee_graphql_builder import build_generate_short_link_mutation

logger = logging.getLogger(__name__)


class ShortLinkGenerator:
    """Turns a canonical product URL into an affiliate short link.

    Every failure (transport, HTTP status, GraphQL ``errors``, malformed payload) is
    reported as ``None`` so one bad link never fails a whole conversion request.
    """

    def __init__(self, client: ShopeeClient) -> None:
        self.client = client

    async def generate(self, origin_url: str, sub_ids: Iterable[str | None] | None = None) -> str | None:
        query = build_generate_short_link_mutation(origin_url=origin_url, sub_ids=sub_ids)
        try:
            data = await self.client.execute(query=query, operation=GENERATE_SHORT_LINK_OPERATION)
        except UpstreamShopeeException as exc:
            logger.warning(
                "short link generation failed url=%s code=%s upstream=%s",
                origin_url,
                exc.code,
                exc.upstream,
            )
            return None

        result = data.get(GENERATE_SHORT_LINK_OPERATION)
        short_link = result.get("shortLink") if isinstance(result, dict) else None
        if not isinstance(short_link, str) or not short_link:
            logger.warning("short link missing from Shopee payload url=%s", origin_url)
            return None
        return short_link
