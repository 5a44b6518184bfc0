from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from link_converter.constants.shopee_links import SHOPEE_LINK_PATTERN, TRAILING_PUNCTUATION_PATTERN
from link_converter.core.exceptions import ApiException
from link_converter.schemas.conversion import ConversionDetail, TextConversion
from link_converter.services.short_link_service import ShortLinkGenerator
from link_converter.services.url_resolver import UrlResolver

logger = logging.getLogger(__name__)

NO_LINKS_MESSAGE = "No links found"


def extract_links(text: str) -> list[str]:
    """Distinct Shopee URLs in ``text``, in first-seen order."""
    return list(dict.fromkeys(SHOPEE_LINK_PATTERN.findall(text)))


def strip_trailing_punctuation(url: str) -> str:
    return TRAILING_PUNCTUATION_PATTERN.sub("", url)


def rewrite_text(text: str, conversions: Sequence[ConversionDetail]) -> str:
    # Plain substring replacement of the raw match, case-sensitive.
    for item in conversions:
        if item.short:
            text = text.replace(item.original, item.short)
    return text


class LinkConversionService:
    def __init__(self, resolver: UrlResolver, generator: ShortLinkGenerator) -> None:
        self.resolver = resolver
        self.generator = generator

    async def convert_link(self, raw_link: str, sub_ids: Sequence[str]) -> ConversionDetail:
        clean_input = strip_trailing_punctuation(raw_link)
        resolved = await self.resolver.resolve_and_clean_url(clean_input)
        short = await self.generator.generate(resolved, sub_ids)
        return ConversionDetail(original=raw_link, resolved=resolved, short=short)

    async def convert_text(self, text: str | None, sub_ids: Sequence[str] | None = None) -> TextConversion:
        if not text:
            raise ApiException(status_code=400, code="missing_text", message="Text content is empty")

        links = extract_links(text)
        if not links:
            return TextConversion(success=True, newText=text, converted=0, message=NO_LINKS_MESSAGE)

        shared_sub_ids = tuple(sub_ids or ())
        conversions = await asyncio.gather(*(self.convert_link(link, shared_sub_ids) for link in links))

        converted = sum(1 for item in conversions if item.short)
        logger.info("converted %s of %s links", converted, len(links))
        return TextConversion(
            success=True,
            newText=rewrite_text(text, conversions),
            totalLinks=len(links),
            converted=converted,
            details=list(conversions),
        )
