from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import parse_qsl, quote_plus, urlencode, urlsplit

import httpx

from link_converter.constants.shopee_links import (
    CANONICAL_HOST,
    CANONICAL_PATH_MARKERS,
    NON_SEARCH_TRACKING_MARKER,
    SEARCH_QUERY_ALLOWLIST,
    SHOP_ITEM_PATTERN,
    SHORT_LINK_HOSTS,
    TRACKING_MARKERS,
)
from link_converter.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedirectResolution:
    url: str
    redirected: bool = False
    error: str | None = None

    @property
    def fallback_used(self) -> bool:
        return self.error is not None


def is_short_link(url: str) -> bool:
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    if host.startswith("www."):
        host = host[len("www.") :]
    return any(host == domain or host.endswith("." + domain) for domain in SHORT_LINK_HOSTS)


def _form_quote(value: str, safe: str = "", encoding: str | None = None, errors: str | None = None) -> str:
    # Form encoding as browsers serialize URLSearchParams: "*" is kept, "~" is escaped.
    return quote_plus(value, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def _clean_search_url(final_url: str, base_url: str) -> str:
    try:
        params = parse_qsl(urlsplit(final_url).query, keep_blank_values=True)
    except ValueError:
        return base_url

    first_values: dict[str, str] = {}
    for key, value in params:
        first_values.setdefault(key, value)

    kept = [(key, first_values[key]) for key in SEARCH_QUERY_ALLOWLIST if key in first_values]
    if not kept:
        return base_url
    try:
        query = urlencode(kept, quote_via=_form_quote)
    except UnicodeEncodeError:
        return base_url
    return f"{base_url}?{query}"


def _cut_at(url: str, marker: str) -> str:
    index = url.find(marker)
    return url if index < 0 else url[:index]


def clean_shopee_url(final_url: str) -> str:
    """Normalize a resolved Shopee URL.

    Search pages keep only allow-listed query parameters, shop/item paths are
    rewritten to ``/product/<shop>/<item>``, already canonical paths lose their
    query string and anything else has known tracking parameters cut off.
    """
    base_url = final_url.split("?", 1)[0]

    if "/search" in base_url:
        return _clean_search_url(final_url, base_url)

    match = SHOP_ITEM_PATTERN.search(base_url)
    if match:
        return f"https://{CANONICAL_HOST}/product/{match.group(2)}/{match.group(3)}"

    if any(marker in base_url for marker in CANONICAL_PATH_MARKERS) or len(base_url.split("/")) == 4:
        return base_url

    cleaned = final_url
    for marker in TRACKING_MARKERS:
        cleaned = _cut_at(cleaned, marker)
    if "/search" not in cleaned:
        cleaned = _cut_at(cleaned, NON_SEARCH_TRACKING_MARKER)
    if cleaned.endswith(("?", "&")):
        cleaned = cleaned[:-1]
    return cleaned


class UrlResolver:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def follow_redirects(self, url: str) -> RedirectResolution:
        if not is_short_link(url):
            return RedirectResolution(url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.shopee_timeout_seconds,
                follow_redirects=True,
                max_redirects=self.settings.resolver_max_redirects,
            ) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
            logger.warning("short link resolution failed url=%s reason=%s", url, exc)
            return RedirectResolution(url=url, error=str(exc) or exc.__class__.__name__)

        return RedirectResolution(url=str(response.url) or url, redirected=bool(response.history))

    async def resolve_and_clean_url(self, url: str) -> str:
        resolution = await self.follow_redirects(url)
        return clean_shopee_url(resolution.url)
