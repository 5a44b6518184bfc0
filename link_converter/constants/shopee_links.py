from __future__ import annotations

import re

SHOPEE_LINK_PATTERN = re.compile(
    r"https?://(?:www\.)?(?:shopee\.vn|vn\.shp\.ee|shp\.ee|s\.shopee\.vn)[^\s]*",
    re.IGNORECASE,
)

TRAILING_PUNCTUATION_PATTERN = re.compile(r"[.,;!?)]+$")

SHORT_LINK_HOSTS = ("s.shopee.vn", "shp.ee", "vn.shp.ee")

CANONICAL_HOST = "shopee.vn"

SHOP_ITEM_PATTERN = re.compile(r"shopee\.vn/([^/]+)/(\d+)/(\d+)", re.IGNORECASE)

# Order is significant: the rebuilt query string follows it.
SEARCH_QUERY_ALLOWLIST = ("keyword", "shop", "evcode", "signature", "promotionId", "mmp_pid")

CANONICAL_PATH_MARKERS = ("/m/", "/product/")

TRACKING_MARKERS = ("uls_trackid=", "utm_source=")

# Kept on search pages, where it is part of the allow-list.
NON_SEARCH_TRACKING_MARKER = "mmp_pid="
