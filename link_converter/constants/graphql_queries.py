from __future__ import annotations

GENERATE_SHORT_LINK_OPERATION = "generateShortLink"

SHORT_LINK_SELECTION_SET = "shortLink"
