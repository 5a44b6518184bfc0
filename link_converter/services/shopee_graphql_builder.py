from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from link_converter.constants.graphql_queries import GENERATE_SHORT_LINK_OPERATION, SHORT_LINK_SELECTION_SET


def compact_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def graphql_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def normalize_sub_ids(sub_ids: Iterable[str | None] | None) -> list[str]:
    """Trim sub ids and drop blank ones; order and duplicates are kept."""
    if not sub_ids:
        return []
    return [item.strip() for item in sub_ids if item and item.strip()]


def build_generate_short_link_mutation(*, origin_url: str, sub_ids: Iterable[str | None] | None = None) -> str:
    arguments = f"originUrl: {graphql_string(origin_url)}"
    valid_ids = normalize_sub_ids(sub_ids)
    if valid_ids:
        arguments += ", subIds: [" + ",".join(graphql_string(item) for item in valid_ids) + "]"
    return (
        f"mutation {{ {GENERATE_SHORT_LINK_OPERATION}(input: {{{arguments}}}) "
        f"{{ {SHORT_LINK_SELECTION_SET} }} }}"
    )
