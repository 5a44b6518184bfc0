from __future__ import annotations

import asyncio

import pytest

from link_converter.core.exceptions import ApiException
from link_converter.schemas.conversion import ConversionDetail
from link_converter.services.link_conversion_service import (
    LinkConversionService,
    extract_links,
    rewrite_text,
    strip_trailing_punctuation,
)


class StubResolver:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def resolve_and_clean_url(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.sleep(0)
        return url.replace("https://s.shopee.vn/", "https://shopee.vn/product/")


class StubGenerator:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    async def generate(self, origin_url: str, sub_ids=None) -> str | None:
        self.calls.append((origin_url, tuple(sub_ids or ())))
        await asyncio.sleep(0)
        if origin_url in self.failing:
            return None
        return "https://s.shopee.vn/aff-" + origin_url.rsplit("/", 1)[-1]


def test_extract_links_dedupes_in_first_seen_order() -> None:
    text = (
        "Mua ngay https://shopee.vn/product/1/2, rồi xem https://S.SHOPEE.VN/abc!\n"
        "lại https://shopee.vn/product/1/2, và http://www.shopee.vn/m/sale "
        "https://vn.shp.ee/xyz https://shp.ee/q https://lazada.vn/p/1 https://shopee.com.br/x"
    )
    assert extract_links(text) == [
        "https://shopee.vn/product/1/2,",
        "https://S.SHOPEE.VN/abc!",
        "http://www.shopee.vn/m/sale",
        "https://vn.shp.ee/xyz",
        "https://shp.ee/q",
    ]


def test_extract_links_distinguishes_raw_matches() -> None:
    assert extract_links("https://shp.ee/a. https://shp.ee/a") == ["https://shp.ee/a.", "https://shp.ee/a"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://shp.ee/a.", "https://shp.ee/a"),
        ("https://shp.ee/a?!).,;", "https://shp.ee/a"),
        ("(https://shp.ee/a)", "(https://shp.ee/a"),
        ("https://shp.ee/a", "https://shp.ee/a"),
    ],
)
def test_strip_trailing_punctuation(raw: str, expected: str) -> None:
    assert strip_trailing_punctuation(raw) == expected


def test_rewrite_text_replaces_every_literal_occurrence_and_skips_failures() -> None:
    text = "A https://shp.ee/a B https://shp.ee/a C https://shp.ee/b"
    conversions = [
        ConversionDetail(original="https://shp.ee/a", resolved="r", short="https://s.shopee.vn/x"),
        ConversionDetail(original="https://shp.ee/b", resolved="r", short=None),
    ]
    assert rewrite_text(text, conversions) == "A https://s.shopee.vn/x B https://s.shopee.vn/x C https://shp.ee/b"


def test_rewrite_text_is_case_sensitive() -> None:
    conversions = [ConversionDetail(original="https://shp.ee/A", resolved="r", short="X")]
    assert rewrite_text("https://shp.ee/A https://SHP.EE/A", conversions) == "X https://SHP.EE/A"


def test_convert_text_rejects_empty_text() -> None:
    service = LinkConversionService(StubResolver(), StubGenerator())
    for text in (None, ""):
        with pytest.raises(ApiException) as exc_info:
            asyncio.run(service.convert_text(text, []))
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "missing_text"


def test_convert_text_without_links_returns_text_unchanged() -> None:
    resolver = StubResolver()
    service = LinkConversionService(resolver, StubGenerator())

    result = asyncio.run(service.convert_text("nothing to see here", ["x"]))

    assert result.model_dump(exclude_unset=True) == {
        "success": True,
        "newText": "nothing to see here",
        "converted": 0,
        "message": "No links found",
    }
    assert resolver.calls == []


def test_convert_text_dedupes_and_shares_sub_ids() -> None:
    resolver = StubResolver()
    generator = StubGenerator()
    service = LinkConversionService(resolver, generator)
    text = "Deal: https://s.shopee.vn/111. Again: https://s.shopee.vn/111. Other https://s.shopee.vn/222"

    result = asyncio.run(service.convert_text(text, ["fb"]))

    assert result.totalLinks == 2
    assert result.converted == 2
    assert result.newText == "Deal: https://s.shopee.vn/aff-111 Again: https://s.shopee.vn/aff-111 Other https://s.shopee.vn/aff-222"
    assert [item.original for item in result.details] == ["https://s.shopee.vn/111.", "https://s.shopee.vn/222"]
    assert [item.resolved for item in result.details] == [
        "https://shopee.vn/product/111",
        "https://shopee.vn/product/222",
    ]
    assert resolver.calls == ["https://s.shopee.vn/111", "https://s.shopee.vn/222"]
    assert all(sub_ids == ("fb",) for _, sub_ids in generator.calls)


def test_convert_text_keeps_failed_links_untouched() -> None:
    generator = StubGenerator(failing={"https://shopee.vn/product/bad"})
    service = LinkConversionService(StubResolver(), generator)
    text = "ok https://s.shopee.vn/good bad https://s.shopee.vn/bad"

    result = asyncio.run(service.convert_text(text, None))

    assert result.success is True
    assert result.totalLinks == 2
    assert result.converted == 1
    assert result.newText == "ok https://s.shopee.vn/aff-good bad https://s.shopee.vn/bad"
    assert result.details[1].short is None
    assert result.model_dump(exclude_unset=True)["details"][1] == {
        "original": "https://s.shopee.vn/bad",
        "resolved": "https://shopee.vn/product/bad",
        "short": None,
    }
