"""Shared fixtures: an in-memory page renderer and a minimal adapter."""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Tuple

import pytest
from bs4 import BeautifulSoup, Tag

from roomhunter.config import SourceConfig
from roomhunter.models import SearchOptions, Source
from roomhunter.render import parse_document
from roomhunter.scrapers.base import RawListing, SourceAdapter, control_enabled

EMPTY_PAGE = "<html><body></body></html>"


class FakeRenderer:
    """Serves canned HTML per URL and records every interaction."""

    def __init__(self, pages: Mapping[str, str], failures: Optional[Mapping[str, Exception]] = None) -> None:
        self.pages = dict(pages)
        self.failures = dict(failures or {})
        self.rendered: List[str] = []
        self.waited: List[str] = []
        self.clicked: List[str] = []
        self.closed = False
        self._html = EMPTY_PAGE

    def render(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: Optional[int] = None) -> Optional[int]:
        self.rendered.append(url)
        if url in self.failures:
            raise self.failures[url]
        self._html = self.pages.get(url, EMPTY_PAGE)
        return 200

    def run_in_page(self, extractor):
        return extractor(parse_document(self._html))

    def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        self.waited.append(selector)
        return parse_document(self._html).select_one(selector) is not None

    def find_and_click(self, selector: str, timeout_ms: int = 3000) -> bool:
        if parse_document(self._html).select_one(selector) is None:
            return False
        self.clicked.append(selector)
        return True

    def close(self) -> None:
        self.closed = True


class RendererPool:
    """Renderer factory that keeps every renderer it hands out."""

    def __init__(self, pages: Mapping[str, str], failures: Optional[Mapping[str, Exception]] = None) -> None:
        self.pages = pages
        self.failures = failures
        self.instances: List[FakeRenderer] = []

    def __call__(self) -> FakeRenderer:
        renderer = FakeRenderer(self.pages, self.failures)
        self.instances.append(renderer)
        return renderer

    @property
    def rendered(self) -> List[str]:
        return [url for renderer in self.instances for url in renderer.rendered]


class StubAdapter(SourceAdapter):
    """Adapter for a tiny synthetic site used to exercise the crawl engine."""

    source = Source.OLX
    config = SourceConfig(
        base_origin="https://rooms.example",
        search_url="https://rooms.example/search",
        default_title="Stub room",
        default_location="Stubville",
    )
    listing_wait_selectors = ("ul.rooms",)
    card_selectors = ("ul.rooms li",)

    def build_page_url(self, options: SearchOptions, page: int) -> str:
        return f"{self.config.search_url}?page={page}"

    def parse_card(self, card: Tag) -> Optional[RawListing]:
        link = card.select_one("a")
        if link is None:
            return None
        price = card.get("data-price")
        return RawListing(
            url=self.resolve(link.get("href")),
            title=link.get_text(),
            price=int(price) if price else None,
        )

    def has_next_page(self, document: BeautifulSoup) -> bool:
        return control_enabled(document.select_one("a.next"))


Room = Tuple[str, str, Optional[int]]


def stub_page(rooms: Iterable[Room], *, next_page: Optional[bool] = True, consent: bool = False) -> str:
    """Render a synthetic search page; *next_page* None omits the control."""

    items = []
    for slug, title, price in rooms:
        price_attr = f' data-price="{price}"' if price is not None else ""
        items.append(f'<li{price_attr}><a href="/room/{slug}">{title}</a></li>')
    parts = ["<html><body>"]
    if consent:
        parts.append('<button id="onetrust-accept-btn-handler">Akceptuję</button>')
    parts.append(f'<ul class="rooms">{"".join(items)}</ul>')
    if next_page is True:
        parts.append('<a class="next" href="#">Next</a>')
    elif next_page is False:
        parts.append('<a class="next" href="#" disabled>Next</a>')
    parts.append("</body></html>")
    return "".join(parts)


def stub_url(page: int) -> str:
    return f"https://rooms.example/search?page={page}"


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def record_sleep(sleeps: List[float]) -> Callable[[float], None]:
    return sleeps.append
