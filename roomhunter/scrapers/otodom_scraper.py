"""Adapter for Otodom.pl rooms for rent in Warsaw."""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from roomhunter.config import SourceConfig
from roomhunter.heuristics import element_text, parse_area, select_first, zloty_price
from roomhunter.models import SearchOptions, Source

from .base import RawListing, SourceAdapter, closest, control_enabled

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.otodom.pl/pl/wyniki/wynajem/pokoj/mazowieckie/warszawa/warszawa/warszawa"

CONTAINER_SELECTORS = ("li", "article")
LINK_SELECTORS = ('a[href*="/pl/oferta/"]', "a")
TITLE_SELECTORS = ('[data-cy="listing-item-title"]', "h3", "p[data-cy]")
AREA_SELECTOR = 'span[aria-label*="Powierzchnia"]'
NEXT_PAGE_SELECTORS = (
    '[data-cy="pagination.next-page"]',
    'a[aria-label*="next"]',
    'button[aria-label*="Następna"]',
)
DETAIL_MARKER = "/oferta/"

# District names follow the city in the card's address line.
_LOCATION_PATTERNS = (
    re.compile(r"Warszawa,\s*([^\W\d_][\w-]*)", re.IGNORECASE),
    re.compile(r"Warszawa\s+([^\W\d_][\w-]*)", re.IGNORECASE),
)


def find_district(text: str) -> Optional[str]:
    for pattern in _LOCATION_PATTERNS:
        match = pattern.search(text)
        if match and "zł" not in match.group(1) and "Cena" not in match.group(1):
            return match.group(1)
    return None


class OtodomAdapter(SourceAdapter):
    source = Source.OTODOM
    config = SourceConfig(
        base_origin="https://www.otodom.pl",
        search_url=SEARCH_URL,
        default_title="Room in Warsaw",
        default_location="Warszawa",
    )

    wait_until = "networkidle"
    listing_wait_selectors = (
        '[data-cy="search.listing"]',
        '[data-cy="search.listing.organic"]',
        "article",
        '[class*="listing"]',
    )
    listing_wait_timeout_ms = 5000
    settle_ms = 1500
    stop_when_no_new_listings = True

    card_selectors = (
        '[data-cy="listing-item"]',
        '[data-cy="search.listing.organic"] li',
        'ul[data-cy="search.listing"] > li',
        'a[href*="/pl/oferta/"]',
    )

    def build_page_url(self, options: SearchOptions, page: int) -> str:
        params = []
        if options.max_price is not None:
            params.append(("priceMax", options.max_price))
        if page > 1:
            params.append(("page", page))
        if not params:
            return self.config.search_url
        return f"{self.config.search_url}?{urlencode(params)}"

    def parse_card(self, card: Tag) -> Optional[RawListing]:
        container = closest(card, CONTAINER_SELECTORS)
        link = select_first(container, LINK_SELECTORS) or (card if card.name == "a" else None)
        if link is None:
            return None

        href = link.get("href") or ""
        if DETAIL_MARKER not in href:
            return None
        url = self.resolve(href)
        if url is None:
            return None

        text = container.get_text()
        district = find_district(container.get_text(" "))

        image = container.select_one("img")
        return RawListing(
            url=url,
            title=element_text(select_first(container, TITLE_SELECTORS)),
            price=zloty_price(text),
            location=f"Warszawa, {district}" if district else None,
            area=parse_area(element_text(container.select_one(AREA_SELECTOR))),
            image=image.get("src") if image else None,
        )

    def has_next_page(self, document: BeautifulSoup) -> bool:
        return control_enabled(select_first(document, NEXT_PAGE_SELECTORS))


__all__ = ["OtodomAdapter", "SEARCH_URL", "find_district"]
