"""Adapter for OLX.pl room and flatshare listings in Warsaw."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from roomhunter.config import SourceConfig
from roomhunter.heuristics import compact_price, element_text
from roomhunter.models import SearchOptions, Source

from .base import RawListing, SourceAdapter, closest, control_enabled

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.olx.pl/nieruchomosci/stancje-pokoje/warszawa/"

PRICE_FILTER_PARAM = "search[filter_float_price:to]"

CONTAINER_SELECTORS = ('[data-cy="l-card"]', '[data-testid="adCard"]')
TITLE_SELECTOR = "h4, h6, [data-cy='ad-title']"
PRICE_SELECTOR = '[data-testid="ad-price"], [data-cy="ad-price"]'
LOCATION_SELECTOR = '[data-testid="location-date"], [data-cy="location-date"]'
NEXT_PAGE_SELECTOR = '[data-testid="pagination-forward"]'
DETAIL_MARKERS = ("/d/", "/oferta/")


class OlxAdapter(SourceAdapter):
    source = Source.OLX
    config = SourceConfig(
        base_origin="https://www.olx.pl",
        search_url=SEARCH_URL,
        default_title="Room listing",
        default_location="Warszawa",
    )

    wait_until = "domcontentloaded"
    listing_wait_selectors = ('[data-testid="listing-grid"]', '[data-cy="l-card"]')
    stop_when_no_new_listings = False

    card_selectors = (
        '[data-testid="listing-grid"] [data-testid="adCard"]',
        '[data-cy="l-card"]',
        'div[data-testid="listing-grid"] > div > div',
        'a[href*="/d/oferta/"]',
    )

    def build_page_url(self, options: SearchOptions, page: int) -> str:
        params = []
        if options.max_price is not None:
            params.append((PRICE_FILTER_PARAM, options.max_price))
        if page > 1:
            params.append(("page", page))
        if not params:
            return self.config.search_url
        return f"{self.config.search_url}?{urlencode(params)}"

    def parse_card(self, card: Tag) -> Optional[RawListing]:
        container = closest(card, CONTAINER_SELECTORS)
        link = container.select_one("a") or (card if card.name == "a" else None)
        if link is None:
            return None

        href = link.get("href") or ""
        if not any(marker in href for marker in DETAIL_MARKERS):
            return None
        url = self.resolve(href)
        if url is None:
            return None

        price_el = container.select_one(PRICE_SELECTOR)
        price = compact_price(price_el.get_text()) if price_el else None

        location = element_text(container.select_one(LOCATION_SELECTOR)).split(" - ")[0]

        image = container.select_one("img")
        return RawListing(
            url=url,
            title=element_text(container.select_one(TITLE_SELECTOR)),
            price=price,
            location=location,
            image=image.get("src") if image else None,
        )

    def has_next_page(self, document: BeautifulSoup) -> bool:
        return control_enabled(document.select_one(NEXT_PAGE_SELECTOR))


__all__ = ["OlxAdapter", "SEARCH_URL"]
