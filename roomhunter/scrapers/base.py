"""Common machinery for per-site listing adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from roomhunter.config import SourceConfig
from roomhunter.heuristics import normalise_text, resolve_url
from roomhunter.models import Listing, SearchOptions, Source

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RawListing:
    """Fields as found on the page, before defaults are applied."""

    url: str
    title: Optional[str] = None
    price: Optional[int] = None
    location: Optional[str] = None
    area: Optional[float] = None
    image: Optional[str] = None


def first_matching(document: BeautifulSoup | Tag, selectors: Sequence[str]) -> Tuple[Optional[str], List[Tag]]:
    """Try *selectors* in priority order; return the first non-empty match.

    Later selectors are only evaluated when every earlier one matched nothing.
    """

    for selector in selectors:
        found = document.select(selector)
        if found:
            return selector, list(found)
    return None, []


def closest(element: Tag, selectors: Sequence[str]) -> Tag:
    """Return the nearest ancestor-or-self matching *selectors*, else *element*."""

    for selector in selectors:
        match = element.css.closest(selector)
        if match is not None:
            return match
    return element


def control_enabled(element: Optional[Tag]) -> bool:
    return element is not None and not element.has_attr("disabled")


class SourceAdapter(ABC):
    """URL building, extraction and pagination rules for one listing site."""

    source: ClassVar[Source]
    config: ClassVar[SourceConfig]

    # Playwright load state to wait for after navigation.
    wait_until: ClassVar[str] = "domcontentloaded"
    # Soft waits for the listing container, tried in order until one appears.
    listing_wait_selectors: ClassVar[Tuple[str, ...]] = ()
    listing_wait_timeout_ms: ClassVar[Optional[int]] = None
    consent_selector: ClassVar[Optional[str]] = "#onetrust-accept-btn-handler"
    # Extra pause after the listing wait for late client-side rendering.
    settle_ms: ClassVar[int] = 0
    # Stop paginating as soon as a page contributes no new listings.
    stop_when_no_new_listings: ClassVar[bool] = False

    card_selectors: ClassVar[Tuple[str, ...]] = ()

    @property
    def name(self) -> str:
        return self.source.value

    @abstractmethod
    def build_page_url(self, options: SearchOptions, page: int) -> str:
        """Return the search URL for *page* (1-based)."""

    @abstractmethod
    def parse_card(self, card: Tag) -> Optional[RawListing]:
        """Turn one candidate element into a raw record, or ``None`` to skip it."""

    @abstractmethod
    def has_next_page(self, document: BeautifulSoup) -> bool:
        """Return True if an enabled "next page" control is present."""

    def extract_listings(self, document: BeautifulSoup) -> List[Listing]:
        """Extract the listings on one rendered page, unique by URL."""

        selector, cards = first_matching(document, self.card_selectors)
        logger.debug("%s: selector %r matched %d card(s)", self.name, selector, len(cards))

        listings: List[Listing] = []
        seen: set[str] = set()
        for card in cards:
            raw = self.parse_card(card)
            if raw is None or raw.url in seen:
                continue
            seen.add(raw.url)
            listings.append(self.normalize(raw))
        return listings

    def normalize(self, raw: RawListing) -> Listing:
        config = self.config
        return Listing(
            title=normalise_text(raw.title) or config.default_title,
            price=raw.price if raw.price is not None and raw.price >= 0 else None,
            currency=config.currency,
            location=normalise_text(raw.location) or config.default_location,
            url=raw.url,
            source=self.source,
            area=raw.area,
            image_url=resolve_url(raw.image, config.base_origin),
        )

    def resolve(self, href: Optional[str]) -> Optional[str]:
        return resolve_url(href, self.config.base_origin)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = [
    "RawListing",
    "SourceAdapter",
    "closest",
    "control_enabled",
    "first_matching",
]
