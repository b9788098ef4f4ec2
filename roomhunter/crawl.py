"""Paginated crawl of a single listing source."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, TypeVar

from bs4 import BeautifulSoup

from .config import Settings
from .criteria import filter_listings
from .errors import CrawlCancelled, CrawlError, RenderError, RenderTimeoutError
from .models import Listing, SearchOptions
from .render import PageRenderer, RendererFactory, playwright_factory
from .scrapers.base import SourceAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], None]


@dataclass(slots=True)
class PageResult:
    """Listings extracted from one rendered search page."""

    page: int
    url: str
    listings: List[Listing]
    has_next_page: bool


def iter_pages(
    adapter: SourceAdapter,
    renderer: PageRenderer,
    options: SearchOptions,
    *,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None,
    sleep: Sleep = time.sleep,
) -> Iterator[PageResult]:
    """Render and extract pages ``1..options.pages`` in order, lazily.

    The consumer decides when to stop; pages are only fetched on demand.
    """

    settings = settings or Settings()
    for page in range(1, options.pages + 1):
        if page > 1 and settings.page_delay_ms:
            sleep(settings.page_delay_ms / 1000)
        if cancel_event is not None and cancel_event.is_set():
            raise CrawlCancelled(adapter.name, page)

        url = adapter.build_page_url(options, page)
        logger.debug("%s: page %d/%d %s", adapter.name, page, options.pages, url)
        _navigate(adapter, renderer, url, page, settings)

        if page == 1 and adapter.consent_selector:
            if renderer.find_and_click(adapter.consent_selector):
                logger.debug("%s: dismissed consent dialog", adapter.name)

        _wait_for_listings(adapter, renderer, page, settings)
        if adapter.settle_ms:
            sleep(adapter.settle_ms / 1000)

        listings = _run_extractor(adapter, renderer, page, adapter.extract_listings)
        has_next = _run_extractor(adapter, renderer, page, adapter.has_next_page)
        yield PageResult(page=page, url=url, listings=listings, has_next_page=has_next)


def crawl(
    adapter: SourceAdapter,
    options: SearchOptions,
    *,
    renderer_factory: Optional[RendererFactory] = None,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None,
    sleep: Sleep = time.sleep,
) -> List[Listing]:
    """Crawl one source and return its unique, filtered listings in page order.

    The renderer is opened here and closed on every exit path. Navigation and
    extraction failures are raised as :class:`CrawlError`.
    """

    settings = settings or Settings()
    factory = renderer_factory or playwright_factory(settings)
    try:
        renderer = factory()
    except Exception as exc:
        raise CrawlError(adapter.name, 1, "navigation", exc) from exc

    collected: Dict[str, Listing] = {}
    pages_fetched = 0
    try:
        for result in iter_pages(
            adapter,
            renderer,
            options,
            settings=settings,
            cancel_event=cancel_event,
            sleep=sleep,
        ):
            pages_fetched += 1
            new = 0
            for listing in result.listings:
                if listing.url in collected:
                    continue
                collected[listing.url] = listing
                new += 1
            logger.info(
                "%s: page %d/%d -> %d listing(s), %d new",
                adapter.name,
                result.page,
                options.pages,
                len(result.listings),
                new,
            )
            if not result.has_next_page:
                logger.debug("%s: no next page after page %d", adapter.name, result.page)
                break
            if adapter.stop_when_no_new_listings and new == 0:
                logger.debug("%s: page %d added nothing new, stopping", adapter.name, result.page)
                break
    finally:
        renderer.close()

    filtered = filter_listings(collected.values(), options)
    logger.info(
        "%s: %d unique listing(s) from %d page(s), %d after filtering",
        adapter.name,
        len(collected),
        pages_fetched,
        len(filtered),
    )
    return filtered


def _navigate(adapter: SourceAdapter, renderer: PageRenderer, url: str, page: int, settings: Settings) -> None:
    try:
        renderer.render(url, wait_until=adapter.wait_until, timeout_ms=settings.navigation_timeout_ms)
    except RenderTimeoutError as exc:
        raise CrawlError(adapter.name, page, "timeout", exc) from exc
    except Exception as exc:
        raise CrawlError(adapter.name, page, "navigation", exc) from exc


def _wait_for_listings(adapter: SourceAdapter, renderer: PageRenderer, page: int, settings: Settings) -> bool:
    timeout_ms = adapter.listing_wait_timeout_ms or settings.wait_timeout_ms
    for selector in adapter.listing_wait_selectors:
        # Only a timeout is soft; a page lost mid-wait fails the crawl.
        try:
            found = renderer.wait_for_selector(selector, timeout_ms)
        except Exception as exc:
            raise CrawlError(adapter.name, page, "navigation", exc) from exc
        if found:
            return True
    if adapter.listing_wait_selectors:
        logger.info("%s: listings did not appear, extracting what rendered", adapter.name)
    return False


def _run_extractor(
    adapter: SourceAdapter,
    renderer: PageRenderer,
    page: int,
    extractor: Callable[[BeautifulSoup], T],
) -> T:
    try:
        return renderer.run_in_page(extractor)
    except RenderError as exc:
        raise CrawlError(adapter.name, page, "navigation", exc) from exc
    except Exception as exc:
        logger.exception("%s: extraction failed on page %d", adapter.name, page)
        raise CrawlError(adapter.name, page, "extraction", exc) from exc


__all__ = ["PageResult", "crawl", "iter_pages"]
