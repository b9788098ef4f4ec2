"""High-level workflow for running every requested source and merging results."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config import Settings
from .crawl import Sleep, crawl
from .errors import CrawlCancelled, UnknownSourceError
from .models import Listing, SearchOptions, Source
from .render import RendererFactory
from .scrapers import SourceAdapter, available_adapters, resolve_sources

logger = logging.getLogger(__name__)

SourceSelection = Union[str, Source, Iterable[Union[str, Source]]]


def _price_key(listing: Listing) -> Tuple[bool, int]:
    return (listing.price is None, listing.price if listing.price is not None else 0)


def sort_listings(listings: Iterable[Listing]) -> List[Listing]:
    """Return *listings* by ascending price, unpriced last.

    The sort is stable, so listings with equal (or no) price keep their
    input order.
    """

    return sorted(listings, key=_price_key)


def aggregate(
    sources: SourceSelection = "all",
    options: Optional[SearchOptions] = None,
    *,
    adapters: Optional[Mapping[Source, SourceAdapter]] = None,
    renderer_factory: Optional[RendererFactory] = None,
    settings: Optional[Settings] = None,
    parallel: bool = False,
    cancel_event: Optional[threading.Event] = None,
    sleep: Sleep = time.sleep,
) -> List[Listing]:
    """Crawl every requested source and return one price-sorted list.

    A failure in any source aborts the whole run; partial results are never
    returned.
    """

    options = options or SearchOptions()
    settings = settings or Settings()
    registry = dict(adapters) if adapters is not None else available_adapters()

    selected: List[SourceAdapter] = []
    for source in resolve_sources(sources):
        adapter = registry.get(source)
        if adapter is None:
            raise UnknownSourceError(f"No adapter registered for source '{source.value}'")
        selected.append(adapter)

    logger.debug(
        "Aggregating %s (pages=%d, max_price=%s, room_type=%s, parallel=%s)",
        [adapter.name for adapter in selected],
        options.pages,
        options.max_price,
        options.room_type.value if options.room_type else None,
        parallel,
    )

    kwargs = dict(
        renderer_factory=renderer_factory,
        settings=settings,
        sleep=sleep,
    )
    if parallel and len(selected) > 1:
        per_source = _crawl_parallel(selected, options, cancel_event or threading.Event(), kwargs)
    else:
        per_source = [crawl(adapter, options, cancel_event=cancel_event, **kwargs) for adapter in selected]

    merged: List[Listing] = []
    for adapter, listings in zip(selected, per_source):
        logger.info("%s: %d listing(s) match", adapter.name, len(listings))
        merged.extend(listings)
    return sort_listings(merged)


def _crawl_parallel(
    adapters: Sequence[SourceAdapter],
    options: SearchOptions,
    cancel_event: threading.Event,
    kwargs: dict,
) -> List[List[Listing]]:
    with ThreadPoolExecutor(max_workers=len(adapters), thread_name_prefix="crawl") as pool:
        futures: List[Future] = [
            pool.submit(crawl, adapter, options, cancel_event=cancel_event, **kwargs)
            for adapter in adapters
        ]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        if any(future.exception() is not None for future in done):
            # Other crawls stop at their next page boundary.
            cancel_event.set()

    failures = [future.exception() for future in futures if future.exception() is not None]
    if failures:
        primary = next((exc for exc in failures if not isinstance(exc, CrawlCancelled)), failures[0])
        raise primary
    return [future.result() for future in futures]


__all__ = ["aggregate", "sort_listings"]
