"""Room listing aggregator for Warsaw classified-ad sites."""

from .config import MAX_PAGES, Settings, SourceConfig, load_settings
from .crawl import PageResult, crawl, iter_pages
from .criteria import classify, filter_listings
from .errors import CrawlCancelled, CrawlError, RoomHunterError, UnknownSourceError
from .models import Listing, RoomType, SearchOptions, Source
from .scrapers import available_adapters
from .workflow import aggregate, sort_listings

__all__ = [
    "MAX_PAGES",
    "Settings",
    "SourceConfig",
    "load_settings",
    "PageResult",
    "crawl",
    "iter_pages",
    "classify",
    "filter_listings",
    "CrawlCancelled",
    "CrawlError",
    "RoomHunterError",
    "UnknownSourceError",
    "Listing",
    "RoomType",
    "SearchOptions",
    "Source",
    "available_adapters",
    "aggregate",
    "sort_listings",
]
