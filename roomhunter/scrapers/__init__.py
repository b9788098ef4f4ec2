"""Adapter registry mapping source names to listing adapters."""

from __future__ import annotations

from typing import Dict, Iterable, List, Union

from roomhunter.errors import UnknownSourceError
from roomhunter.models import Source

from .base import RawListing, SourceAdapter
from .olx_scraper import OlxAdapter
from .otodom_scraper import OtodomAdapter

ALL_SOURCES = "all"


def available_adapters() -> Dict[Source, SourceAdapter]:
    """Return a fresh instance of every built-in adapter, in a fixed order."""

    return {
        Source.OLX: OlxAdapter(),
        Source.OTODOM: OtodomAdapter(),
    }


def resolve_sources(requested: Union[str, Source, Iterable[Union[str, Source]]]) -> List[Source]:
    """Turn ``"all"``, a single name or a list of names into known sources.

    Duplicates are dropped; the first occurrence keeps its position.
    """

    if isinstance(requested, (str, Source)):
        requested = [requested]

    resolved: List[Source] = []
    for item in requested:
        key = item.value if isinstance(item, Source) else str(item).strip().lower()
        if key == ALL_SOURCES:
            candidates = list(Source)
        else:
            try:
                candidates = [Source(key)]
            except ValueError:
                known = ", ".join([ALL_SOURCES] + [s.value for s in Source])
                raise UnknownSourceError(f"Unknown source {item!r}; expected one of: {known}") from None
        for source in candidates:
            if source not in resolved:
                resolved.append(source)
    return resolved


__all__ = [
    "ALL_SOURCES",
    "OlxAdapter",
    "OtodomAdapter",
    "RawListing",
    "SourceAdapter",
    "available_adapters",
    "resolve_sources",
]
