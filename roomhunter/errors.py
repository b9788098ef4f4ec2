"""Exception hierarchy for room listing crawls."""

from __future__ import annotations

from typing import Optional


class RoomHunterError(Exception):
    """Base class for errors raised by :mod:`roomhunter`."""


class RenderError(RoomHunterError):
    """Raised by a page renderer when a page cannot be loaded."""


class NavigationError(RenderError):
    """Navigation failed (network error, renderer crash, bad response)."""


class RenderTimeoutError(RenderError):
    """Navigation did not finish within its timeout."""


class UnknownSourceError(RoomHunterError, ValueError):
    """A requested source has no registered adapter."""


class CrawlError(RoomHunterError):
    """A crawl run for one source failed on a specific page.

    ``kind`` tells the caller what went wrong: ``navigation``, ``timeout``,
    ``extraction`` or ``cancelled``.
    """

    def __init__(self, source: str, page: int, kind: str, cause: Optional[BaseException] = None) -> None:
        self.source = source
        self.page = page
        self.kind = kind
        self.cause = cause
        message = f"{source} page {page}: {kind} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class CrawlCancelled(CrawlError):
    """The crawl was cancelled at a page boundary."""

    def __init__(self, source: str, page: int) -> None:
        super().__init__(source, page, "cancelled")


__all__ = [
    "RoomHunterError",
    "RenderError",
    "NavigationError",
    "RenderTimeoutError",
    "UnknownSourceError",
    "CrawlError",
    "CrawlCancelled",
]
