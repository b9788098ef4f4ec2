"""Text processing heuristics for listing extraction."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional
from urllib.parse import urljoin

from bs4 import Tag

_LOGGER = logging.getLogger(__name__)

_DIGITS_PATTERN = re.compile(r"(\d+)")
_ZLOTY_PATTERN = re.compile(r"(\d[\d\s]*)\s*zł", flags=re.IGNORECASE)
_AREA_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)")


def normalise_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def first_int(text: Optional[str]) -> Optional[int]:
    """Return the first run of digits in *text* as an integer."""

    if not text:
        return None
    match = _DIGITS_PATTERN.search(text)
    if not match:
        return None
    return int(match.group(1))


def compact_price(text: Optional[str]) -> Optional[int]:
    """Parse a price label such as ``"1 500 zł do negocjacji"``.

    Whitespace is dropped first so thousands separators do not split the
    number.
    """

    if not text:
        return None
    return first_int(re.sub(r"\s", "", text))


def zloty_price(text: Optional[str]) -> Optional[int]:
    """Find the first amount followed by ``zł`` in free text."""

    if not text:
        return None
    match = _ZLOTY_PATTERN.search(text)
    if not match:
        return None
    digits = re.sub(r"\s", "", match.group(1))
    _LOGGER.debug("Parsed zloty amount %r -> %s", match.group(0), digits)
    return int(digits)


def parse_area(text: Optional[str]) -> Optional[float]:
    """Parse a floor area like ``"12,5 m²"``; decimal comma or point."""

    if not text:
        return None
    match = _AREA_PATTERN.search(text)
    if not match:
        return None
    try:
        return float(match.group(1).replace(",", "."))
    except ValueError:
        return None


def resolve_url(href: Optional[str], base_origin: str) -> Optional[str]:
    """Return an absolute http(s) URL for *href*, or ``None``.

    Relative references are joined onto *base_origin*; inline ``data:`` and
    ``javascript:`` references are rejected.
    """

    if not href:
        return None
    href = href.strip()
    if not href or href.startswith(("data:", "javascript:", "#")):
        return None
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_origin.rstrip("/") + "/", href)


def select_first(container: Tag, selectors: Iterable[str]) -> Optional[Tag]:
    """Return the first element matching any of *selectors*, in priority order."""

    for selector in selectors:
        element = container.select_one(selector)
        if element is not None:
            return element
    return None


def element_text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return normalise_text(element.get_text())


__all__ = [
    "compact_price",
    "element_text",
    "first_int",
    "normalise_text",
    "parse_area",
    "resolve_url",
    "select_first",
    "zloty_price",
]
