"""Room type classification and listing filters."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Listing, RoomType, SearchOptions

logger = logging.getLogger(__name__)

# Case-insensitive title keywords per room type, Polish first.
ROOM_TYPE_KEYWORDS: Dict[RoomType, Tuple[str, ...]] = {
    RoomType.SINGLE: ("jednoosobowy", "1-osobowy", "single", "dla jednej"),
    RoomType.SHARED: ("współlokator", "współdziel", "shared", "2-osobowy", "dwuosobowy"),
    RoomType.STUDIO: ("kawalerka", "studio", "garsoniera"),
    RoomType.APARTMENT: ("mieszkanie", "apartment", "flat"),
}


def keywords_for(room_type: RoomType | str) -> Tuple[str, ...]:
    return ROOM_TYPE_KEYWORDS.get(RoomType(room_type), ())


def classify(title: str, room_type: RoomType | str) -> bool:
    """Return True if *title* mentions any keyword of *room_type*."""

    lowered = (title or "").lower()
    return any(keyword in lowered for keyword in keywords_for(room_type))


def matches(listing: Listing, options: SearchOptions) -> bool:
    if options.room_type is not None and not classify(listing.title, options.room_type):
        logger.debug("FILTER room type: %r is not %s", listing.title, options.room_type.value)
        return False
    # Listings without a price are kept under a price ceiling.
    if options.max_price is not None and listing.price is not None and listing.price > options.max_price:
        logger.debug("FILTER price: %s (max %s)", listing.price, options.max_price)
        return False
    return True


def filter_listings(listings: Iterable[Listing], options: SearchOptions) -> List[Listing]:
    """Select the listings that satisfy *options*, preserving order.

    When a room type is requested the kept listings are returned as copies
    tagged with that room type; the inputs are never modified.
    """

    kept: List[Listing] = []
    for listing in listings:
        if not matches(listing, options):
            continue
        if options.room_type is not None and listing.room_type is None:
            listing = listing.model_copy(update={"room_type": options.room_type})
        kept.append(listing)
    return kept


__all__ = [
    "ROOM_TYPE_KEYWORDS",
    "classify",
    "filter_listings",
    "keywords_for",
    "matches",
]
