"""JSON export of aggregated listings."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import Listing

logger = logging.getLogger(__name__)


def listing_to_dict(listing: Listing) -> Dict[str, Any]:
    return listing.to_dict()


def listings_to_json(listings: Iterable[Listing], *, indent: Optional[int] = 2) -> str:
    payload: List[Dict[str, Any]] = [listing_to_dict(listing) for listing in listings]
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def dated_filename(now: Optional[datetime] = None) -> str:
    """Return ``<day>-<month>-<year>.json`` for the UTC date of *now*."""

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.day}-{now.month}-{now.year}.json"


def ensure_output_dir(path: str | os.PathLike[str]) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_json(
    listings: Iterable[Listing],
    directory: str | os.PathLike[str] = ".",
    *,
    now: Optional[datetime] = None,
) -> Path:
    """Write *listings* to a date-named JSON file in *directory*."""

    items = list(listings)
    path = ensure_output_dir(directory) / dated_filename(now)
    path.write_text(listings_to_json(items), encoding="utf-8")
    logger.info("Wrote %d listing(s) to %s", len(items), path)
    return path


__all__ = ["dated_filename", "listing_to_dict", "listings_to_json", "write_json"]
