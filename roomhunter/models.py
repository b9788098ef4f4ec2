"""Data models for normalised room listings and search requests."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .config import DEFAULT_PAGES, MAX_PAGES


class Source(str, Enum):
    """Listing sites with a registered adapter."""

    OLX = "olx"
    OTODOM = "otodom"


class RoomType(str, Enum):
    SINGLE = "single"
    SHARED = "shared"
    STUDIO = "studio"
    APARTMENT = "apartment"


class Listing(BaseModel):
    """A single room offer in the common schema.

    Two listings are equal when their ``url`` is equal; the other fields are
    ignored for identity.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    currency: str = Field(default="PLN", pattern=r"^[A-Z]{3}$")
    location: str = Field(min_length=1)
    url: str = Field(min_length=1)
    source: Source
    room_type: Optional[RoomType] = Field(default=None, alias="roomType")
    area: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("title", "location", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Listing):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable dictionary using the export key names."""

        data = self.model_dump(mode="json", by_alias=True)
        for key in ("roomType", "area", "imageUrl"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class SearchOptions(BaseModel):
    """Caller supplied search parameters.

    ``pages`` is clamped into ``[1, max_pages]`` when the options are built;
    nothing downstream re-checks it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_price: Optional[int] = Field(default=None, ge=0, alias="maxPrice")
    room_type: Optional[RoomType] = Field(default=None, alias="roomType")
    pages: int = DEFAULT_PAGES

    @field_validator("pages", mode="before")
    @classmethod
    def clamp_pages(cls, value: Any, info: ValidationInfo) -> int:
        cap = MAX_PAGES
        if info.context and info.context.get("max_pages") is not None:
            cap = min(int(info.context["max_pages"]), MAX_PAGES)
        if value is None:
            value = DEFAULT_PAGES
        return min(max(int(value), 1), cap)

    @classmethod
    def build(
        cls,
        *,
        max_price: Optional[int] = None,
        room_type: Optional[str | RoomType] = None,
        pages: Optional[int] = None,
        max_pages: int = MAX_PAGES,
    ) -> "SearchOptions":
        return cls.model_validate(
            {"max_price": max_price, "room_type": room_type, "pages": pages},
            context={"max_pages": max_pages},
        )


__all__ = ["Listing", "RoomType", "SearchOptions", "Source"]
