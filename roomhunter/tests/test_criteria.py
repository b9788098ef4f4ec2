"""Tests for room type classification and listing filters."""

from __future__ import annotations

import pytest

from roomhunter.criteria import ROOM_TYPE_KEYWORDS, classify, filter_listings, keywords_for
from roomhunter.models import Listing, RoomType, SearchOptions, Source


def make_listing(title: str, price, url: str) -> Listing:
    return Listing(title=title, price=price, location="Warszawa", url=url, source=Source.OLX)


@pytest.mark.parametrize(
    "title,room_type,expected",
    [
        ("Pokój JEDNOOSOBOWY na Ochocie", RoomType.SINGLE, True),
        ("Pokój dla jednej osoby", "single", True),
        ("Szukam współlokatorki", RoomType.SHARED, True),
        ("Pokój 2-osobowy, Wola", RoomType.SHARED, True),
        ("Przytulna Kawalerka", RoomType.STUDIO, True),
        ("Mieszkanie 2 pokoje", RoomType.APARTMENT, True),
        ("Pokój jednoosobowy", RoomType.STUDIO, False),
        ("", RoomType.SINGLE, False),
    ],
)
def test_classify(title: str, room_type, expected: bool) -> None:
    assert classify(title, room_type) is expected


def test_every_room_type_has_keywords() -> None:
    assert set(ROOM_TYPE_KEYWORDS) == set(RoomType)
    assert all(keyword == keyword.lower() for keyword in keywords_for(RoomType.SHARED))


def test_classify_rejects_unknown_room_type() -> None:
    with pytest.raises(ValueError):
        classify("Pokój", "penthouse")


def test_price_ceiling_keeps_listings_without_price() -> None:
    listings = [
        make_listing("A", 1500, "https://x/1"),
        make_listing("B", None, "https://x/2"),
        make_listing("C", 2500, "https://x/3"),
        make_listing("D", 2000, "https://x/4"),
    ]

    kept = filter_listings(listings, SearchOptions.build(max_price=2000))

    assert [listing.title for listing in kept] == ["A", "B", "D"]
    assert all(listing.price is None or listing.price <= 2000 for listing in kept)


def test_zero_price_ceiling_is_applied() -> None:
    listings = [make_listing("Free", 0, "https://x/1"), make_listing("Paid", 100, "https://x/2")]

    kept = filter_listings(listings, SearchOptions.build(max_price=0))

    assert [listing.title for listing in kept] == ["Free"]


def test_room_type_filter_tags_copies_without_touching_inputs() -> None:
    original = make_listing("Kawalerka na Pradze", 2100, "https://x/1")
    listings = [original, make_listing("Pokój jednoosobowy", 1200, "https://x/2")]

    kept = filter_listings(listings, SearchOptions.build(room_type="studio"))

    assert [listing.url for listing in kept] == ["https://x/1"]
    assert kept[0].room_type is RoomType.STUDIO
    assert original.room_type is None


def test_no_options_keeps_everything_in_order() -> None:
    listings = [make_listing(str(i), i * 100, f"https://x/{i}") for i in range(5)]

    assert filter_listings(listings, SearchOptions()) == listings
