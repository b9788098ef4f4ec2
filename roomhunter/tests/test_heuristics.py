"""Unit tests for text heuristics."""

from __future__ import annotations

import pytest

from roomhunter.heuristics import (
    compact_price,
    first_int,
    normalise_text,
    parse_area,
    resolve_url,
    select_first,
    zloty_price,
)
from roomhunter.render import parse_document


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1 500 zł", 1500),
        ("2 300 zł do negocjacji", 2300),
        ("850 zł", 850),
        ("Zamienię", None),
        ("", None),
        (None, None),
    ],
)
def test_compact_price(text, expected) -> None:
    assert compact_price(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Pokój na Mokotowie 1 850 zł / miesiąc", 1850),
        ("Cena: 2 100 zł", 2100),
        ("1200zł", 1200),
        ("Zapytaj o cenę", None),
        ("12 m²", None),
    ],
)
def test_zloty_price(text, expected) -> None:
    assert zloty_price(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("12 m²", 12.0),
        ("12,5 m²", 12.5),
        ("18.75 m²", 18.75),
        ("brak", None),
        (None, None),
    ],
)
def test_parse_area(text, expected) -> None:
    assert parse_area(text) == expected


def test_first_int() -> None:
    assert first_int("ID 42 i 7") == 42
    assert first_int("bez cyfr") is None


@pytest.mark.parametrize(
    "href,expected",
    [
        ("/d/oferta/x.html", "https://www.olx.pl/d/oferta/x.html"),
        ("https://cdn.example/img.jpg", "https://cdn.example/img.jpg"),
        ("d/oferta/y.html", "https://www.olx.pl/d/oferta/y.html"),
        ("data:image/png;base64,AAAA", None),
        ("#", None),
        ("", None),
        (None, None),
    ],
)
def test_resolve_url(href, expected) -> None:
    assert resolve_url(href, "https://www.olx.pl") == expected


def test_normalise_text_collapses_whitespace() -> None:
    assert normalise_text("  Pokój \n\t jednoosobowy  ") == "Pokój jednoosobowy"
    assert normalise_text(None) == ""


def test_select_first_respects_priority_order() -> None:
    soup = parse_document("<div><h3>fallback</h3><p class='title'>preferred</p></div>")

    assert select_first(soup, ("p.title", "h3")).get_text() == "preferred"
    assert select_first(soup, ("span", "h3")).get_text() == "fallback"
    assert select_first(soup, ("span",)) is None
