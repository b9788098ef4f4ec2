"""Tests for crawl settings."""

from __future__ import annotations

import textwrap

import pytest

from roomhunter.config import MAX_PAGES, Settings, load_settings


def test_defaults() -> None:
    settings = Settings()

    assert settings.max_pages == MAX_PAGES == 10
    assert settings.page_delay_ms == 500
    assert settings.navigation_timeout_ms == 30000
    assert settings.wait_timeout_ms == 10000
    assert settings.headless is True


@pytest.mark.parametrize("value,expected", [(0, 1), (3, 3), (10, 10), (99, 10)])
def test_max_pages_can_only_tighten_the_cap(value: int, expected: int) -> None:
    assert Settings(max_pages=value).max_pages == expected


def test_negative_durations_are_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(page_delay_ms=-1)


def test_from_env_reads_prefixed_variables() -> None:
    settings = Settings.from_env(
        {
            "ROOMHUNTER_MAX_PAGES": "4",
            "ROOMHUNTER_PAGE_DELAY_MS": "250",
            "ROOMHUNTER_HEADLESS": "false",
            "ROOMHUNTER_WAIT_TIMEOUT_MS": "",
            "UNRELATED": "1",
        }
    )

    assert settings.max_pages == 4
    assert settings.page_delay_ms == 250
    assert settings.headless is False
    assert settings.wait_timeout_ms == 10000


def test_from_mapping_ignores_unknown_keys() -> None:
    settings = Settings.from_mapping({"colour": "blue", "navigation_timeout_ms": 15000})

    assert settings.navigation_timeout_ms == 15000


def test_load_settings_env_overrides_file(tmp_path) -> None:
    path = tmp_path / "roomhunter.yml"
    path.write_text(
        textwrap.dedent(
            """
            # crawl settings
            max_pages: 6
            page_delay_ms: 800
            headless: no
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(path, environ={"ROOMHUNTER_PAGE_DELAY_MS": "300"})

    assert settings.max_pages == 6
    assert settings.page_delay_ms == 300
    assert settings.headless is False


def test_load_settings_requires_a_mapping(tmp_path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(path, environ={})


def test_load_settings_without_file_uses_environment() -> None:
    assert load_settings(environ={"ROOMHUNTER_MAX_PAGES": "2"}).max_pages == 2
