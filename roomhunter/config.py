"""Runtime settings and per-source configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

# Hard upper bound on pages fetched per source in one crawl run.
MAX_PAGES = 10
DEFAULT_PAGES = 5

ENV_PREFIX = "ROOMHUNTER_"


@dataclass(frozen=True)
class SourceConfig:
    """Static facts about one listing site used to normalise its records."""

    base_origin: str
    search_url: str
    default_title: str
    default_location: str = "Warszawa"
    currency: str = "PLN"


@dataclass(frozen=True)
class Settings:
    """Process-wide crawl settings.

    Every field can be overridden with a ``ROOMHUNTER_<FIELD>`` environment
    variable or a YAML mapping of the same keys. ``max_pages`` may only
    tighten the built-in cap of :data:`MAX_PAGES`.
    """

    max_pages: int = MAX_PAGES
    page_delay_ms: int = 500
    navigation_timeout_ms: int = 30000
    wait_timeout_ms: int = 10000
    headless: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_pages", min(max(int(self.max_pages), 1), MAX_PAGES))
        for name in ("page_delay_ms", "navigation_timeout_ms", "wait_timeout_ms"):
            value = int(getattr(self, name))
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base: Optional["Settings"] = None) -> "Settings":
        known = {f.name: f for f in fields(cls)}
        updates: Dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).strip().lower()
            if name not in known:
                logger.warning("Ignoring unknown setting %r", key)
                continue
            if value is None:
                continue
            updates[name] = _coerce(value, known[name].type)
        return replace(base or cls(), **updates)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, *, base: Optional["Settings"] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        data = {
            key[len(ENV_PREFIX):].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX) and value != ""
        }
        return cls.from_mapping(data, base=base)


def load_settings(path: str | Path | None = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from an optional YAML file, then the environment.

    Environment variables win over the file so a single run can be tweaked
    without editing it.
    """

    settings = Settings()
    if path is not None:
        file_path = Path(path)
        with open(file_path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {file_path} must contain a mapping")
        settings = Settings.from_mapping(data, base=settings)
    return Settings.from_env(environ, base=settings)


def _coerce(value: Any, annotation: Any) -> Any:
    if annotation in (bool, "bool"):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    return int(value)


__all__ = [
    "DEFAULT_PAGES",
    "MAX_PAGES",
    "Settings",
    "SourceConfig",
    "load_settings",
]
