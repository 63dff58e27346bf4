"""YAML config loader — reads brandlens.yml into Settings."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from brandlens.schemas.config import Settings


def load_settings(path: str | Path | None = None) -> Settings:
    """Load and validate a settings file, then apply environment overrides.

    With no path, defaults are used.  Raises ``FileNotFoundError`` if the
    path doesn't exist and ``pydantic.ValidationError`` if the YAML content
    is invalid.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        loaded = yaml.safe_load(path.read_text())
        # An empty file loads as None
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file must be a YAML mapping, got {type(loaded).__name__}")
            raw = loaded

    # YAML provider keys are lower-case; the enum values are upper-case.
    providers = raw.get("providers")
    if isinstance(providers, dict):
        raw["providers"] = {str(k).upper(): v for k, v in providers.items()}

    if os.getenv("DATABASE_URL"):
        raw["database_url"] = os.environ["DATABASE_URL"]
    if os.getenv("MAX_PAGES_PER_SITE"):
        scraper = raw.get("scraper") or {}
        scraper["max_pages"] = os.environ["MAX_PAGES_PER_SITE"]
        raw["scraper"] = scraper

    return Settings(**raw)
