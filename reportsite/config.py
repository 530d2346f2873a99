from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigurationError

CONFIG_NAMES = ("siteconfig.yml", "siteconfig.yaml")
DEFAULT_DATE_FORMAT = "%x"


@dataclass(frozen=True)
class SiteConfig:
    base_url: str
    date_format: str = DEFAULT_DATE_FORMAT


def find_site_config(start: Path) -> Optional[Path]:
    """Walk up from ``start`` to the filesystem root looking for a site config."""
    current = start.resolve()
    while True:
        for name in CONFIG_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_site_config(path: Path) -> SiteConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read site config {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in site config {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Site config must be a mapping: {path}")

    base_url = data.get("baseUrl")
    if not isinstance(base_url, str) or not base_url.strip():
        raise ConfigurationError(f"Site config {path} has no baseUrl.")

    date_format = data.get("dateFormat")
    if date_format is None:
        date_format = DEFAULT_DATE_FORMAT
    elif not isinstance(date_format, str) or not date_format:
        raise ConfigurationError(f"dateFormat in {path} must be a non-empty string.")

    return SiteConfig(base_url=base_url.strip(), date_format=date_format)
