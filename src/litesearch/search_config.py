"""
Configuration helpers for locating the search snapshot.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import ConfigError


DEFAULT_SNAPSHOT_PATH = "./var/data/litesearch/lite.json"
ENV_SEARCH_URI = "SEARCH_URI"
ENV_LITE_MODE = "LITE_MODE"
ENV_LITE_MODE_ALIAS = "COZE_LITE"
ENV_LOG_LEVEL = "LITESEARCH_LOG_LEVEL"

SNAPSHOT_SCHEMES: tuple[str, ...] = ("duckdb", "file")


def parse_search_uri(uri: str) -> str:
    """
    Return the snapshot path from a ``<scheme>://<path>`` search URI.

    Accepted schemes are listed in ``SNAPSHOT_SCHEMES``.
    """
    scheme, sep, path = uri.partition("://")
    if not sep or scheme.lower() not in SNAPSHOT_SCHEMES:
        supported = ", ".join(f"{name}://" for name in SNAPSHOT_SCHEMES)
        raise ConfigError(f"Unsupported search URI {uri!r}. Supported: {supported}")
    if not path:
        raise ConfigError(f"Search URI {uri!r} has no path.")
    return path


def lite_mode_enabled() -> bool:
    return os.getenv(ENV_LITE_MODE) == "1" or os.getenv(ENV_LITE_MODE_ALIAS) == "1"


def resolve_snapshot_path(override_path: str | None = None) -> str:
    """
    Resolve the snapshot path from an explicit path, SEARCH_URI, or default.

    Precedence:
    1) explicit override_path
    2) SEARCH_URI
    3) default path
    """
    if override_path:
        raw_path = override_path
    elif os.getenv(ENV_SEARCH_URI):
        raw_path = parse_search_uri(os.environ[ENV_SEARCH_URI])
    else:
        raw_path = DEFAULT_SNAPSHOT_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from ``level`` or LITESEARCH_LOG_LEVEL."""
    name = (level or os.getenv(ENV_LOG_LEVEL) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
