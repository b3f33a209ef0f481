"""
Search client factory.
"""

from __future__ import annotations

import logging
import os

from .exceptions import ConfigError
from .search_config import ENV_SEARCH_URI, lite_mode_enabled, parse_search_uri
from .storage import DocumentStore, NoopClient, SearchClient


logger = logging.getLogger(__name__)


def create_client(uri: str | None = None) -> SearchClient:
    """Build a search client from ``uri`` or the environment.

    A snapshot URI always wins; otherwise lite mode yields a client that
    stores nothing.
    """
    resolved_uri = uri or os.getenv(ENV_SEARCH_URI)
    if resolved_uri:
        path = parse_search_uri(resolved_uri)
        logger.info("Using snapshot search store at %s", path)
        return DocumentStore(path)
    if lite_mode_enabled():
        logger.info("Lite mode without %s; search is disabled", ENV_SEARCH_URI)
        return NoopClient()
    raise ConfigError(f"No search backend configured; set {ENV_SEARCH_URI}.")
