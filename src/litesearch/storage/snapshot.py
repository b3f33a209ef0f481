"""
JSON snapshot persistence for the in-memory corpus.

The whole corpus is rewritten after every mutation: serialized to a
``.tmp`` file next to the target, then renamed over it.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

Corpus = dict[str, dict[str, str]]

RAW_SOURCE_KEY = "$raw"


class SnapshotFile:
    """Load and atomically rewrite a corpus snapshot at ``path``.

    An empty path disables persistence entirely.
    """

    def __init__(self, path: str | os.PathLike[str] | None) -> None:
        self.path: Path | None = Path(path).expanduser() if path else None
        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                logger.warning("Cannot create snapshot directory %s: %s", self.path.parent, err)

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def load(self) -> Corpus:
        """Read the snapshot; a missing or unreadable file yields an empty corpus."""
        if self.path is None:
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as err:
            logger.warning("Ignoring unreadable snapshot %s: %s", self.path, err)
            return {}

        if not isinstance(payload, dict) or not all(
            isinstance(docs, dict) for docs in payload.values()
        ):
            logger.warning("Ignoring snapshot %s with unexpected layout", self.path)
            return {}

        corpus: Corpus = {}
        for index, docs in payload.items():
            corpus[str(index)] = {
                str(doc_id): _restore(document) for doc_id, document in docs.items()
            }
        logger.debug("Loaded %d indices from snapshot %s", len(corpus), self.path)
        return corpus

    def save(self, corpus: Corpus) -> bool:
        """Write ``corpus`` atomically. Failures are logged and reported as False."""
        if self.path is None:
            return False
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        payload = {
            index: {doc_id: _embed(raw) for doc_id, raw in docs.items()}
            for index, docs in corpus.items()
        }
        try:
            tmp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as err:
            logger.warning("Failed to write snapshot %s: %s", self.path, err)
            return False
        return True


def _embed(raw: str) -> Any:
    """Embed ``raw`` as a JSON value when that reloads to the same text.

    Other sources are wrapped as ``{"$raw": text}`` so they reload verbatim.
    """
    try:
        value = json.loads(raw)
    except ValueError:
        return {RAW_SOURCE_KEY: raw}
    if _is_raw_wrapper(value) or json.dumps(value) != raw:
        return {RAW_SOURCE_KEY: raw}
    return value


def _restore(value: Any) -> str:
    if _is_raw_wrapper(value):
        return value[RAW_SOURCE_KEY]
    return json.dumps(value)


def _is_raw_wrapper(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and len(value) == 1
        and isinstance(value.get(RAW_SOURCE_KEY), str)
    )
