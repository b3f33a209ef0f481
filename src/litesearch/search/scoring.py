"""
Vector similarity scoring.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from .predicates import is_number


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b|)``.

    Vectors of different length, empty vectors, and zero vectors score 0.0.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.size == 0 or va.shape != vb.shape:
        return 0.0

    norm = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.dot(va, vb)) / norm


def as_vector(value: Any) -> list[float] | None:
    """Decode a list/tuple of numbers into floats, or None if any item is not numeric."""
    if not isinstance(value, (list, tuple)):
        return None
    if not all(is_number(item) for item in value):
        return None
    try:
        return np.asarray(value, dtype=np.float64).tolist()
    except OverflowError:
        return None
