from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from ..core.constants import DEFAULT_MATCH_THRESHOLD

Embedding = Union[Sequence[float], np.ndarray]


def euclidean_distance(a: Optional[Embedding], b: Optional[Embedding]) -> float:
    """Euclidean distance between two face embeddings.

    Absent, empty or differently sized vectors are never partially compared:
    the result is +inf so every downstream match check fails closed.
    """
    if a is None or b is None:
        return math.inf

    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.size == 0 or va.shape != vb.shape:
        return math.inf

    distance = float(np.linalg.norm(va - vb))
    return distance if not math.isnan(distance) else math.inf


def is_match(a: Optional[Embedding], b: Optional[Embedding], threshold: float = DEFAULT_MATCH_THRESHOLD) -> bool:
    """Smaller threshold = stricter."""
    return euclidean_distance(a, b) <= threshold
