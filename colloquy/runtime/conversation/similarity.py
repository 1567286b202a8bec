"""Vector helpers for comparing message and entry embeddings."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np


def dot_product(x: Sequence[float], y: Sequence[float]) -> float:
    if len(x) != len(y):
        raise ValueError(f"vector lengths differ: {len(x)} != {len(y)}")
    return float(np.dot(np.asarray(x, dtype=float), np.asarray(y, dtype=float)))


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either vector is empty or zero."""
    if len(vec1) == 0 or len(vec2) == 0:
        return 0.0
    if len(vec1) != len(vec2):
        raise ValueError(f"vector lengths differ: {len(vec1)} != {len(vec2)}")
    v1 = np.asarray(vec1, dtype=float)
    v2 = np.asarray(vec2, dtype=float)
    norm = np.linalg.norm(v1) * np.linalg.norm(v2)
    return float(np.dot(v1, v2) / norm) if norm > 0 else 0.0


def rank_by_similarity(query: Sequence[float], candidates: Sequence[Sequence[float]]) -> List[int]:
    """Indices of ``candidates`` ordered from most to least similar to ``query``."""
    scores = [cosine_similarity(query, vec) for vec in candidates]
    return sorted(range(len(scores)), key=lambda i: scores[i], reverse=True)


__all__ = ["cosine_similarity", "dot_product", "rank_by_similarity"]
