"""
Cosine similarity scoring and top-k ranking.

Ranking is a brute-force scan: every query scores every stored embedding,
O(n*d) for n documents of dimension d. There is no index structure. The
store targets tens to low thousands of documents, where a linear scan in
pure Python answers well within a request budget; a larger corpus belongs
in an ANN-backed store instead.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ragstore.errors import ValidationError
from ragstore.vector_store.base import Document


def vector_norm(vec: Sequence[float]) -> float:
    return math.sqrt(sum(x * x for x in vec))


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> Optional[float]:
    """
    Compute cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Score between -1 and 1, or None when the angle is undefined (either
        vector has zero magnitude, or the arithmetic produced NaN).

    Raises:
        ValidationError: If vectors are empty or have different dimensions
    """
    if not vec_a or not vec_b:
        raise ValidationError("Vectors cannot be empty")

    if len(vec_a) != len(vec_b):
        raise ValidationError(f"Vector dimensions must match: {len(vec_a)} != {len(vec_b)}")

    magnitude_a = vector_norm(vec_a)
    magnitude_b = vector_norm(vec_b)
    if magnitude_a == 0 or magnitude_b == 0:
        return None

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    score = dot_product / (magnitude_a * magnitude_b)
    if math.isnan(score):
        return None
    # Rounding can push |score| a hair past 1.
    return max(-1.0, min(1.0, score))


def rank_documents(
    query_embedding: Sequence[float],
    documents: Sequence[Document],
    k: int,
) -> List[Tuple[Document, float]]:
    """
    Return the top-k documents by descending cosine similarity.

    Documents whose score is undefined are excluded. Scores are compared at
    12 decimal places so parallel vectors tie, and ties keep their insertion
    order (``list.sort`` is stable). The returned scores are not rounded.
    """
    if k <= 0 or not documents:
        return []

    scored: List[Tuple[Document, float]] = []
    for doc in documents:
        score = cosine_similarity(query_embedding, doc.embedding)
        if score is None:
            continue
        scored.append((doc, score))

    scored.sort(key=lambda item: round(item[1], 12), reverse=True)
    return scored[:k]


__all__ = ["cosine_similarity", "rank_documents", "vector_norm"]
