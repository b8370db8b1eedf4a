"""
Cosine similarity scoring between query embeddings and stored documents.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .types import Document


def magnitude(vector: Sequence[float]) -> float:
    """Euclidean norm of a vector."""
    return float(np.linalg.norm(np.asarray(vector, dtype=np.float64)))


def cosine_raw(a: Sequence[float], b: Sequence[float],
               magnitude_a: float = None, magnitude_b: float = None) -> float:
    """
    Raw cosine similarity in [-1, 1].

    Precomputed magnitudes may be passed to skip recomputation. Returns 0.0
    when either vector has zero magnitude.
    """
    a_array = np.asarray(a, dtype=np.float64)
    b_array = np.asarray(b, dtype=np.float64)
    if a_array.shape != b_array.shape:
        raise ValueError(f"Vector dimension {a_array.shape[0]} does not match {b_array.shape[0]}")

    magnitude_a = float(np.linalg.norm(a_array)) if magnitude_a is None else magnitude_a
    magnitude_b = float(np.linalg.norm(b_array)) if magnitude_b is None else magnitude_b
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return float(np.dot(a_array, b_array) / (magnitude_a * magnitude_b))


def normalize_score(raw: float) -> float:
    """Map a raw cosine in [-1, 1] onto [0, 1]."""
    return min(1.0, max(0.0, (raw + 1.0) / 2.0))


def similarity_score(a: Sequence[float], b: Sequence[float]) -> float:
    return normalize_score(cosine_raw(a, b))


def score_documents(documents: Sequence[Document], query_vector: Sequence[float],
                    query_magnitude: float = None) -> List[Tuple[Document, float]]:
    """Score each document against the query, preserving input order."""
    if not documents:
        return []

    query_array = np.asarray(query_vector, dtype=np.float64)
    if query_magnitude is None:
        query_magnitude = float(np.linalg.norm(query_array))

    for doc in documents:
        if not doc.has_vector:
            raise ValueError(f"Document '{doc.text[:50]}' has no embedding")
        if len(doc.vector) != query_array.shape[0]:
            raise ValueError(
                f"Vector dimension {len(doc.vector)} does not match query dimension {query_array.shape[0]}"
            )

    matrix = np.asarray([doc.vector for doc in documents], dtype=np.float64)
    magnitudes = np.asarray([doc.vector_mag for doc in documents], dtype=np.float64)

    dots = matrix @ query_array
    denominators = magnitudes * query_magnitude

    # Zero-magnitude vectors score a raw 0.0 instead of NaN
    raw = np.zeros(len(documents), dtype=np.float64)
    nonzero = denominators != 0
    raw[nonzero] = dots[nonzero] / denominators[nonzero]

    scores = np.clip((raw + 1.0) / 2.0, 0.0, 1.0)
    return [(doc, float(score)) for doc, score in zip(documents, scores)]
