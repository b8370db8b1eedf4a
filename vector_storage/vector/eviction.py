"""
Size-budget eviction: drop least-used, oldest documents until the collection fits.
"""

import heapq
import json
from typing import Callable, List, Sequence, Tuple

from .types import Document

SizeEstimator = Callable[[Sequence[Document]], float]


def estimate_size_in_mb(documents: Sequence[Document]) -> float:
    """Serialized UTF-8 byte length of the collection, in MB."""
    payload = json.dumps(
        [doc.to_dict() for doc in documents],
        default=str,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return len(payload.encode("utf-8")) / 1024 / 1024


class EvictionPolicy:
    """
    Removes documents in (hits, timestamp) ascending order while the estimated
    size of the collection exceeds the budget.

    Ties on (hits, timestamp) fall back to collection position, earliest first.
    Surviving documents keep their relative order.
    """

    def __init__(self, max_size_in_mb: float, size_estimator: SizeEstimator = None):
        self.max_size_in_mb = max_size_in_mb
        self.size_estimator = size_estimator or estimate_size_in_mb

    def is_over_budget(self, documents: Sequence[Document]) -> bool:
        return self.size_estimator(documents) > self.max_size_in_mb

    def evict(self, documents: Sequence[Document]) -> Tuple[List[Document], List[Document]]:
        """
        Compute the eviction for a collection.

        Returns:
            (remaining, evicted) where remaining preserves input order and evicted
            is in removal order.
        """
        remaining = list(documents)
        if not self.is_over_budget(remaining):
            return remaining, []

        heap = [(doc.hits, doc.timestamp, position) for position, doc in enumerate(remaining)]
        heapq.heapify(heap)

        removed = set()
        evicted = []
        while heap and self.is_over_budget(remaining):
            _, _, position = heapq.heappop(heap)
            removed.add(position)
            evicted.append(documents[position])
            remaining = [doc for i, doc in enumerate(documents) if i not in removed]

        return remaining, evicted
