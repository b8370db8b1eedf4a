"""
Document store: the single owner of the resident collection.

Insert and query are the only mutators. Both may evict and both snapshot the
collection to the persistence backend afterwards; a failed snapshot is logged
and never unwinds the in-memory change.
"""

import time
from typing import Callable, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from ..core.errors import ArityMismatch, PersistenceFailure
from ..core.schemas import FilterOptions, SimilaritySearchParams
from ..util.logging import logger
from .backends import IPersistenceBackend, InMemoryBackend
from .embeddings import IEmbeddingProvider
from .eviction import EvictionPolicy, SizeEstimator
from .filters import filter_documents
from .similarity import magnitude, score_documents
from .types import Document, QueryEcho, QueryResponse, SimilarityResult

T = TypeVar("T")


def _now_ms() -> int:
    return int(time.time() * 1000)


class DocumentStore(Generic[T]):
    """
    Size-bounded collection of embedded documents answering cosine-similarity queries.

    Not thread-safe: callers must serialize access to one instance.
    """

    def __init__(self, embedding_provider: IEmbeddingProvider, max_size_in_mb: float,
                 backend: IPersistenceBackend = None, size_estimator: SizeEstimator = None,
                 clock: Callable[[], int] = None):
        """
        Initialize the store and hydrate it from the backend.

        Args:
            embedding_provider: Batch embedding capability used by insert and query
            max_size_in_mb: Eviction budget for the estimated collection size
            backend: Snapshot storage, defaults to an in-memory backend
            size_estimator: Function of the whole collection returning MB
            clock: Returns the current time in milliseconds since epoch
        """
        self.embedding_provider = embedding_provider
        self.backend = backend if backend is not None else InMemoryBackend()
        self.eviction_policy = EvictionPolicy(max_size_in_mb, size_estimator)
        self.clock = clock or _now_ms
        self.last_persistence_error: Optional[PersistenceFailure] = None

        self._documents: List[Document[T]] = []
        self._texts = set()
        self.load()

    @property
    def max_size_in_mb(self) -> float:
        return self.eviction_policy.max_size_in_mb

    @property
    def documents(self) -> Tuple[Document[T], ...]:
        """Resident documents in collection order."""
        return tuple(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, text: str) -> bool:
        return text in self._texts

    def size_in_mb(self) -> float:
        return self.eviction_policy.size_estimator(self._documents)

    def load(self) -> None:
        """Replace the resident collection with the backend snapshot.

        A backend failure leaves the store empty rather than failing.
        """
        try:
            loaded = self.backend.load_all()
        except Exception as e:
            logger.log_persistence("load", 0, "error", e)
            self._documents = []
            self._texts = set()
            return

        # Earlier rows win if a snapshot somehow holds duplicate texts
        documents, seen = [], set()
        for doc in loaded:
            if doc.text not in seen:
                seen.add(doc.text)
                documents.append(doc)

        self._documents = documents
        self._texts = seen
        logger.log_persistence("load", len(documents))
        self._evict()

    def insert(self, texts: Sequence[str], metadatas: Sequence[T]) -> List[Document[T]]:
        """
        Embed and add new texts with their metadata.

        Texts already resident, or repeated earlier in the same batch, are skipped
        silently. Embedding happens in one batch call; if it fails nothing is added.

        Returns:
            The newly added documents, in input order.

        Raises:
            ArityMismatch: texts and metadatas differ in length.
            EmbeddingFailure: the provider failed; the collection is unchanged.
        """
        texts = list(texts)
        metadatas = list(metadatas)
        if len(texts) != len(metadatas):
            raise ArityMismatch(len(texts), len(metadatas))

        new_items = []
        batch_texts = set()
        for text, metadata in zip(texts, metadatas):
            if text in self._texts or text in batch_texts:
                continue
            batch_texts.add(text)
            new_items.append((text, metadata))

        skipped = len(texts) - len(new_items)
        if not new_items:
            logger.log_vector_operation("insert", "success", {"added": 0, "skipped": skipped})
            return []

        vectors = self.embedding_provider.embed_texts([text for text, _ in new_items])

        timestamp = self.clock()
        new_documents = [
            Document(
                text=text,
                metadata=metadata,
                timestamp=timestamp,
                hits=0,
                vector=vector,
                vector_mag=magnitude(vector),
            )
            for (text, metadata), vector in zip(new_items, vectors)
        ]

        self._documents.extend(new_documents)
        self._texts.update(doc.text for doc in new_documents)
        logger.log_vector_operation("insert", "success", {"added": len(new_documents), "skipped": skipped})

        self._evict()
        self._save()
        return new_documents

    def insert_one(self, text: str, metadata: T) -> Optional[Document[T]]:
        """Insert a single text. Returns None if the text was already resident."""
        added = self.insert([text], [metadata])
        return added[0] if added else None

    def query(self, text: str, k: int = 4,
              filter_options: Union[FilterOptions, Mapping, None] = None,
              include_vectors: bool = False) -> QueryResponse[T]:
        """
        Rank resident documents by cosine similarity to text.

        Every returned document has its resident hit counter incremented, so a
        query that returns results also evicts and snapshots.

        Raises:
            pydantic.ValidationError: empty text or negative k.
            EmbeddingFailure: the provider failed; no hits are updated.
        """
        params = SimilaritySearchParams(
            query=text,
            k=k,
            filter_options=filter_options,
            include_vectors=include_vectors,
        )
        return self.similarity_search(params)

    def similarity_search(self, params: SimilaritySearchParams) -> QueryResponse[T]:
        query_embedding = self.embedding_provider.embed_text(params.query)
        query_magnitude = magnitude(query_embedding)

        # Documents restored without a vector can never be scored
        candidates = [
            doc for doc in filter_documents(self._documents, params.filter_options)
            if doc.has_vector
        ]
        scored = score_documents(candidates, query_embedding, query_magnitude)

        # Python's sort is stable, equal scores keep collection order
        ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)[:params.k]

        for doc, _ in ranked:
            doc.hits += 1

        results = [
            SimilarityResult.from_document(doc, score, params.include_vectors)
            for doc, score in ranked
        ]

        logger.log_vector_operation("query", "success", {
            "query": params.query,
            "candidates": len(candidates),
            "returned": len(results),
        })

        if results:
            self._evict()
            self._save()

        return QueryResponse(
            similar_items=results,
            query=QueryEcho(text=params.query, embedding=list(query_embedding)),
        )

    def _evict(self) -> List[Document[T]]:
        remaining, evicted = self.eviction_policy.evict(self._documents)
        if evicted:
            self._documents = remaining
            for doc in evicted:
                self._texts.discard(doc.text)
            logger.log_eviction(len(evicted), len(remaining), self.size_in_mb(), self.max_size_in_mb)
            logger.debug("evicted texts: " + ", ".join(repr(doc.text[:50]) for doc in evicted))
        return evicted

    def _save(self) -> bool:
        try:
            self.backend.replace_all(self._documents)
        except Exception as e:
            failure = e
            if not isinstance(failure, PersistenceFailure):
                failure = PersistenceFailure(f"Snapshot write failed: {e}")
                failure.__cause__ = e
            self.last_persistence_error = failure
            logger.log_persistence("replace_all", len(self._documents), "error", failure)
            return False

        self.last_persistence_error = None
        logger.log_persistence("replace_all", len(self._documents))
        return True
