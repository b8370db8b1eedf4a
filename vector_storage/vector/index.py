"""
Public entry point: wires options to an embedding provider, a persistence
backend and a DocumentStore.
"""

import logging
from typing import Callable, Generic, List, Mapping, Optional, Tuple, TypeVar, Union

from ..core.config import debug_enabled, get_persistence_backend, validate_storage_config
from ..core.errors import ConfigurationError, PersistenceFailure
from ..core.schemas import FilterOptions, StorageOptions
from ..util.logging import logger
from .backends import IPersistenceBackend
from .embeddings import CallableEmbeddingProvider, EmbedTextsFn, IEmbeddingProvider, OpenAIEmbeddingProvider
from .eviction import SizeEstimator
from .store import DocumentStore
from .types import Document, QueryResponse

T = TypeVar("T")


def build_embedding_provider(options: StorageOptions) -> IEmbeddingProvider:
    """Pick the embedding provider for the given options.

    A caller-supplied function always wins over the remote API.
    """
    if options.embed_texts_fn is not None:
        return CallableEmbeddingProvider(options.embed_texts_fn)
    if options.api_key is not None:
        return OpenAIEmbeddingProvider(
            api_key=options.api_key,
            model_name=options.embedding_model_name,
            api_url=options.api_url,
            timeout=options.request_timeout,
        )
    raise ConfigurationError(
        "VectorStorage: provide an OpenAI API key or a custom embed_texts_fn in the options."
    )


class VectorStorage(Generic[T]):
    """Embedded vector index with size-bounded storage."""

    def __init__(self, max_size_in_mb: float = None, embedding_model_name: str = None,
                 api_key: str = None, embed_texts_fn: EmbedTextsFn = None,
                 api_url: str = None, request_timeout: float = None,
                 backend: IPersistenceBackend = None, size_estimator: SizeEstimator = None,
                 clock: Callable[[], int] = None):
        """
        Args:
            max_size_in_mb: Eviction budget, default 2048
            embedding_model_name: Passed to the remote embedding API
            api_key: Credential for the remote embedding API
            embed_texts_fn: Replaces the remote embedding API entirely
            api_url: Remote embeddings endpoint
            request_timeout: Remote request timeout in seconds
            backend: Snapshot storage, default from VECTOR_STORAGE_BACKEND
            size_estimator: Collection size function returning MB
            clock: Millisecond clock used for document timestamps

        Raises:
            ConfigurationError: neither api_key nor embed_texts_fn is available.
        """
        overrides = {
            "max_size_in_mb": max_size_in_mb,
            "embedding_model_name": embedding_model_name,
            "api_key": api_key,
            "embed_texts_fn": embed_texts_fn,
            "api_url": api_url,
            "request_timeout": request_timeout,
        }
        self.options = StorageOptions(**{k: v for k, v in overrides.items() if v is not None})

        if debug_enabled():
            logger.logger.setLevel(logging.DEBUG)
        for issue in validate_storage_config():
            logger.warning(f"VectorStorage config: {issue}")

        if not self.options.has_embedding_path:
            logger.error("VectorStorage: no api_key or embed_texts_fn configured")
        self.embedding_provider = build_embedding_provider(self.options)

        self.store: DocumentStore[T] = DocumentStore(
            embedding_provider=self.embedding_provider,
            max_size_in_mb=self.options.max_size_in_mb,
            backend=backend if backend is not None else get_persistence_backend(),
            size_estimator=size_estimator,
            clock=clock,
        )

    def add_text(self, text: str, metadata: T) -> Optional[Document[T]]:
        """Add one text. Returns None when the text is already stored."""
        return self.store.insert_one(text, metadata)

    def add_texts(self, texts: List[str], metadatas: List[T]) -> List[Document[T]]:
        """Add texts with parallel metadata. Returns only the newly added documents."""
        return self.store.insert(texts, metadatas)

    def similarity_search(self, query: str, k: int = 4,
                          filter_options: Union[FilterOptions, Mapping, None] = None,
                          include_vectors: bool = False) -> QueryResponse[T]:
        """Return the k documents most similar to query, plus the query embedding."""
        return self.store.query(query, k=k, filter_options=filter_options,
                                include_vectors=include_vectors)

    @property
    def documents(self) -> Tuple[Document[T], ...]:
        return self.store.documents

    @property
    def last_persistence_error(self) -> Optional[PersistenceFailure]:
        return self.store.last_persistence_error

    def size_in_mb(self) -> float:
        return self.store.size_in_mb()

    def __len__(self) -> int:
        return len(self.store)
