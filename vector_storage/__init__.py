"""Embedded vector index with cosine similarity search and size-bounded eviction."""

from .core.config import VERSION as __version__
from .core.errors import (
    VectorStorageError,
    ArityMismatch,
    EmbeddingFailure,
    PersistenceFailure,
    ConfigurationError,
)
from .core.schemas import FilterCriteria, FilterOptions
from .vector import (
    Document,
    SimilarityResult,
    QueryResponse,
    DocumentStore,
    VectorStorage,
)

__all__ = [
    'VectorStorage',
    'DocumentStore',
    'Document',
    'SimilarityResult',
    'QueryResponse',
    'FilterCriteria',
    'FilterOptions',
    'VectorStorageError',
    'ArityMismatch',
    'EmbeddingFailure',
    'PersistenceFailure',
    'ConfigurationError',
]
