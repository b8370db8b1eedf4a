"""
In-memory document index: filtering, cosine ranking and size-bounded eviction.
"""

from .types import Document, SimilarityResult, QueryEcho, QueryResponse
from .embeddings import (
    IEmbeddingProvider,
    OpenAIEmbeddingProvider,
    CallableEmbeddingProvider,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
)
from .backends import IPersistenceBackend, InMemoryBackend, SQLiteBackend
from .eviction import EvictionPolicy, estimate_size_in_mb
from .filters import filter_documents, matches
from .store import DocumentStore
from .index import VectorStorage

__all__ = [
    'Document',
    'SimilarityResult',
    'QueryEcho',
    'QueryResponse',
    'IEmbeddingProvider',
    'OpenAIEmbeddingProvider',
    'CallableEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'IPersistenceBackend',
    'InMemoryBackend',
    'SQLiteBackend',
    'EvictionPolicy',
    'estimate_size_in_mb',
    'filter_documents',
    'matches',
    'DocumentStore',
    'VectorStorage',
]
