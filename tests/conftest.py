"""
Shared fixtures: a scripted embedding function, a manual clock and a
backend that records snapshot writes.
"""

import itertools

import pytest

from vector_storage.core.errors import PersistenceFailure
from vector_storage.vector.backends import InMemoryBackend
from vector_storage.vector.embeddings import CallableEmbeddingProvider
from vector_storage.vector.store import DocumentStore


class ScriptedEmbedder:
    """Embedding function returning fixed vectors per text and recording calls."""

    def __init__(self, vectors=None, default=None):
        self.vectors = dict(vectors or {})
        self.default = default or [0.0, 0.0]
        self.calls = []
        self.fail_with = None

    def __call__(self, texts):
        self.calls.append(list(texts))
        if self.fail_with is not None:
            raise self.fail_with
        return [list(self.vectors.get(text, self.default)) for text in texts]


class RecordingBackend(InMemoryBackend):
    """In-memory backend that counts snapshot writes and can be told to fail."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.replace_calls = 0
        self.fail_writes = False
        self.fail_loads = False

    def load_all(self):
        if self.fail_loads:
            raise PersistenceFailure("disk unavailable")
        return super().load_all()

    def replace_all(self, documents):
        self.replace_calls += 1
        if self.fail_writes:
            raise PersistenceFailure("disk full")
        super().replace_all(documents)


@pytest.fixture
def embedder():
    return ScriptedEmbedder({
        "x": [1.0, 0.0],
        "y": [0.0, 1.0],
        "z": [1.0, 1.0],
        "find x": [1.0, 0.0],
        "find y": [0.0, 1.0],
    }, default=[0.5, 0.5])


@pytest.fixture
def clock():
    counter = itertools.count(1000)
    return lambda: next(counter)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def make_store(embedder, backend, clock):
    """Build a DocumentStore over the scripted embedder.

    By default the size estimator counts documents, so max_size_in_mb is a
    document count.
    """
    def _make(max_size=100, size_estimator=len, store_backend=None):
        return DocumentStore(
            embedding_provider=CallableEmbeddingProvider(embedder),
            max_size_in_mb=max_size,
            backend=store_backend if store_backend is not None else backend,
            size_estimator=size_estimator,
            clock=clock,
        )

    return _make
