"""
Exception taxonomy for vector storage operations.
"""


class VectorStorageError(Exception):
    """Base exception for vector storage operations."""
    pass


class ArityMismatch(VectorStorageError, ValueError):
    """Batch insert received texts and metadatas of different lengths."""

    def __init__(self, texts_count: int, metadatas_count: int):
        self.texts_count = texts_count
        self.metadatas_count = metadatas_count
        super().__init__(
            f"texts and metadatas must have the same length "
            f"(got {texts_count} texts, {metadatas_count} metadatas)"
        )


class EmbeddingFailure(VectorStorageError):
    """Embedding provider call failed. Retryable by the caller."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Embedding request failed: {reason}")


class PersistenceFailure(VectorStorageError):
    """Snapshot load or write failed. In-memory state stays authoritative."""
    pass


class ConfigurationError(VectorStorageError):
    """Store constructed without any usable embedding path."""
    pass
