"""
Document and search result records held by the document store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Document(Generic[T]):
    """A stored unit of text, metadata and embedding."""

    text: str
    """Unique key within the store"""

    metadata: T
    """Caller-defined payload, only interpreted by filters"""

    timestamp: int
    """Creation time in milliseconds since epoch"""

    hits: int = 0
    """Number of query result sets this document appeared in"""

    vector: Optional[List[float]] = None
    """Embedding; present iff vector_mag is present"""

    vector_mag: Optional[float] = None
    """Euclidean norm of vector, computed once at insert time"""

    @property
    def has_vector(self) -> bool:
        return self.vector is not None and self.vector_mag is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialized shape used for size estimation and persistence."""
        data = {
            "text": self.text,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
            "hits": self.hits,
        }
        if self.has_vector:
            data["vector"] = self.vector
            data["vectorMag"] = self.vector_mag
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        vector = data.get("vector")
        vector_mag = data.get("vectorMag")
        # Keep the pairing invariant for partially written records
        if vector is None or vector_mag is None:
            vector, vector_mag = None, None
        return cls(
            text=data["text"],
            metadata=data.get("metadata"),
            timestamp=int(data["timestamp"]),
            hits=int(data.get("hits") or 0),
            vector=list(vector) if vector is not None else None,
            vector_mag=float(vector_mag) if vector_mag is not None else None,
        )


@dataclass
class SimilarityResult(Generic[T]):
    """A document copy ranked against a query."""

    text: str
    metadata: T
    timestamp: int
    hits: int
    score: float
    """Normalized cosine similarity in [0, 1]"""

    vector: Optional[List[float]] = None
    vector_mag: Optional[float] = None

    @classmethod
    def from_document(cls, document: Document, score: float,
                      include_vectors: bool = False) -> "SimilarityResult":
        return cls(
            text=document.text,
            metadata=document.metadata,
            timestamp=document.timestamp,
            hits=document.hits,
            score=score,
            vector=document.vector if include_vectors else None,
            vector_mag=document.vector_mag if include_vectors else None,
        )


@dataclass
class QueryEcho:
    """The query text and the embedding computed for it."""

    text: str
    embedding: List[float]


@dataclass
class QueryResponse(Generic[T]):
    similar_items: List[SimilarityResult] = field(default_factory=list)
    query: Optional[QueryEcho] = None
