"""
Embedding providers. The store talks to exactly one, chosen at construction:
the OpenAI-compatible HTTP API, a caller-supplied function, a local
sentence-transformers model, or a deterministic hash for tests.
"""

from abc import ABC, abstractmethod
import hashlib
from typing import Callable, List, Sequence

import requests

from ..core import config
from ..core.errors import EmbeddingFailure

EmbedTextsFn = Callable[[List[str]], Sequence[Sequence[float]]]


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed a batch of texts, same order and length as the input.

        Raises:
            EmbeddingFailure: on any transport, auth or model error.
        """
        pass

    def embed_text(self, text: str) -> List[float]:
        """Embed a single text."""
        return self.embed_texts([text])[0]

    @staticmethod
    def _check_count(texts: Sequence[str], vectors: Sequence[Sequence[float]]):
        if len(vectors) != len(texts):
            raise EmbeddingFailure(f"expected {len(texts)} embeddings, got {len(vectors)}")


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Remote provider for the OpenAI embeddings endpoint (or a compatible one)."""

    def __init__(self, api_key: str, model_name: str = None, api_url: str = None,
                 timeout: float = None, session: requests.Session = None):
        self.api_key = api_key
        self.model_name = model_name or config.EMBED_MODEL_NAME
        self.api_url = api_url or config.OPENAI_API_URL
        self.timeout = timeout or config.REQUEST_TIMEOUT_SEC
        self.session = session or requests.Session()

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        texts = list(texts)
        if not texts:
            return []

        try:
            response = self.session.post(
                self.api_url,
                json={"input": texts, "model": self.model_name},
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EmbeddingFailure(str(e)) from e

        if not response.ok:
            raise EmbeddingFailure(f"HTTP error! status: {response.status_code}")

        try:
            data = response.json()["data"]
            # Items carry their input position; do not trust response order
            items = sorted(data, key=lambda item: item.get("index", 0))
            vectors = [[float(x) for x in item["embedding"]] for item in items]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingFailure(f"malformed embedding response: {e}") from e

        self._check_count(texts, vectors)
        return vectors


class CallableEmbeddingProvider(IEmbeddingProvider):
    """Provider backed by a caller-supplied batch embedding function."""

    def __init__(self, embed_texts_fn: EmbedTextsFn):
        if not callable(embed_texts_fn):
            raise TypeError("embed_texts_fn must be callable")
        self.embed_texts_fn = embed_texts_fn

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        texts = list(texts)
        try:
            vectors = self.embed_texts_fn(texts)
            vectors = [[float(x) for x in vector] for vector in vectors]
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(str(e) or type(e).__name__) from e

        self._check_count(texts, vectors)
        return vectors


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    Same text, same vector, across instances and runs. No model or network needed.
    """

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def _embed_one(self, text: str) -> List[float]:
        vector = []
        counter = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{counter}:{text}".encode()).digest()
            # 4-byte chunks mapped onto [-1, 1]
            for i in range(0, len(digest), 4):
                value = int.from_bytes(digest[i:i + 4], "big")
                vector.append((value / (2**32)) * 2 - 1)
            counter += 1
        return vector[:self.dimension]

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self._embed_one(text) for text in texts]

    def get_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Local sentence-transformers model, loaded on first use.

    Requires the optional ``sentence-transformers`` dependency.
    """

    def __init__(self, model_name: str = "all-mpnet-base-v2"):
        self.model_name = model_name
        self._model = None

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise EmbeddingFailure(
                    "sentence-transformers not installed. Please install vector-storage[local]."
                ) from e
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        texts = list(texts)
        if not texts:
            return []
        try:
            embeddings = self.model.encode(texts, convert_to_tensor=False)
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(str(e)) from e
        return [[float(x) for x in embedding] for embedding in embeddings]

    def get_dimension(self) -> int:
        return int(self.model.get_sentence_embedding_dimension())
