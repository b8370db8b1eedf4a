"""
Persistence backends. Each exposes load-all and an atomic replace-all snapshot.
"""

from abc import ABC, abstractmethod
import copy
import json
import sqlite3
from typing import List, Sequence

from ..core.db import get_db, health_check, init_db
from ..core.errors import PersistenceFailure
from .types import Document


class IPersistenceBackend(ABC):
    """Abstract interface for document snapshot storage."""

    @abstractmethod
    def load_all(self) -> List[Document]:
        """Load every stored document.

        Raises:
            PersistenceFailure: if the snapshot cannot be read.
        """
        pass

    @abstractmethod
    def replace_all(self, documents: Sequence[Document]) -> None:
        """Atomically replace the stored snapshot with documents.

        Raises:
            PersistenceFailure: if the snapshot cannot be written. The previous
                snapshot stays in place.
        """
        pass


class InMemoryBackend(IPersistenceBackend):
    """Process-local snapshot. Useful as a default and in tests."""

    def __init__(self, documents: Sequence[Document] = None):
        self._documents = copy.deepcopy(list(documents or []))

    def load_all(self) -> List[Document]:
        return copy.deepcopy(self._documents)

    def replace_all(self, documents: Sequence[Document]) -> None:
        self._documents = copy.deepcopy(list(documents))


class SQLiteBackend(IPersistenceBackend):
    """SQLite file snapshot, one row per document."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._initialized = False

    def _ensure_schema(self):
        if not self._initialized:
            if not health_check(self.db_path):
                init_db(self.db_path)
            self._initialized = True

    def load_all(self) -> List[Document]:
        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT text, metadata, timestamp, hits, vector, vector_mag FROM documents ORDER BY id"
                )
                rows = cursor.fetchall()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceFailure(f"Failed to load documents from {self.db_path}: {e}") from e

        documents = []
        for text, metadata, timestamp, hits, vector, vector_mag in rows:
            try:
                documents.append(Document.from_dict({
                    "text": text,
                    "metadata": json.loads(metadata) if metadata is not None else None,
                    "timestamp": timestamp,
                    "hits": hits,
                    "vector": json.loads(vector) if vector is not None else None,
                    "vectorMag": vector_mag,
                }))
            except (ValueError, TypeError) as e:
                raise PersistenceFailure(f"Corrupt document row for text '{text[:50]}': {e}") from e
        return documents

    def replace_all(self, documents: Sequence[Document]) -> None:
        try:
            rows = [
                (
                    doc.text,
                    json.dumps(doc.metadata, default=str),
                    doc.timestamp,
                    doc.hits,
                    json.dumps(doc.vector) if doc.has_vector else None,
                    doc.vector_mag if doc.has_vector else None,
                )
                for doc in documents
            ]
        except (TypeError, ValueError) as e:
            raise PersistenceFailure(f"Failed to serialize documents: {e}") from e

        try:
            self._ensure_schema()
            with get_db(self.db_path) as conn:
                try:
                    cursor = conn.cursor()
                    cursor.execute("DELETE FROM documents")
                    cursor.executemany(
                        "INSERT INTO documents (text, metadata, timestamp, hits, vector, vector_mag) "
                        "VALUES (?, ?, ?, ?, ?, ?)",
                        rows
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except (sqlite3.Error, OSError) as e:
            raise PersistenceFailure(f"Failed to save documents to {self.db_path}: {e}") from e
