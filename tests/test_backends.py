"""
Tests for snapshot persistence backends.
"""

import pytest
from unittest.mock import patch

from vector_storage.core.db import health_check
from vector_storage.core.errors import PersistenceFailure
from vector_storage.vector.backends import InMemoryBackend, SQLiteBackend
from vector_storage.vector.types import Document


@pytest.fixture
def sample_documents():
    return [
        Document(text="alpha", metadata={"source": "wiki", "tags": ["a", "b"]},
                 timestamp=1700000000000, hits=2, vector=[1.0, 0.0], vector_mag=1.0),
        Document(text="beta", metadata={"source": "news"},
                 timestamp=1700000000500, hits=0, vector=[3.0, 4.0], vector_mag=5.0),
    ]


class TestInMemoryBackend:

    def test_starts_empty(self):
        assert InMemoryBackend().load_all() == []

    def test_snapshot_is_copied(self, sample_documents):
        backend = InMemoryBackend()
        backend.replace_all(sample_documents)

        sample_documents[0].hits = 99
        loaded = backend.load_all()

        assert loaded[0].hits == 2
        loaded[0].hits = 50
        assert backend.load_all()[0].hits == 2

    def test_replace_discards_previous_snapshot(self, sample_documents):
        backend = InMemoryBackend(sample_documents)
        backend.replace_all(sample_documents[1:])

        assert [doc.text for doc in backend.load_all()] == ["beta"]


class TestSQLiteBackend:

    def test_round_trip(self, tmp_path, sample_documents):
        db_path = str(tmp_path / "vectors.db")
        SQLiteBackend(db_path).replace_all(sample_documents)

        loaded = SQLiteBackend(db_path).load_all()

        assert loaded == sample_documents
        assert health_check(db_path)

    def test_empty_database_loads_nothing(self, tmp_path):
        assert SQLiteBackend(str(tmp_path / "empty.db")).load_all() == []

    def test_existing_schema_is_not_recreated(self, tmp_path, sample_documents):
        db_path = str(tmp_path / "vectors.db")
        SQLiteBackend(db_path).replace_all(sample_documents)

        with patch("vector_storage.vector.backends.init_db") as init_db:
            loaded = SQLiteBackend(db_path).load_all()

        init_db.assert_not_called()
        assert loaded == sample_documents

    def test_missing_directory_is_created(self, tmp_path):
        db_path = str(tmp_path / "nested" / "vectors.db")

        assert SQLiteBackend(db_path).load_all() == []
        assert health_check(db_path)

    def test_replace_all_overwrites(self, tmp_path, sample_documents):
        backend = SQLiteBackend(str(tmp_path / "vectors.db"))
        backend.replace_all(sample_documents)
        backend.replace_all(sample_documents[:1])

        assert [doc.text for doc in backend.load_all()] == ["alpha"]

    def test_document_without_vector(self, tmp_path):
        backend = SQLiteBackend(str(tmp_path / "vectors.db"))
        backend.replace_all([Document(text="bare", metadata=None, timestamp=1)])

        loaded = backend.load_all()[0]

        assert loaded.vector is None
        assert loaded.vector_mag is None
        assert loaded.metadata is None

    def test_failed_write_keeps_previous_snapshot(self, tmp_path, sample_documents):
        """Duplicate texts violate the unique index; the transaction rolls back."""
        backend = SQLiteBackend(str(tmp_path / "vectors.db"))
        backend.replace_all(sample_documents)

        with pytest.raises(PersistenceFailure):
            backend.replace_all([sample_documents[0], sample_documents[0]])

        assert [doc.text for doc in backend.load_all()] == ["alpha", "beta"]

    def test_unopenable_path_raises_persistence_failure(self, tmp_path):
        backend = SQLiteBackend(str(tmp_path))

        with pytest.raises(PersistenceFailure):
            backend.load_all()
        with pytest.raises(PersistenceFailure):
            backend.replace_all([])
