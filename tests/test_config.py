"""
Tests for environment-driven configuration helpers.
"""

from vector_storage.core import config
from vector_storage.vector.backends import InMemoryBackend, SQLiteBackend


def test_default_config_is_valid():
    assert config.validate_storage_config() == []


def test_invalid_values_reported(monkeypatch):
    monkeypatch.setattr(config, "MAX_SIZE_IN_MB", -5)
    monkeypatch.setattr(config, "PERSISTENCE_BACKEND", "redis")
    monkeypatch.setattr(config, "REQUEST_TIMEOUT_SEC", 0)

    issues = config.validate_storage_config()

    assert len(issues) == 3
    assert any("VECTOR_STORAGE_BACKEND" in issue for issue in issues)


def test_memory_backend_by_default(monkeypatch):
    monkeypatch.delenv("VECTOR_STORAGE_BACKEND", raising=False)
    monkeypatch.setattr(config, "PERSISTENCE_BACKEND", "memory")

    assert isinstance(config.get_persistence_backend(), InMemoryBackend)


def test_unknown_backend_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("VECTOR_STORAGE_BACKEND", "redis")

    assert isinstance(config.get_persistence_backend(), InMemoryBackend)


def test_sqlite_backend_uses_db_path(monkeypatch, tmp_path):
    monkeypatch.setenv("VECTOR_STORAGE_BACKEND", "sqlite")
    db_path = str(tmp_path / "nested" / "store.db")

    backend = config.get_persistence_backend(db_path)

    assert isinstance(backend, SQLiteBackend)
    assert backend.db_path == db_path


def test_debug_flag(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    assert config.debug_enabled()

    monkeypatch.setenv("DEBUG", "false")
    assert not config.debug_enabled()
