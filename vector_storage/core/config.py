"""
Runtime configuration for vector storage.
Defaults come from environment variables; explicit constructor options always win.
"""

import os
from pathlib import Path

# Eviction budget (MB of serialized documents)
MAX_SIZE_IN_MB = float(os.getenv("VECTOR_STORAGE_MAX_SIZE_MB", "2048"))

# Embedding provider configuration
EMBED_MODEL_NAME = os.getenv("VECTOR_STORAGE_EMBED_MODEL", "text-embedding-ada-002")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/embeddings")
REQUEST_TIMEOUT_SEC = float(os.getenv("VECTOR_STORAGE_REQUEST_TIMEOUT_SEC", "30"))

# Persistence configuration
PERSISTENCE_BACKEND = os.getenv("VECTOR_STORAGE_BACKEND", "memory")  # memory|sqlite
DB_PATH = os.getenv("VECTOR_STORAGE_DB_PATH", "./data/vector_storage.db")

VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def get_persistence_backend(db_path: str = None):
    """Get the configured persistence backend implementation."""
    provider = os.getenv("VECTOR_STORAGE_BACKEND", PERSISTENCE_BACKEND)

    if provider == "sqlite":
        from ..vector.backends import SQLiteBackend
        return SQLiteBackend(db_path or os.getenv("VECTOR_STORAGE_DB_PATH", DB_PATH))

    # Default to memory backend for unknown providers
    from ..vector.backends import InMemoryBackend
    return InMemoryBackend()


def validate_storage_config():
    """Validate environment configuration and return any issues."""
    issues = []

    if MAX_SIZE_IN_MB < 0:
        issues.append("VECTOR_STORAGE_MAX_SIZE_MB must be >= 0")

    if PERSISTENCE_BACKEND not in ["memory", "sqlite"]:
        issues.append(f"Invalid VECTOR_STORAGE_BACKEND: {PERSISTENCE_BACKEND}")

    if REQUEST_TIMEOUT_SEC <= 0:
        issues.append("VECTOR_STORAGE_REQUEST_TIMEOUT_SEC must be > 0")

    if not EMBED_MODEL_NAME.strip():
        issues.append("VECTOR_STORAGE_EMBED_MODEL cannot be empty")

    return issues
