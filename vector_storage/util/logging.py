"""Structured logging utility for vector storage operations."""

import logging
from typing import Any, Dict, Optional


def _truncate(value: Any, limit: int = 50) -> Any:
    if isinstance(value, str) and len(value) > limit:
        return value[:limit] + "..."
    return value


class StructuredLogger:
    """Structured logger with consistent formatting."""

    def __init__(self, name: str = "vector_storage", level: int = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str = "success",
                      details: Optional[Dict[str, Any]] = None):
        """Log structured operation with status."""
        message_parts = [f"operation={operation}", f"status={status}"]

        if details:
            detail_str = " ".join([f"{k}={_truncate(v)}" for k, v in details.items()])
            message_parts.append(detail_str)

        message = " | ".join(message_parts)

        if status == "success":
            self.logger.info(message)
        elif status == "error":
            self.logger.error(message)
        else:
            self.logger.warning(message)

    def log_vector_operation(self, operation: str, status: str = "success",
                             details: Optional[Dict[str, Any]] = None):
        """Log an insert/query against the document store."""
        self.log_operation(f"vector.{operation}", status, details)

    def log_eviction(self, evicted_count: int, remaining_count: int, size_in_mb: float,
                     max_size_in_mb: float):
        """Log an eviction pass that removed documents."""
        details = {
            "evicted": evicted_count,
            "remaining": remaining_count,
            "size_mb": f"{size_in_mb:.4f}",
            "budget_mb": max_size_in_mb,
        }
        self.log_operation("vector.evict", "success", details)

    def log_persistence(self, operation: str, document_count: int, status: str = "success",
                        error: Optional[BaseException] = None):
        """Log a snapshot load or write."""
        details = {"documents": document_count}
        if error is not None:
            details["error"] = _truncate(str(error), 100)
        self.log_operation(f"persistence.{operation}", status, details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def get_logger(name: str, level: int = logging.INFO) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, level)
