"""
Observability module.

Provides logging configuration and safe structured logging helpers.
"""

from course_rag.observability.log_utils import (
    elapsed_ms,
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from course_rag.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "elapsed_ms",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
