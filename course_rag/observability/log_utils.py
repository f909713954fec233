"""
Helpers for structured log records that never carry payloads.

Chunk texts, embedding vectors and uploaded bytes are reduced to their shape
before they reach a handler.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
import time
from typing import Any, Mapping


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log field.

    bytes → ``bytes(<len>)``, list/tuple → ``<type>(<n> items)``,
    dict → ``dict(<n> keys)``; anything else goes through ``str`` and is cut
    at ``max_length`` characters.
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return f"bytes({len(value)})"
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    try:
        rendered = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(rendered) <= max_length:
        return rendered
    return f"{rendered[:max_length]}... (truncated, {len(rendered)} total)"


def _safe_extra(context: Mapping[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def elapsed_ms(start: float) -> float:
    """Milliseconds since a ``time.perf_counter()`` reading, rounded to 0.01."""
    return round((time.perf_counter() - start) * 1000, 2)


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """Emit ``message`` at ``level`` with every context value passed through safe_log_value."""
    logger.log(level, message, extra=_safe_extra(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log a failure at ERROR with its traceback.

    The record gets ``error_type`` and ``error_msg`` fields next to the
    caller's context, so failed ingestions can be filtered by error class.
    """
    extra = _safe_extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
