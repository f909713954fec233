"""
Logger configuration.

Configures stdlib logging once for the retrieval pipeline: a single stdout
handler with ISO timestamps, level taken from settings.

Dependencies: logging (stdlib), course_rag.configs
System role: Centralized logging configuration
"""

import logging
import sys

# Third-party loggers that flood INFO during embedding and database calls
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "google",
    "grpc",
    "asyncio",
    "sqlalchemy.engine",
)


def configure_logging(level: str | None = None) -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    Args:
        level: Root log level name. Defaults to the configured ``log_level``.
    """
    if level is None:
        from course_rag.configs import get_settings

        level = get_settings().log_level

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
