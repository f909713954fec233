"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from course_rag.configs.chunking import ChunkingSettings
from course_rag.configs.database import DatabaseSettings
from course_rag.configs.embedding import EmbeddingSettings
from course_rag.configs.index_store import IndexStoreSettings
from course_rag.configs.resilience import ResilienceSettings
from course_rag.configs.search import SearchSettings
from course_rag.configs.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "ChunkingSettings",
    "DatabaseSettings",
    "EmbeddingSettings",
    "IndexStoreSettings",
    "ResilienceSettings",
    "SearchSettings",
]
