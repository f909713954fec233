"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the retrieval pipeline
"""

from functools import lru_cache

from pydantic import Field

from course_rag.configs.base import BaseSettings
from course_rag.configs.chunking import ChunkingSettings
from course_rag.configs.database import DatabaseSettings
from course_rag.configs.embedding import EmbeddingSettings
from course_rag.configs.index_store import IndexStoreSettings
from course_rag.configs.resilience import ResilienceSettings
from course_rag.configs.search import SearchSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    resilience: ResilienceSettings = Field(default_factory=ResilienceSettings)
    index_store: IndexStoreSettings = Field(default_factory=IndexStoreSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; tests call
    ``get_settings.cache_clear()`` after changing them.

    Returns:
        Settings: Application settings instance

    Usage:
        from course_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
