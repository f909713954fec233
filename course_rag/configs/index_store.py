"""
Index store configuration settings.

Selects the chunk index backend: pgvector (PostgreSQL) or an in-process
store for local development and tests.

Dependencies: pydantic, pydantic_settings
System role: Index store selection
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from course_rag.configs.base import BaseSettings


class IndexStoreSettings(BaseSettings):
    """Chunk index backend configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INDEX_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    type: Literal["pgvector", "memory"] = Field(
        default="pgvector",
        description="Index store type: 'pgvector' for production, 'memory' for local dev",
    )
