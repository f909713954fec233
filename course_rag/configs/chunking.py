"""
Chunking configuration settings.

Word-based bounds for the paragraph-aware chunker.

Dependencies: pydantic, pydantic_settings
System role: Chunk sizing configuration for the ingestion pipeline
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from course_rag.configs.base import BaseSettings


class ChunkingSettings(BaseSettings):
    """Chunk size and overlap, measured in words."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNKING_",
        case_sensitive=False,
        extra="ignore",
    )

    target_words: int = Field(default=300, description="Target words per chunk", gt=0)
    overlap_words: int = Field(
        default=150,
        description="Words carried over from the previous chunk",
        ge=0,
    )
    max_chunk_words: int = Field(
        default=500,
        description="Upper bound for a single chunk before overlap is added",
        gt=0,
    )
    min_chunk_words: int = Field(
        default=50,
        description="Smallest piece kept on its own when an oversized paragraph is split",
        ge=1,
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "ChunkingSettings":
        """Reject combinations that would loop forever or produce empty chunks."""
        if self.overlap_words >= self.target_words:
            raise ValueError("overlap_words must be less than target_words")
        if self.max_chunk_words < self.target_words:
            raise ValueError("max_chunk_words must be at least target_words")
        return self
