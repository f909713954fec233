"""
Search configuration settings.

Top-K limits and similarity floors for course material search.

Dependencies: pydantic, pydantic_settings
System role: Retrieval precision/recall tuning
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from course_rag.configs.base import BaseSettings


class SearchSettings(BaseSettings):
    """Vector search configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    default_top_k: int = Field(default=20, description="Chunks returned when top_k is omitted", ge=1)
    max_top_k: int = Field(default=100, description="Largest top_k accepted", ge=1)
    min_similarity: float = Field(
        default=0.5,
        description="Default similarity floor (0.0-1.0)",
        ge=0.0,
        le=1.0,
    )
    high_precision_similarity: float = Field(
        default=0.7,
        description="Similarity floor for high-precision searches (0.0-1.0)",
        ge=0.0,
        le=1.0,
    )
    similar_chunks_limit: int = Field(
        default=10,
        description="Default result count for 'more like this' lookups",
        ge=1,
    )

    @model_validator(mode="after")
    def check_top_k(self) -> "SearchSettings":
        """Ensure the default fits under the maximum."""
        if self.default_top_k > self.max_top_k:
            raise ValueError("default_top_k must not exceed max_top_k")
        return self
