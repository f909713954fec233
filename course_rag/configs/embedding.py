"""
Embedding configuration settings.

Gemini embedding model, vector dimension, batching and cache sizing.
The OCR model used for image extraction lives here as well since it shares
the Google credentials.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider and client configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from course_rag.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding provider and client configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str = Field(default="", description="Google AI API key")
    model: str = Field(
        default="models/text-embedding-004",
        description="Google embedding model ID (text-embedding-004 supports 768 dims)",
    )
    dimension: int = Field(default=768, description="Fixed embedding vector dimension", gt=0)

    batch_size: int = Field(default=5, description="Texts embedded concurrently per sub-batch", gt=0)
    batch_delay_ms: int = Field(
        default=500,
        description="Pause between sub-batches in milliseconds",
        ge=0,
    )
    cache_max_size: int = Field(default=1000, description="Maximum cached query embeddings", gt=0)

    ocr_model: str = Field(
        default="gemini-2.5-flash",
        description="Multimodal Gemini model used for image text extraction",
    )
