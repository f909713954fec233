"""
Retry and circuit breaker configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Resilience tuning for embedding provider calls
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from course_rag.configs.base import BaseSettings


class ResilienceSettings(BaseSettings):
    """Retry/backoff and circuit breaker configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_retries: int = Field(default=3, description="Retries after the first attempt", ge=0)
    initial_delay_ms: int = Field(default=1000, description="Delay before the first retry", ge=0)
    max_delay_ms: int = Field(default=10000, description="Cap on a single retry delay", ge=0)
    backoff_multiplier: float = Field(default=2.0, description="Exponential backoff base", ge=1.0)

    circuit_breaker_enabled: bool = Field(
        default=True,
        description="Short-circuit provider calls after repeated failures",
    )
    circuit_failure_threshold: int = Field(
        default=5,
        description="Consecutive failures before the circuit opens",
        ge=1,
    )
    circuit_reset_timeout_ms: int = Field(
        default=60000,
        description="Cool-down before a trial call is let through",
        ge=0,
    )
