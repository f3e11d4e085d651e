"""Sweeper configuration schema."""
from typing import List

from pydantic import BaseModel, Field, field_validator


class SweeperConfig(BaseModel):
    """Sweeper configuration."""

    regions: List[str] = Field(default_factory=list, description="Regions to sweep")
    throttling_retry_timeout: float = Field(
        600.0, description="Seconds to keep retrying a throttled delete"
    )
    max_workers: int = Field(10, description="Maximum concurrent deletes per sweeper")

    @field_validator("regions", mode="before")
    @classmethod
    def split_regions(cls, v):
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [region.strip() for region in v.split(",") if region.strip()]
        return v

    @field_validator("throttling_retry_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Throttling retry timeout must be non-negative")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Maximum workers must be at least 1")
        return v
