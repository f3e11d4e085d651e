"""AWS provider configuration schema."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class IgnoreTagsSettings(BaseModel):
    """Tag keys and prefixes managed outside the provider."""

    keys: List[str] = Field(default_factory=list, description="Exact tag keys to ignore")
    key_prefixes: List[str] = Field(default_factory=list, description="Tag key prefixes to ignore")


class DefaultTagsSettings(BaseModel):
    """Tags applied to every taggable resource unless the user overrides them."""

    tags: Dict[str, str] = Field(default_factory=dict, description="Default tags")


class ProviderSettings(BaseModel):
    """AWS provider settings."""

    region: str = Field("us-east-1", description="AWS region")
    profile: Optional[str] = Field(None, description="AWS shared credentials profile")
    max_retries: int = Field(25, description="Maximum SDK retry attempts")
    connect_timeout: int = Field(10, description="Connection timeout in seconds")
    read_timeout: int = Field(60, description="Read timeout in seconds")
    endpoints: Dict[str, str] = Field(default_factory=dict, description="Custom endpoint URL per service")
    default_tags: DefaultTagsSettings = Field(default_factory=DefaultTagsSettings)
    ignore_tags: IgnoreTagsSettings = Field(default_factory=IgnoreTagsSettings)
    skip_credentials_validation: bool = Field(False, description="Skip STS credential validation")
    skip_requesting_account_id: bool = Field(False, description="Skip account ID lookup")

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Maximum retries must be non-negative")
        return v

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeouts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Timeouts must be at least 1 second")
        return v

    @model_validator(mode="after")
    def validate_account_id_lookup(self) -> "ProviderSettings":
        """Account ID lookup goes through STS, which credential validation also needs."""
        if self.skip_credentials_validation and not self.skip_requesting_account_id:
            object.__setattr__(self, "skip_requesting_account_id", True)
        return self
