"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from capella_cli.client.retry import RetryPolicy
from capella_cli.config.constants import (
    DEFAULT_BASE_DELAY,
    DEFAULT_HOST,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_TIMEOUT,
)


class CapellaProfile(BaseModel):
    """A named Capella API connection profile."""

    name: str
    host_url: str = Field(
        default=DEFAULT_HOST, description="API base URL, e.g. https://cloudapi.cloud.couchbase.com",
    )
    token: str | None = Field(default=None, description="API key token (Bearer)")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1, le=20)
    base_delay: float = Field(default=DEFAULT_BASE_DELAY, ge=0)
    max_delay: float = Field(default=DEFAULT_MAX_DELAY, ge=0)

    @field_validator("host_url")
    @classmethod
    def validate_host_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth_configured(self) -> bool:
        return bool(self.token)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=max(self.max_delay, self.base_delay),
        )


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    default_format: str = "table"
    profiles: dict[str, CapellaProfile] = Field(default_factory=dict)
