"""Retry policy: attempt budget, backoff schedule and retryable statuses."""

from __future__ import annotations

import random
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from capella_cli.config.constants import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_BASE_DELAY,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})
DEFAULT_RETRYABLE_STATUSES = frozenset({429, *range(500, 600)})


class RetryPolicy(BaseModel):
    """Immutable retry configuration handed to the executor."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1, description="Total attempts, first one included")
    base_delay: float = Field(default=DEFAULT_BASE_DELAY, ge=0)
    multiplier: float = Field(default=DEFAULT_BACKOFF_MULTIPLIER, ge=1)
    max_delay: float = Field(default=DEFAULT_MAX_DELAY, ge=0)
    jitter: float = Field(default=DEFAULT_JITTER, ge=0, le=1, description="Extra random fraction added to each delay")
    retryable_statuses: frozenset[int] = DEFAULT_RETRYABLE_STATUSES
    retry_non_idempotent: bool = False

    @model_validator(mode="after")
    def _check_delays(self) -> RetryPolicy:
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must not be smaller than base_delay")
        return self

    @classmethod
    def no_retry(cls) -> RetryPolicy:
        return cls(max_attempts=1)

    def allows_retry(self, method: str) -> bool:
        """Whether a request that may have reached the server can be repeated."""
        return self.retry_non_idempotent or method.upper() in IDEMPOTENT_METHODS

    def backoff(
        self,
        attempt: int,
        retry_after: float | None = None,
        *,
        rand: Callable[[], float] = random.random,
    ) -> float:
        """Delay before the attempt following *attempt* (1-based).

        A server Retry-After hint is a lower bound and is never shortened.
        """
        if retry_after is not None:
            return retry_after + retry_after * self.jitter * rand()
        delay = min(self.base_delay * self.multiplier ** (attempt - 1), self.max_delay)
        return delay + delay * self.jitter * rand()
