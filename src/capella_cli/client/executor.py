"""Retrying HTTP executor for the Capella V4 API.

The executor owns one pooled ``httpx.Client`` and is safe to share between
threads. Requests run on a worker thread so that the caller can abandon one
that is still in flight when its context is cancelled. It never logs: every
terminal failure is raised to the caller.
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ConfigDict

from capella_cli import __version__
from capella_cli.client.auth import resolve_auth
from capella_cli.client.classify import classify_error
from capella_cli.client.context import CallContext
from capella_cli.client.errors import (
    CapellaError,
    DeadlineExceededError,
    TransportError,
)
from capella_cli.client.retry import RetryPolicy
from capella_cli.config.constants import DEFAULT_TIMEOUT


class EndpointCfg(BaseModel):
    """One logical request: target URL, method and the status that means success."""

    model_config = ConfigDict(frozen=True)

    url: str
    method: str = "GET"
    success_status: int = 200

    def with_query(self, **params: Any) -> EndpointCfg:
        """Return a copy whose URL carries *params* (None values are skipped)."""
        merged = {k: v for k, v in params.items() if v is not None}
        url = httpx.URL(self.url).copy_merge_params(merged)
        return self.model_copy(update={"url": str(url)})


@dataclass(frozen=True)
class ExecutionOutcome:
    """A successful response."""

    body: bytes
    status_code: int
    headers: httpx.Headers
    attempts: int = 1


@dataclass(frozen=True)
class _Failure:
    error: CapellaError
    retryable: bool
    cause: Exception


Sleeper = Callable[[CallContext, float], None]


def _context_sleep(ctx: CallContext, seconds: float) -> None:
    ctx.sleep(seconds)


def _serialize(body: Any) -> Any:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(body, Mapping):
        return dict(body)
    return body


class RetryingExecutor:
    """Sends authenticated requests and retries transient failures."""

    def __init__(
        self,
        *,
        policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: httpx.BaseTransport | None = None,
        sleep: Sleeper | None = None,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self._sleep = sleep or _context_sleep
        self._rand = rand
        self._client = httpx.Client(
            verify=verify_ssl,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "User-Agent": f"capella-cli/{__version__}",
            },
        )
        self._workers = ThreadPoolExecutor(thread_name_prefix="capella-http")

    def close(self) -> None:
        self._workers.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    def __enter__(self) -> RetryingExecutor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _request_timeout(self, ctx: CallContext) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        if remaining <= 0:
            raise DeadlineExceededError()
        return min(self.timeout, remaining)

    def _send(
        self,
        ctx: CallContext,
        cfg: EndpointCfg,
        payload: Any,
        auth: httpx.Auth | None,
        policy: RetryPolicy,
    ) -> httpx.Response | _Failure:
        """Perform one attempt."""
        future = self._workers.submit(
            self._client.request,
            cfg.method,
            cfg.url,
            json=payload,
            auth=auth,
            timeout=self._request_timeout(ctx),
        )
        try:
            return ctx.wait(future)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            return _Failure(TransportError(f"Invalid URL {cfg.url}: {exc}"), False, exc)
        except (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout) as exc:
            # Never reached the server: safe to repeat for any method.
            ctx.check()
            return _Failure(TransportError(f"Cannot connect to {cfg.url}: {exc}"), True, exc)
        except httpx.TimeoutException as exc:
            ctx.check()
            return _Failure(
                TransportError(f"Request to {cfg.url} timed out: {exc}"),
                policy.allows_retry(cfg.method),
                exc,
            )
        except httpx.TransportError as exc:
            ctx.check()
            return _Failure(
                TransportError(f"Request to {cfg.url} failed: {exc}"),
                policy.allows_retry(cfg.method),
                exc,
            )

    def execute(
        self,
        ctx: CallContext,
        cfg: EndpointCfg,
        body: Any = None,
        token: str | None = None,
        policy: RetryPolicy | None = None,
    ) -> ExecutionOutcome:
        """Send *cfg* until it succeeds, fails permanently or runs out of attempts."""
        policy = policy or self.policy
        payload = _serialize(body)
        auth = resolve_auth(token)
        attempt = 0
        while True:
            attempt += 1
            ctx.check()
            result = self._send(ctx, cfg, payload, auth, policy)
            retry_after: float | None = None
            if isinstance(result, _Failure):
                if not result.retryable or attempt >= policy.max_attempts:
                    raise result.error from result.cause
            elif result.status_code == cfg.success_status:
                return ExecutionOutcome(
                    body=result.content,
                    status_code=result.status_code,
                    headers=result.headers,
                    attempts=attempt,
                )
            else:
                error = classify_error(result.status_code, result.content, result.headers)
                retryable = (
                    error.retryable
                    and error.status_code in policy.retryable_statuses
                    and (error.status_code == 429 or policy.allows_retry(cfg.method))
                )
                if not retryable or attempt >= policy.max_attempts:
                    raise error
                retry_after = error.retry_after
            self._sleep(ctx, policy.backoff(attempt, retry_after, rand=self._rand))
