"""Shared plumbing for reconciliation call sites.

Every resource type implements create, read, update, delete and import_state
and reports through an :class:`OperationResult`. ``NotFound`` is handled the
same way everywhere: Read removes the resource from tracked state, Delete
treats it as already done.
"""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from capella_cli.client.context import CallContext
from capella_cli.client.errors import (
    ERR_UNMARSHALLING_RESPONSE,
    CapellaError,
    DecodeError,
    RequestExecutionError,
)
from capella_cli.client.executor import EndpointCfg, ExecutionOutcome, RetryingExecutor
from capella_cli.config.models import CapellaProfile

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)
M = TypeVar("M", bound=BaseModel)


class Severity(str, enum.Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str


class Diagnostics(list[Diagnostic]):
    """Warnings and errors collected while running one operation."""

    def add_error(self, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    @property
    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self)


@dataclass
class OperationResult(Generic[S]):
    """Outcome of a lifecycle operation.

    ``state`` is the new tracked state; ``removed`` means the resource must be
    dropped from tracked state.
    """

    state: S | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error

    def remove(self) -> OperationResult[S]:
        logger.info("resource doesn't exist in remote server, removing it from state")
        self.state = None
        self.removed = True
        return self

    def error(self, summary: str, detail: str) -> OperationResult[S]:
        self.diagnostics.add_error(summary, detail)
        return self


@dataclass
class Connection:
    """Executor, API host and credential shared by every resource."""

    executor: RetryingExecutor
    host_url: str
    token: str | None

    @classmethod
    def from_profile(cls, profile: CapellaProfile) -> Connection:
        executor = RetryingExecutor(
            policy=profile.retry_policy(),
            timeout=profile.timeout,
            verify_ssl=profile.verify_ssl,
        )
        return cls(executor=executor, host_url=profile.host_url, token=profile.token)

    def close(self) -> None:
        self.executor.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def decode(outcome: ExecutionOutcome, model: type[M]) -> M:
    """Decode a response body into *model*, raising DecodeError on failure."""
    try:
        return model.model_validate_json(outcome.body)
    except ValueError as exc:
        raise DecodeError(f"{ERR_UNMARSHALLING_RESPONSE}: {exc}") from exc


class CapellaResource(abc.ABC, Generic[S]):
    """Base class for resource call sites."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def url(self, path: str) -> str:
        return f"{self.conn.host_url}/v4/{path.lstrip('/')}"

    def execute(
        self,
        ctx: CallContext,
        path: str,
        method: str,
        success_status: int,
        body: Any = None,
    ) -> ExecutionOutcome:
        cfg = EndpointCfg(url=self.url(path), method=method, success_status=success_status)
        try:
            return self.conn.executor.execute(ctx, cfg, body, self.conn.token)
        except CapellaError as exc:
            raise RequestExecutionError(exc) from exc

    @abc.abstractmethod
    def create(self, ctx: CallContext, plan: S) -> OperationResult[S]: ...

    @abc.abstractmethod
    def read(self, ctx: CallContext, state: S) -> OperationResult[S]: ...

    @abc.abstractmethod
    def update(self, ctx: CallContext, plan: S, state: S) -> OperationResult[S]: ...

    @abc.abstractmethod
    def delete(self, ctx: CallContext, state: S) -> OperationResult[S]: ...

    @abc.abstractmethod
    def import_state(self, ctx: CallContext, import_id: str) -> OperationResult[S]: ...
