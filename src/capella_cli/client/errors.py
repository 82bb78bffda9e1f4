"""Typed exceptions, error-chain helpers and the CLI error handling decorator."""

from __future__ import annotations

import enum
import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])
E = TypeVar("E", bound=BaseException)

err_console = Console(stderr=True)

# Stable prefixes identifying the phase that failed.
ERR_EXECUTING_REQUEST = "failed to execute request"
ERR_UNMARSHALLING_RESPONSE = "failed to unmarshal response"
ERR_INVALID_IMPORT = "invalid import id"


class ErrorKind(str, enum.Enum):
    """Classification of a failed request."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    FATAL = "fatal"


class CapellaError(Exception):
    """Base exception for capella-cli."""

    exit_code: int = 1


class TransportError(CapellaError):
    """The request never produced an HTTP response (connection reset, timeout...)."""

    exit_code = 2
    kind = ErrorKind.TRANSIENT


class APIError(CapellaError):
    """A response from the Capella API with an unexpected status code."""

    kind: ErrorKind = ErrorKind.FATAL

    def __init__(
        self,
        status_code: int,
        message: str = "",
        *,
        code: int | None = None,
        hint: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        self.hint = hint
        self.retry_after = retry_after
        super().__init__(f"Capella returned {status_code}: {message}")

    @property
    def retryable(self) -> bool:
        return self.kind in (ErrorKind.TRANSIENT, ErrorKind.RATE_LIMITED)


class NotFoundError(APIError):
    """Resource not found (404)."""

    kind = ErrorKind.NOT_FOUND
    exit_code = 4


class ConflictError(APIError):
    """Resource conflict (409)."""

    kind = ErrorKind.CONFLICT
    exit_code = 5


class RateLimitedError(APIError):
    """Too many requests (429)."""

    kind = ErrorKind.RATE_LIMITED
    exit_code = 8


class TransientError(APIError):
    """Server-side failure (5xx) that may succeed on a later attempt."""

    kind = ErrorKind.TRANSIENT
    exit_code = 9


class FatalError(APIError):
    """Malformed request, validation failure or any other non-retryable status."""

    kind = ErrorKind.FATAL
    exit_code = 10


class AuthenticationError(FatalError):
    """Authentication failed (401/403)."""

    exit_code = 3


class DecodeError(CapellaError):
    """A response body could not be decoded."""

    exit_code = 11


class ContextCancelledError(CapellaError):
    """The caller cancelled the operation."""

    exit_code = 12

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceededError(ContextCancelledError):
    """The operation's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class RequestExecutionError(CapellaError):
    """Wraps a failure raised while executing a request.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        self.exit_code = getattr(cause, "exit_code", 1)
        super().__init__(f"{ERR_EXECUTING_REQUEST}: {cause}")


class PaginationError(CapellaError):
    """The server returned an inconsistent page sequence."""

    exit_code = 13


class ConfigurationError(CapellaError):
    """Missing or invalid configuration (no token, bad profile...)."""

    exit_code = 6


class ValidationError(CapellaError):
    """A plan failed client-side validation."""

    exit_code = 7

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"Validation error: {detail}" if detail else "Validation error")


class InvalidImportError(ValidationError):
    """A composite import identifier is missing a required key."""

    def __init__(self, detail: str) -> None:
        CapellaError.__init__(self, f"{ERR_INVALID_IMPORT}: {detail}")


def find_error(exc: BaseException | None, cls: type[E]) -> E | None:
    """Walk the ``__cause__``/``__context__`` chain of *exc* and return the first instance of *cls*."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, cls):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ if exc.__cause__ is not None else exc.__context__
    return None


def parse_error(exc: BaseException) -> str:
    """Render *exc* for an operator, keeping the server's own message verbatim."""
    api_error = find_error(exc, APIError)
    if api_error is None:
        return str(exc)
    parts = [f"{api_error.kind.value} (HTTP {api_error.status_code})"]
    if api_error.code is not None:
        parts.append(f"code {api_error.code}")
    text = ", ".join(parts)
    if api_error.message:
        text += f": {api_error.message}"
    if api_error.hint:
        text += f" (hint: {api_error.hint})"
    return text


def check_not_found(exc: BaseException) -> tuple[bool, str]:
    """Return whether *exc* wraps a 404, and its operator-facing message."""
    if find_error(exc, NotFoundError) is not None:
        return True, ""
    return False, parse_error(exc)


def error_handler(func: F) -> F:
    """Decorator that catches CapellaError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CapellaError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}", soft_wrap=True)
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}", soft_wrap=True)
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
