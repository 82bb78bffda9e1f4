"""Cancellation and deadline scope for one unit of work."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from typing import Callable, TypeVar

from capella_cli.client.errors import ContextCancelledError, DeadlineExceededError

T = TypeVar("T")


class CallContext:
    """Carries a cancellation flag and an optional deadline.

    A context may be cancelled from any thread; :meth:`sleep` and
    :meth:`wait` wake up immediately when that happens.
    """

    def __init__(
        self,
        timeout: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._waiters: set[threading.Event] = set()
        self._clock = clock
        self.deadline = clock() + timeout if timeout is not None else None

    def cancel(self) -> None:
        with self._lock:
            self._cancelled.set()
            for waiter in self._waiters:
                waiter.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return self.deadline - self._clock()

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise if the context was cancelled or its deadline passed."""
        if self._cancelled.is_set():
            raise ContextCancelledError()
        if self.expired:
            raise DeadlineExceededError()

    def sleep(self, seconds: float) -> None:
        """Block for *seconds*, returning early with an error on cancellation.

        A sleep that would outlast the deadline fails straight away.
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and seconds > remaining:
            raise DeadlineExceededError()
        if self._cancelled.wait(max(seconds, 0.0)):
            raise ContextCancelledError()
        self.check()

    def wait(self, future: Future[T]) -> T:
        """Block until *future* finishes and return its result.

        Cancellation wins: the wait ends as soon as the context is cancelled
        or its deadline passes, even when the work behind *future* is still
        running.
        """
        wake = threading.Event()
        with self._lock:
            if self._cancelled.is_set():
                future.cancel()
                raise ContextCancelledError()
            self._waiters.add(wake)
        future.add_done_callback(lambda _: wake.set())
        remaining = self.remaining()
        try:
            done = wake.wait(max(remaining, 0.0) if remaining is not None else None)
        finally:
            with self._lock:
                self._waiters.discard(wake)
        if self._cancelled.is_set():
            future.cancel()
            raise ContextCancelledError()
        if not done:
            raise DeadlineExceededError()
        return future.result()
