"""Wait for a provisioned instance to reach a terminal state.

The poller turns the catalog's asynchronous provisioning into a synchronous
result. It sleeps, queries, and repeats until the instance is ready or
failed, the deadline passes, or the caller cancels. Whatever happens, the
outcome carries the last snapshot that was successfully fetched.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .errors import (
    ConfigError,
    PollCancelledError,
    PollError,
    PollQueryFailedError,
    PollTimedOutError,
    SvcatError,
)
from .logger import get_logger
from .models import ServiceInstance

logger = get_logger(__name__)

FetchInstance = Callable[[str, str], ServiceInstance]


class CancellationToken:
    """Flag used to ask a running wait to stop.

    Safe to cancel from another thread or from a signal handler; a pending
    ``wait`` returns as soon as the token is cancelled.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if cancelled meanwhile."""
        return self._event.wait(seconds)


class PollStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PollOutcome:
    status: PollStatus
    instance: ServiceInstance | None
    error: PollError | None = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is PollStatus.SUCCEEDED


class CompletionPoller:
    """Bounded, cancellable sleep-then-query loop over ``fetch``.

    Queries are always ``interval`` apart. The deadline is checked after each
    query returns, so a wait ends at most one interval plus one query
    duration past ``timeout``; the query duration is capped by the client
    request timeout.
    """

    def __init__(
        self,
        fetch: FetchInstance,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._clock = clock

    def wait(
        self,
        namespace: str,
        name: str,
        interval: float,
        timeout: float | None,
        token: CancellationToken | None = None,
    ) -> PollOutcome:
        if interval <= 0:
            raise ConfigError("poll interval must be positive")
        if timeout is not None and (timeout <= 0 or interval > timeout):
            raise ConfigError("poll timeout must be positive and not shorter than the interval")

        token = token or CancellationToken()
        deadline = None if timeout is None else self._clock() + timeout
        last: ServiceInstance | None = None
        attempts = 0

        while True:
            try:
                if token.wait(interval):
                    return self._cancelled(namespace, name, last, attempts)
            except KeyboardInterrupt:
                token.cancel()
                return self._cancelled(namespace, name, last, attempts)

            attempts += 1
            try:
                instance = self._fetch(namespace, name)
            except KeyboardInterrupt:
                token.cancel()
                return self._cancelled(namespace, name, last, attempts)
            except SvcatError as exc:
                if self._expired(deadline):
                    logger.error(
                        "Status query for %s/%s failed at the deadline: %s",
                        namespace,
                        name,
                        exc,
                    )
                    error = PollQueryFailedError(
                        f"failed to get status of instance {namespace}/{name}: {exc}",
                        status_code=exc.status_code,
                    )
                    error.__cause__ = exc
                    return PollOutcome(PollStatus.FAILED, last, error, attempts)
                logger.warning(
                    "Status query for %s/%s failed, retrying: %s", namespace, name, exc
                )
                continue

            last = instance
            if instance.is_terminal:
                logger.debug(
                    "Instance %s/%s is terminal after %d queries", namespace, name, attempts
                )
                return PollOutcome(PollStatus.SUCCEEDED, instance, None, attempts)

            if token.cancelled:
                return self._cancelled(namespace, name, last, attempts)

            if self._expired(deadline):
                error = PollTimedOutError(
                    f"timed out waiting for instance {namespace}/{name} "
                    f"to be provisioned after {timeout:g}s"
                )
                return PollOutcome(PollStatus.TIMED_OUT, last, error, attempts)

            logger.debug("Instance %s/%s not ready yet", namespace, name)

    def _expired(self, deadline: float | None) -> bool:
        return deadline is not None and self._clock() >= deadline

    def _cancelled(
        self,
        namespace: str,
        name: str,
        last: ServiceInstance | None,
        attempts: int,
    ) -> PollOutcome:
        logger.info("Wait for %s/%s cancelled", namespace, name)
        error = PollCancelledError(f"cancelled waiting for instance {namespace}/{name}")
        return PollOutcome(PollStatus.CANCELLED, last, error, attempts)
