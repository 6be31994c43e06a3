"""Async functions expressed as generators.

A generator function stands in for an ``async`` function: every ``yield``
is an await point. The rest of the generator after each yield is registered
as a ``then`` continuation on the awaited Future, so suspending never blocks
the loop.

    def worker(loop):
        value = yield await_tracked(loop.sleep(500, "done"))
        return value.upper()

    result = loop.spawn(worker, loop)
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import typing as t
from collections.abc import Callable, Generator

# Project/local
from event_loop.base import TaskScheduler
from event_loop.errors import FutureRejectedError, LoopStateError
from event_loop.future import Future
from event_loop.suspension import TrackedAwait
from logging_config import get_logger
from scheduler_types import Err, Ok, Result

logger = get_logger(__name__)

# =============================================================================
# 2. ASYNC FUNCTION RUNNER
# =============================================================================


class AsyncFunction:
    """Drives one generator from await point to await point.

    Attributes:
        future: Settles with the generator's return value or raised error.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        generator: Generator[t.Any, t.Any, t.Any],
        name: str,
    ) -> None:
        """Start the generator; it runs synchronously up to its first yield.

        Args:
            scheduler: Loop owning the Futures involved.
            generator: Generator object to drive.
            name: Label for the returned Future.
        """
        self._scheduler = scheduler
        self._generator = generator
        self._resolve: Callable[..., None] | None = None
        self._reject: Callable[..., None] | None = None
        self.future: Future[t.Any] = Future(scheduler, self._capture, name=name)
        self._step(Ok(None))

    def _capture(self, resolve: Callable[..., None], reject: Callable[..., None]) -> None:
        self._resolve = resolve
        self._reject = reject

    def _step(self, sent: Result) -> None:
        """Resume the generator with a value or an error."""
        if self._resolve is None or self._reject is None:
            raise LoopStateError(f"{self.future.name} resumed before its Future was created")
        thrown: BaseException | None = None
        try:
            if isinstance(sent, Ok):
                yielded = self._generator.send(sent.value)
            else:
                thrown = _as_exception(sent.error)
                yielded = self._generator.throw(thrown)
        except StopIteration as stop:
            self._resolve(stop.value)
            return
        except Exception as exc:
            # An uncaught wrapped reason leaves with the original reason.
            if exc is thrown and isinstance(exc, FutureRejectedError):
                self._reject(exc.reason)
            else:
                self._reject(exc)
            return
        self._suspend(yielded)

    def _suspend(self, yielded: t.Any) -> None:
        tracked = isinstance(yielded, TrackedAwait)
        awaited = yielded.future if tracked else yielded

        if not isinstance(awaited, Future):
            error = TypeError(f"{self.future.name} yielded {awaited!r}, expected a Future")
            self._step(Err(error))
            return

        suspensions = self._scheduler.suspensions
        if tracked:
            suspensions.enter()
            logger.debug(
                f"{self.future.name} awaiting {awaited.name} "
                f"(waiting: {suspensions.count})"
            )

        def on_fulfilled(value: t.Any) -> None:
            if tracked:
                suspensions.leave()
            self._step(Ok(value))

        def on_rejected(error: t.Any) -> None:
            if tracked:
                suspensions.leave()
            self._step(Err(error))

        awaited.then(on_fulfilled, on_rejected)


# =============================================================================
# 3. PRIVATE HELPERS
# =============================================================================


def _as_exception(reason: t.Any) -> BaseException:
    """Rejection reason as something that can be raised."""
    if isinstance(reason, BaseException):
        return reason
    return FutureRejectedError(reason)
