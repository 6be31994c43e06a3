"""Deferred values with chained continuations.

This module implements the Future state machine. A Future starts pending and
settles exactly once, to resolved or rejected. Settlement and every
continuation run as microtasks on the owning scheduler, so continuation code
never runs synchronously inside ``resolve``, ``reject`` or ``then``.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

from __future__ import annotations

# Standard library
import typing as t
from collections.abc import Callable
from functools import partial

# Project/local
from constants import UNNAMED_LABEL, FutureState
from event_loop.base import TaskScheduler
from event_loop.errors import LoopStateError
from logging_config import get_logger
from scheduler_types import Err, Handler, Ok, Result, Task

logger = get_logger(__name__)

# =============================================================================
# 2. TYPES & CONSTANTS
# =============================================================================

T = t.TypeVar("T")

ResolveFn = Callable[..., None]
RejectFn = Callable[..., None]
Initializer = Callable[[ResolveFn, RejectFn], t.Any]

# =============================================================================
# 3. FUTURE
# =============================================================================


class Future(t.Generic[T]):
    """A value that will be available later.

    Attributes:
        name: Label used for logs and the labels of this Future's microtasks.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        initializer: Initializer | None = None,
        name: str = UNNAMED_LABEL,
    ) -> None:
        """Create a pending Future and run its initializer synchronously.

        Args:
            scheduler: Loop whose microtask queue runs this Future's work.
            initializer: Called immediately with ``resolve`` and ``reject``.
                If it raises, the Future is rejected with the exception.
            name: Label for logging.
        """
        self._scheduler = scheduler
        self.name = name
        self._state = FutureState.PENDING
        self._result: Result | None = None
        self._handlers: list[Handler] = []

        if initializer is not None:
            try:
                initializer(self._resolve, self._reject)
            except Exception as exc:
                logger.debug(f"{self.name} initializer raised {exc!r}")
                self._reject(exc)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def resolved(
        cls, scheduler: TaskScheduler, value: t.Any = None, name: str = UNNAMED_LABEL
    ) -> Future[t.Any]:
        """Create a Future that resolves with ``value`` on the next drain."""
        return cls(scheduler, lambda resolve, _reject: resolve(value), name=name)

    @classmethod
    def rejected(
        cls, scheduler: TaskScheduler, error: t.Any, name: str = UNNAMED_LABEL
    ) -> Future[t.Any]:
        """Create a Future that rejects with ``error`` on the next drain."""
        return cls(scheduler, lambda _resolve, reject: reject(error), name=name)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> FutureState:
        return self._state

    @property
    def result(self) -> Result | None:
        """Settled result, or None while pending."""
        return self._result

    def is_pending(self) -> bool:
        return self._state == FutureState.PENDING

    def __repr__(self) -> str:
        return f"<Future {self.name} {self._state}>"

    # -------------------------------------------------------------------------
    # Chaining
    # -------------------------------------------------------------------------

    def then(
        self,
        on_fulfilled: Callable[[t.Any], t.Any] | None = None,
        on_rejected: Callable[[t.Any], t.Any] | None = None,
    ) -> Future[t.Any]:
        """Register continuations and return the Future of their outcome.

        The returned child settles with whatever the matching callback
        returns. A missing callback passes the parent's settlement through,
        a raising callback rejects the child, and a callback returning a
        Future makes the child follow that Future.

        Args:
            on_fulfilled: Called with the value if this Future resolves.
            on_rejected: Called with the reason if this Future rejects.

        Returns:
            New pending child Future.
        """
        child: Future[t.Any] = Future(self._scheduler, name=f"{self.name}.then")
        self._handlers.append(
            Handler(
                on_fulfilled=on_fulfilled,
                on_rejected=on_rejected,
                settle_child=child._settle,
            )
        )
        # Already-settled parents still go through the handler queue
        self._run_handlers()
        return child

    def catch(self, on_rejected: Callable[[t.Any], t.Any]) -> Future[t.Any]:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _resolve(self, value: t.Any = None) -> None:
        self._settle(Ok(value))

    def _reject(self, error: t.Any = None) -> None:
        self._settle(Err(error))

    def _settle(self, result: Result) -> None:
        """Schedule the state change; never settles synchronously."""
        suffix = "resolve" if isinstance(result, Ok) else "reject"
        self._scheduler.queue_microtask(
            Task(partial(self._change_state, result), f"{self.name}.{suffix}")
        )

    def _change_state(self, result: Result) -> None:
        if self._state != FutureState.PENDING:
            return
        self._state = (
            FutureState.RESOLVED if isinstance(result, Ok) else FutureState.REJECTED
        )
        self._result = result
        logger.debug(f"{self.name} {self._state}")
        self._run_handlers()

    def _run_handlers(self) -> None:
        if self._state == FutureState.PENDING:
            return
        while self._handlers:
            handler = self._handlers.pop(0)
            callback = (
                handler.on_fulfilled
                if self._state == FutureState.RESOLVED
                else handler.on_rejected
            )
            self._scheduler.queue_microtask(
                Task(
                    partial(self._evaluate, callback, handler.settle_child),
                    f"{self.name}.handler",
                )
            )

    def _evaluate(
        self,
        callback: Callable[[t.Any], t.Any] | None,
        settle_child: Callable[[Result], None],
    ) -> None:
        """Run one continuation against the settled result."""
        result = self._result
        if result is None:
            raise LoopStateError(f"{self.name} ran a continuation before settling")

        if callback is None:
            settle_child(result)
            return

        argument = result.value if isinstance(result, Ok) else result.error
        try:
            returned = callback(argument)
        except Exception as exc:
            settle_child(Err(exc))
            return

        if isinstance(returned, Future):
            returned.then(
                lambda value: settle_child(Ok(value)),
                lambda error: settle_child(Err(error)),
            )
        else:
            settle_child(Ok(returned))
