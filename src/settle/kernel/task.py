"""Task abstraction and the explicit coercion boundary."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from settle.kernel.errors import InvalidTaskError
from settle.kernel.outcome import Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")

Resolve = Callable[[Any], Any]
Reject = Callable[[Any], Any]


@runtime_checkable
class Task(Protocol):
    """Opaque asynchronous unit of work.

    A task calls exactly one of the two handlers, once, at some later point.
    The engine cannot enforce that on external tasks; it only relies on
    Outcome's check-and-set to absorb violations.
    """

    def subscribe(self, on_success: Resolve, on_failure: Reject) -> None: ...


class CallbackTask(Generic[T]):
    """Task driven by a ``start(resolve, reject)`` function.

    ``start`` runs once, on the first subscription. An exception raised by
    ``start`` is delivered as the task's failure.

    Example:
        def start(resolve, reject):
            loop.call_later(0.1, resolve, "done")

        task = CallbackTask(start)
    """

    def __init__(self, start: Callable[[Resolve, Reject], Any]) -> None:
        self._start = start
        self._outcome: Outcome[T] | None = None

    def subscribe(self, on_success: Resolve, on_failure: Reject) -> None:
        if self._outcome is None:
            self._outcome = Outcome()
            try:
                self._start(self._outcome.fulfill, self._outcome.reject)
            except Exception as exc:
                self._outcome.reject(exc)
        self._outcome.subscribe(on_success, on_failure)


class AwaitableTask(Generic[T]):
    """Task wrapping a coroutine, future or any other awaitable.

    The awaitable is scheduled on the running loop at first subscription.
    Cancellation is reported as a failure with ``asyncio.CancelledError``.
    """

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._outcome: Outcome[T] | None = None
        self._scheduled = False

    def subscribe(self, on_success: Resolve, on_failure: Reject) -> None:
        if self._outcome is None:
            self._outcome = Outcome()
            self._schedule(self._outcome)
        self._outcome.subscribe(on_success, on_failure)

    def close(self) -> None:
        """Close a wrapped coroutine that was never scheduled."""
        if not self._scheduled and inspect.iscoroutine(self._awaitable):
            self._awaitable.close()

    def _schedule(self, outcome: Outcome[T]) -> None:
        try:
            future = asyncio.ensure_future(self._awaitable, loop=asyncio.get_running_loop())
        except (RuntimeError, ValueError) as exc:
            # No running loop, or a future bound to another loop: it can never
            # complete here.
            self.close()
            outcome.reject(exc)
            return
        self._scheduled = True

        def on_done(done: asyncio.Future[T]) -> None:
            if done.cancelled():
                outcome.reject(asyncio.CancelledError())
                return
            exc = done.exception()
            if exc is not None:
                outcome.reject(exc)
            else:
                outcome.fulfill(done.result())

        future.add_done_callback(on_done)


def as_task(item: Any, *, coerce_values: bool = True, index: int | None = None) -> Task:
    """Turn one combinator input element into a Task.

    - Task (including Outcome): returned as-is
    - awaitable: wrapped in AwaitableTask
    - any other value: an already fulfilled Outcome, unless coerce_values
      is False, in which case InvalidTaskError is raised

    Args:
        item: The element to convert
        coerce_values: Whether plain values become fulfilled tasks
        index: Position of item in the input, for error reporting

    Returns:
        A Task for item
    """
    if isinstance(item, Task):
        return item
    if inspect.isawaitable(item):
        return AwaitableTask(item)
    if coerce_values:
        logger.debug("Coercing plain value at index %s into a fulfilled task", index)
        return Outcome.fulfilled(item)
    raise InvalidTaskError(
        f"Element at index {index} is not a task or awaitable: {type(item).__name__}",
        index,
        item,
    )
