"""Deferred Outcome - the single-assignment result holder returned by every combinator."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Generator
from typing import Any, Generic, Literal, TypeVar

from settle.kernel.errors import OutcomePendingError, RejectionError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

State = Literal["pending", "fulfilled", "rejected"]

OnFulfilled = Callable[[Any], Any]
OnRejected = Callable[[Any], Any]


def as_exception(reason: Any) -> BaseException:
    """Exception to raise for a rejection reason."""
    if isinstance(reason, BaseException):
        return reason
    return RejectionError(reason)


class Outcome(Generic[T]):
    """
    Single-assignment, dual-state result holder.

    States:
    - pending: no outcome yet
    - fulfilled: settled with a value
    - rejected: settled with a failure reason

    Settlement is a check-and-set transition: the first call to ``fulfill``
    or ``reject`` wins and every later call is a no-op that returns False.
    Handlers registered with ``subscribe`` fire synchronously at settlement,
    or immediately when registered after it. An Outcome therefore satisfies
    the Task contract and can be fed back into any combinator.

    Example:
        outcome = Outcome()
        outcome.fulfill(1)   # True
        outcome.reject("x")  # False, still fulfilled with 1
        value = await outcome
    """

    def __init__(self) -> None:
        self._state: State = "pending"
        self._value: T | None = None
        self._reason: Any = None
        self._handlers: list[tuple[OnFulfilled, OnRejected]] = []

    @staticmethod
    def fulfilled(value: Any) -> Outcome[Any]:
        """Create an outcome that is already fulfilled with value."""
        outcome: Outcome[Any] = Outcome()
        outcome.fulfill(value)
        return outcome

    @staticmethod
    def rejected(reason: Any) -> Outcome[Any]:
        """Create an outcome that is already rejected with reason."""
        outcome: Outcome[Any] = Outcome()
        outcome.reject(reason)
        return outcome

    @property
    def state(self) -> State:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state == "pending"

    @property
    def settled(self) -> bool:
        return self._state != "pending"

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def reason(self) -> Any:
        return self._reason

    def fulfill(self, value: T) -> bool:
        """Settle as fulfilled. Returns True only if this call settled the outcome."""
        return self._transition("fulfilled", value)

    def reject(self, reason: Any) -> bool:
        """Settle as rejected. Returns True only if this call settled the outcome."""
        return self._transition("rejected", reason)

    def _transition(self, state: State, payload: Any) -> bool:
        if self._state != "pending":
            logger.debug("Ignored %s attempt on already %s outcome", state, self._state)
            return False

        self._state = state
        if state == "fulfilled":
            self._value = payload
        else:
            self._reason = payload

        handlers, self._handlers = self._handlers, []
        first_error: Exception | None = None
        for on_fulfilled, on_rejected in handlers:
            try:
                self._dispatch(on_fulfilled, on_rejected)
            except Exception as exc:
                # Every handler still runs; the caller sees the first failure.
                if first_error is None:
                    first_error = exc
                else:
                    logger.debug("Suppressed additional handler error: %r", exc)
        if first_error is not None:
            raise first_error
        return True

    def _discard(self, on_fulfilled: OnFulfilled) -> None:
        self._handlers = [pair for pair in self._handlers if pair[0] is not on_fulfilled]

    def _dispatch(self, on_fulfilled: OnFulfilled, on_rejected: OnRejected) -> None:
        if self._state == "fulfilled":
            on_fulfilled(self._value)
        else:
            on_rejected(self._reason)

    def subscribe(self, on_fulfilled: OnFulfilled, on_rejected: OnRejected) -> None:
        """Register completion handlers.

        Exactly one of the two handlers is called, exactly once, when the
        outcome settles (immediately if it already has). A handler that
        raises does not stop later handlers; the first error is re-raised to
        the caller that settled the outcome.
        """
        if self._state == "pending":
            self._handlers.append((on_fulfilled, on_rejected))
            return
        self._dispatch(on_fulfilled, on_rejected)

    def map(self, func: Callable[[T], R]) -> Outcome[R]:
        """Derive an outcome whose value is func(value).

        Rejections pass through unchanged. An exception raised by func
        rejects the derived outcome.
        """
        derived: Outcome[R] = Outcome()

        def on_fulfilled(value: T) -> None:
            try:
                mapped = func(value)
            except Exception as exc:
                derived.reject(exc)
                return
            derived.fulfill(mapped)

        self.subscribe(on_fulfilled, derived.reject)
        return derived

    def recover(self, recovery_func: Callable[[Any], T]) -> Outcome[T]:
        """Recover from rejection with recovery function."""
        derived: Outcome[T] = Outcome()

        def on_rejected(reason: Any) -> None:
            try:
                recovered_value = recovery_func(reason)
            except Exception as exc:
                derived.reject(exc)
                return
            derived.fulfill(recovered_value)

        self.subscribe(derived.fulfill, on_rejected)
        return derived

    def result(self) -> T:
        """Return the value of a settled outcome.

        Raises:
            OutcomePendingError: the outcome has not settled yet
            BaseException: the rejection reason (wrapped in RejectionError
                if it is not an exception)
        """
        if self._state == "pending":
            raise OutcomePendingError("Outcome has not settled yet")
        if self._state == "rejected":
            raise as_exception(self._reason)
        return self._value  # type: ignore[return-value]

    def __await__(self) -> Generator[Any, None, T]:
        if self._state == "pending":
            # The future only signals settlement, result() carries the payload.
            waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()

            def wake(_: Any) -> None:
                if not waiter.done():
                    waiter.set_result(None)

            self.subscribe(wake, wake)
            try:
                yield from waiter.__await__()
            finally:
                # A cancelled await must not leave its handler behind.
                if self._state == "pending":
                    self._discard(wake)
        return self.result()

    def __repr__(self) -> str:
        if self._state == "fulfilled":
            return f"Outcome(fulfilled, value={self._value!r})"
        if self._state == "rejected":
            return f"Outcome(rejected, reason={self._reason!r})"
        return "Outcome(pending)"
