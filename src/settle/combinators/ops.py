"""Combinator primitives: all_, race, any_, all_settled."""

# Combinators satisfy the following laws:
#
# 1. Order: all_, all_settled and any_'s aggregate failure list results by
#    input index, never by completion order
#
# 2. Duality: all_ is failure-fast / success-complete,
#    any_ is success-fast / failure-complete
#
# 3. Totality: all_settled never rejects
#
# 4. Single settlement: each returned Outcome settles at most once, and each
#    task counts at most once towards it
#
# 5. No cancellation: losing tasks keep running, their outcomes are discarded


from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, MappingView, Set
from typing import Any, TypeVar

from settle.config import CombinatorConfig
from settle.kernel.errors import InvalidTaskError, InvalidTasksError
from settle.kernel.outcome import Outcome
from settle.kernel.records import AggregateFailure, ResultRecord
from settle.kernel.task import AwaitableTask, Task, as_task
from settle.kernel.trace import Trace

from .types import InvocationTrace, Tally

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnSuccess = Callable[[int, Any], None]
OnFailure = Callable[[int, Any], None]


_PUBLIC_NAMES = {"all": "all_", "any": "any_"}

# Inputs whose iteration order is not a task order.
_UNORDERED = (str, bytes, bytearray, Mapping, Set, MappingView)


def _materialize(tasks: Any, config: CombinatorConfig, combinator: str) -> list[Task]:
    """Validate the input shape and coerce every element into a Task.

    Raises:
        InvalidTasksError: tasks is not an ordered collection
        InvalidTaskError: an element is not coercible (coerce_values=False)
    """
    if isinstance(tasks, _UNORDERED) or not isinstance(tasks, Iterable):
        public_name = _PUBLIC_NAMES.get(combinator, combinator)
        raise InvalidTasksError(
            f"{public_name}() expects an ordered sequence of tasks, got {type(tasks).__name__}",
            tasks,
        )

    task_list: list[Task] = []
    items = iter(tasks)
    try:
        for index, item in enumerate(items):
            task_list.append(as_task(item, coerce_values=config.coerce_values, index=index))
    except InvalidTaskError:
        # Nothing gets scheduled, so close every coroutine we were handed.
        for task in task_list:
            if isinstance(task, AwaitableTask):
                task.close()
        for item in items:
            if inspect.iscoroutine(item):
                item.close()
        raise
    return task_list


def _watch(
    task_list: list[Task],
    tally: Tally,
    outcome: Outcome[Any],
    invocation: InvocationTrace,
    on_success: OnSuccess,
    on_failure: OnFailure,
) -> None:
    """Subscribe to every task, forwarding only first notifications per task.

    Notifications arriving after the outcome settled are observed but have
    no effect.
    """

    def handlers(index: int) -> tuple[Callable[[Any], None], Callable[[Any], None]]:
        def success(value: Any) -> None:
            if not tally.claim(index):
                invocation.duplicate(index, "fulfilled")
                return
            invocation.task_settled(index, "fulfilled")
            if outcome.settled:
                return
            on_success(index, value)

        def failure(reason: Any) -> None:
            if not tally.claim(index):
                invocation.duplicate(index, "rejected")
                return
            invocation.task_settled(index, "rejected")
            if outcome.settled:
                return
            on_failure(index, reason)

        return success, failure

    for index, task in enumerate(task_list):
        on_fulfilled, on_rejected = handlers(index)
        task.subscribe(on_fulfilled, on_rejected)


def _start(
    combinator: str,
    tasks: Any,
    config: CombinatorConfig | None,
    trace: Trace | None,
) -> tuple[list[Task], Outcome[Any], InvocationTrace]:
    config = config or CombinatorConfig.default()
    task_list = _materialize(tasks, config, combinator)
    outcome: Outcome[Any] = Outcome()
    invocation = InvocationTrace(combinator, len(task_list), config, trace)
    invocation.watch(outcome)
    return task_list, outcome, invocation


def all_(
    tasks: Iterable[Any],
    *,
    config: CombinatorConfig | None = None,
    trace: Trace | None = None,
) -> Outcome[list[Any]]:
    """Wait for every task to succeed.

    Semantics:
        - Fulfills with one value per task, in input order, once all succeeded
        - Rejects with the first delivered failure reason
        - Empty input fulfills immediately with []

    Args:
        tasks: Ordered collection of tasks, awaitables or plain values.
        config: Optional per-call configuration.
        trace: Optional trace to record begin/task/settled events into.

    Returns:
        Outcome[list[Any]]: The aggregate outcome.

    Raises:
        InvalidTasksError: tasks is not an ordered collection.
    """
    task_list, outcome, invocation = _start("all", tasks, config, trace)
    if not task_list:
        outcome.fulfill([])
        return outcome

    tally = Tally(len(task_list))
    tally.release_on(outcome)

    def on_success(index: int, value: Any) -> None:
        if tally.record(index, value):
            outcome.fulfill(list(tally.slots))

    def on_failure(index: int, reason: Any) -> None:
        outcome.reject(reason)

    _watch(task_list, tally, outcome, invocation, on_success, on_failure)
    return outcome


def race(
    tasks: Iterable[Any],
    *,
    config: CombinatorConfig | None = None,
    trace: Trace | None = None,
) -> Outcome[Any]:
    """Settle like whichever task settles first, success or failure.

    Empty input never settles.
    """
    task_list, outcome, invocation = _start("race", tasks, config, trace)
    if not task_list:
        logger.debug("race: no tasks, outcome stays pending")
        return outcome

    tally = Tally(len(task_list))
    tally.release_on(outcome)

    def on_success(index: int, value: Any) -> None:
        outcome.fulfill(value)

    def on_failure(index: int, reason: Any) -> None:
        outcome.reject(reason)

    _watch(task_list, tally, outcome, invocation, on_success, on_failure)
    return outcome


def any_(
    tasks: Iterable[Any],
    *,
    config: CombinatorConfig | None = None,
    trace: Trace | None = None,
) -> Outcome[Any]:
    """Wait for the first task to succeed.

    Semantics:
        - Fulfills with the first success value, however many tasks failed before
        - Rejects with an AggregateFailure only when every task failed; its
          reasons follow input order
        - Empty input rejects immediately with an empty AggregateFailure

    Args:
        tasks: Ordered collection of tasks, awaitables or plain values.
        config: Optional per-call configuration.
        trace: Optional trace to record begin/task/settled events into.

    Returns:
        Outcome[Any]: The aggregate outcome.
    """
    task_list, outcome, invocation = _start("any", tasks, config, trace)
    if not task_list:
        outcome.reject(AggregateFailure(()))
        return outcome

    tally = Tally(len(task_list))
    tally.release_on(outcome)

    def on_success(index: int, value: Any) -> None:
        outcome.fulfill(value)

    def on_failure(index: int, reason: Any) -> None:
        if tally.record(index, reason):
            outcome.reject(AggregateFailure(tuple(tally.slots)))

    _watch(task_list, tally, outcome, invocation, on_success, on_failure)
    return outcome


def all_settled(
    tasks: Iterable[Any],
    *,
    config: CombinatorConfig | None = None,
    trace: Trace | None = None,
) -> Outcome[list[ResultRecord[Any]]]:
    """Wait for every task to settle, never rejecting.

    Fulfills with one ResultRecord per task, in input order. Empty input
    fulfills immediately with [].
    """
    task_list, outcome, invocation = _start("all_settled", tasks, config, trace)
    if not task_list:
        outcome.fulfill([])
        return outcome

    tally = Tally(len(task_list))
    tally.release_on(outcome)

    def on_success(index: int, value: Any) -> None:
        if tally.record(index, ResultRecord.ok(value)):
            outcome.fulfill(list(tally.slots))

    def on_failure(index: int, reason: Any) -> None:
        if tally.record(index, ResultRecord.failed(reason)):
            outcome.fulfill(list(tally.slots))

    _watch(task_list, tally, outcome, invocation, on_success, on_failure)
    return outcome
