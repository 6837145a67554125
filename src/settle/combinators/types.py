"""Per-invocation settlement bookkeeping shared by the combinators."""

from __future__ import annotations

import logging
from typing import Any

from settle.config import CombinatorConfig
from settle.kernel.outcome import Outcome
from settle.kernel.trace import Trace

logger = logging.getLogger(__name__)


class Tally:
    """Result slots plus a completion counter for one combinator call.

    Each index is claimed on its task's first notification only, so a task
    that settles twice can never advance the counter twice. Once the owning
    outcome settles, release() drops the slots; tasks that are still running
    only keep this emptied shell alive.
    """

    def __init__(self, size: int, threshold: int | None = None) -> None:
        self.slots: list[Any] = [None] * size
        self.count = 0
        self.threshold = size if threshold is None else threshold
        self.released = False
        self._claimed = [False] * size

    @property
    def size(self) -> int:
        return len(self._claimed)

    def claim(self, index: int) -> bool:
        """Return True on the first notification for index, False afterwards."""
        if self._claimed[index]:
            return False
        self._claimed[index] = True
        return True

    def record(self, index: int, payload: Any) -> bool:
        """Store payload at index and report whether the threshold is now reached.

        A released tally ignores the call and returns False.
        """
        if self.released:
            return False
        self.slots[index] = payload
        self.count += 1
        return self.count == self.threshold

    def release(self) -> None:
        self.released = True
        self.slots = []

    def release_on(self, outcome: Outcome[Any]) -> None:
        """Release the slots as soon as outcome settles."""
        outcome.subscribe(lambda _value: self.release(), lambda _reason: self.release())


class InvocationTrace:
    """Trace and log events for one combinator call.

    Records "<combinator>_begin" when created, "task_settled" per task
    completion and "<combinator>_settled" once the outcome settles. A None
    trace disables recording, logging still happens.
    """

    def __init__(
        self,
        combinator: str,
        size: int,
        config: CombinatorConfig,
        trace: Trace | None = None,
    ) -> None:
        self.combinator = combinator
        self.config = config
        self._trace = trace
        self._label = config.name or combinator
        self._begin_id: int | None = None

        info: dict[str, Any] = {"tasks": size}
        if config.name:
            info["name"] = config.name
        if trace is not None:
            self._begin_id = trace.record(f"{combinator}_begin", info=info)
        logger.debug(
            "%s: watching %d tasks", self._label, size, extra={"combinator": combinator, "tasks": size}
        )

    def task_settled(self, index: int, status: str) -> None:
        logger.debug(
            "%s: task %d %s",
            self._label,
            index,
            status,
            extra={"combinator": self.combinator, "task_index": index, "status": status},
        )
        if self._trace is not None and self.config.trace_tasks:
            self._trace.record(
                "task_settled",
                info={"index": index, "status": status},
                parent_id=self._begin_id,
            )

    def duplicate(self, index: int, status: str) -> None:
        logger.debug(
            "%s: ignored repeated %s notification from task %d",
            self._label,
            status,
            index,
            extra={"combinator": self.combinator, "task_index": index, "status": status},
        )

    def watch(self, outcome: Outcome[Any]) -> None:
        """Record the settlement of outcome when it happens."""
        outcome.subscribe(
            lambda _value: self._settled("fulfilled"),
            lambda _reason: self._settled("rejected"),
        )

    def _settled(self, status: str) -> None:
        logger.debug(
            "%s: settled as %s",
            self._label,
            status,
            extra={"combinator": self.combinator, "status": status},
        )
        if self._trace is not None:
            self._trace.record(
                f"{self.combinator}_settled",
                info={"status": status},
                parent_id=self._begin_id,
            )
