"""Result Record and Aggregate Failure value types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

Status = Literal["fulfilled", "rejected"]


@dataclass(frozen=True)
class ResultRecord(Generic[T]):
    """
    Tagged outcome of a single task, produced by ``all_settled``.

    Attributes:
        status: "fulfilled" or "rejected"
        value: Success value (only meaningful when fulfilled)
        reason: Failure reason (only meaningful when rejected)
    """

    status: Status
    value: T | None = None
    reason: Any | None = None

    @staticmethod
    def ok(value: Any) -> ResultRecord[Any]:
        return ResultRecord(status="fulfilled", value=value)

    @staticmethod
    def failed(reason: Any) -> ResultRecord[Any]:
        return ResultRecord(status="rejected", reason=reason)

    @property
    def is_fulfilled(self) -> bool:
        return self.status == "fulfilled"

    @property
    def is_rejected(self) -> bool:
        return self.status == "rejected"

    def to_dict(self) -> dict[str, Any]:
        if self.status == "fulfilled":
            return {"status": self.status, "value": self.value}
        return {"status": self.status, "reason": self.reason}


@dataclass(frozen=True)
class AggregateFailure:
    """Every failure reason of an ``any_`` call, in original input order.

    Produced only when all tasks failed. Not an exception: awaiting the
    rejected outcome raises ``RejectionError`` carrying this object.
    """

    reasons: tuple[Any, ...] = ()
    message: str = "All tasks were rejected"

    def __len__(self) -> int:
        return len(self.reasons)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.reasons)

    def __getitem__(self, index: int) -> Any:
        return self.reasons[index]

    def __str__(self) -> str:
        return f"{self.message} ({len(self.reasons)} reasons)"
