"""Kernel layer - outcome, task and value types."""

from settle.kernel.errors import (
    InvalidTaskError,
    InvalidTasksError,
    OutcomePendingError,
    RejectionError,
    SettleError,
)
from settle.kernel.outcome import Outcome
from settle.kernel.records import AggregateFailure, ResultRecord
from settle.kernel.task import AwaitableTask, CallbackTask, Task, as_task
from settle.kernel.trace import Evidence, Trace

__all__ = [
    "Outcome",
    "Task",
    "CallbackTask",
    "AwaitableTask",
    "as_task",
    "ResultRecord",
    "AggregateFailure",
    "Evidence",
    "Trace",
    # Errors
    "SettleError",
    "InvalidTasksError",
    "InvalidTaskError",
    "RejectionError",
    "OutcomePendingError",
]
