from .combinators import all_, all_settled, any_, race
from .config import CombinatorConfig
from .kernel import (
    AggregateFailure,
    AwaitableTask,
    CallbackTask,
    Evidence,
    InvalidTaskError,
    InvalidTasksError,
    Outcome,
    OutcomePendingError,
    RejectionError,
    ResultRecord,
    SettleError,
    Task,
    Trace,
    as_task,
)

__all__ = [
    # Combinators
    "all_",
    "race",
    "any_",
    "all_settled",
    # Core
    "Outcome",
    "Task",
    "CallbackTask",
    "AwaitableTask",
    "as_task",
    "ResultRecord",
    "AggregateFailure",
    "CombinatorConfig",
    # Tracing
    "Trace",
    "Evidence",
    # Errors
    "SettleError",
    "InvalidTasksError",
    "InvalidTaskError",
    "RejectionError",
    "OutcomePendingError",
]
