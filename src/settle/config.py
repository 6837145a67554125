"""Configuration for combinator invocations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CombinatorConfig(BaseModel):
    """Per-call options shared by all four combinators."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    coerce_values: bool = Field(
        default=True,
        description="Treat plain (non-task, non-awaitable) values as already fulfilled tasks",
    )
    trace_tasks: bool = Field(
        default=True,
        description="Record a task_settled trace event for every task completion",
    )
    name: str | None = Field(
        default=None,
        description="Label attached to trace events and log lines",
    )

    @classmethod
    def default(cls) -> CombinatorConfig:
        return _DEFAULT


_DEFAULT = CombinatorConfig()
