"""Error types raised by the combinator engine."""

from __future__ import annotations

from typing import Any


class SettleError(Exception):
    """Base class for every error raised by settle itself."""


class InvalidTasksError(SettleError, TypeError):
    """Raised synchronously when a combinator receives a non-sequence input."""

    def __init__(self, message: str, tasks: object) -> None:
        self.tasks = tasks
        super().__init__(message)


class InvalidTaskError(SettleError, TypeError):
    """Raised when an element cannot be turned into a task.

    Only happens when plain-value coercion is disabled.
    """

    def __init__(self, message: str, index: int | None, item: object) -> None:
        self.index = index
        self.item = item
        super().__init__(message)


class RejectionError(SettleError):
    """Raised by ``await`` when an outcome is rejected with a non-exception reason.

    The original reason is preserved untouched on ``.reason``.
    """

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f"Outcome rejected: {reason!r}")

    def __repr__(self) -> str:
        return f"RejectionError(reason={self.reason!r})"


class OutcomePendingError(SettleError):
    """Raised when reading the result of an outcome that has not settled yet."""
