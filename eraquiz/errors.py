from __future__ import annotations

"""Error types raised by the quiz core."""


class QuizError(Exception):
    """Base class for quiz errors surfaced to callers."""


class Unresolvable(QuizError):
    """A candidate has no usable year hints (or no usable works).

    Non-fatal: the candidate is dropped from the pool upstream.
    """


class InvalidState(QuizError):
    """A transition was attempted outside its valid source state."""

    def __init__(self, message: str, *, status: str | None = None, action: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.action = action


class InsufficientData(QuizError):
    """Too few usable figures survived filtering to start a session."""

    def __init__(self, available: int, required: int) -> None:
        super().__init__(f"Not enough figure data available ({available} < {required})")
        self.available = available
        self.required = required
