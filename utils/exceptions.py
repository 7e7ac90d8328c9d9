from __future__ import annotations

"""Shared exception types for cross-module use."""

from typing import Iterable


class FastballError(Exception):
    """Base class for errors raised by the simulation engine."""


class InvalidOutcomeError(FastballError, ValueError):
    """Raised when a pitch outcome violates the status/type pairing rules."""

    def __init__(self, problems: Iterable[str] | None = None, outcome: object | None = None):
        self.problems = list(problems or [])
        self.outcome = outcome
        message = "Malformed pitch outcome"
        if self.problems:
            message += ": " + "; ".join(self.problems)
        super().__init__(message)


class InvalidProfileError(FastballError, ValueError):
    """Raised when batter skill points are out of range or over budget."""


__all__ = ["FastballError", "InvalidOutcomeError", "InvalidProfileError"]
