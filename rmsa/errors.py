"""Exceptions raised by the analysis engine."""

from typing import Optional


class RmsaError(Exception):
    """Base class for all errors raised by rmsa."""


class MalformedSystemError(RmsaError, ValueError):
    """The textual task system could not be parsed.

    Attributes:
        token: The offending task token, if one was isolated.
        position: Character offset in the input where parsing failed.
    """

    def __init__(self, message: str, token: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.token = token
        self.position = position


class EmptySystemError(RmsaError, ValueError):
    """An analysis that needs at least one task was asked of an empty system."""


class NonConvergenceError(RmsaError, ArithmeticError):
    """A fixed-point iteration did not settle within its iteration cap."""

    def __init__(self, message: str, iterations: int) -> None:
        super().__init__(message)
        self.iterations = iterations


class ConfigError(RmsaError, ValueError):
    """Invalid analysis configuration."""
