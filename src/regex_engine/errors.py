"""
Exceptions raised by the regex engine layer.
"""

from typing import Optional


class RegexEngineError(Exception):
    """Base class for every error raised by this package."""


class PatternCompileError(RegexEngineError):
    """The pattern could not be compiled by the regex library."""

    def __init__(self, pattern: str, message: str, position: Optional[int] = None):
        self.pattern = pattern
        self.message = message
        self.position = position
        if position is not None:
            super().__init__(f"{message} at position {position} in pattern {pattern!r}")
        else:
            super().__init__(f"{message} in pattern {pattern!r}")


class MatchError(RegexEngineError):
    """
    The matcher failed while executing.

    This is never raised for a legitimate "no match"; it means the operation
    could not be completed (timeout, closed handle, ...).
    """

    def __init__(self, message: str, start: int = 0):
        self.start = start
        super().__init__(message)
