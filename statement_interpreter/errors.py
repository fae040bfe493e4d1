"""Exceptions raised by the interpreter.

Missing statement fields are not errors: rules that lack their inputs simply
produce no flag.
"""

from typing import Optional


class InterpreterError(Exception):
    """Base class for every error raised by this package."""


class InsufficientDataError(InterpreterError):
    """Statements are too sparse to analyze. Fatal; never retried."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class AnalysisTimeoutError(InterpreterError):
    """The analyzer stage did not finish within the configured timeout."""
