"""
Custom exceptions for the accrual library.
"""


class AccrualError(Exception):
    """Base exception for all accrual library errors."""


class ConfigurationError(AccrualError, ValueError):
    """Malformed inputs to a calendar, schedule or day counter."""


class UnknownCalendarError(ConfigurationError, KeyError):
    """No calendar is registered under the requested market identifier."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ''


class ConvergenceError(AccrualError):
    """Root finding failed to produce a solution."""


class NotTradableError(ConvergenceError):
    """The objective has no attainable root (e.g. price below its theoretical floor)."""


class RootNotBracketedError(ConvergenceError):
    """No sign change was found while expanding the search interval."""


class MaxEvaluationsExceededError(ConvergenceError):
    """The requested accuracy was not reached within the evaluation budget."""
