"""
Hotel Audit Analytics - Engine Errors

Only malformed caller *parameters* raise. Malformed *data* (an answer value
outside PASS/FAIL/NA, an unreadable score, a run with no timestamp) is
normalized to None/empty at the record boundary and never raises.
"""

from typing import Any

from utils.logger import log_invalid_argument


class AnalyticsError(Exception):
    """Base class for errors surfaced by the analytics engine."""
    pass


class InvalidArgumentError(AnalyticsError, ValueError):
    """
    Raised when a caller passes a parameter the engine cannot interpret.

    Attributes:
        argument: Name of the offending parameter
        value: The value that was rejected
    """

    def __init__(self, argument: str, value: Any, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}={value!r}: {reason}")


def invalid_argument(argument: str, value: Any, reason: str) -> InvalidArgumentError:
    """Log the rejected parameter and build the error to raise."""
    log_invalid_argument(argument, value, reason)
    return InvalidArgumentError(argument, value, reason)


def require_count(argument: str, value: Any) -> int:
    """
    Validate a top-N style parameter.

    Raises:
        InvalidArgumentError: If value is not a non-negative integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise invalid_argument(argument, value, "must be an integer")
    if value < 0:
        raise invalid_argument(argument, value, "must not be negative")
    return value
