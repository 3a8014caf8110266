"""
Error taxonomy for the Outbreak Signal Engine.

Every error derives from ValueError so callers that already guard numeric
code with ``except ValueError`` keep working.
"""
from typing import Any, Optional


class SignalError(ValueError):
    """Base class for all engine errors."""


class ConfigurationError(SignalError):
    """Invalid scalar parameter (window, lag, z) or unknown config key."""

    def __init__(self, parameter: str, value: Any, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {parameter}={value!r}: {reason}")


class InputError(SignalError):
    """Time series violates its invariants."""

    def __init__(
        self,
        reason: str,
        index: Optional[int] = None,
        period: Any = None,
    ):
        self.reason = reason
        self.index = index
        self.period = period
        if index is None:
            message = reason
        else:
            message = f"{reason} (period {period!r} at position {index})"
        super().__init__(message)
