"""
Errors raised by the presentation engine.
"""


class PrestoError(Exception):
    """Base class for presto errors."""


class InvalidShape(PrestoError, TypeError):
    """Top-level value cannot be presented (scalar, or sequence of non-records)."""

    def __init__(self, value_type: str, reason: str = ""):
        self.value_type = value_type
        self.reason = reason
        message = f"Cannot present value of type '{value_type}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RowConversionError(PrestoError):
    """One sequence element could not be converted into a table row."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Row {index}: {reason}")
