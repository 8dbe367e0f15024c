"""
Imager Errors

Exception hierarchy shared by the matrix core, the convolution and blend
engines and the codec boundary. Each class also derives from the closest
builtin so callers can catch either.
"""

from typing import Any, Iterable


class ImagerError(Exception):
    """Base class for all Imager errors."""


class ValidationError(ImagerError, ValueError):
    """Malformed parameter: bad dimension, even kernel size, bad size."""


class InvalidModeError(ValidationError):
    """Unrecognized named mode, type or direction for an operation."""

    def __init__(self, operation: str, value: Any, accepted: Iterable[str] = ()):
        self.operation = operation
        self.value = value
        self.accepted = list(accepted)
        message = f"{operation}: {value!r} is not an accepted mode"
        if self.accepted:
            message += f" (expected one of {', '.join(self.accepted)})"
        super().__init__(message)


class MatrixIndexError(ImagerError, IndexError):
    """Out-of-bounds element access."""


class ChannelMismatchError(ImagerError, ValueError):
    """Operands have incompatible channel counts."""


class DimensionError(ImagerError, ValueError):
    """Operands have incompatible rows/cols."""


class DivisionByZeroError(ImagerError, ZeroDivisionError):
    """Scalar or per-element zero divisor."""


def coerce_mode(enum_cls, value, operation: str):
    """
    Turn a string (or enum member) into a member of `enum_cls`.

    Raises:
        InvalidModeError: If the value names no member
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidModeError(operation, value, [m.value for m in enum_cls]) from None
