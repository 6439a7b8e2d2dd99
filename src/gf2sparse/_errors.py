"""
Error handling for gf2sparse.

Every failure is a programming-contract violation raised synchronously at
the call that detected it. Each exception carries a numeric code so callers
can branch on the class or on the code.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

GF2_OK = 0

# Argument errors (10-19)
GF2_ERROR_INVALID_ARGUMENT = 10
GF2_ERROR_DIMENSION_MISMATCH = 11
GF2_ERROR_INDEX_OUT_OF_BOUNDS = 14
GF2_ERROR_SELF_ALIAS = 15


_ERROR_MESSAGES = {
    GF2_OK: "Success",
    GF2_ERROR_INVALID_ARGUMENT: "Invalid argument",
    GF2_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    GF2_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    GF2_ERROR_SELF_ALIAS: "Destination aliases an operand",
}


# =============================================================================
# Exception Classes
# =============================================================================

class GF2Error(Exception):
    """
    Base exception for all gf2sparse errors.

    Subclasses also derive from the matching builtin (IndexError,
    ValueError) so generic handlers keep working.
    """

    code = GF2_OK

    OK = GF2_OK
    ERROR_INVALID_ARGUMENT = GF2_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = GF2_ERROR_DIMENSION_MISMATCH
    ERROR_INDEX_OUT_OF_BOUNDS = GF2_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_SELF_ALIAS = GF2_ERROR_SELF_ALIAS

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        """
        Create a gf2sparse exception.

        Args:
            message: Detailed message (defaults to the code's generic text)
            code: Error code (defaults to the class code)
        """
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "GF2Error":
        """Create the exception class registered for ``code``."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        exc_cls = _CODE_TO_CLASS.get(code, cls)
        return exc_cls(msg, code=code)


class IndexOutOfRange(GF2Error, IndexError):
    """A row, column or vector index outside ``[0, extent)``."""
    code = GF2_ERROR_INDEX_OUT_OF_BOUNDS


class ShapeMismatch(GF2Error, ValueError):
    """Operand dimensions that cannot be combined."""
    code = GF2_ERROR_DIMENSION_MISMATCH


class InvalidArgument(GF2Error, ValueError):
    """Malformed constructor input, extents or offsets."""
    code = GF2_ERROR_INVALID_ARGUMENT


class SelfAliasViolation(GF2Error, ValueError):
    """Destination shares storage with an operand it must not overwrite."""
    code = GF2_ERROR_SELF_ALIAS


_CODE_TO_CLASS = {
    GF2_ERROR_INVALID_ARGUMENT: InvalidArgument,
    GF2_ERROR_DIMENSION_MISMATCH: ShapeMismatch,
    GF2_ERROR_INDEX_OUT_OF_BOUNDS: IndexOutOfRange,
    GF2_ERROR_SELF_ALIAS: SelfAliasViolation,
}


# =============================================================================
# Checking Helpers
# =============================================================================

def check_index(index: int, extent: int) -> None:
    """Raise IndexOutOfRange unless ``0 <= index < extent``."""
    if index < 0 or index >= extent:
        raise IndexOutOfRange(f"{index} out of range: [0-{extent - 1}]")


def check_extent(name: str, value: int) -> None:
    """Raise InvalidArgument for a negative dimension."""
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")


__all__ = [
    'GF2Error',
    'IndexOutOfRange',
    'ShapeMismatch',
    'InvalidArgument',
    'SelfAliasViolation',
    'check_index',
    'check_extent',
    'GF2_OK',
    'GF2_ERROR_INVALID_ARGUMENT',
    'GF2_ERROR_DIMENSION_MISMATCH',
    'GF2_ERROR_INDEX_OUT_OF_BOUNDS',
    'GF2_ERROR_SELF_ALIAS',
]
