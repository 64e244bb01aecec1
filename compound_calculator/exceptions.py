"""
Exception types for the compound calculator.

The engine is total for well-formed input: missing optional data is
treated as empty and dormant partners are skipped. Only parameters that
cannot be simulated at all are raised, before the run starts.
"""

from pydantic import ValidationError


class CalculatorError(Exception):
    """Base class for calculator errors."""
    pass


class InvalidParameterError(CalculatorError, ValueError):
    """Raised when simulation parameters fail validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PartnerReferenceError(InvalidParameterError):
    """Raised in strict mode when an L2 partner references a missing L1."""
    pass


# Exception categories based on handling strategy

# Must raise - the run cannot start
MUST_RAISE = (
    InvalidParameterError,
    ValidationError,
)


def must_raise(exc: Exception) -> bool:
    """
    Check if exception must be raised to the caller.

    Args:
        exc: Exception to check

    Returns:
        True if exception must be raised
    """
    return isinstance(exc, MUST_RAISE)


def from_validation_error(exc: ValidationError) -> InvalidParameterError:
    """
    Convert a pydantic ValidationError into an InvalidParameterError.

    The first failing location names the offending field.

    Args:
        exc: Pydantic validation error

    Returns:
        InvalidParameterError describing the first error
    """
    errors = exc.errors()
    if not errors:
        return InvalidParameterError(str(exc))

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    message = f"Invalid simulation parameter {field}: {first.get('msg')}"
    if len(errors) > 1:
        message += f" (+{len(errors) - 1} more)"
    return InvalidParameterError(message, field=field)
