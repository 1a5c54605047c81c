"""
Exception types for the life balance engine.
"""

from typing import Optional


class LifeBalanceError(Exception):
    """Base class for all engine errors."""
    pass


class ValidationError(LifeBalanceError, ValueError):
    """
    Raised when a mutation violates a domain constraint.

    Fields:
        field: Name of the offending input (e.g. "magnitude")
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class StoreError(LifeBalanceError):
    """Raised when key-value store operations fail."""
    pass


class CodecError(LifeBalanceError, ValueError):
    """Raised when stored data cannot be decoded into entities."""
    pass


class OracleError(LifeBalanceError):
    """Raised when the rating oracle request or response is unusable."""
    pass
