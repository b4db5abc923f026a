"""Exception hierarchy for qalgebra."""

from __future__ import annotations


class AlgebraError(Exception):
    """Base class for qalgebra-specific exceptions."""


class ValidationError(AlgebraError, ValueError):
    """Raised when an atomic identifier is constructed from unsupported fields."""


class DomainError(AlgebraError, ValueError):
    """Raised when an operation is applied outside of its mathematical domain.

    Examples are non-positive integer powers or products between elements of
    incompatible algebra kinds.
    """


class NotFoundError(AlgebraError, LookupError):
    """Raised when an identifier is absent from an ordering table or index space."""


class InvariantError(AlgebraError, RuntimeError):
    """Raised when a structural invariant of the algebra is violated."""


__all__ = [
    "AlgebraError",
    "ValidationError",
    "DomainError",
    "NotFoundError",
    "InvariantError",
]
