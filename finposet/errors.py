from __future__ import annotations


class PosetError(ValueError):
    """Base class for all errors raised by finposet."""


class InvalidRelation(PosetError):
    """Raised when a relation or covering edge set is not a partial order."""


class IndexOutOfRange(PosetError, IndexError):
    """Raised when an element index falls outside 0..n-1."""

    def __init__(self, index: int, n: int):
        super().__init__(f"index {index} out of range for poset of size {n}")
        self.index = index
        self.n = n


class DimensionMismatch(PosetError):
    """Raised when a matrix or combinator input has inconsistent dimensions."""


class SizeLimitExceeded(PosetError):
    """Raised when a bounded operation is asked for an input above its configured limit."""


class MissingBound(PosetError):
    """Raised when a top or bottom element is required but the poset has none."""
