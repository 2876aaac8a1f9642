from __future__ import annotations


class SparseVecError(Exception):
    """Base class for all sparsevec errors."""


class IncompatibleTypeError(TypeError, SparseVecError):
    """Two element types have no common type to promote to."""

    def __init__(self, a: type, b: type) -> None:
        self.a: type = a
        """The first of the conflicting types."""
        self.b: type = b
        """The second of the conflicting types."""
        super().__init__(
            f"No common numeric type for {a.__name__} and {b.__name__}"
        )
