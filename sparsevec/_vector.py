"""The SparseVector container and its arithmetic."""

from __future__ import annotations

from collections.abc import Mapping
import fractions
import logging
import math
import numbers
from typing import Any, Generic, Hashable, Iterator, TypeVar

import numpy as np

from sparsevec import _promote
from sparsevec.exceptions import IncompatibleTypeError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=numbers.Number)


class SparseVector(Generic[K, V]):
    """A numeric vector that only stores the dimensions that were set.

    Dimensions (keys) can be any hashable value.
    Reading a dimension that was never set gives 0.
    Setting a dimension to 0 still stores it,
    so it counts towards `len()`, `is_empty()`, and iteration.

    Every operation returns a new vector; operands are never modified.

    Examples
    --------
    >>> from sparsevec import SparseVector
    >>> v1 = SparseVector({"a": 1, "b": 2})
    >>> v2 = SparseVector({"b": 3, "c": 4})
    >>> v1["z"]
    0
    >>> v1 + v2
    SparseVector({'a': 1, 'b': 5, 'c': 4})
    >>> v1 - v2
    SparseVector({'a': 1, 'b': -1, 'c': -4})
    >>> v1 * 2
    SparseVector({'a': 2, 'b': 4})
    >>> v1 // 4
    SparseVector({'a': Fraction(1, 4), 'b': Fraction(1, 2)})
    """

    __slots__ = ("_map",)

    # numpy scalars must defer to our reflected operators, eg np.float64(2) * vec
    __array_ufunc__ = None

    def __init__(self, mapping: Mapping[K, V] | None = None) -> None:
        self._map: dict[K, V] = {} if mapping is None else dict(mapping)

    @classmethod
    def from_map(cls, mapping: Mapping[K, V]) -> SparseVector[K, V]:
        """Create a vector from a copy of `mapping`."""
        return cls(mapping)

    def copy(self) -> SparseVector[K, V]:
        """An independent copy of this vector."""
        return type(self)(self._map)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> SparseVector[K, V]:
        # keys are hashable and values are numbers, so a shallow copy is enough
        return self.copy()

    def __getitem__(self, key: K) -> V:
        if key in self._map:
            return self._map[key]
        return 0

    def get(self, key: K) -> V:
        """The value at `key`, or 0 if it was never set."""
        return self[key]

    def __setitem__(self, key: K, value: V) -> None:
        self._map[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def contains_key(self, key: K) -> bool:
        """Whether `key` is stored, even if its value is 0."""
        return key in self._map

    def keys(self):
        return self._map.keys()

    def values(self):
        return self._map.values()

    def items(self):
        return self._map.items()

    def __iter__(self) -> Iterator[K]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def is_empty(self) -> bool:
        """True if no dimension has ever been set, even to 0."""
        return not self._map

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self._map == other._map

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._map!r})"

    def __add__(self, other: SparseVector) -> SparseVector:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return _combine(self, other, negate_other=False)

    def __sub__(self, other: SparseVector) -> SparseVector:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return _combine(self, other, negate_other=True)

    def __neg__(self) -> SparseVector[K, V]:
        return type(self)({key: -value for key, value in self._map.items()})

    def __mul__(self, scalar: numbers.Number) -> SparseVector:
        if not _is_scalar(scalar):
            return NotImplemented
        return type(self)({key: value * scalar for key, value in self._map.items()})

    __rmul__ = __mul__

    def __truediv__(self, scalar: numbers.Number) -> SparseVector:
        """Divide every value by `scalar`.

        Division by zero follows IEEE-754 (giving inf or nan)
        when the value or the scalar is inexact (float, complex, numpy floating).
        For exact types (int, Fraction, Decimal) it raises ZeroDivisionError.

        Examples
        --------
        >>> from sparsevec import SparseVector
        >>> SparseVector({"a": 1.0, "b": -2.0, "c": 0.0}) / 0
        SparseVector({'a': inf, 'b': -inf, 'c': nan})
        """
        if not _is_scalar(scalar):
            return NotImplemented
        return type(self)(
            {key: divide(value, scalar) for key, value in self._map.items()}
        )

    def __floordiv__(self, scalar: numbers.Number) -> SparseVector:
        """Rational scaling: every value becomes an exact Fraction divided by `scalar`.

        This is not floor division.
        Floats are converted exactly, from their binary representation.

        Examples
        --------
        >>> from sparsevec import SparseVector
        >>> SparseVector({"a": 3, "b": 0.5}) // 6
        SparseVector({'a': Fraction(1, 2), 'b': Fraction(1, 12)})
        """
        if not _is_scalar(scalar):
            return NotImplemented
        denominator = to_fraction(scalar)
        return type(self)(
            {key: to_fraction(value) / denominator for key, value in self._map.items()}
        )


def _combine(v1: SparseVector, v2: SparseVector, *, negate_other: bool) -> SparseVector:
    if negate_other:
        # negating can change the type, eg -True is the int -1
        v2 = -v2
    _, value_type = _promote.common_type(v1, v2)
    result = {key: _promote.coerce(value, value_type) for key, value in v1.items()}
    for key, value in v2.items():
        if key in v1:
            result[key] = _promote.coerce(result[key] + value, value_type)
        else:
            result[key] = _promote.coerce(value, value_type)
    return SparseVector(result)


def _is_scalar(x: Any) -> bool:
    return isinstance(x, (numbers.Number, np.number))


def _is_inexact(x: Any) -> bool:
    return isinstance(x, (float, complex, np.inexact))


def divide(a: numbers.Number, b: numbers.Number) -> numbers.Number:
    """`a / b`, but with IEEE-754 results when dividing an inexact number by 0."""
    if b != 0 or not (_is_inexact(a) or _is_inexact(b)):
        return a / b
    logger.debug(f"Dividing {a!r} by zero")
    if isinstance(a, (complex, np.complexfloating)) or isinstance(
        b, (complex, np.complexfloating)
    ):
        # the sign of a complex zero is ambiguous
        return complex(math.nan, math.nan)
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, float(b))


def to_fraction(x: numbers.Number) -> fractions.Fraction:
    """Convert `x` exactly to a Fraction."""
    if isinstance(x, fractions.Fraction):
        return x
    try:
        return fractions.Fraction(x)
    except (TypeError, ValueError, OverflowError) as e:
        raise IncompatibleTypeError(type(x), fractions.Fraction) from e
