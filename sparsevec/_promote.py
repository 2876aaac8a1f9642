from __future__ import annotations

import decimal
import fractions
import logging
import numbers
from typing import TYPE_CHECKING, Any, Callable, Iterable

import numpy as np

from sparsevec.exceptions import IncompatibleTypeError

if TYPE_CHECKING:
    from sparsevec._vector import SparseVector

logger = logging.getLogger(__name__)

DEFAULT_TYPES: tuple[type, type] = (object, numbers.Number)
"""The (key_type, value_type) used when there are no entries to look at."""

_ABSTRACT = (object, numbers.Number, numbers.Complex, numbers.Real)
_TOWER = (bool, int, fractions.Fraction, float, complex)

Rule = Callable[[type, type], Any]


class Promoter:
    """An ordered set of rules for promoting two value types to a common type.

    When called, each rule is tried in order. A rule either returns
    the sentinel `NotImplemented`, meaning the next rule should be tried,
    or it returns the promoted type.
    If no rule applies, an `IncompatibleTypeError` is raised.

    Examples
    --------
    >>> from fractions import Fraction
    >>> from sparsevec import promote_types
    >>> promote_types(int, float)
    <class 'float'>
    >>> promote_types(Fraction, int)
    <class 'fractions.Fraction'>
    >>> promote_types(bool, bool)
    <class 'int'>
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self.rules = tuple(rules)
        """Mutable, so users can add their own numeric types."""

    def register(self, rule: Rule) -> Rule:
        """Register (after existing rules) a new promotion rule."""
        self.rules = (*self.rules, rule)
        return rule

    def __call__(self, a: type, b: type) -> type:
        for rule in self.rules:
            result = rule(a, b)
            if result is NotImplemented:
                continue
            return result
        raise IncompatibleTypeError(a, b)


promote_types = Promoter()


@promote_types.register
def _abstract(a: type, b: type) -> type:
    if a in _ABSTRACT or b in _ABSTRACT:
        logger.debug(f"Falling back to Number when promoting {a} and {b}")
        return numbers.Number
    return NotImplemented


@promote_types.register
def _boolean(a: type, b: type) -> type:
    # bool + bool is an int in python, unlike every other type
    if a is bool and b is bool:
        return int
    return NotImplemented


@promote_types.register
def _identical(a: type, b: type) -> type:
    if a is b:
        return a
    return NotImplemented


@promote_types.register
def _numpy(a: type, b: type) -> type:
    if not (issubclass(a, np.generic) or issubclass(b, np.generic)):
        return NotImplemented
    if not (_is_numpy_compatible(a) and _is_numpy_compatible(b)):
        raise IncompatibleTypeError(a, b)
    result = np.promote_types(np.dtype(a), np.dtype(b))
    if result == np.dtype(object):
        raise IncompatibleTypeError(a, b)
    return result.type


@promote_types.register
def _decimal(a: type, b: type) -> type:
    if not (issubclass(a, decimal.Decimal) or issubclass(b, decimal.Decimal)):
        return NotImplemented
    other = b if issubclass(a, decimal.Decimal) else a
    if other in (bool, int) or issubclass(other, decimal.Decimal):
        return decimal.Decimal
    raise IncompatibleTypeError(a, b)


@promote_types.register
def _tower(a: type, b: type) -> type:
    if a in _TOWER and b in _TOWER:
        return max(a, b, key=_TOWER.index)
    return NotImplemented


@promote_types.register
def _subclass(a: type, b: type) -> type:
    for sub, base in ((a, b), (b, a)):
        if issubclass(sub, base):
            return base
        for tower_type in _TOWER:
            if issubclass(sub, tower_type) and base in _TOWER:
                return promote_types(tower_type, base)
    return NotImplemented


def _is_numpy_compatible(t: type) -> bool:
    return issubclass(t, np.generic) or t in (bool, int, float, complex)


def promote_key_types(a: type, b: type) -> type:
    """The common type of two key types.

    Keys only promote when both are numbers; anything else becomes `object`.
    Keys are never converted, so this is informational only.
    """
    if a is b:
        return a
    if issubclass(a, numbers.Number) and issubclass(b, numbers.Number):
        try:
            return promote_types(a, b)
        except IncompatibleTypeError:
            return object
    return object


def element_types(vec: SparseVector) -> tuple[type, type]:
    """The (key_type, value_type) able to represent every entry of `vec`.

    Examples
    --------
    >>> from sparsevec import SparseVector, element_types
    >>> element_types(SparseVector({"a": 1, "b": 2.5}))
    (<class 'str'>, <class 'float'>)
    >>> element_types(SparseVector())
    (<class 'object'>, <class 'numbers.Number'>)
    """
    if vec.is_empty():
        return DEFAULT_TYPES
    items = iter(vec.items())
    first_key, first_value = next(items)
    key_type, value_type = type(first_key), type(first_value)
    for key, value in items:
        key_type = promote_key_types(key_type, type(key))
        value_type = promote_types(value_type, type(value))
    return key_type, value_type


def common_type(v1: SparseVector, v2: SparseVector) -> tuple[type, type]:
    """The (key_type, value_type) for a vector combining `v1` and `v2`.

    If both vectors are empty, this is `DEFAULT_TYPES`.
    If exactly one is empty, the types of the other one are used.
    Otherwise the key types and the value types are promoted pairwise.

    Raises
    ------
    IncompatibleTypeError
        If the value types have no common type, eg Decimal and float.

    Examples
    --------
    >>> from sparsevec import SparseVector, common_type
    >>> common_type(SparseVector({"a": 1}), SparseVector({"b": 2.0}))
    (<class 'str'>, <class 'float'>)
    >>> common_type(SparseVector(), SparseVector({1: 2}))
    (<class 'int'>, <class 'int'>)
    """
    if v1.is_empty() and v2.is_empty():
        return DEFAULT_TYPES
    if v1.is_empty():
        return element_types(v2)
    if v2.is_empty():
        return element_types(v1)
    k1, t1 = element_types(v1)
    k2, t2 = element_types(v2)
    return promote_key_types(k1, k2), promote_types(t1, t2)


def coerce(value: Any, value_type: type) -> Any:
    """Convert `value` to `value_type`, unless that type is abstract."""
    if value_type in _ABSTRACT or type(value) is value_type:
        return value
    return value_type(value)
