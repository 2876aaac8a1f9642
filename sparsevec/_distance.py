"""Similarity and distance metrics between SparseVectors.

Every metric treats a dimension missing from one vector as 0 in that vector.
The union-based metrics visit each dimension exactly once:
first every key of `v1`, then the keys of `v2` that are not in `v1`.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Literal

from sparsevec._vector import SparseVector, divide

logger = logging.getLogger(__name__)

COSINE_TOLERANCE = 1e-15
"""How far below 1 a cosine may be before rounding it up to exactly 1."""


def dot(v1: SparseVector, v2: SparseVector) -> numbers.Number:
    """Compute the dot product of two vectors.

    Only the dimensions stored in both vectors can contribute.

    Examples
    --------
    >>> from sparsevec import SparseVector, dot
    >>> dot(SparseVector({"a": 1, "b": 2}), SparseVector({"b": 3, "c": 4}))
    6
    """
    if len(v2) < len(v1):
        v1, v2 = v2, v1
    return sum((value * v2[key] for key, value in v1.items() if key in v2), 0)


def norm(vec: SparseVector, *, metric: Literal["l1", "l2"] = "l2") -> numbers.Number:
    """Compute the norm (length) of a vector.

    Parameters
    ----------
    vec :
        The vector to compute the norm of.
    metric : {"l1", "l2"}, default "l2"
        The metric to use. "l1" for Manhattan distance, "l2" for Euclidean distance.

    Returns
    -------
    The norm of the vector. An empty vector has norm 0.

    Examples
    --------
    >>> from sparsevec import SparseVector, norm
    >>> norm(SparseVector({"a": -3, "b": 4}))
    5.0
    >>> norm(SparseVector({"a": -3, "b": 4}), metric="l1")
    7
    """
    if metric == "l1":
        return sum((abs(value) for value in vec.values()), 0)
    elif metric == "l2":
        return math.sqrt(sum((value * value for value in vec.values()), 0))
    else:
        raise ValueError(f"Unsupported norm {metric}")


def normalize(
    vec: SparseVector, *, metric: Literal["l1", "l2"] = "l2"
) -> SparseVector:
    """Scale a vector to have unit length.

    A vector with norm 0 is divided by 0, see `SparseVector.__truediv__`.

    Examples
    --------
    >>> from sparsevec import SparseVector, normalize
    >>> normalize(SparseVector({"a": 3, "b": 4}))
    SparseVector({'a': 0.6, 'b': 0.8})
    >>> normalize(SparseVector({"a": 1, "b": 3}), metric="l1")
    SparseVector({'a': 0.25, 'b': 0.75})
    """
    return vec / norm(vec, metric=metric)


def cosine_distance(
    v1: SparseVector, v2: SparseVector, *, tolerance: float = COSINE_TOLERANCE
) -> float:
    """One minus the cosine of the angle between two vectors.

    The result is between 0 (same direction) and 2 (opposite directions).
    If either vector has magnitude 0 the cosine is undefined and
    the result is nan. No error is raised.

    Parameters
    ----------
    v1 :
        The first vector.
    v2 :
        The second vector.
    tolerance :
        A cosine above ``1 - tolerance`` is taken to be exactly 1,
        so that rounding never makes a vector look different from itself.

    Examples
    --------
    >>> from sparsevec import SparseVector, cosine_distance
    >>> cosine_distance(SparseVector({"x": 1}), SparseVector({"x": 5}))
    0
    >>> cosine_distance(SparseVector({"x": 1}), SparseVector({"x": -1}))
    2.0
    >>> cosine_distance(SparseVector({"x": 1}), SparseVector({"y": 1}))
    1.0
    """
    v1_magnitude = 0
    v2_magnitude = 0
    dot_product = 0
    # a key only in v2 adds v1[key] * v2[key] == 0 to the dot product
    for key, value in v1.items():
        v1_magnitude += value * value
        dot_product += value * v2[key]
    for value in v2.values():
        v2_magnitude += value * value

    # Decimal can not be divided by the float from sqrt, so work in floats
    magnitude = math.sqrt(v1_magnitude) * math.sqrt(v2_magnitude)
    cosine = divide(float(dot_product), magnitude)
    if cosine > 1 - tolerance:
        logger.debug(f"Rounding cosine {cosine!r} to 1")
        cosine = 1
    return 1 - cosine


def zero_distance(v1: SparseVector, v2: SparseVector) -> int:
    """The number of dimensions that are nonzero in exactly one of the vectors.

    A dimension explicitly stored as 0 counts the same as a missing one.

    Examples
    --------
    >>> from sparsevec import SparseVector, zero_distance
    >>> zero_distance(SparseVector({"a": 1, "b": 2}), SparseVector({"b": 3, "c": 4}))
    2
    >>> zero_distance(SparseVector({"a": 0}), SparseVector({"b": 0}))
    0
    """
    distance = 0
    for key in v1:
        if v1[key] != 0 and v2[key] == 0:
            distance += 1
    for key in v2:
        if v2[key] != 0 and v1[key] == 0:
            distance += 1
    return distance


def taxicab_distance(v1: SparseVector, v2: SparseVector) -> numbers.Number:
    """The sum of the absolute differences in each dimension (L1 distance).

    Examples
    --------
    >>> from sparsevec import SparseVector, taxicab_distance
    >>> taxicab_distance(
    ...     SparseVector({"a": 1, "b": 2}), SparseVector({"b": 3, "c": 4})
    ... )  # |1-0| + |2-3| + |0-4|
    6
    """
    distance = 0
    for key, value in v1.items():
        distance += abs(value - v2[key])
    for key, value in v2.items():
        if key not in v1:
            distance += abs(value)
    return distance


def euclidean_distance(v1: SparseVector, v2: SparseVector) -> float:
    """The ordinary straight-line (L2) distance between two vectors.

    Examples
    --------
    >>> from sparsevec import SparseVector, euclidean_distance
    >>> euclidean_distance(SparseVector({"a": 3}), SparseVector({"b": 4}))
    5.0
    """
    distance = 0
    for key, value in v1.items():
        difference = value - v2[key]
        distance += difference * difference
    for key, value in v2.items():
        if key not in v1:
            distance += value * value
    return math.sqrt(distance)


def infinite_distance(v1: SparseVector, v2: SparseVector) -> numbers.Number:
    """The largest absolute difference in any one dimension (Chebyshev distance).

    Examples
    --------
    >>> from sparsevec import SparseVector, infinite_distance
    >>> infinite_distance(
    ...     SparseVector({"a": 1, "b": 2}), SparseVector({"b": 3, "c": 4})
    ... )
    4
    """
    largest = 0
    for key, value in v1.items():
        current = abs(value - v2[key])
        if current > largest:
            largest = current
    for key, value in v2.items():
        if key in v1:
            continue
        current = abs(value)
        if current > largest:
            largest = current
    return largest
