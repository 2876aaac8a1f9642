"""Sparse vector operations on ibis map<any_type, numeric> expressions."""

from __future__ import annotations

from typing import Literal

import ibis
import ibis.expr.datatypes as dt
import ibis.expr.types as ir

from sparsevec._distance import COSINE_TOLERANCE
from sparsevec._vector import SparseVector


@ibis.udf.scalar.builtin(name="list_sum")
def _array_sum(a) -> float: ...


@ibis.udf.scalar.builtin(name="list_max")
def _array_max(a) -> float: ...


def literal(vec: SparseVector, type: str | dt.DataType | None = None) -> ir.MapValue:
    """Turn a SparseVector into an ibis map literal.

    Parameters
    ----------
    vec :
        The vector to convert.
    type :
        The type of the map, eg "map<string, float64>".
        If None, ibis infers it from the entries.

    Examples
    --------
    >>> from sparsevec import SparseVector
    >>> from sparsevec import columns
    >>> vec = SparseVector({"a": 1.5})
    >>> columns.literal(vec, type="map<string, float64>").execute()
    {'a': 1.5}
    """
    return ibis.literal(dict(vec.items()), type=type)


def dot(a: ir.MapValue, b: ir.MapValue) -> ir.FloatingValue:
    """Compute the dot product of two sparse vectors.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> float(columns.dot(m1, m2).execute())  # 2*3
    6.0
    """
    _check_maps(a, b)
    terms = a.keys().map(lambda k: a[k] * b.get(k, 0))
    return _with_nulls(_sum(terms), a, b)


def norm(vec: ir.MapValue, *, metric: Literal["l1", "l2"] = "l2") -> ir.FloatingValue:
    """Compute the norm (length) of a sparse vector.

    Parameters
    ----------
    vec :
        The vector to compute the norm of.
    metric : {"l1", "l2"}, default "l2"
        The metric to use. "l1" for Manhattan distance, "l2" for Euclidean distance.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m = ibis.map({"a": -3, "b": 4})
    >>> float(columns.norm(m).execute())
    5.0
    >>> float(columns.norm(m, metric="l1").execute())
    7.0
    """
    _check_maps(vec)
    vals = vec.values()
    if metric == "l1":
        result = _sum(vals.map(lambda x: x.abs()))
    elif metric == "l2":
        result = _sum(vals.map(lambda x: x**2)).sqrt()
    else:
        raise ValueError(f"Unsupported norm {metric}")
    return _with_nulls(result, vec)


def normalize(vec: ir.MapValue, *, metric: Literal["l1", "l2"] = "l2") -> ir.MapValue:
    """Scale a sparse vector to have unit length.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> columns.normalize(ibis.map({"a": 3, "b": 4})).execute()
    {'a': 0.6, 'b': 0.8}
    """
    denom = norm(vec, metric=metric)
    return ibis.map(vec.keys(), vec.values().map(lambda x: x / denom))


def add(a: ir.MapValue, b: ir.MapValue) -> ir.MapValue:
    """Add two sparse vectors. Every key of either map is in the result.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> columns.add(m1, m2).execute() == {"a": 1, "b": 5, "c": 4}
    True
    """
    _check_maps(a, b)
    keys = _union_keys(a, b)
    return ibis.map(keys, keys.map(lambda k: a.get(k, 0) + b.get(k, 0)))


def subtract(a: ir.MapValue, b: ir.MapValue) -> ir.MapValue:
    """Subtract the sparse vector `b` from `a`.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> columns.subtract(m1, m2).execute() == {"a": 1, "b": -1, "c": -4}
    True
    """
    _check_maps(a, b)
    keys = _union_keys(a, b)
    return ibis.map(keys, keys.map(lambda k: a.get(k, 0) - b.get(k, 0)))


def cosine_distance(
    a: ir.MapValue, b: ir.MapValue, *, tolerance: float = COSINE_TOLERANCE
) -> ir.FloatingValue:
    """One minus the cosine of the angle between two sparse vectors.

    Same as `sparsevec.cosine_distance`, but as an ibis expression.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> a, b = ibis.map({"x": 1}), ibis.map({"x": -1})
    >>> float(columns.cosine_distance(a, b).execute())
    2.0
    """
    _check_maps(a, b)
    dot_product = _sum(a.keys().map(lambda k: a[k] * b.get(k, 0)))
    a_magnitude = _sum(a.values().map(lambda x: x * x)).sqrt()
    b_magnitude = _sum(b.values().map(lambda x: x * x)).sqrt()
    magnitude = a_magnitude * b_magnitude
    # a zero magnitude has no direction, so the cosine is NaN rather than NULL
    cosine = (magnitude == 0).ifelse(
        ibis.literal(float("nan")), dot_product / magnitude
    )
    # NaN compares greater than every number in DuckDB
    cosine = ((cosine > 1 - tolerance) & ~cosine.isnan()).ifelse(1.0, cosine)
    return _with_nulls(1 - cosine, a, b)


def zero_distance(a: ir.MapValue, b: ir.MapValue) -> ir.IntegerValue:
    """The number of keys that are nonzero in exactly one of the sparse vectors.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> int(columns.zero_distance(m1, m2).execute())
    2
    """
    _check_maps(a, b)
    only_a = a.keys().filter(lambda k: (a[k] != 0) & (b.get(k, 0) == 0))
    only_b = b.keys().filter(lambda k: (b[k] != 0) & (a.get(k, 0) == 0))
    return _with_nulls(only_a.length() + only_b.length(), a, b)


def taxicab_distance(a: ir.MapValue, b: ir.MapValue) -> ir.NumericValue:
    """The sum of the absolute differences in each dimension (L1 distance).

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> float(columns.taxicab_distance(m1, m2).execute())
    6.0
    """
    _check_maps(a, b)
    return _with_nulls(_sum(_abs_differences(a, b)), a, b)


def euclidean_distance(a: ir.MapValue, b: ir.MapValue) -> ir.FloatingValue:
    """The ordinary straight-line (L2) distance between two sparse vectors.

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 3})
    >>> m2 = ibis.map({"b": 4})
    >>> float(columns.euclidean_distance(m1, m2).execute())
    5.0
    """
    _check_maps(a, b)
    squares = _abs_differences(a, b).map(lambda x: x**2)
    return _with_nulls(_sum(squares).sqrt(), a, b)


def infinite_distance(a: ir.MapValue, b: ir.MapValue) -> ir.NumericValue:
    """The largest absolute difference in any one dimension (Chebyshev distance).

    Examples
    --------
    >>> import ibis
    >>> from sparsevec import columns
    >>> m1 = ibis.map({"a": 1, "b": 2})
    >>> m2 = ibis.map({"b": 3, "c": 4})
    >>> float(columns.infinite_distance(m1, m2).execute())
    4.0
    """
    _check_maps(a, b)
    largest = _array_max(_abs_differences(a, b)).fill_null(0)
    return _with_nulls(largest, a, b)


def _abs_differences(a: ir.MapValue, b: ir.MapValue) -> ir.ArrayValue:
    # every key of a, then the keys of b that are not in a
    from_a = a.keys().map(lambda k: (a[k] - b.get(k, 0)).abs())
    only_b = b.keys().filter(lambda k: ~a.contains(k))
    from_b = only_b.map(lambda k: b[k].abs())
    return from_a.concat(from_b)


def _union_keys(a: ir.MapValue, b: ir.MapValue) -> ir.ArrayValue:
    only_b = b.keys().filter(lambda k: ~a.contains(k))
    return a.keys().concat(only_b)


def _sum(vals: ir.ArrayValue) -> ir.NumericValue:
    # list_sum([]) is NULL, but an empty sum is 0
    return _array_sum(vals).fill_null(0)


def _with_nulls(result: ir.Value, *maps: ir.MapValue) -> ir.Value:
    is_null = ibis.literal(False)
    for m in maps:
        is_null = is_null | m.isnull()
    return is_null.ifelse(ibis.null(), result)


def _check_maps(*values: ir.Value) -> None:
    for v in values:
        if not isinstance(v, ir.MapValue):
            raise ValueError(f"Unsupported type {type(v)}")
