from __future__ import annotations

import math

import ibis
import pandas as pd
import pytest

import sparsevec
from sparsevec import SparseVector, columns

NULL_MAP = ibis.literal(None, "map<string, int64>")


def _to_map(x):
    if isinstance(x, dict):
        return ibis.literal(x, type="map<string, int64>")
    return x


def _execute(e):
    result = e.execute()
    if not isinstance(result, dict) and pd.isna(result):
        return None
    return result


SCENARIO = ({"a": 1, "b": 2}, {"b": 3, "c": 4})


@pytest.mark.parametrize(
    "a,b,expected",
    [
        pytest.param(*SCENARIO, 6, id="map"),
        pytest.param({}, {}, 0, id="empty_maps"),
        pytest.param({}, {"a": 5}, 0, id="one_empty_map"),
        pytest.param(NULL_MAP, {"a": 5}, None, id="null_nonnull"),
        pytest.param({"a": 5}, NULL_MAP, None, id="nonnull_null"),
    ],
)
def test_dot(backend, a, b, expected):
    assert _execute(columns.dot(_to_map(a), _to_map(b))) == expected


@pytest.mark.parametrize(
    "a,metric,expected",
    [
        pytest.param({"a": -3, "b": 4}, "l2", 5.0, id="l2"),
        pytest.param({"a": -3, "b": 4}, "l1", 7, id="l1"),
        pytest.param({}, "l2", 0, id="empty"),
        pytest.param(NULL_MAP, "l2", None, id="null"),
    ],
)
def test_norm(backend, a, metric, expected):
    assert _execute(columns.norm(_to_map(a), metric=metric)) == expected


def test_norm_unknown_metric():
    with pytest.raises(ValueError, match="Unsupported norm"):
        columns.norm(_to_map({"a": 1}), metric="l3")


def test_normalize(backend):
    result = _execute(columns.normalize(_to_map({"a": 3, "b": 4})))
    assert result == {"a": pytest.approx(0.6), "b": pytest.approx(0.8)}


@pytest.mark.parametrize(
    "a,b,expected",
    [
        pytest.param(*SCENARIO, {"a": 1, "b": 5, "c": 4}, id="map"),
        pytest.param({}, {"a": 5}, {"a": 5}, id="one_empty"),
        pytest.param({}, {}, {}, id="empty"),
    ],
)
def test_add(backend, a, b, expected):
    assert _execute(columns.add(_to_map(a), _to_map(b))) == expected


@pytest.mark.parametrize(
    "a,b,expected",
    [
        pytest.param(*SCENARIO, {"a": 1, "b": -1, "c": -4}, id="map"),
        pytest.param({}, {"a": 5}, {"a": -5}, id="one_empty"),
    ],
)
def test_subtract(backend, a, b, expected):
    assert _execute(columns.subtract(_to_map(a), _to_map(b))) == expected


@pytest.mark.parametrize(
    "a,b,expected",
    [
        pytest.param({"x": 1}, {"x": 1}, 0.0, id="identical"),
        pytest.param({"x": 1}, {"x": -1}, 2.0, id="opposite"),
        pytest.param({"x": 1}, {"y": 1}, 1.0, id="orthogonal"),
        pytest.param({"x": 1, "y": 2}, {"x": 2, "y": 4}, 0.0, id="parallel"),
        pytest.param(NULL_MAP, {"x": 1}, None, id="null"),
    ],
)
def test_cosine_distance(backend, a, b, expected):
    result = _execute(columns.cosine_distance(_to_map(a), _to_map(b)))
    if expected is None:
        assert result is None
    else:
        assert result == pytest.approx(expected)


@pytest.mark.parametrize(
    "a,b",
    [
        pytest.param({}, {"x": 1}, id="first_empty"),
        pytest.param({"x": 1}, {}, id="second_empty"),
        pytest.param({"x": 0}, {"x": 1}, id="stored_zero"),
        pytest.param({}, {}, id="both_empty"),
    ],
)
def test_cosine_distance_zero_magnitude_is_nan(backend, a, b):
    result = columns.cosine_distance(_to_map(a), _to_map(b)).execute()
    assert math.isnan(result)


@pytest.mark.parametrize(
    "a,b,expected",
    [
        pytest.param(*SCENARIO, 2, id="scenario"),
        pytest.param({"a": 0}, {}, 0, id="stored_zero_is_absent"),
        pytest.param({"a": 0, "b": 1}, {"a": 2}, 2, id="stored_zero_vs_nonzero"),
        pytest.param({}, {}, 0, id="empty"),
        pytest.param({"a": 1}, NULL_MAP, None, id="null"),
    ],
)
def test_zero_distance(backend, a, b, expected):
    assert _execute(columns.zero_distance(_to_map(a), _to_map(b))) == expected


@pytest.mark.parametrize(
    "a,b,taxicab,euclidean,infinite",
    [
        pytest.param(*SCENARIO, 6, 18**0.5, 4, id="scenario"),
        pytest.param({}, {}, 0, 0, 0, id="empty"),
        pytest.param({"a": -3}, {"b": 4}, 7, 5, 4, id="disjoint"),
        pytest.param(NULL_MAP, {"a": 1}, None, None, None, id="null"),
    ],
)
def test_union_distances(backend, a, b, taxicab, euclidean, infinite):
    for x, y in [(a, b), (b, a)]:
        x, y = _to_map(x), _to_map(y)
        assert _execute(columns.taxicab_distance(x, y)) == taxicab
        result = _execute(columns.euclidean_distance(x, y))
        if euclidean is None:
            assert result is None
        else:
            assert result == pytest.approx(euclidean)
        assert _execute(columns.infinite_distance(x, y)) == infinite


@pytest.mark.parametrize(
    "a,b",
    [
        pytest.param({"a": 1, "b": 2, "d": 0}, {"b": 3, "c": 4, "d": -2}, id="mixed"),
        pytest.param({"x": 1}, {"x": -1}, id="opposite"),
        pytest.param({}, {"x": 1}, id="one_empty"),
        pytest.param({}, {}, id="both_empty"),
        pytest.param({"x": 0}, {"x": 1}, id="all_zero"),
        pytest.param({"x": 0, "y": 0}, {"y": 0}, id="both_all_zero"),
    ],
)
@pytest.mark.parametrize(
    "in_memory,expression",
    [
        pytest.param(sparsevec.cosine_distance, columns.cosine_distance, id="cosine"),
        pytest.param(sparsevec.zero_distance, columns.zero_distance, id="zero"),
        pytest.param(
            sparsevec.taxicab_distance, columns.taxicab_distance, id="taxicab"
        ),
        pytest.param(
            sparsevec.euclidean_distance, columns.euclidean_distance, id="euclidean"
        ),
        pytest.param(
            sparsevec.infinite_distance, columns.infinite_distance, id="infinite"
        ),
        pytest.param(sparsevec.dot, columns.dot, id="dot"),
    ],
)
def test_matches_in_memory(backend, a, b, in_memory, expression):
    v1, v2 = SparseVector(a), SparseVector(b)
    m1 = columns.literal(v1, type="map<string, int64>")
    m2 = columns.literal(v2, type="map<string, int64>")
    expected = in_memory(v1, v2)
    result = expression(m1, m2).execute()
    if math.isnan(expected):
        assert math.isnan(result)
    else:
        assert result == pytest.approx(expected)


def test_on_a_column(backend):
    t = ibis.memtable({"id": [0, 1]})
    map_type = "map<string, int64>"
    left = (t.id == 0).ifelse(
        ibis.literal({"a": 1, "b": 2}, map_type), ibis.literal({"x": 1}, map_type)
    )
    right = (t.id == 0).ifelse(
        ibis.literal({"b": 3, "c": 4}, map_type), ibis.literal({"x": 5}, map_type)
    )
    t = t.mutate(
        taxicab=columns.taxicab_distance(left, right),
        zero=columns.zero_distance(left, right),
    ).order_by("id")
    df = backend.execute(t)
    assert df.taxicab.tolist() == [6, 4]
    assert df.zero.tolist() == [2, 0]


def test_literal_round_trip(backend):
    vec = SparseVector({"a": 1.5, "b": -2.0})
    result = _execute(columns.literal(vec, type="map<string, float64>"))
    assert SparseVector(result) == vec


@pytest.mark.parametrize(
    "f",
    [
        columns.dot,
        columns.add,
        columns.subtract,
        columns.cosine_distance,
        columns.zero_distance,
        columns.taxicab_distance,
        columns.euclidean_distance,
        columns.infinite_distance,
    ],
)
def test_non_map_inputs(f):
    with pytest.raises(ValueError, match="Unsupported type"):
        f(ibis.literal([1, 2]), ibis.literal([3, 4]))
