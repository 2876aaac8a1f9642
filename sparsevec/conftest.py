from __future__ import annotations

import ibis
import pytest

from sparsevec import SparseVector


@pytest.fixture
def backend() -> ibis.BaseBackend:
    return ibis.duckdb.connect()


@pytest.fixture
def v1() -> SparseVector:
    return SparseVector({"a": 1, "b": 2})


@pytest.fixture
def v2() -> SparseVector:
    return SparseVector({"b": 3, "c": 4})
