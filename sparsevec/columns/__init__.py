"""Sparse vectors as ibis map<any_type, numeric> expressions.

These mirror the in-memory functions of `sparsevec`,
so a column of sparse vectors can be compared row by row in the database.
A NULL map on either side gives a NULL result.
"""

from __future__ import annotations

from sparsevec.columns._columns import add as add
from sparsevec.columns._columns import cosine_distance as cosine_distance
from sparsevec.columns._columns import dot as dot
from sparsevec.columns._columns import euclidean_distance as euclidean_distance
from sparsevec.columns._columns import infinite_distance as infinite_distance
from sparsevec.columns._columns import literal as literal
from sparsevec.columns._columns import norm as norm
from sparsevec.columns._columns import normalize as normalize
from sparsevec.columns._columns import subtract as subtract
from sparsevec.columns._columns import taxicab_distance as taxicab_distance
from sparsevec.columns._columns import zero_distance as zero_distance
