"""Sparse numeric vectors keyed by arbitrary hashable dimensions."""

from __future__ import annotations

import importlib.metadata
import warnings

from sparsevec import columns as columns
from sparsevec import exceptions as exceptions
from sparsevec._distance import cosine_distance as cosine_distance
from sparsevec._distance import dot as dot
from sparsevec._distance import euclidean_distance as euclidean_distance
from sparsevec._distance import infinite_distance as infinite_distance
from sparsevec._distance import norm as norm
from sparsevec._distance import normalize as normalize
from sparsevec._distance import taxicab_distance as taxicab_distance
from sparsevec._distance import zero_distance as zero_distance
from sparsevec._promote import common_type as common_type
from sparsevec._promote import element_types as element_types
from sparsevec._promote import promote_types as promote_types
from sparsevec._vector import SparseVector as SparseVector
from sparsevec.exceptions import IncompatibleTypeError as IncompatibleTypeError
from sparsevec.exceptions import SparseVecError as SparseVecError

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError as e:
    warnings.warn(f"Could not determine version of {__name__}\n{e!s}", stacklevel=2)
    __version__ = "unknown"
