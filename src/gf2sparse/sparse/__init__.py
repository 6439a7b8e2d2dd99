"""gf2sparse Sparse Module.

GF(2) sparse matrices and vectors over three interchangeable storage
engines that share one algebraic contract.

Type Hierarchy:

    SparseMatrixBase (ABC)
    ├── CompactMatrix       # Sorted parallel row/column index lists
    ├── MapMatrix           # Dual hash maps
    └── WindowedMatrix      # Zero-copy windows over a shared store

    SparseVectorBase (ABC)
    ├── CompactVector
    ├── MapVector
    └── WindowedVector

Quick Start:
    >>> from gf2sparse.sparse import CompactMatrix, MapMatrix, WindowedMatrix
    >>>
    >>> a = CompactMatrix(2, 2, [1, 0, 0, 1])
    >>> a.swap_rows(0, 1)
    >>> a == MapMatrix(2, 2, [0, 1, 1, 0])
    True
    >>>
    >>> w = WindowedMatrix.identity(8)
    >>> view = w.slice(3, 0, 4, 4).T     # zero-copy, writes through
    >>> view.nonzero()
    ([3], [0])

Backend Types:
    - COMPACT: binary search + splice; copies on slice/transpose
    - MAP: O(1) expected access; copies on slice/transpose
    - WINDOWED: aliasing views on slice/transpose/row/column

Key Functions:
    - matrix, vector, identity: factories using config.default_backend
    - vstack, hstack: stacking
    - from_dense, to_dense, from_scipy, to_scipy: numpy/scipy interop
    - to_json, from_json: wire format
    - shares_memory: aliasing test for windowed values
"""

# =============================================================================
# Backend / Ownership
# =============================================================================
from ._backend import (
    Backend,
    Ownership,
    StorageInfo,
)

from ._ownership import (
    RefChain,
    OwnershipTracker,
)

# =============================================================================
# Base Classes
# =============================================================================
from ._base import (
    SparseMatrixBase,
    SparseVectorBase,
)

# =============================================================================
# Engines
# =============================================================================
from ._compact import CompactMatrix, CompactVector
from ._map import MapMatrix, MapVector
from ._windowed import WindowedMatrix, WindowedVector
from ._store import DualMapStore

# =============================================================================
# Operations
# =============================================================================
from ._ops import (
    matrix_type,
    vector_type,
    matrix,
    vector,
    identity,
    vstack,
    hstack,
    from_dense,
    to_dense,
    from_scipy,
    to_scipy,
    shares_memory,
)

from ._serialize import (
    to_dict,
    from_dict,
    to_json,
    from_json,
    matrix_from_json,
    vector_from_json,
)


__all__ = [
    # ---- Base Classes ----
    'SparseMatrixBase',
    'SparseVectorBase',

    # ---- Engines ----
    'CompactMatrix',
    'CompactVector',
    'MapMatrix',
    'MapVector',
    'WindowedMatrix',
    'WindowedVector',
    'DualMapStore',

    # ---- Backend/Ownership (Advanced) ----
    'Backend',
    'Ownership',
    'StorageInfo',
    'RefChain',
    'OwnershipTracker',

    # ---- Factories ----
    'matrix_type',
    'vector_type',
    'matrix',
    'vector',
    'identity',

    # ---- Stacking ----
    'vstack',
    'hstack',

    # ---- Conversion ----
    'from_dense',
    'to_dense',
    'from_scipy',
    'to_scipy',

    # ---- Wire Format ----
    'to_dict',
    'from_dict',
    'to_json',
    'from_json',
    'matrix_from_json',
    'vector_from_json',

    # ---- Aliasing ----
    'shares_memory',
]
