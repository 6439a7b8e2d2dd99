"""
gf2sparse - Sparse Linear Algebra over GF(2)

Binary sparse matrices and vectors where addition is XOR and
multiplication is AND, with:
- Three storage engines behind one contract (compact, map, windowed)
- Gaussian-elimination primitives (add_rows, swap_rows, swap_columns)
- Zero-copy aliasing windows (windowed engine)
- numpy / scipy interop and a JSON wire format

Architecture:
    ┌──────────────────────────────────────────────┐
    │     SparseMatrixBase / SparseVectorBase      │
    ├──────────────────────────────────────────────┤
    │  Backend: COMPACT | MAP | WINDOWED           │
    │  Ownership: OWNED | VIEW                     │
    └──────────────────────────────────────────────┘

Example:
    >>> import gf2sparse
    >>>
    >>> h = gf2sparse.matrix(3, 6, [1, 1, 0, 1, 0, 0,
    ...                             0, 1, 1, 0, 1, 0,
    ...                             1, 0, 0, 0, 1, 1])
    >>> h.add_rows(0, 2, 2)
    >>> h.row_indices(2)
    [1, 3, 4, 5]
    >>>
    >>> with gf2sparse.config.local(backend=gf2sparse.BackendConfig('windowed')):
    ...     w = gf2sparse.identity(4)   # WindowedMatrix
"""

import logging

__version__ = '0.1.0'

logging.getLogger("gf2sparse").addHandler(logging.NullHandler())

from ._config import (
    config,
    get_config,
    SparseConfig,
    BackendConfig,
    SerializeConfig,
    RenderConfig,
)

from ._errors import (
    GF2Error,
    IndexOutOfRange,
    ShapeMismatch,
    InvalidArgument,
    SelfAliasViolation,
)

# Import main modules
from . import sparse

from .sparse import (
    # Engines
    SparseMatrixBase,
    SparseVectorBase,
    CompactMatrix,
    CompactVector,
    MapMatrix,
    MapVector,
    WindowedMatrix,
    WindowedVector,

    # Backend/Ownership enums
    Backend,
    Ownership,

    # Factories
    matrix,
    vector,
    identity,

    # Stacking
    vstack,
    hstack,

    # Conversion
    from_dense,
    to_dense,
    from_scipy,
    to_scipy,
    to_json,
    from_json,

    shares_memory,
)

from ._typing import as_matrix, as_vector

__all__ = [
    # Version
    '__version__',

    # Modules
    'sparse',

    # Configuration
    'config',
    'get_config',
    'SparseConfig',
    'BackendConfig',
    'SerializeConfig',
    'RenderConfig',

    # Errors
    'GF2Error',
    'IndexOutOfRange',
    'ShapeMismatch',
    'InvalidArgument',
    'SelfAliasViolation',

    # Engines
    'SparseMatrixBase',
    'SparseVectorBase',
    'CompactMatrix',
    'CompactVector',
    'MapMatrix',
    'MapVector',
    'WindowedMatrix',
    'WindowedVector',

    # Backend/Ownership
    'Backend',
    'Ownership',

    # Factories
    'matrix',
    'vector',
    'identity',

    # Stacking
    'vstack',
    'hstack',

    # Conversion
    'from_dense',
    'to_dense',
    'from_scipy',
    'to_scipy',
    'to_json',
    'from_json',
    'as_matrix',
    'as_vector',

    'shares_memory',
]
