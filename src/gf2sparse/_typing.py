"""
gf2sparse Type Definitions and Input Dispatch.

This module provides protocols and conversion helpers so that public
functions can accept any of:

    - gf2sparse values (any engine)
    - SciPy sparse matrices
    - NumPy arrays
    - Python sequences (nested lists / tuples)

Example:
    >>> from gf2sparse._typing import as_matrix
    >>>
    >>> m = as_matrix([[1, 0], [0, 1]])              # configured backend
    >>> m = as_matrix(scipy_csr, backend='map')      # MapMatrix copy
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

from ._errors import InvalidArgument

if TYPE_CHECKING:
    import numpy as np
    from scipy import sparse as sp
    from .sparse import Backend, SparseMatrixBase, SparseVectorBase


# =============================================================================
# Protocol Definitions
# =============================================================================

@runtime_checkable
class BitMatrixLike(Protocol):
    """Anything exposing a shape and its set positions."""

    @property
    def shape(self) -> Tuple[int, int]:
        ...

    def iter_nonzero(self) -> Iterator[Tuple[int, int]]:
        ...


@runtime_checkable
class BitVectorLike(Protocol):
    """Anything exposing a length and its sorted set positions."""

    def __len__(self) -> int:
        ...

    def nonzero_indices(self) -> List[int]:
        ...


MatrixInput = Union["SparseMatrixBase", "sp.spmatrix", "np.ndarray", Sequence[Sequence[int]]]
VectorInput = Union["SparseVectorBase", "np.ndarray", Sequence[int]]
BackendInput = Optional[Union["Backend", str]]


# =============================================================================
# Format Detection
# =============================================================================

def is_scipy_sparse(obj: Any) -> bool:
    from scipy import sparse as sp
    return sp.issparse(obj)


def is_numpy_array(obj: Any) -> bool:
    import numpy as np
    return isinstance(obj, np.ndarray)


def get_format(obj: Any) -> str:
    """Detect the input format.

    Returns:
        One of 'matrix', 'vector', 'scipy', 'numpy', 'sequence',
        'bitmatrix', 'bitvector', 'unknown'.
    """
    from .sparse import SparseMatrixBase, SparseVectorBase

    if isinstance(obj, SparseMatrixBase):
        return "matrix"
    elif isinstance(obj, SparseVectorBase):
        return "vector"
    elif is_scipy_sparse(obj):
        return "scipy"
    elif is_numpy_array(obj):
        return "numpy"
    elif isinstance(obj, (list, tuple)):
        return "sequence"
    elif isinstance(obj, BitMatrixLike):
        return "bitmatrix"
    elif isinstance(obj, BitVectorLike):
        return "bitvector"
    return "unknown"


# =============================================================================
# Conversion Functions
# =============================================================================

def as_matrix(obj: MatrixInput, backend: BackendInput = None,
              copy: bool = False) -> "SparseMatrixBase":
    """Coerce ``obj`` to a gf2sparse matrix.

    Args:
        obj: Matrix of any engine, scipy sparse matrix, 2-D numpy array or
            nested sequence.
        backend: Target engine. None keeps an existing matrix's engine and
            uses ``config.default_backend`` for everything else.
        copy: Always return a new matrix, even when ``obj`` already matches.

    Raises:
        InvalidArgument: If ``obj`` cannot be interpreted as a matrix.
    """
    from .sparse import from_dense, from_scipy, matrix_type

    fmt = get_format(obj)
    if fmt == "matrix":
        if backend is None:
            return obj.copy() if copy else obj
        cls = matrix_type(backend)
        if isinstance(obj, cls) and not copy:
            return obj
        return cls.from_matrix(obj)
    if fmt == "vector":
        return matrix_type(backend).from_vector(obj)
    if fmt == "scipy":
        return from_scipy(obj, backend=backend)
    if fmt in ("numpy", "sequence"):
        import numpy as np
        arr = np.asarray(obj)
        if arr.ndim != 2:
            raise InvalidArgument(f"expected a 2-D array, got {arr.ndim}-D")
        return from_dense(arr, backend=backend)
    if fmt == "bitmatrix":
        rows, cols = obj.shape
        out = matrix_type(backend)(rows, cols)
        for i, j in obj.iter_nonzero():
            out.set(i, j, 1)
        return out
    raise InvalidArgument(f"cannot interpret {type(obj).__name__} as a matrix")


def as_vector(obj: VectorInput, backend: BackendInput = None,
              copy: bool = False) -> "SparseVectorBase":
    """Coerce ``obj`` to a gf2sparse vector.

    Accepts vectors of any engine, 1-D numpy arrays, flat sequences, and
    1 x n matrices (their single row).
    """
    from .sparse import from_dense, vector_type

    fmt = get_format(obj)
    if fmt == "vector":
        if backend is None:
            return obj.copy() if copy else obj
        cls = vector_type(backend)
        if isinstance(obj, cls) and not copy:
            return obj
        return cls.from_vector(obj)
    if fmt == "matrix":
        if obj.rows != 1:
            raise InvalidArgument(f"only a 1 x n matrix converts to a vector, got {obj.shape}")
        return vector_type(backend)._from_indices(obj.cols, obj.row_indices(0))
    if fmt in ("numpy", "sequence"):
        import numpy as np
        arr = np.asarray(obj)
        if arr.ndim != 1:
            raise InvalidArgument(f"expected a 1-D array, got {arr.ndim}-D")
        return from_dense(arr, backend=backend)
    if fmt == "bitvector":
        return vector_type(backend)._from_indices(len(obj), obj.nonzero_indices())
    raise InvalidArgument(f"cannot interpret {type(obj).__name__} as a vector")


__all__ = [
    "BitMatrixLike",
    "BitVectorLike",
    "MatrixInput",
    "VectorInput",
    "is_scipy_sparse",
    "is_numpy_array",
    "get_format",
    "as_matrix",
    "as_vector",
]
