"""High-Level Sparse Operations.

This module provides functional operations on GF(2) sparse values:
- Factories that honour the configured default backend
- Stacking operations (vstack, hstack)
- Cross-library conversions (numpy, scipy)

Example:
    >>> from gf2sparse.sparse import matrix, vstack, to_scipy
    >>>
    >>> a = matrix(2, 3, [1, 0, 1, 0, 1, 0])
    >>> aug = hstack([a, identity(2)])
    >>> to_scipy(aug).nnz
    5
"""

from typing import Any, List, Optional, Sequence, Union
import logging

import numpy as np
from scipy import sparse as sp

from .._config import get_config
from .._errors import InvalidArgument, ShapeMismatch
from ._backend import Backend
from ._base import SparseMatrixBase, SparseVectorBase
from ._compact import CompactMatrix, CompactVector
from ._map import MapMatrix, MapVector
from ._windowed import WindowedMatrix, WindowedVector, shares_memory

logger = logging.getLogger("gf2sparse.sparse.ops")

__all__ = [
    # Engine lookup
    'matrix_type',
    'vector_type',

    # Factories
    'matrix',
    'vector',
    'identity',

    # Stacking
    'vstack',
    'hstack',

    # Cross-library
    'from_dense',
    'to_dense',
    'from_scipy',
    'to_scipy',

    # Aliasing
    'shares_memory',
]


_MATRIX_TYPES = {
    Backend.COMPACT: CompactMatrix,
    Backend.MAP: MapMatrix,
    Backend.WINDOWED: WindowedMatrix,
}

_VECTOR_TYPES = {
    Backend.COMPACT: CompactVector,
    Backend.MAP: MapVector,
    Backend.WINDOWED: WindowedVector,
}


def _resolve(backend: Optional[Union[Backend, str]]) -> Backend:
    if backend is None:
        backend = get_config().default_backend
    try:
        return Backend.parse(backend)
    except ValueError:
        raise InvalidArgument(
            f"Unknown backend {backend!r}. Supported: {[b.value for b in Backend]}"
        ) from None


def matrix_type(backend: Optional[Union[Backend, str]] = None) -> type:
    """Matrix class for ``backend`` (configured default when None)."""
    return _MATRIX_TYPES[_resolve(backend)]


def vector_type(backend: Optional[Union[Backend, str]] = None) -> type:
    """Vector class for ``backend`` (configured default when None)."""
    return _VECTOR_TYPES[_resolve(backend)]


# =============================================================================
# Factories
# =============================================================================

def matrix(rows: int, cols: int, values: Any = None,
           backend: Optional[Union[Backend, str]] = None) -> SparseMatrixBase:
    """Create a ``rows x cols`` matrix, optionally seeded row-major.

    Args:
        rows: Number of rows.
        cols: Number of columns.
        values: Optional flat sequence of ``rows * cols`` values; odd
            entries become 1.
        backend: Storage engine; defaults to ``config.default_backend``.

    Returns:
        New matrix of the requested engine.
    """
    return matrix_type(backend)(rows, cols, values)


def vector(length: int, values: Any = None,
           backend: Optional[Union[Backend, str]] = None) -> SparseVectorBase:
    """Create a vector of ``length`` bits, optionally seeded."""
    return vector_type(backend)(length, values)


def identity(size: int, backend: Optional[Union[Backend, str]] = None) -> SparseMatrixBase:
    """Square identity matrix."""
    return matrix_type(backend).identity(size)


# =============================================================================
# Stacking Operations
# =============================================================================

def vstack(matrices: Sequence[SparseMatrixBase]) -> SparseMatrixBase:
    """Vertically stack matrices (row concatenation).

    The result is a copy in the engine of the first matrix.

    Args:
        matrices: Matrices with the same column count.

    Returns:
        New matrix with ``sum(rows)`` rows.

    Raises:
        InvalidArgument: If the sequence is empty.
        ShapeMismatch: If column counts differ.
    """
    if not matrices:
        raise InvalidArgument("Cannot stack an empty sequence of matrices")

    cols = matrices[0].cols
    for m in matrices[1:]:
        if m.cols != cols:
            raise ShapeMismatch(f"Column mismatch: {m.cols} vs {cols}")

    total = sum(m.rows for m in matrices)
    out = matrices[0]._matrix_type()(total, cols)
    offset = 0
    for m in matrices:
        for i, j in m.iter_nonzero():
            out._set(offset + i, j, 1)
        offset += m.rows

    logger.debug("vstack of %d matrices -> %s", len(matrices), out.shape)
    return out


def hstack(matrices: Sequence[SparseMatrixBase]) -> SparseMatrixBase:
    """Horizontally stack matrices (column concatenation).

    The result is a copy in the engine of the first matrix.

    Raises:
        InvalidArgument: If the sequence is empty.
        ShapeMismatch: If row counts differ.
    """
    if not matrices:
        raise InvalidArgument("Cannot stack an empty sequence of matrices")

    rows = matrices[0].rows
    for m in matrices[1:]:
        if m.rows != rows:
            raise ShapeMismatch(f"Row mismatch: {m.rows} vs {rows}")

    total = sum(m.cols for m in matrices)
    out = matrices[0]._matrix_type()(rows, total)
    offset = 0
    for m in matrices:
        for i, j in m.iter_nonzero():
            out._set(i, offset + j, 1)
        offset += m.cols

    logger.debug("hstack of %d matrices -> %s", len(matrices), out.shape)
    return out


# =============================================================================
# Cross-Library Conversions
# =============================================================================

def from_dense(array: Any, backend: Optional[Union[Backend, str]] = None
               ) -> Union[SparseMatrixBase, SparseVectorBase]:
    """Build a matrix (2-D input) or vector (1-D input) from an array-like.

    Odd entries become 1; even entries become 0.
    """
    arr = np.asarray(array)
    if arr.ndim == 1:
        return vector_type(backend)(arr.shape[0], arr)
    if arr.ndim == 2:
        return matrix_type(backend).from_dense(arr)
    raise InvalidArgument(f"expected a 1-D or 2-D array, got {arr.ndim}-D")


def to_dense(value: Union[SparseMatrixBase, SparseVectorBase]) -> np.ndarray:
    """Dense ``uint8`` numpy array."""
    return value.to_dense()


def from_scipy(mat: Any, backend: Optional[Union[Backend, str]] = None) -> SparseMatrixBase:
    """Build a matrix from any scipy sparse matrix or array.

    Stored entries are reduced mod 2; explicit zeros and even values are
    dropped. The data is always copied.
    """
    if not sp.issparse(mat):
        raise InvalidArgument(f"expected a scipy sparse matrix, got {type(mat).__name__}")

    coo = sp.coo_matrix(mat)
    odd = (coo.data.astype(np.int64) % 2) == 1
    rows = coo.row[odd].tolist()
    cols = coo.col[odd].tolist()

    out = matrix_type(backend)(coo.shape[0], coo.shape[1])
    for i, j in zip(rows, cols):
        # Duplicate coordinates sum before the parity test.
        out._set(i, j, 1 - out._at(i, j))
    logger.debug("from_scipy %s nnz=%d -> %s", coo.shape, out.nnz, out.backend.value)
    return out


def to_scipy(mat: SparseMatrixBase) -> sp.csr_matrix:
    """Convert to ``scipy.sparse.csr_matrix`` with dtype uint8."""
    row_list, col_list = mat.nonzero()
    data = np.ones(len(row_list), dtype=np.uint8)
    out = sp.csr_matrix(
        (data, (np.asarray(row_list, dtype=np.int64), np.asarray(col_list, dtype=np.int64))),
        shape=mat.shape,
        dtype=np.uint8,
    )
    logger.debug("to_scipy %s nnz=%d", mat.shape, out.nnz)
    return out
