"""
Sparse Base Classes

This module defines the abstract base classes for the gf2sparse type system.
Every storage engine implements the same GF(2) contract, so values produced
by different engines can be compared and combined freely.

Type Hierarchy:

    SparseMatrixBase (ABC)
    ├── CompactMatrix   - sorted parallel row/column index lists
    ├── MapMatrix       - dual hash maps
    └── WindowedMatrix  - zero-copy windows over a shared dual-map store

    SparseVectorBase (ABC)
    ├── CompactVector   - sorted index list
    ├── MapVector       - index set
    └── WindowedVector  - 1 x n window over a shared dual-map store

Design:

1. Logical Equality: equality and every binary operation are defined on the
   (row, col) -> bit mapping only, never on internal representation.

2. Minimal Engine Surface: an engine supplies unchecked ``_at``/``_set``,
   ``nnz`` and iteration. Everything else has a generic implementation here
   that engines may override for speed.

3. Checked Public Surface: bounds and shapes are validated by the public
   methods before the unchecked primitives run.

Arithmetic is over GF(2): addition is XOR, multiplication is AND.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Sequence, Set, Tuple
import numpy as np

from .._errors import (
    InvalidArgument,
    IndexOutOfRange,
    SelfAliasViolation,
    ShapeMismatch,
    check_extent,
    check_index,
)
from ._backend import Backend, Ownership, StorageInfo

__all__ = [
    'SparseMatrixBase',
    'SparseVectorBase',
]


def _bit(value: Any) -> int:
    """Odd values are 1, even values are 0."""
    return int(value) % 2


def _seed_positions(values: Any, expected: int) -> np.ndarray:
    """Flat positions of the odd entries of a row-major seed array."""
    flat = np.asarray(values).ravel()
    if flat.size != expected:
        raise InvalidArgument(
            f"values has {flat.size} elements, expected {expected}"
        )
    if flat.size == 0:
        return np.empty(0, dtype=np.int64)
    return np.flatnonzero(flat.astype(np.int64) % 2)


def _check_window(name: str, offset: int, extent: int, limit: int) -> None:
    if offset < 0:
        raise InvalidArgument(f"{name} offset must be non-negative, got {offset}")
    if extent <= 0:
        raise InvalidArgument(f"{name} extent must be positive, got {extent}")
    if offset + extent > limit:
        raise IndexOutOfRange(
            f"{offset + extent - 1} out of range: [0-{limit - 1}]"
        )


class SparseMatrixBase(ABC):
    """
    Abstract base class for all GF(2) sparse matrices.

    Required (subclasses must implement):
        shape: Matrix dimensions (rows, cols)
        nnz: Number of set bits
        _at(i, j): Unchecked read, returns 0 or 1
        _set(i, j, v): Unchecked write of a bit (0 or 1)
        iter_nonzero(): Set positions in row-major order
        _matrix_type(), _vector_type(): Engine classes for new values

    Optional (subclasses may override for speed):
        row_indices, column_indices, zeroize, swap_rows, swap_columns,
        add_rows, add_columns, row, column, slice, transpose

    Example:

        m = CompactMatrix(2, 2, [1, 0, 0, 1])
        m.swap_rows(0, 1)
        assert m == MapMatrix(2, 2, [0, 1, 1, 0])
    """

    BACKEND: Backend

    def __init__(self, rows: int, cols: int, values: Any = None):
        check_extent("rows", rows)
        check_extent("cols", cols)
        self._init_storage(rows, cols)
        if values is not None:
            for pos in _seed_positions(values, rows * cols).tolist():
                self._set(pos // cols, pos % cols, 1)

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @abstractmethod
    def _init_storage(self, rows: int, cols: int) -> None:
        ...

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        ...

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Number of set bits."""
        ...

    @abstractmethod
    def _at(self, i: int, j: int) -> int:
        ...

    @abstractmethod
    def _set(self, i: int, j: int, v: int) -> None:
        ...

    @abstractmethod
    def iter_nonzero(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(i, j)`` of every set bit in row-major order."""
        ...

    @classmethod
    @abstractmethod
    def _matrix_type(cls) -> type:
        ...

    @classmethod
    @abstractmethod
    def _vector_type(cls) -> type:
        ...

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def identity(cls, size: int) -> 'SparseMatrixBase':
        """Square matrix with the diagonal set."""
        m = cls._matrix_type()(size, size)
        for i in range(size):
            m._set(i, i, 1)
        return m

    @classmethod
    def from_matrix(cls, source: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """Deep copy of ``source`` (any engine). Never aliases."""
        if not isinstance(source, SparseMatrixBase):
            raise InvalidArgument(f"expected a sparse matrix, got {type(source).__name__}")
        m = cls._matrix_type()(*source.shape)
        for i, j in list(source.iter_nonzero()):
            m._set(i, j, 1)
        return m

    @classmethod
    def from_vector(cls, vec: 'SparseVectorBase') -> 'SparseMatrixBase':
        """1 x len(vec) matrix holding the bits of ``vec``."""
        if not isinstance(vec, SparseVectorBase):
            raise InvalidArgument(f"expected a sparse vector, got {type(vec).__name__}")
        m = cls._matrix_type()(1, len(vec))
        for j in vec.nonzero_indices():
            m._set(0, j, 1)
        return m

    @classmethod
    def from_dense(cls, array: Any) -> 'SparseMatrixBase':
        """Build from a 2-D array-like (numpy array or nested lists)."""
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise InvalidArgument(f"expected a 2-D array, got {arr.ndim}-D")
        return cls._matrix_type()(arr.shape[0], arr.shape[1], arr)

    @classmethod
    def from_json(cls, text: str) -> 'SparseMatrixBase':
        """Rebuild from the ``{"Rows", "Cols", "RowIndices", "ColIndices"}`` form."""
        from ._serialize import matrix_from_json
        return cls.from_matrix(matrix_from_json(text, backend=Backend.COMPACT))

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def backend(self) -> Backend:
        return self.BACKEND

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    @property
    def ndim(self) -> int:
        return 2

    @property
    def size(self) -> int:
        """Total number of cells (rows * cols)."""
        return self.shape[0] * self.shape[1]

    @property
    def density(self) -> float:
        """Fraction of set bits."""
        total = self.size
        return self.nnz / total if total > 0 else 0.0

    @property
    def is_view(self) -> bool:
        """Whether this matrix is a window into another matrix's storage."""
        return False

    def dims(self) -> Tuple[int, int]:
        return self.shape

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            backend=self.backend,
            ownership=Ownership.VIEW if self.is_view else Ownership.OWNED,
            shape=self.shape,
            nnz=self.nnz,
        )

    # =========================================================================
    # Element Access
    # =========================================================================

    def _check_cell(self, i: int, j: int) -> None:
        check_index(i, self.rows)
        check_index(j, self.cols)

    def at(self, i: int, j: int) -> int:
        """Bit at row ``i``, column ``j``."""
        self._check_cell(i, j)
        return self._at(i, j)

    def set(self, i: int, j: int, v: Any) -> None:
        """Write a bit; odd ``v`` sets it, even ``v`` clears it."""
        self._check_cell(i, j)
        self._set(i, j, _bit(v))

    def __getitem__(self, key: Tuple[int, int]) -> int:
        i, j = key
        return self.at(i, j)

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        i, j = key
        self.set(i, j, value)

    # =========================================================================
    # Queries
    # =========================================================================

    def is_zero(self) -> bool:
        return self.nnz == 0

    def nonzero(self) -> Tuple[List[int], List[int]]:
        """Row and column index lists of every set bit, row-major."""
        row_list: List[int] = []
        col_list: List[int] = []
        for i, j in self.iter_nonzero():
            row_list.append(i)
            col_list.append(j)
        return row_list, col_list

    def row_indices(self, i: int) -> List[int]:
        """Sorted column indices of the set bits in row ``i``."""
        check_index(i, self.rows)
        return [c for r, c in self.iter_nonzero() if r == i]

    def column_indices(self, j: int) -> List[int]:
        """Sorted row indices of the set bits in column ``j``."""
        check_index(j, self.cols)
        return [r for r, c in self.iter_nonzero() if c == j]

    def equals(self, other: Any) -> bool:
        """Logical equality: same shape and same set bits."""
        if not isinstance(other, SparseMatrixBase):
            return False
        if self.shape != other.shape or self.nnz != other.nnz:
            return False
        return set(self.iter_nonzero()) == set(other.iter_nonzero())

    # =========================================================================
    # Mutation
    # =========================================================================

    def set_row(self, i: int, vec: 'SparseVectorBase') -> None:
        """Overwrite row ``i`` with the bits of ``vec``."""
        check_index(i, self.rows)
        if len(vec) != self.cols:
            raise ShapeMismatch(f"vector length {len(vec)} != cols {self.cols}")
        bits = set(vec.nonzero_indices())
        for j in range(self.cols):
            self._set(i, j, 1 if j in bits else 0)

    def set_column(self, j: int, vec: 'SparseVectorBase') -> None:
        """Overwrite column ``j`` with the bits of ``vec``."""
        check_index(j, self.cols)
        if len(vec) != self.rows:
            raise ShapeMismatch(f"vector length {len(vec)} != rows {self.rows}")
        bits = set(vec.nonzero_indices())
        for i in range(self.rows):
            self._set(i, j, 1 if i in bits else 0)

    def set_matrix(self, a: 'SparseMatrixBase', i: int = 0, j: int = 0) -> None:
        """Copy ``a`` into the block whose top-left corner is ``(i, j)``."""
        if i < 0 or j < 0:
            raise InvalidArgument(f"offsets must be non-negative, got ({i}, {j})")
        if i + a.rows > self.rows or j + a.cols > self.cols:
            raise ShapeMismatch(
                f"{a.shape} at ({i}, {j}) does not fit in {self.shape}"
            )
        bits = set(a.iter_nonzero())
        for r in range(a.rows):
            for c in range(a.cols):
                self._set(i + r, j + c, 1 if (r, c) in bits else 0)

    def zeroize(self) -> None:
        """Clear every bit."""
        for i, j in list(self.iter_nonzero()):
            self._set(i, j, 0)

    def zeroize_range(self, i: int, j: int, rows: int, cols: int) -> None:
        """Clear every bit inside the ``rows x cols`` block at ``(i, j)``."""
        if i < 0 or j < 0 or rows < 0 or cols < 0:
            raise InvalidArgument(
                f"negative range ({i}, {j}, {rows}, {cols})"
            )
        if i + rows > self.rows:
            raise IndexOutOfRange(f"{i + rows - 1} out of range: [0-{self.rows - 1}]")
        if j + cols > self.cols:
            raise IndexOutOfRange(f"{j + cols - 1} out of range: [0-{self.cols - 1}]")
        for r, c in list(self.iter_nonzero()):
            if i <= r < i + rows and j <= c < j + cols:
                self._set(r, c, 0)

    def swap_rows(self, i1: int, i2: int) -> None:
        check_index(i1, self.rows)
        check_index(i2, self.rows)
        if i1 == i2:
            return
        row1 = self.row_indices(i1)
        row2 = self.row_indices(i2)
        for c in row1:
            self._set(i1, c, 0)
        for c in row2:
            self._set(i2, c, 0)
        for c in row2:
            self._set(i1, c, 1)
        for c in row1:
            self._set(i2, c, 1)

    def swap_columns(self, j1: int, j2: int) -> None:
        check_index(j1, self.cols)
        check_index(j2, self.cols)
        if j1 == j2:
            return
        col1 = self.column_indices(j1)
        col2 = self.column_indices(j2)
        for r in col1:
            self._set(r, j1, 0)
        for r in col2:
            self._set(r, j2, 0)
        for r in col2:
            self._set(r, j1, 1)
        for r in col1:
            self._set(r, j2, 1)

    def add_rows(self, i1: int, i2: int, dest: int) -> None:
        """Row ``dest`` becomes ``row(i1) XOR row(i2)``; ``dest`` may be either."""
        for i in (i1, i2, dest):
            check_index(i, self.rows)
        result = set(self.row_indices(i1)) ^ set(self.row_indices(i2))
        for c in self.row_indices(dest):
            if c not in result:
                self._set(dest, c, 0)
        for c in result:
            self._set(dest, c, 1)

    def add_columns(self, j1: int, j2: int, dest: int) -> None:
        """Column ``dest`` becomes ``column(j1) XOR column(j2)``."""
        for j in (j1, j2, dest):
            check_index(j, self.cols)
        result = set(self.column_indices(j1)) ^ set(self.column_indices(j2))
        for r in self.column_indices(dest):
            if r not in result:
                self._set(r, dest, 0)
        for r in result:
            self._set(r, dest, 1)

    def negate(self) -> 'SparseMatrixBase':
        """Flip every bit in place."""
        bits = set(self.iter_nonzero())
        for i in range(self.rows):
            for j in range(self.cols):
                self._set(i, j, 0 if (i, j) in bits else 1)
        return self

    # =========================================================================
    # Destination-Style Algebra (self is the destination)
    # =========================================================================

    def _aliases(self, other: Any) -> bool:
        """Whether writing to self could change ``other``."""
        return self is other

    def _check_not_aliased(self, *operands: Any) -> None:
        for op in operands:
            if self._aliases(op):
                raise SelfAliasViolation(
                    f"destination {type(self).__name__} aliases an operand"
                )

    def _check_same_shape(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> None:
        if not (self.shape == a.shape == b.shape):
            raise ShapeMismatch(
                f"shapes differ: dest {self.shape}, a {a.shape}, b {b.shape}"
            )

    def _assign(self, bits: Set[Tuple[int, int]]) -> None:
        for i, j in list(self.iter_nonzero()):
            if (i, j) not in bits:
                self._set(i, j, 0)
        for i, j in bits:
            self._set(i, j, 1)

    def add(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """self = a + b. The destination may be ``a`` or ``b``."""
        self._check_same_shape(a, b)
        self._assign(set(a.iter_nonzero()) ^ set(b.iter_nonzero()))
        return self

    def xor(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """self = a XOR b."""
        self._check_same_shape(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.iter_nonzero()) ^ set(b.iter_nonzero()))
        return self

    def and_(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """self = a AND b."""
        self._check_same_shape(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.iter_nonzero()) & set(b.iter_nonzero()))
        return self

    def or_(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """self = a OR b."""
        self._check_same_shape(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.iter_nonzero()) | set(b.iter_nonzero()))
        return self

    def mul(self, a: 'SparseMatrixBase', b: 'SparseMatrixBase') -> 'SparseMatrixBase':
        """self = a . b over GF(2).

        Every output cell is visited: cell (i, j) is the parity of
        ``|row_i(a) & column_j(b)|``.
        """
        if a.cols != b.rows:
            raise ShapeMismatch(f"cannot multiply {a.shape} by {b.shape}")
        if self.shape != (a.rows, b.cols):
            raise ShapeMismatch(
                f"destination {self.shape} != product shape {(a.rows, b.cols)}"
            )
        self._check_not_aliased(a, b)

        a_rows = [set(a.row_indices(i)) for i in range(a.rows)]
        b_cols = [set(b.column_indices(j)) for j in range(b.cols)]
        bits = set()
        for i, row in enumerate(a_rows):
            if not row:
                continue
            for j, col in enumerate(b_cols):
                if len(row & col) % 2:
                    bits.add((i, j))
        self._assign(bits)
        return self

    # =========================================================================
    # Derived Values
    # =========================================================================

    def row(self, i: int) -> 'SparseVectorBase':
        """Row ``i`` as a vector."""
        check_index(i, self.rows)
        return self._vector_type()._from_indices(self.cols, self.row_indices(i))

    def column(self, j: int) -> 'SparseVectorBase':
        """Column ``j`` as a vector."""
        check_index(j, self.cols)
        return self._vector_type()._from_indices(self.rows, self.column_indices(j))

    def slice(self, i: int, j: int, rows: int, cols: int) -> 'SparseMatrixBase':
        """The ``rows x cols`` block at ``(i, j)``, as an independent copy."""
        _check_window("row", i, rows, self.rows)
        _check_window("column", j, cols, self.cols)
        m = self._matrix_type()(rows, cols)
        for r, c in self.iter_nonzero():
            if i <= r < i + rows and j <= c < j + cols:
                m._set(r - i, c - j, 1)
        return m

    def transpose(self) -> 'SparseMatrixBase':
        """Transposed independent copy."""
        m = self._matrix_type()(self.cols, self.rows)
        for i, j in self.iter_nonzero():
            m._set(j, i, 1)
        return m

    @property
    def T(self) -> 'SparseMatrixBase':
        return self.transpose()

    def copy(self) -> 'SparseMatrixBase':
        """Deep copy in this engine. Never aliases."""
        return self._matrix_type().from_matrix(self)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Dense ``uint8`` numpy array."""
        out = np.zeros(self.shape, dtype=np.uint8)
        row_list, col_list = self.nonzero()
        if row_list:
            out[row_list, col_list] = 1
        return out

    def to_scipy(self):
        """scipy.sparse.csr_matrix with dtype uint8."""
        from ._ops import to_scipy
        return to_scipy(self)

    def to_json(self, **kwargs) -> str:
        from ._serialize import to_json
        return to_json(self, **kwargs)

    # =========================================================================
    # Operators (return new matrices of the left operand's engine)
    # =========================================================================

    def _binary(self, other: Any, op: str):
        if not isinstance(other, SparseMatrixBase):
            return NotImplemented
        out = self._matrix_type()(*self.shape)
        return getattr(out, op)(self, other)

    def __add__(self, other):
        return self._binary(other, 'add')

    def __xor__(self, other):
        return self._binary(other, 'xor')

    def __and__(self, other):
        return self._binary(other, 'and_')

    def __or__(self, other):
        return self._binary(other, 'or_')

    def __matmul__(self, other):
        if isinstance(other, SparseVectorBase):
            out = self._vector_type()(self.rows)
            return out.mat_mul(self, other)
        if not isinstance(other, SparseMatrixBase):
            return NotImplemented
        out = self._matrix_type()(self.rows, other.cols)
        return out.mul(self, other)

    def __invert__(self):
        return self.copy().negate()

    def __eq__(self, other):
        if not isinstance(other, SparseMatrixBase):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, nnz={self.nnz})"

    def __str__(self) -> str:
        from ._serialize import render_matrix
        return render_matrix(self)

    def __len__(self) -> int:
        """Return number of rows."""
        return self.shape[0]

    def __iter__(self) -> Iterator['SparseVectorBase']:
        for i in range(self.rows):
            yield self.row(i)

    def __bool__(self) -> bool:
        """Return True if any bit is set."""
        return self.nnz > 0


class SparseVectorBase(ABC):
    """
    Abstract base class for all GF(2) sparse vectors.

    Required (subclasses must implement):
        __len__, nnz, _at(i), _set(i, v), nonzero_indices(),
        _init_storage(length), _vector_type()
    """

    BACKEND: Backend

    def __init__(self, length: int, values: Any = None):
        check_extent("length", length)
        self._init_storage(length)
        if values is not None:
            for pos in _seed_positions(values, length).tolist():
                self._set(pos, 1)

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @abstractmethod
    def _init_storage(self, length: int) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Number of set bits."""
        ...

    @abstractmethod
    def _at(self, i: int) -> int:
        ...

    @abstractmethod
    def _set(self, i: int, v: int) -> None:
        ...

    @abstractmethod
    def nonzero_indices(self) -> List[int]:
        """Sorted positions of the set bits."""
        ...

    @classmethod
    @abstractmethod
    def _vector_type(cls) -> type:
        ...

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def _from_indices(cls, length: int, indices: Sequence[int]) -> 'SparseVectorBase':
        v = cls._vector_type()(length)
        for i in indices:
            v._set(i, 1)
        return v

    @classmethod
    def from_vector(cls, source: 'SparseVectorBase') -> 'SparseVectorBase':
        """Deep copy of ``source`` (any engine). Never aliases."""
        if not isinstance(source, SparseVectorBase):
            raise InvalidArgument(f"expected a sparse vector, got {type(source).__name__}")
        return cls._from_indices(len(source), source.nonzero_indices())

    @classmethod
    def from_json(cls, text: str) -> 'SparseVectorBase':
        """Rebuild from the ``{"Length", "Indices"}`` form."""
        from ._serialize import vector_from_json
        return cls.from_vector(vector_from_json(text, backend=Backend.COMPACT))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def backend(self) -> Backend:
        return self.BACKEND

    @property
    def shape(self) -> Tuple[int]:
        return (len(self),)

    @property
    def is_view(self) -> bool:
        return False

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            backend=self.backend,
            ownership=Ownership.VIEW if self.is_view else Ownership.OWNED,
            shape=self.shape,
            nnz=self.nnz,
        )

    # =========================================================================
    # Element Access
    # =========================================================================

    def at(self, i: int) -> int:
        check_index(i, len(self))
        return self._at(i)

    def set(self, i: int, value: Any) -> None:
        check_index(i, len(self))
        self._set(i, _bit(value))

    def __getitem__(self, i: int) -> int:
        return self.at(i)

    def __setitem__(self, i: int, value: Any) -> None:
        self.set(i, value)

    def __iter__(self) -> Iterator[int]:
        bits = set(self.nonzero_indices())
        for i in range(len(self)):
            yield 1 if i in bits else 0

    # =========================================================================
    # Queries
    # =========================================================================

    def is_zero(self) -> bool:
        return self.nnz == 0

    def nonzero_map(self) -> dict:
        """``{index: 1}`` for every set bit."""
        return {i: 1 for i in self.nonzero_indices()}

    def hamming_weight(self) -> int:
        return self.nnz

    def _check_length(self, *others: 'SparseVectorBase') -> None:
        for other in others:
            if len(other) != len(self):
                raise ShapeMismatch(f"vector lengths differ: {len(self)} != {len(other)}")

    def hamming_distance(self, a: 'SparseVectorBase') -> int:
        """Number of positions where the two vectors differ."""
        self._check_length(a)
        return len(set(self.nonzero_indices()) ^ set(a.nonzero_indices()))

    def dot(self, a: 'SparseVectorBase') -> int:
        """Parity of the number of positions set in both vectors."""
        self._check_length(a)
        return len(set(self.nonzero_indices()) & set(a.nonzero_indices())) % 2

    def next_set(self, start: int = 0) -> Optional[int]:
        """First set position ``>= start``, or None if there is none."""
        check_index(start, len(self))
        for i in self.nonzero_indices():
            if i >= start:
                return i
        return None

    def equals(self, other: Any) -> bool:
        if not isinstance(other, SparseVectorBase):
            return False
        if len(self) != len(other) or self.nnz != other.nnz:
            return False
        return self.nonzero_indices() == other.nonzero_indices()

    # =========================================================================
    # Mutation
    # =========================================================================

    def set_vec(self, a: 'SparseVectorBase', i: int = 0) -> None:
        """Copy ``a`` into positions ``[i, i + len(a))``."""
        if i < 0:
            raise InvalidArgument(f"offset must be non-negative, got {i}")
        if i + len(a) > len(self):
            raise ShapeMismatch(
                f"vector of length {len(a)} at {i} does not fit in {len(self)}"
            )
        bits = set(a.nonzero_indices())
        for k in range(len(a)):
            self._set(i + k, 1 if k in bits else 0)

    def negate(self) -> 'SparseVectorBase':
        """Flip every bit in place."""
        bits = set(self.nonzero_indices())
        for i in range(len(self)):
            self._set(i, 0 if i in bits else 1)
        return self

    def _assign(self, bits: Set[int]) -> None:
        for i in self.nonzero_indices():
            if i not in bits:
                self._set(i, 0)
        for i in bits:
            self._set(i, 1)

    # =========================================================================
    # Destination-Style Algebra (self is the destination)
    # =========================================================================

    def _aliases(self, other: Any) -> bool:
        return self is other

    def _check_not_aliased(self, *operands: Any) -> None:
        for op in operands:
            if self._aliases(op):
                raise SelfAliasViolation(
                    f"destination {type(self).__name__} aliases an operand"
                )

    def add(self, a: 'SparseVectorBase', b: 'SparseVectorBase') -> 'SparseVectorBase':
        """self = a + b. The destination may be ``a`` or ``b``."""
        self._check_length(a, b)
        self._assign(set(a.nonzero_indices()) ^ set(b.nonzero_indices()))
        return self

    def xor(self, a: 'SparseVectorBase', b: 'SparseVectorBase') -> 'SparseVectorBase':
        self._check_length(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.nonzero_indices()) ^ set(b.nonzero_indices()))
        return self

    def and_(self, a: 'SparseVectorBase', b: 'SparseVectorBase') -> 'SparseVectorBase':
        self._check_length(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.nonzero_indices()) & set(b.nonzero_indices()))
        return self

    def or_(self, a: 'SparseVectorBase', b: 'SparseVectorBase') -> 'SparseVectorBase':
        self._check_length(a, b)
        self._check_not_aliased(a, b)
        self._assign(set(a.nonzero_indices()) | set(b.nonzero_indices()))
        return self

    def mat_mul(self, mat: SparseMatrixBase, vec: 'SparseVectorBase') -> 'SparseVectorBase':
        """self = mat . vec over GF(2)."""
        if mat.cols != len(vec):
            raise ShapeMismatch(f"cannot multiply {mat.shape} by vector of length {len(vec)}")
        if len(self) != mat.rows:
            raise ShapeMismatch(f"destination length {len(self)} != {mat.rows}")
        self._check_not_aliased(mat, vec)
        v = set(vec.nonzero_indices())
        self._assign({
            i for i in range(mat.rows)
            if len(v.intersection(mat.row_indices(i))) % 2
        })
        return self

    def mul_mat(self, vec: 'SparseVectorBase', mat: SparseMatrixBase) -> 'SparseVectorBase':
        """self = vec . mat over GF(2)."""
        if len(vec) != mat.rows:
            raise ShapeMismatch(f"cannot multiply vector of length {len(vec)} by {mat.shape}")
        if len(self) != mat.cols:
            raise ShapeMismatch(f"destination length {len(self)} != {mat.cols}")
        self._check_not_aliased(vec, mat)
        v = set(vec.nonzero_indices())
        self._assign({
            j for j in range(mat.cols)
            if len(v.intersection(mat.column_indices(j))) % 2
        })
        return self

    # =========================================================================
    # Derived Values
    # =========================================================================

    def slice(self, i: int, length: int) -> 'SparseVectorBase':
        """Positions ``[i, i + length)`` as an independent copy."""
        _check_window("vector", i, length, len(self))
        return self._vector_type()._from_indices(
            length, [k - i for k in self.nonzero_indices() if i <= k < i + length]
        )

    def copy(self) -> 'SparseVectorBase':
        return self._vector_type().from_vector(self)

    def to_dense(self) -> np.ndarray:
        out = np.zeros(len(self), dtype=np.uint8)
        idx = self.nonzero_indices()
        if idx:
            out[idx] = 1
        return out

    def to_json(self, **kwargs) -> str:
        from ._serialize import to_json
        return to_json(self, **kwargs)

    # =========================================================================
    # Operators
    # =========================================================================

    def _binary(self, other: Any, op: str):
        if not isinstance(other, SparseVectorBase):
            return NotImplemented
        out = self._vector_type()(len(self))
        return getattr(out, op)(self, other)

    def __add__(self, other):
        return self._binary(other, 'add')

    def __xor__(self, other):
        return self._binary(other, 'xor')

    def __and__(self, other):
        return self._binary(other, 'and_')

    def __or__(self, other):
        return self._binary(other, 'or_')

    def __matmul__(self, other):
        if isinstance(other, SparseVectorBase):
            return self.dot(other)
        if not isinstance(other, SparseMatrixBase):
            return NotImplemented
        out = self._vector_type()(other.cols)
        return out.mul_mat(self, other)

    def __invert__(self):
        return self.copy().negate()

    def __eq__(self, other):
        if not isinstance(other, SparseVectorBase):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(length={len(self)}, nnz={self.nnz})"

    def __str__(self) -> str:
        from ._serialize import render_vector
        return render_vector(self)

    def __bool__(self) -> bool:
        return self.nnz > 0
