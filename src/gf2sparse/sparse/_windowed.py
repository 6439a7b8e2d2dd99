"""
Windowed (Aliased) Storage

A windowed value is a rectangular window over a DualMapStore that other
windows may share. Each window carries:

    - _row_start, _col_start: offsets of local (0, 0) inside the store
    - _rows, _cols: window extent
    - _transposed: whether col_map plays the role of rows

``slice``, ``transpose``, ``row`` and ``column`` return new windows over the
same store and copy nothing, so writes through any window are visible
through every other window covering the same cells:

    >>> m = WindowedMatrix(4, 4)
    >>> s = m.slice(1, 1, 2, 2)
    >>> s[0, 0] = 1
    >>> m[1, 1]
    1
    >>> m.T[1, 1] = 0     # clears the same bit
    >>> s[0, 0]
    0

Offsets are expressed in the window's own orientation: a transposed
window reads cell (i, j) from base cell (col_start + j, row_start + i).

``copy()`` and ``from_matrix()`` always allocate a fresh store.
"""

from typing import Any, Iterator, List, Tuple

from ._backend import Backend, Ownership, StorageInfo
from ._base import SparseMatrixBase, SparseVectorBase, _check_window
from ._ownership import OwnershipTracker, RefChain
from ._store import DualMapStore
from .._errors import check_index

__all__ = ['WindowedMatrix', 'WindowedVector', 'shares_memory']


class _Window:
    """Offset/extent bookkeeping shared by windowed matrices and vectors."""

    def _init_window(self, rows: int, cols: int) -> None:
        self._store = DualMapStore()
        self._row_start = 0
        self._col_start = 0
        self._rows = rows
        self._cols = cols
        self._transposed = False
        self._ownership = OwnershipTracker.owned()
        self._ref_chain = RefChain()

    @classmethod
    def _view(cls, source: '_Window', row_start: int, col_start: int,
              rows: int, cols: int, transposed: bool):
        """New window of type ``cls`` over ``source``'s store."""
        obj = cls.__new__(cls)
        obj._store = source._store
        obj._row_start = row_start
        obj._col_start = col_start
        obj._rows = rows
        obj._cols = cols
        obj._transposed = transposed
        obj._ownership = OwnershipTracker.view(source)
        obj._ref_chain = RefChain()
        obj._ref_chain.add(source)
        return obj

    # -------------------------------------------------------------------------
    # Coordinate Translation
    # -------------------------------------------------------------------------

    def _base(self, i: int, j: int) -> Tuple[int, int]:
        r = self._row_start + i
        c = self._col_start + j
        if self._transposed:
            return c, r
        return r, c

    def _cell(self, i: int, j: int) -> int:
        return 1 if self._store.contains(*self._base(i, j)) else 0

    def _put(self, i: int, j: int, v: int) -> None:
        r, c = self._base(i, j)
        self._store.put(r, c, v)

    def _iter_window(self) -> Iterator[Tuple[int, int]]:
        """Local ``(i, j)`` of every set bit inside the window, row-major."""
        primary, _ = self._store.maps(self._transposed)
        r0, c0 = self._row_start, self._col_start
        r1, c1 = r0 + self._rows, c0 + self._cols
        for r in sorted(k for k in primary if r0 <= k < r1):
            for c in sorted(primary[r]):
                if c0 <= c < c1:
                    yield r - r0, c - c0

    def _line(self, primary: bool, k: int, lo: int, hi: int) -> List[int]:
        maps = self._store.maps(self._transposed)
        members = maps[0 if primary else 1].get(k, ())
        return sorted(x - lo for x in members if lo <= x < hi)

    def _region(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Base-store (row range, column range) covered by the window."""
        rows = (self._row_start, self._row_start + self._rows)
        cols = (self._col_start, self._col_start + self._cols)
        if self._transposed:
            return cols, rows
        return rows, cols

    def _aliases(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, _Window) or other._store is not self._store:
            return False
        (ar, ac), (br, bc) = self._region(), other._region()
        return (ar[0] < br[1] and br[0] < ar[1]
                and ac[0] < bc[1] and bc[0] < ac[1])

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def is_view(self) -> bool:
        return self._ownership.is_view

    @property
    def owner(self) -> Any:
        """The value whose store this window reads (self when owned)."""
        return self._ref_chain.root if self._ref_chain else self

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            backend=Backend.WINDOWED,
            ownership=Ownership.VIEW if self.is_view else Ownership.OWNED,
            shape=self.shape,
            nnz=self.nnz,
            offset=(self._row_start, self._col_start),
            transposed=self._transposed,
        )


class WindowedMatrix(_Window, SparseMatrixBase):
    """
    GF(2) matrix as a window over a shared dual-map store.

    Memory Model:
        A constructed matrix OWNS its store. ``slice``, ``transpose``,
        ``row`` and ``column`` are VIEWs of it and write through.
    """

    BACKEND = Backend.WINDOWED

    def _init_storage(self, rows: int, cols: int) -> None:
        self._init_window(rows, cols)

    @classmethod
    def _matrix_type(cls) -> type:
        return WindowedMatrix

    @classmethod
    def _vector_type(cls) -> type:
        return WindowedVector

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def nnz(self) -> int:
        return sum(1 for _ in self._iter_window())

    def _at(self, i: int, j: int) -> int:
        return self._cell(i, j)

    def _set(self, i: int, j: int, v: int) -> None:
        self._put(i, j, v)

    def iter_nonzero(self) -> Iterator[Tuple[int, int]]:
        return iter(list(self._iter_window()))

    def row_indices(self, i: int) -> List[int]:
        check_index(i, self._rows)
        return self._line(True, self._row_start + i,
                          self._col_start, self._col_start + self._cols)

    def column_indices(self, j: int) -> List[int]:
        check_index(j, self._cols)
        return self._line(False, self._col_start + j,
                          self._row_start, self._row_start + self._rows)

    # =========================================================================
    # Zero-Copy Derivations
    # =========================================================================

    def slice(self, i: int, j: int, rows: int, cols: int) -> 'WindowedMatrix':
        """Window onto the ``rows x cols`` block at ``(i, j)``. Writes through."""
        _check_window("row", i, rows, self._rows)
        _check_window("column", j, cols, self._cols)
        return WindowedMatrix._view(
            self, self._row_start + i, self._col_start + j,
            rows, cols, self._transposed,
        )

    def transpose(self) -> 'WindowedMatrix':
        """Transposed window. Writes through."""
        return WindowedMatrix._view(
            self, self._col_start, self._row_start,
            self._cols, self._rows, not self._transposed,
        )

    def row(self, i: int) -> 'WindowedVector':
        """Row ``i`` as a 1 x cols window. Writes through."""
        check_index(i, self._rows)
        return WindowedVector._view(
            self, self._row_start + i, self._col_start,
            1, self._cols, self._transposed,
        )

    def column(self, j: int) -> 'WindowedVector':
        """Column ``j`` as the transpose of a rows x 1 window. Writes through."""
        check_index(j, self._cols)
        return WindowedVector._view(
            self, self._col_start + j, self._row_start,
            1, self._rows, not self._transposed,
        )

    def __repr__(self) -> str:
        kind = "view" if self.is_view else "owned"
        return f"WindowedMatrix(shape={self.shape}, nnz={self.nnz}, {kind})"


class WindowedVector(_Window, SparseVectorBase):
    """GF(2) vector as a 1 x length window over a shared dual-map store."""

    BACKEND = Backend.WINDOWED

    def _init_storage(self, length: int) -> None:
        self._init_window(1, length)

    @classmethod
    def _vector_type(cls) -> type:
        return WindowedVector

    @property
    def shape(self) -> Tuple[int]:
        return (self._cols,)

    def __len__(self) -> int:
        return self._cols

    @property
    def nnz(self) -> int:
        return sum(1 for _ in self._iter_window())

    def _at(self, i: int) -> int:
        return self._cell(0, i)

    def _set(self, i: int, v: int) -> None:
        self._put(0, i, v)

    def nonzero_indices(self) -> List[int]:
        return [j for _, j in self._iter_window()]

    def slice(self, i: int, length: int) -> 'WindowedVector':
        """Window onto positions ``[i, i + length)``. Writes through."""
        _check_window("vector", i, length, self._cols)
        return WindowedVector._view(
            self, self._row_start, self._col_start + i,
            1, length, self._transposed,
        )

    def __repr__(self) -> str:
        kind = "view" if self.is_view else "owned"
        return f"WindowedVector(length={len(self)}, nnz={self.nnz}, {kind})"


def shares_memory(a: Any, b: Any) -> bool:
    """True iff ``a`` and ``b`` are windows over the same store."""
    return (isinstance(a, _Window) and isinstance(b, _Window)
            and a._store is b._store)
