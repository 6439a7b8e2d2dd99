"""
Compact Coordinate Storage

Set bits are stored as two parallel Python lists:

    - _row_idx[nnz]: row of each set bit, non-decreasing
    - _col_idx[nnz]: column of each set bit, strictly increasing inside
                     each run of equal row index

Every mutation locates its run with a binary search and splices the two
lists in place, so the invariants hold after every call without a rebuild.
Slices and transposes are independent copies.

Example:
    >>> m = CompactMatrix(2, 3, [1, 0, 1,
    ...                          0, 1, 0])
    >>> m.nonzero()
    ([0, 0, 1], [0, 2, 1])
    >>> m.swap_rows(0, 1)
    >>> m.row_indices(0)
    [1]
"""

from collections import Counter
from typing import Iterator, List, Tuple

from ._backend import Backend
from ._base import SparseMatrixBase, SparseVectorBase
from ._index import (
    locate,
    range_of_row,
    splice_cut,
    splice_insert_one,
    splice_insert_range,
)
from .._errors import ShapeMismatch, check_index

__all__ = ['CompactMatrix', 'CompactVector']


class CompactMatrix(SparseMatrixBase):
    """
    GF(2) matrix in compact coordinate form.

    Attributes:
        shape: Matrix dimensions (rows, cols)
        nnz: Number of set bits (length of either index list)

    Memory Model:
        Always OWNED. ``slice``, ``transpose``, ``row`` and ``column``
        return copies that share nothing with the source.
    """

    __slots__ = ('_shape', '_row_idx', '_col_idx')

    BACKEND = Backend.COMPACT

    def _init_storage(self, rows: int, cols: int) -> None:
        self._shape = (rows, cols)
        self._row_idx: List[int] = []
        self._col_idx: List[int] = []

    @classmethod
    def _matrix_type(cls) -> type:
        return CompactMatrix

    @classmethod
    def _vector_type(cls) -> type:
        return CompactVector

    # =========================================================================
    # Properties (SparseMatrixBase)
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def nnz(self) -> int:
        return len(self._row_idx)

    # =========================================================================
    # Primitives
    # =========================================================================

    def _at(self, i: int, j: int) -> int:
        start, end = range_of_row(self._row_idx, i)
        pos = locate(self._col_idx, j, start, end)
        return 1 if pos < end and self._col_idx[pos] == j else 0

    def _set(self, i: int, j: int, v: int) -> None:
        start, end = range_of_row(self._row_idx, i)
        pos = locate(self._col_idx, j, start, end)
        present = pos < end and self._col_idx[pos] == j
        if v and not present:
            splice_insert_one(self._row_idx, pos, i)
            splice_insert_one(self._col_idx, pos, j)
        elif not v and present:
            splice_cut(self._row_idx, pos, pos + 1)
            splice_cut(self._col_idx, pos, pos + 1)

    def iter_nonzero(self) -> Iterator[Tuple[int, int]]:
        return zip(list(self._row_idx), list(self._col_idx))

    def nonzero(self) -> Tuple[List[int], List[int]]:
        return list(self._row_idx), list(self._col_idx)

    # =========================================================================
    # Run Access
    # =========================================================================

    def row_indices(self, i: int) -> List[int]:
        check_index(i, self.rows)
        start, end = range_of_row(self._row_idx, i)
        return self._col_idx[start:end]

    def column_indices(self, j: int) -> List[int]:
        check_index(j, self.cols)
        return [r for r, c in zip(self._row_idx, self._col_idx) if c == j]

    def _replace_row(self, i: int, cols: List[int]) -> None:
        """Replace row ``i``'s run with the sorted column list ``cols``."""
        start, end = range_of_row(self._row_idx, i)
        splice_cut(self._row_idx, start, end)
        splice_cut(self._col_idx, start, end)
        splice_insert_range(self._row_idx, start, [i] * len(cols))
        splice_insert_range(self._col_idx, start, cols)

    # =========================================================================
    # Mutation
    # =========================================================================

    def zeroize(self) -> None:
        self._row_idx.clear()
        self._col_idx.clear()

    def swap_rows(self, i1: int, i2: int) -> None:
        """Exchange two rows by relocating their runs.

        Equal-length runs swap column values in place. Otherwise both runs
        are cut (higher first, so the lower run's offsets stay valid) and
        reinserted: the higher row's columns where the lower run started,
        the lower row's columns after the rows in between.
        """
        check_index(i1, self.rows)
        check_index(i2, self.rows)
        if i1 == i2:
            return
        if i1 > i2:
            i1, i2 = i2, i1

        start1, end1 = range_of_row(self._row_idx, i1)
        start2, end2 = range_of_row(self._row_idx, i2)
        len1 = end1 - start1
        len2 = end2 - start2

        if len1 == len2:
            cols = self._col_idx
            cols[start1:end1], cols[start2:end2] = cols[start2:end2], cols[start1:end1]
            return

        buf2 = splice_cut(self._col_idx, start2, end2)
        splice_cut(self._row_idx, start2, end2)
        buf1 = splice_cut(self._col_idx, start1, end1)
        splice_cut(self._row_idx, start1, end1)

        splice_insert_range(self._col_idx, start1, buf2)
        splice_insert_range(self._row_idx, start1, [i1] * len2)

        # The rows in between moved by len2 - len1.
        new_start2 = start2 - len1 + len2
        splice_insert_range(self._col_idx, new_start2, buf1)
        splice_insert_range(self._row_idx, new_start2, [i2] * len1)

    def swap_columns(self, j1: int, j2: int) -> None:
        check_index(j1, self.cols)
        check_index(j2, self.cols)
        if j1 == j2:
            return
        rows1 = self.column_indices(j1)
        rows2 = self.column_indices(j2)
        for r in rows1:
            self._set(r, j1, 0)
        for r in rows2:
            self._set(r, j2, 0)
        for r in rows1:
            self._set(r, j2, 1)
        for r in rows2:
            self._set(r, j1, 1)

    def add_rows(self, i1: int, i2: int, dest: int) -> None:
        """Row ``dest`` becomes ``row(i1) XOR row(i2)``.

        A column survives iff it occurs an odd number of times across the
        two source runs.
        """
        for i in (i1, i2, dest):
            check_index(i, self.rows)
        counts = Counter(self.row_indices(i1))
        counts.update(self.row_indices(i2))
        result = sorted(c for c, n in counts.items() if n % 2)
        self._replace_row(dest, result)

    def set_row(self, i: int, vec: SparseVectorBase) -> None:
        check_index(i, self.rows)
        if len(vec) != self.cols:
            raise ShapeMismatch(f"vector length {len(vec)} != cols {self.cols}")
        self._replace_row(i, list(vec.nonzero_indices()))


class CompactVector(SparseVectorBase):
    """
    GF(2) vector as a length plus a sorted list of set positions.
    """

    __slots__ = ('_length', '_indices')

    BACKEND = Backend.COMPACT

    def _init_storage(self, length: int) -> None:
        self._length = length
        self._indices: List[int] = []

    @classmethod
    def _vector_type(cls) -> type:
        return CompactVector

    def __len__(self) -> int:
        return self._length

    @property
    def nnz(self) -> int:
        return len(self._indices)

    def _at(self, i: int) -> int:
        pos = locate(self._indices, i)
        return 1 if pos < len(self._indices) and self._indices[pos] == i else 0

    def _set(self, i: int, v: int) -> None:
        pos = locate(self._indices, i)
        present = pos < len(self._indices) and self._indices[pos] == i
        if v and not present:
            splice_insert_one(self._indices, pos, i)
        elif not v and present:
            splice_cut(self._indices, pos, pos + 1)

    def nonzero_indices(self) -> List[int]:
        return list(self._indices)

    def next_set(self, start: int = 0):
        check_index(start, len(self))
        pos = locate(self._indices, start)
        return self._indices[pos] if pos < len(self._indices) else None
