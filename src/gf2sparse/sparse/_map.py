"""
Dual Hash-Map Storage

Each matrix owns a DualMapStore (row -> columns and column -> rows), so
single-bit access is O(1) expected and both row and column runs are read
directly. Row and column swaps move whole inner sets. Slices and
transposes are independent copies.
"""

from typing import Iterator, List, Set, Tuple

from ._backend import Backend
from ._base import SparseMatrixBase, SparseVectorBase
from ._store import DualMapStore
from .._errors import check_index

__all__ = ['MapMatrix', 'MapVector']


class MapMatrix(SparseMatrixBase):
    """
    GF(2) matrix in dual hash-map form.

    Memory Model:
        Always OWNED. Two map entries per set bit.
    """

    __slots__ = ('_shape', '_maps')

    BACKEND = Backend.MAP

    def _init_storage(self, rows: int, cols: int) -> None:
        self._shape = (rows, cols)
        self._maps = DualMapStore()

    @classmethod
    def _matrix_type(cls) -> type:
        return MapMatrix

    @classmethod
    def _vector_type(cls) -> type:
        return MapVector

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def nnz(self) -> int:
        return len(self._maps)

    def _at(self, i: int, j: int) -> int:
        return 1 if self._maps.contains(i, j) else 0

    def _set(self, i: int, j: int, v: int) -> None:
        self._maps.put(i, j, v)

    def iter_nonzero(self) -> Iterator[Tuple[int, int]]:
        return iter(list(self._maps))

    def row_indices(self, i: int) -> List[int]:
        check_index(i, self.rows)
        return sorted(self._maps.row(i))

    def column_indices(self, j: int) -> List[int]:
        check_index(j, self.cols)
        return sorted(self._maps.col(j))

    def zeroize(self) -> None:
        self._maps.clear()

    def swap_rows(self, i1: int, i2: int) -> None:
        check_index(i1, self.rows)
        check_index(i2, self.rows)
        if i1 != i2:
            self._maps.swap_rows(i1, i2)

    def swap_columns(self, j1: int, j2: int) -> None:
        check_index(j1, self.cols)
        check_index(j2, self.cols)
        if j1 != j2:
            self._maps.swap_cols(j1, j2)

    def copy(self) -> 'MapMatrix':
        m = MapMatrix(*self._shape)
        m._maps = self._maps.copy()
        return m


class MapVector(SparseVectorBase):
    """GF(2) vector as a length plus a set of set positions."""

    __slots__ = ('_length', '_bits')

    BACKEND = Backend.MAP

    def _init_storage(self, length: int) -> None:
        self._length = length
        self._bits: Set[int] = set()

    @classmethod
    def _vector_type(cls) -> type:
        return MapVector

    def __len__(self) -> int:
        return self._length

    @property
    def nnz(self) -> int:
        return len(self._bits)

    def _at(self, i: int) -> int:
        return 1 if i in self._bits else 0

    def _set(self, i: int, v: int) -> None:
        if v:
            self._bits.add(i)
        else:
            self._bits.discard(i)

    def nonzero_indices(self) -> List[int]:
        return sorted(self._bits)

    def nonzero_map(self) -> dict:
        return dict.fromkeys(self._bits, 1)
