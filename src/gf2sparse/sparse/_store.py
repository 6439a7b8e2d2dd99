"""
Dual-map backing store.

Two synchronized maps hold every set bit ``(r, c)``:

    row_map[r] = {c, ...}
    col_map[c] = {r, ...}

Both are updated by every write, so row and column views never need
reconciling. Empty inner sets are pruned; a missing key and an empty set
both mean "no set bits".

MapMatrix owns one store per matrix. WindowedMatrix and WindowedVector
share one store between any number of windows.
"""

from typing import Dict, Iterator, Set, Tuple

__all__ = ['DualMapStore']

_EMPTY: frozenset = frozenset()


class DualMapStore:
    """Row -> columns and column -> rows maps kept mutually consistent."""

    __slots__ = ('row_map', 'col_map')

    def __init__(self):
        self.row_map: Dict[int, Set[int]] = {}
        self.col_map: Dict[int, Set[int]] = {}

    # -------------------------------------------------------------------------
    # Bit Access
    # -------------------------------------------------------------------------

    def contains(self, r: int, c: int) -> bool:
        return c in self.row_map.get(r, _EMPTY)

    def add(self, r: int, c: int) -> None:
        self.row_map.setdefault(r, set()).add(c)
        self.col_map.setdefault(c, set()).add(r)

    def discard(self, r: int, c: int) -> None:
        cols = self.row_map.get(r)
        if cols is None or c not in cols:
            return
        cols.discard(c)
        if not cols:
            del self.row_map[r]
        rows = self.col_map[c]
        rows.discard(r)
        if not rows:
            del self.col_map[c]

    def put(self, r: int, c: int, v: int) -> None:
        if v:
            self.add(r, c)
        else:
            self.discard(r, c)

    # -------------------------------------------------------------------------
    # Row / Column Views
    # -------------------------------------------------------------------------

    def row(self, r: int) -> Set[int]:
        """Columns set in row ``r`` (read-only view)."""
        return self.row_map.get(r, _EMPTY)

    def col(self, c: int) -> Set[int]:
        """Rows set in column ``c`` (read-only view)."""
        return self.col_map.get(c, _EMPTY)

    def maps(self, transposed: bool = False) -> Tuple[Dict[int, Set[int]], Dict[int, Set[int]]]:
        """(primary, secondary) maps; a transposed window reads col_map as rows."""
        if transposed:
            return self.col_map, self.row_map
        return self.row_map, self.col_map

    # -------------------------------------------------------------------------
    # Whole-Store Operations
    # -------------------------------------------------------------------------

    def swap_rows(self, r1: int, r2: int) -> None:
        cols1 = self.row_map.pop(r1, set())
        cols2 = self.row_map.pop(r2, set())
        for c in cols1:
            self.col_map[c].discard(r1)
        for c in cols2:
            self.col_map[c].discard(r2)
        for c in cols1:
            self.col_map[c].add(r2)
        for c in cols2:
            self.col_map[c].add(r1)
        if cols2:
            self.row_map[r1] = cols2
        if cols1:
            self.row_map[r2] = cols1

    def swap_cols(self, c1: int, c2: int) -> None:
        rows1 = self.col_map.pop(c1, set())
        rows2 = self.col_map.pop(c2, set())
        for r in rows1:
            self.row_map[r].discard(c1)
        for r in rows2:
            self.row_map[r].discard(c2)
        for r in rows1:
            self.row_map[r].add(c2)
        for r in rows2:
            self.row_map[r].add(c1)
        if rows2:
            self.col_map[c1] = rows2
        if rows1:
            self.col_map[c2] = rows1

    def clear(self) -> None:
        self.row_map.clear()
        self.col_map.clear()

    def copy(self) -> 'DualMapStore':
        out = DualMapStore()
        out.row_map = {r: set(cols) for r, cols in self.row_map.items()}
        out.col_map = {c: set(rows) for c, rows in self.col_map.items()}
        return out

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        for r in sorted(self.row_map):
            for c in sorted(self.row_map[r]):
                yield r, c

    def __len__(self) -> int:
        return sum(len(cols) for cols in self.row_map.values())

    def __repr__(self) -> str:
        return f"DualMapStore(rows={len(self.row_map)}, nnz={len(self)})"
