"""
Index utilities for the compact coordinate form.

The compact engine stores set bits as two parallel Python lists: row
indices (non-decreasing) and column indices (strictly increasing inside
each row run). Lookups are binary searches over these lists and every
mutation is expressed with the three splice primitives below.
"""

from bisect import bisect_left, bisect_right
from typing import List, Sequence, Tuple

__all__ = [
    'range_of_row',
    'locate',
    'splice_insert_one',
    'splice_insert_range',
    'splice_cut',
]


def range_of_row(row_indices: Sequence[int], r: int) -> Tuple[int, int]:
    """Half-open ``(start, end)`` run of ``r`` inside sorted row indices.

    The run is empty (``start == end``) when row ``r`` has no set bits;
    ``start`` is then the position where its entries would be inserted.
    """
    start = bisect_left(row_indices, r)
    end = bisect_right(row_indices, r, start)
    return start, end


def locate(col_indices: Sequence[int], c: int, lo: int = 0, hi: int = None) -> int:
    """Insertion point of ``c`` inside ``col_indices[lo:hi]``.

    Returns the absolute position: the index of ``c`` if present, otherwise
    the position it would occupy.
    """
    if hi is None:
        hi = len(col_indices)
    return bisect_left(col_indices, c, lo, hi)


def splice_insert_one(array: List[int], pos: int, value: int) -> None:
    array.insert(pos, value)


def splice_insert_range(array: List[int], pos: int, values: Sequence[int]) -> None:
    array[pos:pos] = values


def splice_cut(array: List[int], start: int, end: int) -> List[int]:
    """Remove ``array[start:end]`` in place and return the removed run."""
    removed = array[start:end]
    del array[start:end]
    return removed
