"""Backend Types and Storage Metadata.

This module defines the backend system for GF(2) sparse values:
- Backend types (Compact, Map, Windowed)
- Ownership model (owned storage vs. windows into shared storage)
- Storage metadata for introspection

Backend Types:
    - COMPACT: Sorted parallel row/column index lists
    - MAP: Dual hash maps (row -> cols, col -> rows)
    - WINDOWED: Rectangular windows over a shared dual-map store

Example:
    >>> m = CompactMatrix(3, 3)
    >>> m.backend                # Backend.COMPACT
    >>> w = WindowedMatrix(8, 8).slice(0, 0, 4, 4)
    >>> w.storage_info().ownership   # Ownership.VIEW
"""

from enum import Enum
from typing import Tuple, Optional
from dataclasses import dataclass

__all__ = [
    'Backend',
    'Ownership',
    'StorageInfo',
]


# =============================================================================
# Enumerations
# =============================================================================

class Backend(Enum):
    """Sparse storage engine.

    Attributes:
        COMPACT: Row-sorted coordinate lists. Every mutation is a binary
                 search plus a splice. Slices and transposes are copies.

        MAP: Two synchronized hash maps. O(1) expected access, two map
             entries per set bit. Slices and transposes are copies.

        WINDOWED: Offsets and extents over a shared dual-map store.
                  Slices, transposes, rows and columns are zero-copy
                  windows; writes through them reach the parent.
    """
    COMPACT = 'compact'
    MAP = 'map'
    WINDOWED = 'windowed'

    @classmethod
    def parse(cls, value) -> 'Backend':
        """Accept a Backend member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


class Ownership(Enum):
    """Data ownership model.

    Attributes:
        OWNED: The value owns its storage outright. Created by
               constructors, copy(), from_matrix() and all compact/map
               derivations.

        VIEW: The value is a window into storage owned by another value.
              Created by windowed slice(), transpose(), row(), column().
    """
    OWNED = 'owned'
    VIEW = 'view'


# =============================================================================
# Storage Information
# =============================================================================

@dataclass
class StorageInfo:
    """Storage metadata for a sparse matrix or vector.

    Attributes:
        backend: Storage backend type.
        ownership: Data ownership model.
        shape: Logical dimensions ((length,) for vectors).
        nnz: Number of set bits visible through this value.
        offset: (row_start, col_start) inside the backing store.
        transposed: Whether map roles are swapped (windowed only).

    Note:
        This is primarily for introspection and debugging.
    """
    backend: Backend
    ownership: Ownership
    shape: Tuple[int, ...]
    nnz: int

    offset: Optional[Tuple[int, int]] = None
    transposed: bool = False

    @property
    def is_view(self) -> bool:
        return self.ownership == Ownership.VIEW

    def __repr__(self) -> str:
        return (
            f"StorageInfo(backend={self.backend.value}, "
            f"ownership={self.ownership.value}, "
            f"shape={self.shape}, nnz={self.nnz})"
        )
