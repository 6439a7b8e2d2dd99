"""Ownership and Reference Management.

Windowed matrices share one backing store between any number of windows.
This module tracks which value created a window so that window chains can
be inspected and so that the owner stays reachable while views exist.

Key Concepts:
    - Reference Chain: When window B is derived from A, B holds a
      reference to A (and to A's ancestors, flattened).
    - Owner vs View: the value that allocated the store is OWNED;
      every derived window is a VIEW of it.
"""

from typing import Any, List, Optional
from dataclasses import dataclass, field

__all__ = [
    'RefChain',
    'OwnershipTracker',
]


# =============================================================================
# Reference Chain
# =============================================================================

@dataclass
class RefChain:
    """Maintains the ancestry of a window.

    Attributes:
        _refs: Strong references to every ancestor, nearest first.

    Example:
        >>> m = WindowedMatrix(8, 8)
        >>> s = m.slice(0, 0, 4, 4)     # s._ref_chain holds m
        >>> t = s.transpose()           # t._ref_chain holds s and m
    """
    _refs: List[Any] = field(default_factory=list)

    def add(self, source: Any) -> None:
        """Add source, then flatten its own chain into this one."""
        if source is None:
            return
        if self.contains(source):
            return

        self._refs.append(source)

        chain = getattr(source, '_ref_chain', None)
        if chain:
            for ancestor in chain._refs:
                if not self.contains(ancestor):
                    self._refs.append(ancestor)

    def contains(self, obj: Any) -> bool:
        # Identity, not equality: windows compare by value.
        return any(ref is obj for ref in self._refs)

    @property
    def root(self) -> Optional[Any]:
        """The farthest ancestor (the owner of the store)."""
        return self._refs[-1] if self._refs else None

    @property
    def count(self) -> int:
        return len(self._refs)

    def __bool__(self) -> bool:
        return bool(self._refs)

    def __repr__(self) -> str:
        return f"RefChain(count={self.count})"


# =============================================================================
# Ownership Tracker
# =============================================================================

class OwnershipTracker:
    """Records whether a value owns its store or views another value's.

    Example:
        >>> OwnershipTracker.owned().is_owned
        True
        >>> OwnershipTracker.view(parent).source is parent
        True
    """

    __slots__ = ('_is_owned', '_source')

    def __init__(self, source: Optional[Any] = None, owned: bool = True):
        self._is_owned = owned
        self._source = None if owned else source

    @classmethod
    def owned(cls) -> 'OwnershipTracker':
        """Create tracker for owned data."""
        return cls(source=None, owned=True)

    @classmethod
    def view(cls, source: Any) -> 'OwnershipTracker':
        """Create tracker for a window derived from ``source``."""
        return cls(source=source, owned=False)

    @property
    def is_owned(self) -> bool:
        return self._is_owned

    @property
    def is_view(self) -> bool:
        return not self._is_owned

    @property
    def source(self) -> Optional[Any]:
        """The value this window was derived from, or None when owned."""
        return self._source

    def __repr__(self) -> str:
        if self._is_owned:
            return "OwnershipTracker(owned)"
        return f"OwnershipTracker(view of {type(self._source).__name__})"
