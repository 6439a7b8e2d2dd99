"""
Tests for the dual-map store behind the map and windowed engines.
"""

import numpy as np

from gf2sparse.sparse import DualMapStore, MapMatrix
from conftest import assert_store_consistent, random_bits


class TestDualMapStore:

    def test_add_and_discard(self):
        s = DualMapStore()
        s.add(1, 2)
        s.add(1, 5)
        s.add(3, 2)
        assert s.contains(1, 5)
        assert s.row(1) == {2, 5}
        assert s.col(2) == {1, 3}
        assert len(s) == 3
        s.discard(1, 2)
        s.discard(1, 2)
        assert s.col(2) == {3}
        assert_store_consistent(s)

    def test_empty_sets_pruned(self):
        s = DualMapStore()
        s.put(0, 0, 1)
        s.put(0, 0, 0)
        assert s.row_map == {} and s.col_map == {}
        assert s.row(0) == frozenset()

    def test_maps_orientation(self):
        s = DualMapStore()
        assert s.maps() == (s.row_map, s.col_map)
        primary, secondary = s.maps(transposed=True)
        assert primary is s.col_map and secondary is s.row_map

    def test_swap_rows_and_cols(self):
        s = DualMapStore()
        for r, c in [(0, 0), (0, 2), (1, 2), (3, 1)]:
            s.add(r, c)
        s.swap_rows(0, 3)
        assert list(s) == [(0, 1), (1, 2), (3, 0), (3, 2)]
        s.swap_cols(2, 4)
        assert list(s) == [(0, 1), (1, 4), (3, 0), (3, 4)]
        s.swap_rows(2, 5)
        assert len(s) == 4
        assert_store_consistent(s)

    def test_copy_is_deep(self):
        s = DualMapStore()
        s.add(0, 1)
        c = s.copy()
        c.add(0, 2)
        assert s.row(0) == {1}


class TestMapMatrix:

    def test_swaps_match_numpy(self, rng):
        dense = random_bits(rng, (7, 6), density=0.4)
        m = MapMatrix.from_dense(dense)
        for _ in range(30):
            a, b = rng.integers(0, 6, size=2).tolist()
            m.swap_rows(a, b)
            m.swap_columns(b, a)
            dense[[a, b]] = dense[[b, a]]
            dense[:, [a, b]] = dense[:, [b, a]]
        np.testing.assert_array_equal(m.to_dense(), dense)
        assert_store_consistent(m._maps)

    def test_copy_does_not_share_store(self):
        m = MapMatrix.identity(3)
        c = m.copy()
        assert c._maps is not m._maps
        c.set(0, 1, 1)
        assert m.at(0, 1) == 0

    def test_zeroize_clears_store(self):
        m = MapMatrix.identity(3)
        m.zeroize()
        assert len(m._maps) == 0
        assert m.shape == (3, 3)
