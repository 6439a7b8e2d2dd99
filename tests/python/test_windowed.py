"""
Tests for the windowed engine: zero-copy derivations, write-through,
ownership tracking and overlap-based alias detection.
"""

import pytest
import numpy as np

from gf2sparse import SelfAliasViolation, IndexOutOfRange, InvalidArgument
from gf2sparse.sparse import (
    WindowedMatrix, WindowedVector, CompactMatrix,
    Ownership, shares_memory,
)
from conftest import assert_store_consistent, random_bits


class TestWriteThrough:
    """Writes through any window reach the parent and every sibling."""

    def test_slice_writes_through(self):
        m = WindowedMatrix(4, 4)
        s = m.slice(1, 1, 2, 2)
        s[0, 0] = 1
        assert m[1, 1] == 1
        m[2, 2] = 1
        assert s[1, 1] == 1

    def test_transpose_writes_through(self):
        m = WindowedMatrix(3, 5)
        t = m.T
        assert t.shape == (5, 3)
        t[4, 0] = 1
        assert m[0, 4] == 1
        m[1, 1] = 1
        t[1, 1] = 0
        assert m[1, 1] == 0

    def test_row_view(self):
        m = WindowedMatrix(3, 4)
        r = m.row(2)
        assert isinstance(r, WindowedVector)
        assert len(r) == 4
        r[3] = 1
        assert m[2, 3] == 1
        m[2, 0] = 1
        assert r.nonzero_indices() == [0, 3]

    def test_column_view(self):
        m = WindowedMatrix(4, 3)
        c = m.column(1)
        assert len(c) == 4
        c[2] = 1
        assert m[2, 1] == 1
        m[0, 1] = 1
        assert c.nonzero_indices() == [0, 2]

    def test_vector_slice_view(self):
        v = WindowedVector(6)
        s = v.slice(2, 3)
        s[0] = 1
        assert v[2] == 1
        assert s.is_view

    def test_nested_windows(self):
        """slice of transpose of slice still maps to the right base cell."""
        m = WindowedMatrix(6, 6)
        w = m.slice(1, 2, 4, 3).T.slice(1, 0, 2, 4)
        assert w.shape == (2, 4)
        w[1, 3] = 1
        # w[1, 3] -> T[2, 3] -> slice(1, 2)[3, 2] -> m[4, 4]
        assert m[4, 4] == 1
        assert m.nnz == 1

    def test_mutations_through_view(self, rng):
        """Row operations on a window only touch the window's cells."""
        dense = random_bits(rng, (6, 6), density=0.5)
        m = WindowedMatrix.from_dense(dense)
        s = m.slice(1, 1, 3, 4)
        s.swap_rows(0, 2)
        s.add_columns(0, 1, 3)
        s.zeroize_range(1, 0, 1, 2)

        block = dense[1:4, 1:5].copy()
        block[[0, 2]] = block[[2, 0]]
        block[:, 3] = block[:, 0] ^ block[:, 1]
        block[1, 0:2] = 0
        expected = dense.copy()
        expected[1:4, 1:5] = block

        np.testing.assert_array_equal(m.to_dense(), expected)
        assert_store_consistent(m._store)

    def test_zeroize_view_leaves_outside(self):
        m = WindowedMatrix(4, 4, [1] * 16)
        m.slice(0, 0, 2, 2).zeroize()
        assert m.nnz == 12
        assert m[2, 2] == 1 and m[0, 0] == 0

    def test_window_nnz_counts_visible_bits(self):
        m = WindowedMatrix.identity(5)
        assert m.slice(0, 0, 2, 5).nnz == 2
        assert m.slice(3, 0, 2, 2).nnz == 0


class TestDerivedQueries:
    """Queries on windows agree with numpy slicing."""

    def test_slice_queries(self, rng):
        dense = random_bits(rng, (7, 8), density=0.4)
        m = WindowedMatrix.from_dense(dense)
        s = m.slice(2, 1, 4, 6)
        block = dense[2:6, 1:7]
        np.testing.assert_array_equal(s.to_dense(), block)
        for i in range(4):
            assert s.row_indices(i) == np.flatnonzero(block[i]).tolist()
        for j in range(6):
            assert s.column_indices(j) == np.flatnonzero(block[:, j]).tolist()

    def test_transpose_queries(self, rng):
        dense = random_bits(rng, (5, 7), density=0.4)
        t = WindowedMatrix.from_dense(dense).T
        np.testing.assert_array_equal(t.to_dense(), dense.T)
        assert t.nonzero() == CompactMatrix.from_dense(dense.T).nonzero()

    def test_identity_slice_transpose(self):
        """identity(8).slice(3, 0, 4, 4).T has its single bit at (3, 0)."""
        w = WindowedMatrix.identity(8).slice(3, 0, 4, 4).T
        assert w.shape == (4, 4)
        assert w.nonzero() == ([3], [0])
        assert w.is_view

    def test_row_of_transpose_is_column(self, rng):
        m = WindowedMatrix.from_dense(random_bits(rng, (4, 5)))
        for j in range(5):
            assert m.T.row(j) == m.column(j)

    def test_slice_bounds(self):
        m = WindowedMatrix(4, 4)
        with pytest.raises(IndexOutOfRange):
            m.slice(2, 0, 3, 1)
        with pytest.raises(InvalidArgument):
            m.slice(0, 0, 0, 1)
        s = m.slice(1, 1, 2, 2)
        with pytest.raises(IndexOutOfRange):
            s[2, 0]
        with pytest.raises(IndexOutOfRange):
            s.row(2)


class TestOwnership:
    """Test storage_info, owner and the reference chain."""

    def test_owned(self):
        m = WindowedMatrix(3, 3)
        info = m.storage_info()
        assert info.ownership == Ownership.OWNED
        assert info.offset == (0, 0)
        assert not info.transposed
        assert not m.is_view
        assert m.owner is m

    def test_view_info(self):
        m = WindowedMatrix(6, 6)
        s = m.slice(1, 2, 3, 3)
        info = s.storage_info()
        assert info.is_view
        assert info.offset == (1, 2)
        assert info.shape == (3, 3)
        t = s.T.storage_info()
        assert t.transposed
        assert t.offset == (2, 1)

    def test_chain_root_is_owner(self):
        m = WindowedMatrix(6, 6)
        s = m.slice(0, 0, 4, 4)
        t = s.T
        r = t.row(1)
        assert t._ref_chain.contains(s)
        assert t._ref_chain.contains(m)
        assert r._ref_chain.count == 3
        assert r.owner is m
        assert t._ownership.source is s

    def test_copy_is_owned_and_independent(self):
        m = WindowedMatrix.identity(4)
        c = m.slice(0, 0, 2, 2).copy()
        assert not c.is_view
        assert not shares_memory(c, m)
        c[0, 1] = 1
        assert m[0, 1] == 0

    def test_from_matrix_allocates(self):
        m = WindowedMatrix.identity(3)
        c = WindowedMatrix.from_matrix(m.T)
        assert not shares_memory(c, m)
        assert c == m

    def test_shares_memory(self):
        m = WindowedMatrix(4, 4)
        assert shares_memory(m, m.T)
        assert shares_memory(m.row(0), m.column(3))
        assert not shares_memory(m, WindowedMatrix(4, 4))
        assert not shares_memory(CompactMatrix(2, 2), CompactMatrix(2, 2))


class TestAliasDetection:
    """Overlapping windows cannot be both destination and operand."""

    def test_overlapping_slices_rejected(self):
        m = WindowedMatrix(4, 4)
        dest = m.slice(0, 0, 2, 2)
        with pytest.raises(SelfAliasViolation):
            dest.xor(m.slice(1, 1, 2, 2), WindowedMatrix(2, 2))
        with pytest.raises(SelfAliasViolation):
            dest.and_(WindowedMatrix(2, 2), m.slice(0, 0, 2, 2))

    def test_transpose_overlap_rejected(self):
        m = WindowedMatrix.identity(3)
        with pytest.raises(SelfAliasViolation):
            m.mul(m.T, WindowedMatrix.identity(3))

    def test_disjoint_windows_allowed(self):
        m = WindowedMatrix(4, 4)
        m.slice(0, 2, 2, 2)[0, 0] = 1
        m.slice(2, 0, 2, 2)[1, 1] = 1
        dest = m.slice(0, 0, 2, 2)
        dest.xor(m.slice(0, 2, 2, 2), m.slice(2, 0, 2, 2))
        assert dest.nonzero() == ([0, 1], [0, 1])
        assert m[0, 0] == 1 and m[1, 1] == 1

    def test_transpose_of_disjoint_region_allowed(self):
        """Transposed windows are compared by the base cells they cover."""
        m = WindowedMatrix(4, 4)
        ll = m.slice(2, 0, 2, 2)
        ur = m.slice(0, 2, 2, 2)
        ur.or_(ll.T, WindowedMatrix(2, 2))
        with pytest.raises(SelfAliasViolation):
            ur.or_(m.slice(0, 2, 2, 2).T.T, WindowedMatrix(2, 2))

    def test_row_view_aliases_parent(self):
        m = WindowedMatrix.identity(3)
        x = m.row(0)
        with pytest.raises(SelfAliasViolation):
            x.mat_mul(m, WindowedVector(3, [1, 1, 1]))
        y = m.row(1)
        with pytest.raises(SelfAliasViolation):
            y.xor(x, m.row(1))

    def test_add_tolerates_overlap(self):
        m = WindowedMatrix(2, 2, [1, 0, 0, 1])
        m.add(m, m.T)
        assert m.is_zero()
