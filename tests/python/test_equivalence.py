"""
Cross-engine differential tests.

The same random mutation sequence is replayed on every engine and the
results are compared with each other and with a dense numpy model.
"""

import pytest
import numpy as np

from gf2sparse.sparse import (
    CompactMatrix, MapMatrix, WindowedMatrix,
    CompactVector, MapVector, WindowedVector,
)
from conftest import (
    MATRIX_TYPES,
    VECTOR_TYPES,
    assert_compact_invariant,
    assert_store_consistent,
    random_bits,
)


def _apply(m, dense, op, args):
    """Apply one mutation to a sparse matrix and to its dense model."""
    if op == 'set':
        i, j, v = args
        m.set(i, j, v)
        dense[i, j] = v % 2
    elif op == 'swap_rows':
        i1, i2 = args
        m.swap_rows(i1, i2)
        dense[[i1, i2]] = dense[[i2, i1]]
    elif op == 'swap_columns':
        j1, j2 = args
        m.swap_columns(j1, j2)
        dense[:, [j1, j2]] = dense[:, [j2, j1]]
    elif op == 'add_rows':
        i1, i2, d = args
        m.add_rows(i1, i2, d)
        dense[d] = dense[i1] ^ dense[i2]
    elif op == 'add_columns':
        j1, j2, d = args
        m.add_columns(j1, j2, d)
        dense[:, d] = dense[:, j1] ^ dense[:, j2]
    elif op == 'zeroize_range':
        i, j, h, w = args
        m.zeroize_range(i, j, h, w)
        dense[i:i + h, j:j + w] = 0


def _random_ops(rng, rows, cols, count):
    ops = []
    names = ['set', 'swap_rows', 'swap_columns', 'add_rows', 'add_columns', 'zeroize_range']
    for _ in range(count):
        name = names[int(rng.integers(len(names)))]
        if name == 'set':
            args = (int(rng.integers(rows)), int(rng.integers(cols)), int(rng.integers(4)))
        elif name == 'swap_rows':
            args = tuple(rng.integers(rows, size=2).tolist())
        elif name == 'swap_columns':
            args = tuple(rng.integers(cols, size=2).tolist())
        elif name == 'add_rows':
            args = tuple(rng.integers(rows, size=3).tolist())
        elif name == 'add_columns':
            args = tuple(rng.integers(cols, size=3).tolist())
        else:
            i = int(rng.integers(rows))
            j = int(rng.integers(cols))
            args = (i, j, int(rng.integers(rows - i + 1)), int(rng.integers(cols - j + 1)))
        ops.append((name, args))
    return ops


class TestEngineEquivalence:
    """Every engine agrees with every other engine."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_mutation_sequences(self, seed):
        rng = np.random.default_rng(seed)
        rows, cols = 6, 8
        start = random_bits(rng, (rows, cols))
        ops = _random_ops(rng, rows, cols, 60)

        results = []
        for cls in MATRIX_TYPES:
            m = cls.from_dense(start)
            dense = start.copy()
            for op, args in ops:
                _apply(m, dense, op, args)
            np.testing.assert_array_equal(m.to_dense(), dense)
            results.append(m)

        assert_compact_invariant(results[0])
        assert_store_consistent(results[1]._maps)
        assert_store_consistent(results[2]._store)

        for a in results:
            for b in results:
                assert a == b
                assert a.equals(b)

    def test_from_matrix_across_engines(self, rng):
        dense = random_bits(rng, (5, 7))
        for src_cls in MATRIX_TYPES:
            src = src_cls.from_dense(dense)
            for dst_cls in MATRIX_TYPES:
                copy = dst_cls.from_matrix(src)
                assert type(copy) is dst_cls
                assert copy == src

    def test_vectors_across_engines(self, rng):
        bits = random_bits(rng, 12, density=0.5)
        vectors = [cls(12, bits) for cls in VECTOR_TYPES]
        for a in vectors:
            for b in vectors:
                assert a == b
                assert a.hamming_distance(b) == 0
                assert type(b).from_vector(a) == a

    def test_mixed_engine_algebra(self, rng):
        a = CompactMatrix.from_dense(random_bits(rng, (4, 5)))
        b = MapMatrix.from_dense(random_bits(rng, (5, 3)))
        c = WindowedMatrix(4, 3)
        c.mul(a, b)
        expected = (a.to_dense().astype(int) @ b.to_dense().astype(int)) % 2
        np.testing.assert_array_equal(c.to_dense(), expected)

    def test_mixed_engine_vector_ops(self):
        a = CompactVector(4, [1, 1, 0, 0])
        b = MapVector(4, [1, 0, 1, 0])
        out = WindowedVector(4).xor(a, b)
        assert out.nonzero_indices() == [1, 2]

    def test_derived_values_agree(self, rng):
        dense = random_bits(rng, (6, 6))
        mats = [cls.from_dense(dense) for cls in MATRIX_TYPES]
        for m in mats[1:]:
            assert m.T == mats[0].T
            assert m.slice(1, 2, 4, 3) == mats[0].slice(1, 2, 4, 3)
            for i in range(6):
                assert m.row(i) == mats[0].row(i)
                assert m.column(i) == mats[0].column(i)
