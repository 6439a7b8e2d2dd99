"""
Pytest configuration and shared fixtures for gf2sparse tests.

Most suites run once per storage engine through the ``engine`` fixture so
every engine is held to the same observable behavior.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import gf2sparse
from gf2sparse.sparse import (
    CompactMatrix, CompactVector,
    MapMatrix, MapVector,
    WindowedMatrix, WindowedVector,
)


ENGINES = {
    'compact': (CompactMatrix, CompactVector),
    'map': (MapMatrix, MapVector),
    'windowed': (WindowedMatrix, WindowedVector),
}

MATRIX_TYPES = [pair[0] for pair in ENGINES.values()]
VECTOR_TYPES = [pair[1] for pair in ENGINES.values()]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(params=list(ENGINES), ids=list(ENGINES))
def engine(request):
    """(MatrixClass, VectorClass) for each storage engine."""
    return ENGINES[request.param]


@pytest.fixture
def Mat(engine):
    return engine[0]


@pytest.fixture
def Vec(engine):
    return engine[1]


@pytest.fixture
def rng():
    """Seeded generator for randomized differential tests."""
    return np.random.default_rng(20240611)


@pytest.fixture
def dense_small():
    """A 3x4 bit pattern used across suites.

    Matrix:
    [[1, 0, 1, 0],
     [0, 1, 0, 1],
     [1, 1, 0, 0]]
    """
    return np.array([
        [1, 0, 1, 0],
        [0, 1, 0, 1],
        [1, 1, 0, 0],
    ], dtype=np.uint8)


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from default configuration."""
    gf2sparse.config.reset()
    yield
    gf2sparse.config.reset()


# =============================================================================
# Helper Functions
# =============================================================================

def random_bits(rng, shape, density=0.3):
    """Random 0/1 uint8 array."""
    return (rng.random(shape) < density).astype(np.uint8)


def assert_matches_dense(value, dense):
    """Assert a matrix or vector holds exactly the bits of ``dense``."""
    dense = np.asarray(dense, dtype=np.uint8)
    assert value.shape == dense.shape
    np.testing.assert_array_equal(value.to_dense(), dense)
    assert value.nnz == int(dense.sum())


def assert_compact_invariant(mat):
    """Row list non-decreasing; columns strictly increasing inside each row run."""
    rows, cols = mat._row_idx, mat._col_idx
    assert len(rows) == len(cols)
    for k in range(1, len(rows)):
        assert rows[k - 1] <= rows[k]
        if rows[k - 1] == rows[k]:
            assert cols[k - 1] < cols[k]


def assert_store_consistent(store):
    """Every bit appears in both maps and no empty inner set remains."""
    pairs_by_row = {(r, c) for r, cs in store.row_map.items() for c in cs}
    pairs_by_col = {(r, c) for c, rs in store.col_map.items() for r in rs}
    assert pairs_by_row == pairs_by_col
    assert all(store.row_map.values())
    assert all(store.col_map.values())
