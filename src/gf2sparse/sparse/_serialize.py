"""
JSON wire format and text rendering.

Matrices travel in coordinate form, whatever their engine::

    {"Rows": 3, "Cols": 3, "RowIndices": [0, 1, 2], "ColIndices": [0, 1, 2]}

Vectors travel as::

    {"Length": 5, "Indices": [0, 2, 4]}

Decoding validates the document and rebuilds through a CompactMatrix (or
CompactVector) before converting to the requested engine.
"""

from typing import Any, Dict, List, Optional, Union
import json
import logging

from .._config import get_config
from .._errors import InvalidArgument
from ._backend import Backend
from ._base import SparseMatrixBase, SparseVectorBase
from ._compact import CompactMatrix, CompactVector

logger = logging.getLogger("gf2sparse.sparse.serialize")

__all__ = [
    'to_dict',
    'from_dict',
    'to_json',
    'from_json',
    'matrix_from_json',
    'vector_from_json',
    'render_matrix',
    'render_vector',
]

_MATRIX_KEYS = ("Rows", "Cols", "RowIndices", "ColIndices")
_VECTOR_KEYS = ("Length", "Indices")


# =============================================================================
# Encoding
# =============================================================================

def to_dict(value: Union[SparseMatrixBase, SparseVectorBase]) -> Dict[str, Any]:
    """Wire-format dictionary for a matrix or vector of any engine."""
    if isinstance(value, SparseMatrixBase):
        row_list, col_list = value.nonzero()
        return {
            "Rows": value.rows,
            "Cols": value.cols,
            "RowIndices": row_list,
            "ColIndices": col_list,
        }
    if isinstance(value, SparseVectorBase):
        return {"Length": len(value), "Indices": value.nonzero_indices()}
    raise InvalidArgument(f"cannot serialize {type(value).__name__}")


def to_json(value: Union[SparseMatrixBase, SparseVectorBase],
            indent: Optional[int] = None, sort_keys: Optional[bool] = None) -> str:
    """Encode to JSON text; unset options come from ``config.serialize``."""
    cfg = get_config().serialize
    text = json.dumps(
        to_dict(value),
        indent=cfg.indent if indent is None else indent,
        sort_keys=cfg.sort_keys if sort_keys is None else sort_keys,
    )
    logger.debug("encoded %r (%d bytes)", value, len(text))
    return text


# =============================================================================
# Decoding
# =============================================================================

def _int_field(doc: Dict[str, Any], key: str) -> int:
    value = doc[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _index_list(doc: Dict[str, Any], key: str, extent: int) -> List[int]:
    values = doc[key]
    if values is None:
        return []
    if not isinstance(values, list):
        raise InvalidArgument(f"{key} must be a list, got {type(values).__name__}")
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidArgument(f"{key} entries must be integers, got {v!r}")
        if v < 0 or v >= extent:
            raise InvalidArgument(f"{key} entry {v} out of range: [0-{extent - 1}]")
    return values


def _check_keys(doc: Any, keys) -> None:
    if not isinstance(doc, dict):
        raise InvalidArgument(f"expected a JSON object, got {type(doc).__name__}")
    missing = [k for k in keys if k not in doc]
    if missing:
        raise InvalidArgument(f"missing keys: {missing}")


def _matrix_from_doc(doc: Dict[str, Any]) -> CompactMatrix:
    _check_keys(doc, _MATRIX_KEYS)
    rows = _int_field(doc, "Rows")
    cols = _int_field(doc, "Cols")
    row_list = _index_list(doc, "RowIndices", rows)
    col_list = _index_list(doc, "ColIndices", cols)
    if len(row_list) != len(col_list):
        raise InvalidArgument(
            f"RowIndices and ColIndices differ in length: "
            f"{len(row_list)} != {len(col_list)}"
        )
    m = CompactMatrix(rows, cols)
    for i, j in zip(row_list, col_list):
        m._set(i, j, 1)
    return m


def _vector_from_doc(doc: Dict[str, Any]) -> CompactVector:
    _check_keys(doc, _VECTOR_KEYS)
    length = _int_field(doc, "Length")
    v = CompactVector(length)
    for i in _index_list(doc, "Indices", length):
        v._set(i, 1)
    return v


def _convert(value, backend):
    from ._ops import matrix_type, vector_type
    if isinstance(value, SparseMatrixBase):
        cls = matrix_type(backend)
        return value if cls is CompactMatrix else cls.from_matrix(value)
    cls = vector_type(backend)
    return value if cls is CompactVector else cls.from_vector(value)


def from_dict(doc: Dict[str, Any], backend: Optional[Union[Backend, str]] = None
              ) -> Union[SparseMatrixBase, SparseVectorBase]:
    """Decode a wire-format dictionary; the keys decide matrix vs vector."""
    if isinstance(doc, dict) and "Length" in doc:
        value = _vector_from_doc(doc)
    else:
        value = _matrix_from_doc(doc)
    return _convert(value, backend)


def _load(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise InvalidArgument(f"malformed JSON: {e}") from e


def from_json(text: Union[str, bytes], backend: Optional[Union[Backend, str]] = None
              ) -> Union[SparseMatrixBase, SparseVectorBase]:
    """Decode JSON text into a matrix or vector of ``backend``."""
    value = from_dict(_load(text), backend)
    logger.debug("decoded %r", value)
    return value


def matrix_from_json(text: Union[str, bytes],
                     backend: Optional[Union[Backend, str]] = None) -> SparseMatrixBase:
    return _convert(_matrix_from_doc(_load(text)), backend)


def vector_from_json(text: Union[str, bytes],
                     backend: Optional[Union[Backend, str]] = None) -> SparseVectorBase:
    return _convert(_vector_from_doc(_load(text)), backend)


# =============================================================================
# Rendering
# =============================================================================

def render_vector(vec: SparseVectorBase) -> str:
    cfg = get_config().render
    return cfg.separator.join(cfg.one if b else cfg.zero for b in vec)


def render_matrix(mat: SparseMatrixBase) -> str:
    """One line per row, cells joined by ``config.render.separator``."""
    cfg = get_config().render
    bits = set(mat.iter_nonzero())
    lines = []
    for i in range(mat.rows):
        lines.append(cfg.separator.join(
            cfg.one if (i, j) in bits else cfg.zero for j in range(mat.cols)
        ))
    return "\n".join(lines)
