"""Selection of sub-matrices by lists of row and column indices."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def _as_indices(idx: int | Sequence[int], limit: int, what: str) -> list[int]:
    values = [idx] if isinstance(idx, (int, np.integer)) else list(idx)
    for v in values:
        if not isinstance(v, (int, np.integer)) or isinstance(v, bool):
            raise TypeError(f"{what} indices must be integers")
        if v < 0 or v >= limit:
            raise IndexError(f"{what} index {v} is out of range")
    return [int(v) for v in values]


def submatrix(matrix, rows: int | Sequence[int], cols: int | Sequence[int]) -> np.ndarray:
    """Return the matrix made of the given rows and columns, in the given order.

    ``rows`` and ``cols`` are a single index or a sequence of indices; a single
    index yields one row or one column of the result.
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError("submatrix needs a two-dimensional matrix")
    n_rows, n_cols = arr.shape
    row_idx = _as_indices(rows, n_rows, "row")
    col_idx = _as_indices(cols, n_cols, "column")
    if len(row_idx) > n_rows or len(col_idx) > n_cols:
        raise ValueError("indices exceed matrix dimension")
    return arr[np.ix_(row_idx, col_idx)].copy()