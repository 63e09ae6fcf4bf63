"""Logarithms of the absolute values of generalized factorial (C) numbers.

The numbers are computed with the triangular recursion

    |C(n, k)| = (s k + r + n - 1) |C(n-1, k)| + s |C(n-1, k-1)|

carried out in log scale. The scale ``s`` is strictly positive and the
location ``r`` non-negative; callers pass them with their natural signs,
``scale = -s < 0`` and ``location = -r <= 0``.
"""

from __future__ import annotations

import math

import numpy as np

from gdfmm.combinatorics import log_raising_factorial, raising_factorial

_INF = math.inf


def _log(x: float) -> float:
    if x > 0:
        return math.log(x)
    if x == 0:
        return -_INF
    return math.nan


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return _INF


def _check_parameters(scale: float, location: float) -> tuple[float, float]:
    if not (scale < 0 and location <= 0):
        raise ValueError(
            "the recursive formula for the absolute values of the C numbers can be "
            "used only if the scale is strictly negative and the location is non positive"
        )
    return -scale, -location


def _step(log_prev_k: float, log_prev_km1: float, s: float, coef: float) -> float:
    """One step of the recursion in log scale."""
    return _log(coef) + log_prev_k + _log(1.0 + s / coef * _exp(log_prev_km1 - log_prev_k))


def log_c_matrix(n: int, scale: float, location: float) -> np.ndarray:
    """Return the (n+1) x (n+1) matrix of log|C(nn, k)| for 0 <= k <= nn <= n.

    Entries above the diagonal are zero. Column 0 holds the log of the
    raising factorial of the location.
    """
    s, r = _check_parameters(scale, location)
    res = np.zeros((n + 1, n + 1), dtype=float)
    # Filled diagonal by diagonal: entry (m, m - diag) needs the previous
    # diagonal at (m-1, m-diag) and the same diagonal at (m-1, m-diag-1).
    for diag in range(n + 1):
        for m in range(diag, n + 1):
            k = m - diag
            if m == 0 and k == 0:
                res[m, k] = 0.0
            elif k == 0:
                res[m, k] = _log(raising_factorial(m, r))
            elif m == k:
                res[m, k] = _log(s) + res[m - 1, k - 1]
            else:
                coef = s * k + r + m - 1
                res[m, k] = _step(res[m - 1, k], res[m - 1, k - 1], s, coef)
    return res


def log_c_numbers(n: int, scale: float, location: float) -> np.ndarray:
    """Return log|C(n, k; scale, location)| for k = 0, ..., n."""
    s, r = _check_parameters(scale, location)
    if n == 0:
        return np.zeros(1, dtype=float)

    row = [log_raising_factorial(1, r), _log(s)]
    for nn in range(2, n + 1):
        new_row = [log_raising_factorial(nn, r)]
        new_row.extend(
            _step(row[k], row[k - 1], s, s * k + r + nn - 1) for k in range(1, nn)
        )
        new_row.append(nn * _log(s))
        row = new_row
    return np.array(row, dtype=float)


def log_c_numbers_central(n: int, scale: float) -> np.ndarray:
    """Return log|C(n, k; scale)| for k = 0, ..., n for central C numbers."""
    if not scale < 0:
        raise ValueError(
            "the recursive formula for the absolute values of the C numbers can be "
            "used only if the scale is strictly negative"
        )
    s = -scale
    if n == 0:
        return np.zeros(1, dtype=float)

    row = [-_INF, _log(s)]
    for nn in range(2, n + 1):
        new_row = [-_INF]
        new_row.extend(
            _step(row[k], row[k - 1], s, s * k + nn - 1) for k in range(1, nn)
        )
        new_row.append(nn * _log(s))
        row = new_row
    return np.array(row, dtype=float)