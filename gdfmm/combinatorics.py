"""Stable log-sums, raising and falling factorials and Pochhammer symbols."""

from __future__ import annotations

import math
from collections.abc import Sequence

from scipy import special

_INF = math.inf


def _log(x: float) -> float:
    """Natural logarithm with IEEE semantics: log(0) = -inf, log(<0) = nan."""
    if x > 0:
        return math.log(x)
    if x == 0:
        return -_INF
    return math.nan


def _exp(x: float) -> float:
    """Exponential that overflows to +inf instead of raising."""
    try:
        return math.exp(x)
    except OverflowError:
        return _INF


def log_stable_sum(
    a: Sequence[float],
    is_log: bool,
    val_max: float | None = None,
    idx_max: int | None = None,
) -> float:
    """Return log(sum(a_i)) computed in a numerically stable way.

    If ``is_log`` is true the values of ``a`` are already logarithms.
    ``val_max`` and ``idx_max`` may give the maximum and its position; they
    are trusted without checking. When neither is given the maximum is found.
    When only ``val_max`` is given, every element (the maximum included) is
    summed after rescaling.
    """
    values = list(a)
    if not values:
        return 0.0

    if val_max is None:
        if idx_max is None:
            idx_max = max(range(len(values)), key=values.__getitem__)
        val_max = values[idx_max]

    if is_log:
        if val_max == -_INF:
            return -_INF
        scaled = (_exp(x - val_max) for x in values)
    else:
        if val_max < 0:
            raise ValueError(
                "log_stable_sum: if is_log is false, the maximum value can not be negative"
            )
        if val_max == 0:
            return 0.0
        log_max = _log(val_max)
        scaled = (_exp(_log(x) - log_max) for x in values)

    offset = val_max if is_log else _log(val_max)

    if idx_max is None:
        return offset + _log(sum(scaled))

    others = sum(s for i, s in enumerate(scaled) if i != idx_max)
    return offset + _log(1.0 + others)


def pochhammer(x: int, a: float) -> float:
    """Pochhammer symbol Gamma(a + x) / Gamma(a)."""
    return float(special.poch(a, x))


def log_pochhammer(x: int, a: float) -> float:
    """Logarithm of the Pochhammer symbol Gamma(a + x) / Gamma(a)."""
    if x == 0:
        return 0.0
    if a > 0 and a + x > 0:
        return math.lgamma(a + x) - math.lgamma(a)
    value = pochhammer(x, a)
    if value < 0:
        raise ValueError("log_pochhammer: the Pochhammer symbol is negative")
    return _log(value)


def raising_factorial_poch(n: int, a: float) -> float:
    """Raising factorial (a)^n via the Pochhammer symbol."""
    return pochhammer(n, a)


def log_raising_factorial_poch(n: int, a: float) -> float:
    """Log of the raising factorial (a)^n via the Pochhammer symbol; needs a > 0."""
    if a <= 0:
        raise ValueError(
            "log_raising_factorial_poch: can not compute the raising factorial "
            "of a negative number in log scale"
        )
    return log_pochhammer(n, a)


def log_raising_factorial(n: int, a: float) -> float:
    """Log of the raising factorial a (a+1) ... (a+n-1); needs a >= 0."""
    if n == 0:
        return 0.0
    if a < 0:
        raise ValueError(
            "log_raising_factorial: can not compute the raising factorial "
            "of a negative number in log scale"
        )
    if a == 0.0:
        return -_INF
    val_max = math.log(a + n - 1)
    if n == 1:
        return val_max
    res = 1.0 + sum(math.log(a + i) / val_max for i in range(n - 1))
    return val_max * res


def raising_factorial(n: int, a: float) -> float:
    """Raising factorial a (a+1) ... (a+n-1)."""
    if n == 0:
        return 1.0
    if n == 1:
        return a
    if a <= 0:
        return math.prod(a + i for i in range(n))
    return _exp(log_raising_factorial(n, a))


def log_falling_factorial(n: int, a: float) -> float:
    """Log of the falling factorial a (a-1) ... (a-n+1); needs a > n - 1."""
    if n == 0:
        return 0.0
    if a < 0:
        raise ValueError(
            "log_falling_factorial: can not compute the falling factorial "
            "of a negative number in log scale"
        )
    if a == 0.0:
        return -_INF
    if a - n + 1 <= 0:
        raise ValueError(
            "log_falling_factorial: can not compute the falling factorial (a)_n "
            "in log scale if a <= n-1"
        )
    val_max = math.log(a)
    if n == 1:
        return val_max
    res = 1.0 + sum(math.log(a - i) / val_max for i in range(1, n))
    return val_max * res


def falling_factorial(n: int, a: float) -> float:
    """Falling factorial a (a-1) ... (a-n+1).

    For a <= 0 the value is the product a (a+1) ... (a+n-1).
    """
    if n == 0:
        return 1.0
    if n == 1:
        return a
    if a <= 0:
        return math.prod(a + i for i in range(n))
    return _exp(log_falling_factorial(n, a))


def falling_factorial_old(n: int, a: float) -> float:
    """Falling factorial through the identity (a)_n = (-1)^n (-a)^n."""
    value = pochhammer(n, -a)
    return value if n % 2 == 0 else -value


def log_falling_factorial_old(n: int, a: float) -> float:
    """Log-scale counterpart of :func:`falling_factorial_old`."""
    value = log_pochhammer(n, -a)
    return value if n % 2 == 0 else -value


def _paired(n_i: Sequence[int], gamma: Sequence[float]) -> zip:
    if len(n_i) != len(gamma):
        raise ValueError("the lengths of n_i and gamma have to be equal")
    return zip(n_i, gamma)


def combined_product(
    n_i: Sequence[int], gamma: Sequence[float], mstar: int, k: int
) -> float:
    """Product over j of (n_j + gamma_j * (mstar + k))."""
    return math.prod(
        (float(nj) + gj * float(mstar + k) for nj, gj in _paired(n_i, gamma)),
        start=1.0,
    )


def combined_sum(
    n_i: Sequence[int], gamma: Sequence[float], mstar: int, k: int
) -> float:
    """Sum over j of (n_j + gamma_j * (mstar + k))."""
    return sum(
        (float(nj) + gj * float(mstar + k) for nj, gj in _paired(n_i, gamma)),
        0.0,
    )