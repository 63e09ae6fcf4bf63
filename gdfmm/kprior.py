"""Prior on the number of distinct clusters in a group of related samples.

``compute_log_vprior`` gives the normalising factor that depends on the prior
of the number of components, and ``kprior_unnormalized`` (or its recursive
extension to any number of groups) gives the combinatorial factor. The prior
probability of ``k`` distinct clusters is ``exp(log_V + log_K)``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from gdfmm.cnumbers import log_c_numbers
from gdfmm.combinatorics import (
    log_falling_factorial,
    log_raising_factorial,
    log_stable_sum,
    raising_factorial,
)

_INF = math.inf


def log_choose(n: int, k: int) -> float:
    """Logarithm of the binomial coefficient n choose k; needs 0 <= k <= n."""
    if k < 0 or n < 0 or k > n:
        raise ValueError(f"log_choose: invalid arguments n={n}, k={k}")
    if k == 0 or k == n:
        return 0.0
    return math.lgamma(n + 1) - math.lgamma(k + 1) - math.lgamma(n - k + 1)


def _check_lengths(n_i: Sequence[int], gamma: Sequence[float], where: str) -> None:
    if len(n_i) != len(gamma):
        raise ValueError(
            f"{where}: the length of n_i (group sizes) and gamma has to be equal"
        )


def _inverse(x: float) -> float:
    if x == 0:
        return _INF
    return 1.0 / x


def compute_vprior(
    k: int,
    n_i: Sequence[int],
    gamma: Sequence[float],
    eval_prob: Callable[[int], float],
    m_max: int = 100,
) -> float:
    """Return V(k), summing over the number of non-allocated components up to ``m_max``.

    ``eval_prob(m)`` is the prior probability of ``m`` components.
    """
    _check_lengths(n_i, gamma, "compute_vprior")
    total = 0.0
    for mstar in range(m_max + 1):
        scale = float(mstar + k)
        product = math.prod(
            (_inverse(raising_factorial(nj, gj * scale)) for nj, gj in zip(n_i, gamma)),
            start=1.0,
        )
        total += raising_factorial(k, float(mstar + 1)) * eval_prob(mstar + k) * product
    return total


def compute_log_vprior(
    k: int,
    n_i: Sequence[int],
    gamma: Sequence[float],
    log_eval_prob: Callable[[int], float],
    m_max: int = 100,
) -> float:
    """Return log V(k), summing over the number of non-allocated components up to ``m_max``.

    ``log_eval_prob(m)`` is the log prior probability of ``m`` components.
    """
    if k == 0:
        raise ValueError("compute_log_vprior: k=0 is not a valid number of clusters")
    if len(n_i) == 0:
        raise ValueError("compute_log_vprior: the length of n_i (group sizes) must be positive")
    _check_lengths(n_i, gamma, "compute_log_vprior")
    if k > sum(n_i):
        raise ValueError(
            "compute_log_vprior: k can not be higher than the sum of the elements of n_i"
        )

    terms = [-_INF] * (m_max + 1)
    idx_max = 0
    val_max = -_INF
    for mstar in range(m_max + 1):
        scale = float(mstar + k)
        value = (
            log_raising_factorial(k, float(mstar + 1))
            + log_eval_prob(mstar + k)
            - sum(log_raising_factorial(nj, gj * scale) for nj, gj in zip(n_i, gamma))
        )
        terms[mstar] = value
        if value > val_max:
            idx_max, val_max = mstar, value
    return log_stable_sum(terms, True, val_max, idx_max)


def _sum_with_max(values: list[float]) -> float:
    """Log-sum of log-values, tracking the maximum as the values were produced."""
    idx_max = 0
    val_max = -_INF
    for idx, value in enumerate(values):
        if value > val_max:
            idx_max, val_max = idx, value
    return log_stable_sum(values, True, val_max, idx_max)


def kprior_unnormalized(k: int, n_i: Sequence[int], gamma: Sequence[float]) -> float:
    """Log of the unnormalised prior of k distinct clusters, for one or two groups."""
    _check_lengths(n_i, gamma, "kprior_unnormalized")
    if len(n_i) > 2 or len(n_i) == 0:
        raise ValueError(
            "kprior_unnormalized: the length of n_i (group sizes) must be equal to 1 or 2"
        )

    if k == 0:
        # k = 0 is certain only when every group is empty.
        return 0.0 if max(n_i) == 0 else -_INF
    if k > sum(n_i):
        return -_INF

    if len(n_i) == 1:
        return float(log_c_numbers(n_i[0], -gamma[0], 0.0)[k])

    n1, n2 = int(n_i[0]), int(n_i[1])
    abs_c1 = log_c_numbers(n1, -gamma[0], 0.0)
    abs_c2 = log_c_numbers(n2, -gamma[1], 0.0)

    start1 = max(0, k - n1)
    start2 = max(0, k - n2)
    end1 = min(k, n2)

    log_a: list[float] = []
    for r1 in range(start1, end1 + 1):
        inner = [
            log_choose(k - r2, r1)
            + log_falling_factorial(k - r1 - r2, float(k - r1))
            + float(abs_c2[k - r2])
            for r2 in range(start2, k - r1 + 1)
        ]
        log_a.append(float(abs_c1[k - r1]) + _sum_with_max(inner))
    return _sum_with_max(log_a)


def kprior_unnormalized_recursive(
    k: int, n_i: Sequence[int], gamma: Sequence[float]
) -> float:
    """Log of the unnormalised prior of k distinct clusters, for any number of groups."""
    _check_lengths(n_i, gamma, "kprior_unnormalized_recursive")
    if len(n_i) == 0:
        raise ValueError(
            "kprior_unnormalized_recursive: the length of n_i (group sizes) must be greater than 0"
        )
    if len(n_i) <= 2:
        return kprior_unnormalized(k, n_i, gamma)
    if k == 0:
        return -_INF
    if k > sum(n_i):
        return -_INF

    head_n, last_n = list(n_i[:-1]), [n_i[-1]]
    head_g, last_g = list(gamma[:-1]), [gamma[-1]]

    log_a: list[float] = []
    for k1 in range(k + 1):
        inner = [
            log_choose(k2, k - k1)
            + log_falling_factorial(k1 + k2 - k, float(k1))
            + kprior_unnormalized(k2, last_n, last_g)
            for k2 in range(k - k1, k + 1)
        ]
        log_a.append(
            kprior_unnormalized_recursive(k1, head_n, head_g) + _sum_with_max(inner)
        )
    return _sum_with_max(log_a)