"""Values saved by the marginal Gibbs sampler at each kept iteration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from gdfmm.state import GSData


def _log(x: float) -> float:
    if x > 0:
        return math.log(x)
    if x == 0:
        return -math.inf
    return math.nan


def log_q_weights(state: GSData) -> np.ndarray:
    """Unnormalised log cluster probabilities for each level.

    Returns a d x (K+1) matrix. Entry (j, l) for l < K is log(N_jl + gamma_j);
    the last column is the log weight of a new cluster in level j.
    """
    k = state.K
    # The count of components enters this constant truncated to an integer.
    lam_int = float(int(state.lambda_))
    psi = math.exp(-state.log_sum)
    log_const_new = (
        -state.log_sum
        + _log(k + 1.0 + lam_int * psi)
        - _log(k + lam_int * psi)
    )

    weights = np.zeros((state.d, k + 1), dtype=float)
    for j, g in enumerate(state.gamma[: state.d]):
        weights[j, :k] = [_log(float(state.n[j, l]) + g) for l in range(k)]
        weights[j, k] = log_const_new + _log(state.lambda_ * g)
    return weights


@dataclass
class MarginalTrace:
    """Chain of saved values: one entry per kept iteration.

    ``partition`` holds, for each kept iteration, the cluster label of every
    observation, level by level. ``log_q`` holds the matrices returned by
    :func:`log_q_weights`.
    """

    it_saved: int = 0
    K: list[int] = field(default_factory=list)
    partition: list[list[int]] = field(default_factory=list)
    mu: list[np.ndarray] = field(default_factory=list)
    sigma: list[np.ndarray] = field(default_factory=list)
    lambda_: list[float] = field(default_factory=list)
    u: list[list[float]] = field(default_factory=list)
    gamma: list[list[float]] = field(default_factory=list)
    log_q: list[np.ndarray] = field(default_factory=list)

    def record(self, state: GSData) -> None:
        """Save the current values of ``state`` as a new kept iteration."""
        if state.K == 0:
            raise ValueError("K is 0, this should be impossible")
        self.K.append(int(state.K))
        self.mu.append(np.array(state.mu, dtype=float))
        self.sigma.append(np.array(state.sigma, dtype=float))
        self.lambda_.append(float(state.lambda_))
        self.u.append([float(x) for x in state.u])
        self.gamma.append([float(x) for x in state.gamma])
        self.partition.append(
            [int(c) for row in state.ctilde[: state.d] for c in row]
        )
        self.log_q.append(log_q_weights(state))
        self.it_saved += 1

    @property
    def u_matrix(self) -> np.ndarray:
        """U as a d x n_saved matrix."""
        return np.array(self.u, dtype=float).T

    @property
    def gamma_matrix(self) -> np.ndarray:
        """gamma as a d x n_saved matrix."""
        return np.array(self.gamma, dtype=float).T

    @property
    def partition_matrix(self) -> np.ndarray:
        """Labels as an n_saved x n_data matrix."""
        return np.array(self.partition, dtype=int)