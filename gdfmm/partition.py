"""Full conditional update of the cluster allocation of every observation."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from gdfmm.state import GSData

_TWO_PI = 2.0 * math.pi


def log_norm(x: float, u: float, s: float) -> float:
    """Log density at ``x`` of a normal with mean ``u`` and variance ``s``."""
    return -0.5 * math.log(_TWO_PI * s) - (0.5 / s) * (x - u) * (x - u)


class PartitionUpdater:
    """Draws the component of each observation given weights, means and variances.

    After the draw the occupied components are relabelled 0, ..., K-1 in the
    order of their old labels, and the means and variances are reordered so
    that the first K entries belong to the occupied components.
    """

    name = "Partition"

    def __init__(self, d: int, n_j: Sequence[int], fixed: bool) -> None:
        self.fixed = bool(fixed)
        self.c: list[list[int]] = [[1] * int(n_j[j]) for j in range(d)]
        self.clust_out: list[int] = []

    @property
    def keep_fixed(self) -> bool:
        return self.fixed

    def _draw(self, state: GSData, rng: np.random.Generator) -> None:
        m_total = state.M
        mu = np.asarray(state.mu[:m_total], dtype=float)
        sigma = np.asarray(state.sigma[:m_total], dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            log_s = np.log(np.asarray(state.s, dtype=float)[:, :m_total])
            log_const = -0.5 * np.log(_TWO_PI * sigma)
            for j, row in enumerate(state.data):
                for i, x in enumerate(row[: state.n_j[j]]):
                    log_probs = log_s[j] + log_const - (0.5 / sigma) * (x - mu) ** 2
                    probs = np.exp(log_probs - log_probs.max())
                    if np.isnan(probs).any():
                        raise RuntimeError("got a nan in the component probabilities")
                    self.c[j][i] = int(rng.choice(m_total, p=probs / probs.sum()))

    def update(self, state: GSData, rng: np.random.Generator) -> None:
        """Draw a new allocation and write it, relabelled, into ``state``."""
        if self.fixed:
            return

        self._draw(state, rng)

        self.clust_out = sorted({label for row in self.c for label in row})
        k = len(self.clust_out)
        state.K = k
        state.allocate_n(k)
        state.update_ctilde(self.c, self.clust_out)

        occupied = set(self.clust_out)
        empty = [m for m in range(state.M) if m not in occupied]
        order = self.clust_out + empty
        state.mu = [state.mu[m] for m in order]
        state.sigma = [state.sigma[m] for m in order]