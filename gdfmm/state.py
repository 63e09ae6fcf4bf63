"""State shared by the full conditionals of the Gibbs sampler."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

DEFAULT_PRIOR = "Normal-InvGamma"


class GSData:
    """Values that the Gibbs sampler reads and updates at every iteration.

    ``data`` is a matrix whose rows are the levels (groups). Each row holds
    that level's observations, padded on the right with NaN. ``partition``
    gives the initial cluster label of every observation, level by level.
    """

    def __init__(
        self,
        data,
        rng: np.random.Generator,
        mstar: int,
        lambda0: float,
        gamma0: Sequence[float],
        init_mean: Sequence[float],
        init_var: Sequence[float],
        partition: Sequence[int],
        prior: str = DEFAULT_PRIOR,
    ) -> None:
        matrix = np.asarray(data, dtype=float)
        if matrix.ndim != 2:
            raise ValueError("data must be a two-dimensional matrix")

        self.prior = prior
        self.iterations = 0
        self.lambda_ = float(lambda0)
        self.mstar = int(mstar)
        self.r = 0
        self.beta: np.ndarray | None = None
        self.use_data = True

        # Missing values are dropped; n_j counts the values before the first NaN.
        self.data: list[list[float]] = [
            [float(x) for x in row if not math.isnan(x)] for row in matrix
        ]
        self.d = matrix.shape[0]
        self.n_j: list[int] = []
        for row in matrix:
            nan_positions = np.flatnonzero(np.isnan(row))
            self.n_j.append(int(nan_positions[0]) if nan_positions.size else row.size)
        self.log_prob_marginal_data: list[list[float]] = [[0.0] * n for n in self.n_j]

        self.K = 0
        self.M = self.mstar
        self.ctilde: list[list[int]] = []
        self.n = np.zeros((self.d, 0), dtype=int)
        self.n_k: list[int] = []
        self.cluster_indices: list[set[tuple[int, int]]] = []

        if len(partition) == 0:
            raise ValueError("the initial partition must not be empty")
        self.initialize_partition(partition)

        self.gamma = [float(g) for g in gamma0]
        if len(self.gamma) != self.d:
            raise ValueError("gamma0 must hold one value for each level")
        self.u = [1.0] * self.d
        self.log_sum = 0.0
        self.update_log_sum()

        self.s = np.ones((self.d, self.M))
        self.initialize_s(self.M, rng)
        self.mu: list[float] = []
        self.sigma: list[float] = []
        self.initialize_tau(self.M, init_mean, init_var)

        self.sum_cluster_elements = [0.0] * self.K
        self.squared_sum_cluster_elements = [0.0] * self.K

    def update_log_sum(self) -> None:
        """Recompute the sum over levels of gamma_j * log(U_j + 1)."""
        self.log_sum = sum(math.log(u + 1.0) * g for u, g in zip(self.u, self.gamma))

    def initialize_partition(self, partition: Sequence[int]) -> None:
        """Set K, M, the labels and the cluster counts from a vector of labels."""
        labels = [int(c) for c in partition]
        if not labels:
            raise ValueError("the partition must not be empty")
        if any(c < 0 for c in labels):
            raise ValueError("cluster labels must be non-negative")
        if len(labels) != sum(self.n_j):
            raise ValueError("the partition must hold one label for each observation")

        self.K = max(labels) + 1
        self.M = self.K + self.mstar
        self.n = np.zeros((self.d, self.K), dtype=int)
        self.n_k = [0] * self.K
        self.ctilde = []
        it = iter(labels)
        for j, size in enumerate(self.n_j):
            row = [next(it) for _ in range(size)]
            for c in row:
                self.n[j, c] += 1
                self.n_k[c] += 1
            self.ctilde.append(row)

    def allocate_s(self, m: int) -> None:
        """Reset the d x m weight matrix to ones."""
        self.s = np.ones((self.d, m))

    def initialize_s(self, m: int, rng: np.random.Generator) -> None:
        """Draw the d x m weights, S_jm ~ Gamma(gamma_j, 1)."""
        self.s = np.array(
            [[rng.gamma(g, 1.0) for _ in range(m)] for g in self.gamma], dtype=float
        ).reshape(self.d, m)

    def initialize_tau(
        self, m: int, init_mean: Sequence[float], init_var: Sequence[float]
    ) -> None:
        """Set the component means and variances to the given initial values."""
        if len(init_mean) != m:
            raise ValueError("length of init_mean is not equal to M")
        if len(init_var) != m:
            raise ValueError("length of init_var is not equal to M")
        self.mu = [float(x) for x in init_mean]
        self.sigma = [float(x) for x in init_var]

    def allocate_n(self, k: int) -> None:
        """Reset the d x k count matrix and the k cluster sizes to zero."""
        self.n = np.zeros((self.d, k), dtype=int)
        self.n_k = [0] * k

    def allocate_tau(self, m: int) -> None:
        """Reset m means to zero and m variances to one."""
        self.mu = [0.0] * m
        self.sigma = [1.0] * m

    def _relabel(self, c: Sequence[Sequence[int]], clust_out: Sequence[int]) -> list[list[tuple[int, int]]]:
        members: list[list[tuple[int, int]]] = []
        for m, label in enumerate(clust_out[: self.K]):
            found: list[tuple[int, int]] = []
            for j, size in enumerate(self.n_j):
                for i in range(size):
                    if c[j][i] == label:
                        self.n[j, m] += 1
                        self.ctilde[j][i] = m
                        found.append((j, i))
                self.n_k[m] += int(self.n[j, m])
            members.append(found)
        return members

    def update_ctilde(
        self, c: Sequence[Sequence[int]], clust_out: Sequence[int]
    ) -> None:
        """Relabel the allocation ``c`` so that label ``clust_out[m]`` becomes m.

        The counts must have been reset with :meth:`allocate_n` for the current K.
        """
        self._relabel(c, clust_out)

    def update_cluster_structures(
        self, c: Sequence[Sequence[int]], clust_out: Sequence[int]
    ) -> None:
        """As :meth:`update_ctilde`, also rebuilding the members of each cluster."""
        members = self._relabel(c, clust_out)
        self.cluster_indices = [set(found) for found in members]

    def initialize_sums_in_clusters(self) -> None:
        """Add every observation and its square to the totals of its cluster."""
        for row, labels in zip(self.data, self.ctilde):
            for x, c in zip(row, labels):
                self.sum_cluster_elements[c] += x
                self.squared_sum_cluster_elements[c] += x * x

    def compute_var_in_cluster(self, m: int) -> float:
        """Sample variance of the observations in cluster m."""
        if m >= len(self.sum_cluster_elements):
            raise IndexError("requested variance of a cluster that does not exist")
        size = self.n_k[m]
        if size == 1:
            return 0.0
        if size == 0:
            return math.nan
        total = self.sum_cluster_elements[m]
        return (self.squared_sum_cluster_elements[m] - total * total / size) / (size - 1)

    def compute_log_prob_marginal_data(
        self, nu_0: float, sigma_0: float, mu_0: float, k_0: float
    ) -> None:
        """Store the log marginal density of every observation under the prior."""
        n0 = nu_0
        scale_sq = sigma_0 * (k_0 + 1.0) / k_0
        const = (
            math.lgamma((n0 + 1.0) / 2.0)
            - math.lgamma(n0 / 2.0)
            - 0.5 * math.log(math.pi * scale_sq * n0)
        )
        self.log_prob_marginal_data = [
            [
                const
                - 0.5 * (n0 + 1.0) * math.log(1.0 + (x - mu_0) ** 2 / (n0 * scale_sq))
                for x in row[:size]
            ]
            for row, size in zip(self.data, self.n_j)
        ]