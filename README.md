# gdfmm

Numerical building blocks for group-dependent finite mixture models:
log-scale combinatorics, non-central C numbers, the prior law of the number
of distinct clusters across groups, and the state, partition update and
trace of a Gibbs sampler.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `gdfmm.combinatorics`
  - `log_stable_sum(a, is_log, val_max=None, idx_max=None)`: log of a sum,
    computed stably; `a` may already hold logarithms (`is_log=True`).
  - `raising_factorial`, `log_raising_factorial`, `raising_factorial_poch`,
    `log_raising_factorial_poch`: the raising factorial a (a+1) ... (a+n-1).
  - `falling_factorial`, `log_falling_factorial`, `falling_factorial_old`,
    `log_falling_factorial_old`: the falling factorial a (a-1) ... (a-n+1).
  - `pochhammer`, `log_pochhammer`: Gamma(a + x) / Gamma(a).
  - `combined_product`, `combined_sum`: product and sum over groups of
    n_j + gamma_j (mstar + k).
  - Invalid arguments in log scale raise `ValueError`.
- `gdfmm.cnumbers`
  - `log_c_numbers(n, scale, location)`: log |C(n, k; scale, location)| for
    k = 0..n, as a NumPy array.
  - `log_c_numbers_central(n, scale)`: the same for central C numbers.
  - `log_c_matrix(n, scale, location)`: the (n+1) x (n+1) matrix of
    log |C(nn, k)| for 0 <= k <= nn <= n.
  - `scale` must be strictly negative and `location` non-positive, otherwise
    `ValueError` is raised.
- `gdfmm.kprior`
  - `log_choose(n, k)`: log of the binomial coefficient.
  - `compute_vprior(k, n_i, gamma, eval_prob, m_max=100)` and
    `compute_log_vprior(k, n_i, gamma, log_eval_prob, m_max=100)`: the
    normalising factor V(k). The prior on the number of components is passed
    in as a function (`eval_prob(m)` or `log_eval_prob(m)`).
  - `kprior_unnormalized(k, n_i, gamma)`: unnormalised log prior of `k`
    distinct clusters for one or two groups.
  - `kprior_unnormalized_recursive(k, n_i, gamma)`: the same for any number
    of groups.
  - The prior probability of `k` clusters is `exp(log_V + log_K)`.
- `gdfmm.indexing`
  - `submatrix(matrix, rows, cols)`: the rows and columns picked by index, in
    the given order; a single index is accepted for either.
- `gdfmm.state`
  - `GSData(data, rng, mstar, lambda0, gamma0, init_mean, init_var, partition, prior="Normal-InvGamma")`:
    the sampler state. `data` is a matrix with one row per level, padded on
    the right with NaN; `partition` gives the initial label of every
    observation, level by level. It holds the labels (`ctilde`), the counts
    (`n`, `n_k`), the weights `s`, the means `mu` and variances `sigma`,
    `u`, `gamma`, `lambda_` and `log_sum`, with methods to reallocate and
    relabel them, to accumulate per-cluster sums and variances, and to
    compute the log marginal density of each observation.
- `gdfmm.partition`
  - `PartitionUpdater(d, n_j, fixed)`: `update(state, rng)` draws the
    component of each observation and relabels the occupied components
    0..K-1, reordering `mu` and `sigma` to match. Does nothing when `fixed`.
  - `log_norm(x, u, s)`: log normal density with mean `u` and variance `s`.
- `gdfmm.trace`
  - `log_q_weights(state)`: the d x (K+1) matrix of unnormalised log cluster
    weights per level, the last column for a new cluster.
  - `MarginalTrace`: `record(state)` appends the current K, labels, `mu`,
    `sigma`, `lambda_`, `u`, `gamma` and log weights; `u_matrix`,
    `gamma_matrix` and `partition_matrix` give them as arrays.

## Example

```python
import math

import numpy as np

from gdfmm.cnumbers import log_c_numbers_central
from gdfmm.kprior import kprior_unnormalized_recursive
from gdfmm.partition import PartitionUpdater
from gdfmm.state import GSData
from gdfmm.trace import MarginalTrace

# log |C(5, k; -1)| for k = 0..5
print(log_c_numbers_central(5, -1.0))

# unnormalised log prior of K = 3 distinct clusters in three groups
print(kprior_unnormalized_recursive(3, [2, 2, 2], [1.0, 1.0, 1.0]))

# two levels with 2 and 3 observations, two clusters and one empty component
rng = np.random.default_rng(0)
data = [[1.0, 2.0, math.nan], [0.5, 1.5, 3.0]]
state = GSData(
    data, rng, mstar=1, lambda0=2.0, gamma0=[1.0, 1.0],
    init_mean=[0.0, 2.0, 4.0], init_var=[1.0, 1.0, 1.0],
    partition=[0, 1, 0, 1, 1],
)

updater = PartitionUpdater(state.d, state.n_j, fixed=False)
trace = MarginalTrace()
updater.update(state, rng)
trace.record(state)
print(trace.K, trace.partition_matrix, trace.log_q[0])
```

## What the package does not do

There is no complete sampler: no driver loop over iterations, burn-in and
thinning, and no updates of the means and variances, of `u`, `gamma`,
`lambda_` or of the number of empty components. Only the partition update is
provided. No prior distributions on the number of components are included;
`compute_vprior` and `compute_log_vprior` take them as functions. There is
no command-line program.