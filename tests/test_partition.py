import math

import numpy as np
import pytest
from scipy import stats

from gdfmm.partition import PartitionUpdater, log_norm
from gdfmm.state import GSData

NAN = math.nan


def _state(init_mean):
    data = [[0.0, 0.1, NAN], [5.0, 5.1, 5.2]]
    state = GSData(
        data,
        np.random.default_rng(0),
        1,
        1.0,
        [1.0, 1.0],
        init_mean,
        [1.0, 1.0, 1.0],
        [0, 0, 1, 1, 1],
    )
    state.allocate_s(state.M)
    return state


@pytest.mark.parametrize("x,u,s", [(0.0, 0.0, 1.0), (1.5, -0.5, 2.0), (3.0, 3.0, 0.25)])
def test_log_norm_matches_normal_logpdf(x, u, s):
    assert log_norm(x, u, s) == pytest.approx(stats.norm.logpdf(x, u, math.sqrt(s)))


def test_constructor_sets_all_labels_to_one():
    updater = PartitionUpdater(2, [2, 3], False)
    assert updater.c == [[1, 1], [1, 1, 1]]
    assert updater.keep_fixed is False


def test_fixed_partition_leaves_state_unchanged():
    state = _state([0.0, 5.0, 100.0])
    before = [row[:] for row in state.ctilde]
    updater = PartitionUpdater(state.d, state.n_j, True)
    updater.update(state, np.random.default_rng(1))
    assert state.ctilde == before
    assert state.mu == [0.0, 5.0, 100.0]
    assert state.K == 2


def test_update_assigns_by_likelihood():
    state = _state([0.0, 5.0, 100.0])
    updater = PartitionUpdater(state.d, state.n_j, False)
    updater.update(state, np.random.default_rng(2))
    assert updater.clust_out == [0, 1]
    assert state.K == 2
    assert state.ctilde == [[0, 0], [1, 1, 1]]
    assert state.n.tolist() == [[2, 0], [0, 3]]
    assert state.n_k == [2, 3]
    assert state.mu == [0.0, 5.0, 100.0]


def test_update_relabels_and_reorders_parameters():
    state = _state([100.0, 0.0, 5.0])
    state.sigma = [9.0, 1.0, 1.0]
    updater = PartitionUpdater(state.d, state.n_j, False)
    updater.update(state, np.random.default_rng(3))
    assert updater.clust_out == [1, 2]
    assert updater.c == [[1, 1], [2, 2, 2]]
    assert state.ctilde == [[0, 0], [1, 1, 1]]
    assert state.mu == [0.0, 5.0, 100.0]
    assert state.sigma == [1.0, 1.0, 9.0]
    assert state.M == 3


def test_counts_are_consistent_after_update():
    state = _state([0.0, 0.05, 5.0])
    updater = PartitionUpdater(state.d, state.n_j, False)
    updater.update(state, np.random.default_rng(4))
    assert sum(state.n_k) == sum(state.n_j)
    assert state.n.sum(axis=1).tolist() == state.n_j
    assert len(state.n_k) == state.K == len(updater.clust_out)
    assert sorted(state.mu) == [0.0, 0.05, 5.0]
    labels = {c for row in state.ctilde for c in row}
    assert labels == set(range(state.K))


def test_zero_weights_raise():
    state = _state([0.0, 5.0, 100.0])
    state.s = np.zeros((state.d, state.M))
    updater = PartitionUpdater(state.d, state.n_j, False)
    with pytest.raises(RuntimeError):
        updater.update(state, np.random.default_rng(5))