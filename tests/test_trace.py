import math

import numpy as np
import pytest

from gdfmm.state import GSData
from gdfmm.trace import MarginalTrace, log_q_weights

PARTITION = [0, 1, 0, 1, 1]


def make_state(lambda0=2.0):
    data = [[1.0, 2.0, math.nan], [3.0, 4.0, 5.0]]
    return GSData(
        data,
        np.random.default_rng(0),
        0,
        lambda0,
        [1.0, 1.5],
        [0.0, 1.0],
        [1.0, 1.0],
        PARTITION,
    )


def test_record_saves_partition_and_k():
    state = make_state()
    trace = MarginalTrace()
    trace.record(state)
    assert trace.it_saved == 1
    assert trace.K == [state.K]
    assert trace.partition == [PARTITION]


def test_record_copies_values():
    state = make_state()
    trace = MarginalTrace()
    trace.record(state)
    saved_mu = list(trace.mu[0])
    state.mu[0] = 42.0
    state.u[0] = 7.0
    assert list(trace.mu[0]) == saved_mu
    assert trace.u[0][0] == 1.0


def test_matrices_have_expected_shapes():
    state = make_state()
    trace = MarginalTrace()
    for _ in range(3):
        trace.record(state)
    assert trace.it_saved == 3
    assert trace.u_matrix.shape == (state.d, 3)
    assert trace.gamma_matrix.shape == (state.d, 3)
    assert trace.partition_matrix.shape == (3, sum(state.n_j))
    assert np.allclose(trace.gamma_matrix[:, 2], state.gamma)


def test_log_q_allocated_columns_match_counts():
    state = make_state()
    w = log_q_weights(state)
    assert w.shape == (state.d, state.K + 1)
    for j in range(state.d):
        assert np.allclose(np.exp(w[j, : state.K]) - state.gamma[j], state.n[j])


def test_log_q_new_cluster_column_invariant_over_levels():
    state = make_state()
    w = log_q_weights(state)
    offsets = [w[j, state.K] - math.log(state.gamma[j]) for j in range(state.d)]
    assert offsets[0] == pytest.approx(offsets[1])


def test_log_q_lambda_truncated_in_constant():
    low = make_state(lambda0=2.0)
    high = make_state(lambda0=2.7)
    w_low = log_q_weights(low)
    w_high = log_q_weights(high)
    diff = w_high[:, low.K] - w_low[:, low.K]
    assert np.allclose(diff, math.log(2.7 / 2.0))
    assert np.allclose(w_high[:, : low.K], w_low[:, : low.K])


def test_record_stores_log_q():
    state = make_state()
    trace = MarginalTrace()
    trace.record(state)
    assert np.allclose(trace.log_q[0], log_q_weights(state))


def test_record_rejects_zero_clusters():
    state = make_state()
    state.K = 0
    trace = MarginalTrace()
    with pytest.raises(ValueError):
        trace.record(state)
    assert trace.it_saved == 0