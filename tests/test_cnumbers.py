import math

import numpy as np
import pytest

from gdfmm.cnumbers import log_c_matrix, log_c_numbers, log_c_numbers_central


def _rising(x, n):
    return math.prod((x + i for i in range(n)), start=1.0)


def _falling(t, k):
    return math.prod((t - i for i in range(k)), start=1.0)


@pytest.mark.parametrize(
    "n,s,r,t",
    [(5, 0.5, 0.7, 3.0), (4, 1.3, 0.0, 2.5), (6, 2.0, 1.5, 4.2), (3, 0.1, 2.0, 1.7)],
)
def test_expansion_identity(n, s, r, t):
    # (s t + r) rising n equals sum_k |C(n,k)| times t falling k
    logc = log_c_numbers(n, -s, -r)
    rhs = sum(math.exp(v) * _falling(t, k) for k, v in enumerate(logc))
    assert rhs == pytest.approx(_rising(s * t + r, n), rel=1e-9)


@pytest.mark.parametrize("n", [1, 2, 3, 4, 7])
def test_unit_scale_central_gives_lah_numbers(n):
    logc = log_c_numbers_central(n, -1.0)
    for k in range(1, n + 1):
        lah = math.comb(n - 1, k - 1) * math.factorial(n) / math.factorial(k)
        assert math.exp(logc[k]) == pytest.approx(lah, rel=1e-9)
    assert logc[0] == -math.inf


def test_small_lah_values():
    logc = log_c_numbers(3, -1.0, 0.0)
    assert np.exp(logc[1:]) == pytest.approx([6.0, 6.0, 1.0])


def test_length_and_last_element():
    n, s = 6, 0.8
    logc = log_c_numbers(n, -s, -0.3)
    assert len(logc) == n + 1
    assert logc[n] == pytest.approx(n * math.log(s))


def test_n_zero():
    assert list(log_c_numbers(0, -1.0, -1.0)) == [0.0]
    assert list(log_c_numbers_central(0, -1.0)) == [0.0]


def test_first_column_is_log_raising_factorial():
    r = 0.9
    logc = log_c_numbers(4, -0.5, -r)
    assert logc[0] == pytest.approx(math.log(_rising(r, 4)))


def test_central_matches_zero_location():
    for n in range(1, 8):
        a = log_c_numbers_central(n, -0.7)
        b = log_c_numbers(n, -0.7, 0.0)
        assert a[0] == b[0] == -math.inf
        assert a[1:] == pytest.approx(b[1:])


@pytest.mark.parametrize("s,r", [(0.5, 0.7), (1.0, 0.0), (2.5, 1.2)])
def test_matrix_rows_match_vector(s, r):
    n = 6
    mat = log_c_matrix(n, -s, -r)
    assert mat.shape == (n + 1, n + 1)
    for nn in range(n + 1):
        row = log_c_numbers(nn, -s, -r)
        expected = mat[nn, : nn + 1]
        for got, want in zip(row, expected):
            if math.isinf(want):
                assert got == want
            else:
                assert got == pytest.approx(want)


def test_matrix_upper_triangle_is_zero():
    mat = log_c_matrix(5, -0.4, -0.2)
    assert np.all(np.triu(mat, k=1) == 0.0)
    assert mat[0, 0] == 0.0


@pytest.mark.parametrize("scale,location", [(0.0, 0.0), (1.0, -1.0), (-1.0, 0.5)])
def test_invalid_parameters(scale, location):
    with pytest.raises(ValueError):
        log_c_numbers(3, scale, location)
    with pytest.raises(ValueError):
        log_c_matrix(3, scale, location)


def test_central_invalid_scale():
    with pytest.raises(ValueError):
        log_c_numbers_central(3, 0.0)