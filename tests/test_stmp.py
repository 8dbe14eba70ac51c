import logging

import naive
import numpy as np
import numpy.testing as npt
import pytest

from mstompy import config, core, stmp

test_data = [
    (
        np.array([9, 8100, -60, 7], dtype=np.float64),
        np.array([584, -11, 23, 79, 1001, 0, -19, 12, 8, -41], dtype=np.float64),
    ),
    (
        np.random.uniform(-1000, 1000, [8]).astype(np.float64),
        np.random.uniform(-1000, 1000, [64]).astype(np.float64),
    ),
]


@pytest.mark.parametrize("T_A, T_B", test_data)
def test_stmp_self_join(T_A, T_B):
    m = 3
    ref_P, ref_I = naive.stmp(T_B, m)
    comp_P, comp_I = stmp(T_B, m)

    npt.assert_almost_equal(ref_P, comp_P)
    npt.assert_almost_equal(ref_I, comp_I)


@pytest.mark.parametrize("T_A, T_B", test_data)
def test_stmp_A_B_join(T_A, T_B):
    m = 3
    ref_P, ref_I = naive.stmp(T_A, m, T_B)
    comp_P, comp_I = stmp(T_A, m, T_B)

    assert comp_P.shape[0] == T_B.shape[0] - m + 1
    npt.assert_almost_equal(ref_P, comp_P)
    npt.assert_almost_equal(ref_I, comp_I)


def test_stmp_self_join_random():
    T = np.random.uniform(-1, 1, [100])
    m = 10
    ref_P, ref_I = naive.stmp(T, m)
    comp_P, comp_I = stmp(T, m)

    npt.assert_almost_equal(ref_P, comp_P, decimal=6)
    npt.assert_almost_equal(ref_I, comp_I)


def test_stmp_self_join_no_trivial_match():
    T = np.random.uniform(-1, 1, [64])
    m = 8
    excl_zone = m // 2
    _, comp_I = stmp(T, m)

    for i, nn_idx in enumerate(comp_I):
        assert abs(i - nn_idx) >= excl_zone


def test_stmp_repeated_pattern():
    pattern = np.array([0.0, 1.0, 3.0, 2.0, 0.5])
    T = np.concatenate(
        [pattern, np.random.uniform(10, 20, [10]), pattern, np.random.rand(5)]
    )
    m = pattern.shape[0]
    comp_P, comp_I = stmp(T, m)

    npt.assert_almost_equal(comp_P[0], 0.0, decimal=3)
    npt.assert_almost_equal(comp_P[15], 0.0, decimal=3)
    assert comp_I[0] == 15
    assert comp_I[15] == 0


def test_stmp_list_input():
    T = [584, -11, 23, 79, 1001, 0, -19, 12, 8, -41]
    ref_P, ref_I = naive.stmp(np.array(T, dtype=np.float64), 3)
    comp_P, comp_I = stmp(T, 3)

    npt.assert_almost_equal(ref_P, comp_P)
    npt.assert_almost_equal(ref_I, comp_I)


@pytest.mark.parametrize("T_A", [None, [], np.array([])])
def test_stmp_empty_T_A(T_A):
    with pytest.raises(ValueError):
        stmp(T_A, 3)


def test_stmp_empty_T_B():
    with pytest.raises(ValueError):
        stmp(np.random.rand(10), 3, np.array([]))


@pytest.mark.parametrize("m", [1, 5, 6])
def test_stmp_invalid_window_size(m):
    with pytest.raises(ValueError):
        stmp(np.random.rand(10), m)


def test_stmp_window_larger_than_T_A():
    with pytest.raises(ValueError):
        stmp(np.random.rand(4), 5, np.random.rand(20))


def test_stmp_constant_subsequence():
    T = np.random.rand(20)
    T[:6] = 1.0
    with pytest.raises(core.ZeroStdError):
        stmp(T, 4)


def test_stmp_identical_inputs_warning(caplog):
    T = np.random.rand(20)
    with caplog.at_level(logging.WARNING, logger="mstompy.stmp"):
        stmp(T, 3, T.copy())

    assert "self-join" in caplog.text


def test_stmp_sentinel():
    T_A = np.random.rand(20)
    T_B = np.random.rand(20)
    _, comp_I = stmp(T_A, 3, T_B)

    assert np.all(comp_I != config.MSTOMPY_INDEX_SENTINEL)


def test_stmp_A_B_join_constant_subsequence():
    T_A = np.random.uniform(-1, 1, [40])
    T_B = np.random.uniform(-1, 1, [40])
    T_B[20:26] = 0.0
    m = 4
    ref_P, ref_I = naive.stmp(T_A, m, T_B)
    comp_P, comp_I = stmp(T_A, m, T_B)

    assert np.all(np.isinf(comp_P[20:23]))
    assert np.all(np.isfinite(np.delete(comp_P, [20, 21, 22])))
    npt.assert_almost_equal(ref_P, comp_P)
    npt.assert_almost_equal(ref_I, comp_I)


def test_stmp_scale_invariant():
    T = np.random.uniform(-1, 1, [64])
    m = 5
    ref_P, _ = stmp(T, m)
    comp_P, _ = stmp(T * 1e-8, m)

    npt.assert_almost_equal(ref_P, comp_P, decimal=5)
