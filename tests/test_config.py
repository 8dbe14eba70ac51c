import numpy as np
import pytest

from mstompy import config, core


def test_change_excl_zone_denom():
    assert core.get_excl_zone(8) == 4

    config.MSTOMPY_EXCL_ZONE_DENOM = 4
    assert core.get_excl_zone(8) == 2

    config._reset("MSTOMPY_EXCL_ZONE_DENOM")
    assert core.get_excl_zone(8) == 4


def test_change_index_sentinel():
    config.MSTOMPY_INDEX_SENTINEL = -1
    _, I = core._init_PI(5)
    assert np.all(I == -1)

    config._reset("MSTOMPY_INDEX_SENTINEL")
    _, I = core._init_PI(5)
    assert np.all(I == np.iinfo(np.int64).max)


def test_reset_one_var():
    ref = config.MSTOMPY_EXCL_ZONE_DENOM

    config.MSTOMPY_EXCL_ZONE_DENOM += 1
    config._reset("MSTOMPY_EXCL_ZONE_DENOM")

    assert config.MSTOMPY_EXCL_ZONE_DENOM == ref


def test_reset_all_vars():
    ref_index_sentinel = config.MSTOMPY_INDEX_SENTINEL
    ref_excl_zone_denom = config.MSTOMPY_EXCL_ZONE_DENOM

    config.MSTOMPY_INDEX_SENTINEL = -1
    config.MSTOMPY_EXCL_ZONE_DENOM += 1

    config._reset()
    assert config.MSTOMPY_INDEX_SENTINEL == ref_index_sentinel
    assert config.MSTOMPY_EXCL_ZONE_DENOM == ref_excl_zone_denom


def test_reset_unknown_var():
    with pytest.warns(UserWarning):
        config._reset("MSTOMPY_DOES_NOT_EXIST")
