# MSTOMPY
# Portions derived from STUMPY, Copyright 2019 TD Ameritrade.
# Released under the terms of the 3-Clause BSD license.

import logging

import numpy as np

from . import core

logger = logging.getLogger(__name__)


def _preprocess_join(T_A, m, T_B=None):
    """
    Validate the inputs of a single dimensional matrix profile computation

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence that the query subsequences are taken from

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be annotated. `None` means self-join.

    Returns
    -------
    T_A : numpy.ndarray
        A validated copy of `T_A`

    T_B : numpy.ndarray
        A validated copy of `T_B` or `None` for a self-join

    l : int
        The length of the matrix profile
    """
    if T_A is None or len(T_A) == 0:
        raise ValueError("T_A is None or has a length of 0")

    if T_B is not None and len(T_B) == 0:
        raise ValueError(
            "T_B must be None for a self-join or have a length greater than 0"
        )

    T_A = core._preprocess(T_A)
    if T_B is None:
        core.check_window_size(m, max_size=core.get_max_window_size(T_A.shape[0]))
        l = T_A.shape[0] - m + 1
    else:
        T_B = core._preprocess(T_B)
        if core.are_arrays_equal(T_A, T_B):
            logger.warning("Arrays T_A, T_B are equal, which implies a self-join.")
            logger.warning("Try setting `T_B = None`.")
        core.check_window_size(
            m, max_size=min(T_A.shape[0], core.get_max_window_size(T_B.shape[0]))
        )
        l = T_B.shape[0] - m + 1

    return T_A, T_B, l


def _stmp(T_A, m, T_B, l, indices):
    """
    Fold the distance profiles of the requested query subsequences into a matrix
    profile

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence that the query subsequences are taken from

    m : int
        Window size

    T_B : numpy.ndarray
        The time series or sequence that will be annotated. `None` means self-join.

    l : int
        The length of the matrix profile

    indices : numpy.ndarray
        The start indices (along `T_A`) of the query subsequences, in the order
        that they are processed

    Returns
    -------
    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        Matrix profile indices
    """
    P, I = core._init_PI(l)

    for idx in indices:
        D = core.distance_profile(T_A, m, idx, T_B)
        core.update_PI(D, idx, P, I)

    return P, I


def stmp(T_A, m, T_B=None):
    """
    Compute the exact matrix profile and matrix profile indices using the
    "Scalable Time series Matrix Profile" (STMP) algorithm and MASS

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence that the query subsequences are taken from.
        When `T_B` is `None`, this is also the time series that is annotated.

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be annotated. For every subsequence
        in `T_B`, its nearest neighbor in `T_A` will be recorded. When `None`, a
        self-join on `T_A` is performed and trivial matches are excluded.

    Returns
    -------
    P : numpy.ndarray
        Matrix profile with `np.inf` where no neighbor was found

    I : numpy.ndarray
        Matrix profile indices with `config.MSTOMPY_INDEX_SENTINEL` where no
        neighbor was found

    Raises
    ------
    ValueError
        If `T_A` is empty, `T_B` is empty (but not `None`) or `m` is out of bounds

    ZeroStdError
        If a query subsequence of `T_A` is constant

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    Every subsequence of `T_A` is visited in order. Ties are resolved in favor of
    the subsequence that is visited last. A constant subsequence of `T_B` has no
    defined distance and keeps a matrix profile value of `np.inf`.

    For an AB-join, the number of query subsequences is `len(T_A) - m + 1` and
    is independent of `len(T_B)`. So, when `T_A` is longer than `T_B`, the
    subsequences of `T_A` that start at or beyond `len(T_B) - m + 1` are also
    visited rather than only the first `len(T_B) - m + 1` offsets of `T_A`.
    """
    T_A, T_B, l = _preprocess_join(T_A, m, T_B)
    indices = np.arange(T_A.shape[0] - m + 1)

    return _stmp(T_A, m, T_B, l, indices)
