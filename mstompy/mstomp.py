# MSTOMPY
# Portions derived from STUMPY, Copyright 2019 TD Ameritrade.
# Released under the terms of the 3-Clause BSD license.

import warnings

import numpy as np
from numba import njit

from . import config, core


def _preprocess_multi(T):
    """
    Copy a set of time series into a new 2-D `np.float64` array and validate it

    Parameters
    ----------
    T : list or numpy.ndarray
        A set of time series where each row is a different dimension

    Returns
    -------
    T : numpy.ndarray
        A validated 2-D copy of `T`

    Raises
    ------
    ValueError
        If `T` has no time series or the time series differ in length
    """
    if T is None or len(T) == 0:
        raise ValueError("T is None or does not contain any time series")

    T = [core._preprocess(T_i) for T_i in T]
    n = T[0].shape[0]
    for i, T_i in enumerate(T):
        if T_i.shape[0] != n:
            msg = f"Time series {i} has a length of {T_i.shape[0]} and doesn't match "
            msg += f"the first time series with length {n}"
            raise ValueError(msg)

    return np.array(T, dtype=np.float64)


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _calculate_multi_distance_profile(m, QT, idx, M_T, Σ_T, D):
    """
    A Numba JIT-compiled conversion of sliding dot products into z-normalized
    Euclidean distances (inplace)

    Parameters
    ----------
    m : int
        Window size

    QT : numpy.ndarray
        The sliding dot products of the `idx`-th subsequence of every dimension

    idx : int
        The index of the query subsequence

    M_T : numpy.ndarray
        Rolling mean of every dimension

    Σ_T : numpy.ndarray
        Rolling standard deviation of every dimension

    D : numpy.ndarray
        The output multi-dimensional distance profile

    Returns
    -------
    None

    Notes
    -----
    A constant subsequence, either the query or a target, has no defined
    distance and is assigned `np.inf`
    """
    d, l = QT.shape
    for i in range(d):
        μ_Q = M_T[i, idx]
        σ_Q = Σ_T[i, idx]
        for j in range(l):
            if σ_Q == 0.0 or Σ_T[i, j] == 0.0:
                D[i, j] = np.inf
            else:
                ρ = (QT[i, j] - m * μ_Q * M_T[i, j]) / (m * σ_Q * Σ_T[i, j])
                D[i, j] = np.sqrt(2.0 * m * np.abs(1.0 - ρ))


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _column_wise_sort(D):
    """
    A Numba JIT-compiled ascending sort of every column of `D` (inplace)

    Parameters
    ----------
    D : numpy.ndarray
        Multi-dimensional distance profile

    Returns
    -------
    None
    """
    for j in range(D.shape[1]):
        D[:, j] = np.sort(D[:, j])


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _column_wise_mean(D):
    """
    A Numba JIT-compiled cumulative sum down every column of `D` divided by the
    number of rows summed so far (inplace)

    Parameters
    ----------
    D : numpy.ndarray
        Column-wise sorted multi-dimensional distance profile

    Returns
    -------
    None
    """
    for i in range(1, D.shape[0]):
        D[i, :] = D[i, :] + D[i - 1, :]

    for i in range(D.shape[0]):
        D[i, :] = D[i, :] / (i + 1)


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _update_multi_PI(D, idx, P, I):
    """
    A Numba JIT-compiled element-wise minimum of `D` and `P` (inplace). Ties are
    resolved in favor of `D` so that the latest `idx` wins.

    Parameters
    ----------
    D : numpy.ndarray
        Column-wise averaged multi-dimensional distance profile

    idx : int
        The index of the query subsequence

    P : numpy.ndarray
        The multi-dimensional matrix profile

    I : numpy.ndarray
        The multi-dimensional matrix profile indices

    Returns
    -------
    None
    """
    d, l = D.shape
    for i in range(d):
        for j in range(l):
            if D[i, j] <= P[i, j]:
                P[i, j] = D[i, j]
                I[i, j] = idx


class kmatrixprofile:
    """
    A class to compute the multi-dimensional matrix profile of `k` aligned time
    series with the mSTOMP algorithm

    Parameters
    ----------
    T : list or numpy.ndarray
        A set of time series where each row is a different dimension. All time
        series must have the same length.

    m : int
        Window size

    Attributes
    ----------
    P_ : numpy.ndarray
        The multi-dimensional matrix profile. Row `k` holds, for every subsequence,
        the smallest average distance using its `k + 1` best agreeing dimensions.

    I_ : numpy.ndarray
        The multi-dimensional matrix profile indices

    T_ : numpy.ndarray
        A copy of the time series

    Methods
    -------
    mstomp()
        Compute the multi-dimensional matrix profile

    Notes
    -----
    `DOI: 10.1109/ICDM.2017.66 \
    <https://www.cs.ucr.edu/~eamonn/Motif_Discovery_ICDM.pdf>`__

    See mSTAMP Algorithm

    Examples
    --------
    >>> import mstompy
    >>> kmp = mstompy.kmatrixprofile(
    ...     [[0., 0., 1., 1., 0., 0., 0., 1., 1., 0., 0.],
    ...      [0., 0., -1., -1., 0., 0., 0., -1., -1., 0., 0.]],
    ...     m=4)
    >>> kmp.mstomp().P_[0].round(3)
    array([0.   , 0.   , 0.   , 1.839, 1.839, 0.   , 0.   , 0.   ])
    """

    def __init__(self, T, m):
        """
        Initialize the `kmatrixprofile` object

        Parameters
        ----------
        T : list or numpy.ndarray
            A set of time series where each row is a different dimension

        m : int
            Window size
        """
        self._T = _preprocess_multi(T)
        self._d, self._n = self._T.shape
        core.check_window_size(m, max_size=core.get_max_window_size(self._n))
        self._m = m
        self._l = self._n - self._m + 1
        self._excl_zone = core.get_excl_zone(self._m)

        self._P, self._I = core._init_PI((self._d, self._l))
        self._T_fft = core._fft(self._T, self._n)

    def _cross_correlate(self, idx):
        """
        Compute the sliding dot product between the subsequence at `idx` and its
        own time series for every dimension

        Parameters
        ----------
        idx : int
            The index of the query subsequence

        Returns
        -------
        QT : numpy.ndarray
            A `(k, n - m + 1)` array of sliding dot products
        """
        Q = self._T[:, idx : idx + self._m]

        return core._sliding_dot_product(Q, self._T_fft, self._n)

    def mstomp(self):
        """
        Compute the multi-dimensional matrix profile and matrix profile indices
        (inplace)

        Parameters
        ----------
        None

        Returns
        -------
        self : kmatrixprofile
            This object with updated `P_` and `I_`

        Notes
        -----
        A constant subsequence has no defined distance in its dimension. So, it
        contributes `np.inf` to every average that includes that dimension and a
        `UserWarning` is issued.
        """
        M_T, Σ_T = core.compute_mean_std(self._T, self._m)
        if np.any(Σ_T == 0.0):
            dim, idx = np.argwhere(Σ_T == 0.0)[0]
            msg = f"The subsequence at index {idx} of dimension {dim} (and possibly "
            msg += "others) is constant and has no defined distance"
            warnings.warn(msg)

        D = np.empty((self._d, self._l), dtype=np.float64)
        for idx in range(self._l):
            QT = self._cross_correlate(idx)
            _calculate_multi_distance_profile(self._m, QT, idx, M_T, Σ_T, D)
            core._apply_exclusion_zone(D, idx, self._excl_zone, np.inf)
            _column_wise_sort(D)
            _column_wise_mean(D)
            _update_multi_PI(D, idx, self._P, self._I)

        return self

    @property
    def P_(self):
        """
        Get the multi-dimensional matrix profile
        """
        return self._P.astype(np.float64)

    @property
    def I_(self):
        """
        Get the multi-dimensional matrix profile indices
        """
        return self._I.astype(np.int64)

    @property
    def T_(self):
        """
        Get the time series
        """
        return self._T.astype(np.float64)

    @property
    def m(self):
        """
        Get the window size
        """
        return self._m
