# MSTOMPY
# Portions derived from STUMPY, Copyright 2019 TD Ameritrade.
# Released under the terms of the 3-Clause BSD license.

import numpy as np
from numba import njit
from scipy import fft

from . import config


class ZeroStdError(ValueError):
    """
    Raised when a constant subsequence has a standard deviation of zero and,
    thus, cannot be z-normalized

    Parameters
    ----------
    msg : str
        The error message

    centered : numpy.ndarray, default None
        The mean-centered (but not scaled) input, when available. This is only
        provided for inspection and must not be treated as z-normalized data.
    """

    def __init__(self, msg, centered=None):
        super().__init__(msg)
        self.centered = centered


class InvariantError(RuntimeError):
    """
    Raised when an internal length/shape invariant is violated. This signals a
    bug in the offset arithmetic rather than bad user input.
    """


def _preprocess(T):
    """
    Copy `T` into a new 1-D `np.float64` array and validate it

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    Returns
    -------
    T : numpy.ndarray
        A validated copy of `T`

    Raises
    ------
    ValueError
        If `T` is not 1-dimensional, is empty, or contains non-finite values
    """
    T = np.array(T, dtype=np.float64)

    if T.ndim != 1:
        raise ValueError(f"T is {T.ndim}-dimensional and must be 1-dimensional. ")

    if T.shape[0] == 0:
        raise ValueError("T does not have any data")

    check_finite(T)

    return T


def check_finite(a):
    """
    Check if the array only contains finite values

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    Returns
    -------
    None

    Raises
    ------
    ValueError
        If the array contains a `np.nan` or a `np.inf`
    """
    if not np.all(np.isfinite(a)):
        msg = "Input array contains one or more non-finite values (`np.nan`/`np.inf`)"
        raise ValueError(msg)

    return


def check_dtype(a, dtype=np.float64):
    """
    Check if the array type of `a` is of type specified by `dtype` parameter.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    dtype : dtype, default np.float64
        NumPy `dtype`

    Returns
    -------
    None

    Raises
    ------
    TypeError
        If the array type does not match `dtype`
    """
    if dtype is int:
        dtype = np.int64
    if dtype is float:
        dtype = np.float64
    if dtype is bool:
        dtype = np.bool_
    if not np.issubdtype(a.dtype, dtype):
        msg = f"{dtype} dtype expected but found {a.dtype} in input array\n"
        msg += "Please change your input `dtype` with `.astype(dtype)`"
        raise TypeError(msg)

    return True


def are_arrays_equal(a, b):
    """
    Check if two arrays are equal; first by comparing memory addresses,
    and secondly by their values.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    b : numpy.ndarray
        NumPy array

    Returns
    -------
    output : bool
        This is `True` if the arrays are equal and `False` otherwise.
    """
    if id(a) == id(b):
        return True

    if a.shape != b.shape:
        return False

    return bool((a == b).all())


def check_window_size(m, max_size=None):
    """
    Check the window size and ensure that it is greater than or equal to two and,
    if `max_size` is provided, ensure that the window size is less than or equal
    to `max_size`.

    Parameters
    ----------
    m : int
        Window size

    max_size : int, default None
        The maximum window size allowed

    Returns
    -------
    None

    Raises
    ------
    ValueError
        If the window size is out of bounds
    """
    if m < 2:
        raise ValueError(
            "All window sizes must be greater than or equal to two",
            """A window size of one (or less) always produces a standard deviation
            of zero and so no subsequence can be z-normalized.
            """,
        )

    if max_size is not None and m > max_size:
        raise ValueError(f"The window size must be less than or equal to {max_size}")


def get_max_window_size(n):
    """
    Get the maximum window size for a query against a time series of length `n`

    The query must be shorter than half of the time series (i.e., `2 * m < n`).

    Parameters
    ----------
    n : int
        The length of the time series

    Returns
    -------
    max_m : int
        The maximum window size allowed
    """
    return (n - 1) // 2


def rolling_window(a, window):
    """
    Use strides to generate rolling/sliding windows for a numpy array.

    Parameters
    ----------
    a : numpy.ndarray
        numpy array

    window : int
        Size of the rolling window

    Returns
    -------
    output : numpy.ndarray
        This will be a new view of the original input array.
    """
    a = np.asarray(a)
    shape = a.shape[:-1] + (a.shape[-1] - window + 1, window)
    strides = a.strides + (a.strides[-1],)

    return np.lib.stride_tricks.as_strided(a, shape=shape, strides=strides)


def rolling_isconstant(a, w):
    """
    Compute the rolling isconstant for a 1-D or 2-D array.

    This is accomplished by comparing the min and max within each window and
    assigning `True` when the min and max are equal and `False` otherwise.

    Parameters
    ----------
    a : numpy.ndarray
        The input array. When `a` is 2-dimensional, each row is rolled
        independently.

    w : int
        The rolling window size

    Returns
    -------
    output : numpy.ndarray
        Rolling window isconstant
    """
    return np.ptp(rolling_window(a, w), axis=-1) == 0


def z_norm(a):
    """
    Calculate the z-normalized input array `a` by subtracting the mean and
    dividing by the population standard deviation.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    Returns
    -------
    output : numpy.ndarray
        A new z-normalized array

    Raises
    ------
    ZeroStdError
        If `a` is constant. The mean-centered array is available through the
        `centered` attribute of the exception.
    """
    a = _preprocess(a)

    if np.ptp(a) == 0:
        centered = np.zeros_like(a)
        raise ZeroStdError("The standard deviation of the input array is zero", centered)

    centered = a - np.mean(a)

    return centered / np.sqrt(np.mean(centered * centered))


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _rolling_mean_std(T, m):
    """
    A Numba JIT-compiled single pass over `T` that accumulates a running sum and a
    running sum of squares and then differences them `m` positions apart.

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    m : int
        Window size

    Returns
    -------
    M_T : numpy.ndarray
        Rolling mean

    Σ_T : numpy.ndarray
        Rolling population standard deviation
    """
    n = T.shape[0]
    l = n - m + 1

    csum = np.zeros(n + 1)
    csum_sq = np.zeros(n + 1)
    for i in range(n):
        csum[i + 1] = csum[i] + T[i]
        csum_sq[i + 1] = csum_sq[i] + T[i] * T[i]

    M_T = np.empty(l)
    Σ_T = np.empty(l)
    for i in range(l):
        μ = (csum[i + m] - csum[i]) / m
        var = (csum_sq[i + m] - csum_sq[i]) / m - μ * μ
        M_T[i] = μ
        # Cancellation can leave a tiny negative variance
        Σ_T[i] = np.sqrt(max(var, 0.0))

    return M_T, Σ_T


def compute_mean_std(T, m):
    """
    Compute the rolling mean and the rolling population standard deviation in
    O(n) time

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence. When `T` is 2-dimensional, each row is rolled
        independently.

    m : int
        Window size

    Returns
    -------
    M_T : numpy.ndarray
        Rolling mean

    Σ_T : numpy.ndarray
        Rolling standard deviation, which is exactly zero for constant windows
    """
    T = np.asarray(T, dtype=np.float64)
    check_window_size(m, max_size=T.shape[-1] - 1)

    if T.ndim == 1:
        M_T, Σ_T = _rolling_mean_std(T, m)
    else:
        M_T = np.empty((T.shape[0], T.shape[-1] - m + 1), dtype=np.float64)
        Σ_T = np.empty((T.shape[0], T.shape[-1] - m + 1), dtype=np.float64)
        for i in range(T.shape[0]):
            M_T[i], Σ_T[i] = _rolling_mean_std(np.ascontiguousarray(T[i]), m)

    # Running sums leave residue behind in constant windows
    Σ_T[rolling_isconstant(T, m)] = 0.0

    return M_T, Σ_T


def rolling_std(T, m):
    """
    Compute the rolling population standard deviation of every window of size `m`

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    m : int
        Window size

    Returns
    -------
    Σ_T : numpy.ndarray
        Rolling standard deviation with length `len(T) - m + 1`

    Raises
    ------
    ValueError
        If `m <= 1` or `m >= len(T)`
    """
    T = _preprocess(T)
    _, Σ_T = compute_mean_std(T, m)

    return Σ_T


def _fft(a, n):
    """
    Forward real FFT along the last axis, zero-padded (or truncated) to length `n`

    Parameters
    ----------
    a : numpy.ndarray
        Real valued input

    n : int
        Transform length

    Returns
    -------
    output : numpy.ndarray
        Complex frequency domain coefficients
    """
    return fft.rfft(a, n, axis=-1)


def _ifft(A, n):
    """
    Inverse real FFT along the last axis. The output is already scaled by `1 / n`.

    Parameters
    ----------
    A : numpy.ndarray
        Complex frequency domain coefficients

    n : int
        Length of the real valued output

    Returns
    -------
    output : numpy.ndarray
        Real valued time domain sequence
    """
    return fft.irfft(A, n, axis=-1)


def _sliding_dot_product(Q, T_fft, n):
    """
    Compute the sliding dot product between `Q` and a pre-transformed time series

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence. When `Q` is 2-dimensional, each row is
        correlated against the matching row of `T_fft`.

    T_fft : numpy.ndarray
        The output of `_fft(T, n)`

    n : int
        Length of the time series

    Returns
    -------
    QT : numpy.ndarray
        Sliding dot product between `Q` and `T`
    """
    m = Q.shape[-1]
    Qr_fft = _fft(np.flip(Q, axis=-1), n)
    QT = _ifft(Qr_fft * T_fft, n)

    return QT[..., m - 1 : n]


def sliding_dot_product(Q, T):
    """
    Use FFT convolution to calculate the sliding window dot product.

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence

    T : numpy.ndarray
        Time series or sequence

    Returns
    -------
    output : numpy.ndarray
        Sliding dot product between `Q` and `T` with length `len(T) - len(Q) + 1`

    Raises
    ------
    ValueError
        If `len(Q) < 2` or `2 * len(Q) >= len(T)`

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table I, Figure 4

    The reversed query is zero-padded to `len(T)` so that the circular convolution
    only wraps around in the cells before `m - 1`, which are discarded.
    """
    Q = _preprocess(Q)
    T = _preprocess(T)
    n = T.shape[0]
    check_window_size(Q.shape[0], max_size=get_max_window_size(n))

    return _sliding_dot_product(Q, _fft(T, n), n)


def mass(Q, T):
    """
    Compute the distance profile using the MASS algorithm

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence

    T : numpy.ndarray
        Time series or sequence

    Returns
    -------
    D : numpy.ndarray
        Distance profile

    Raises
    ------
    ValueError
        If `len(Q) < 2` or `2 * len(Q) >= len(T)`

    ZeroStdError
        If `Q` is constant. A constant subsequence of `T` yields a distance of
        `np.inf` instead.

    InvariantError
        If the sliding dot product and the rolling standard deviation disagree
        in length

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table II

    Since the normalized query sums to zero, the dot product with any raw window
    equals the dot product with that window after mean-centering. So, dividing
    by the rolling standard deviation yields `m` times the Pearson correlation.
    """
    Q = _preprocess(Q)
    T = _preprocess(T)
    m = Q.shape[0]
    check_window_size(m, max_size=get_max_window_size(T.shape[0]))

    Q_norm = z_norm(Q)
    Σ_T = rolling_std(T, m)
    QT = sliding_dot_product(Q_norm, T)

    if QT.shape[0] != Σ_T.shape[0]:
        msg = f"The length of the rolling standard deviation, {Σ_T.shape[0]}, is not "
        msg += f"the same as the sliding dot product, {QT.shape[0]}"
        raise InvariantError(msg)

    # A constant subsequence of `T` has no defined distance to any query
    D = np.full(QT.shape[0], np.inf)
    mask = Σ_T > 0.0
    # The absolute value absorbs tiny negative values from cancellation
    D[mask] = np.sqrt(np.abs(2.0 * (m - QT[mask] / Σ_T[mask])))

    return D


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _apply_exclusion_zone(a, idx, excl_zone, val):
    """
    A Numba JIT-compiled version of `apply_exclusion_zone`

    Parameters
    ----------
    a : numpy.ndarray
        The array you want to apply the exclusion zone to

    idx : int
        The index around which the window should be centered

    excl_zone : int
        Size of the exclusion zone

    val : float or bool
        The elements within the exclusion zone will be set to this value

    Returns
    -------
    None
    """
    zone_start = max(0, idx - excl_zone)
    zone_stop = min(a.shape[-1], idx + excl_zone)
    if zone_start < zone_stop:
        a[..., zone_start:zone_stop] = val


def apply_exclusion_zone(a, idx, excl_zone, val):
    """
    Apply an exclusion zone to an array (inplace), i.e. set all values
    to `val` in a window around a given index.

    All values in a in [idx - excl_zone, idx + excl_zone) (clamped to the bounds
    of the last axis of `a`) will be set to `val`.

    Parameters
    ----------
    a : numpy.ndarray
        The array you want to apply the exclusion zone to

    idx : int
        The index around which the window should be centered

    excl_zone : int
        Size of the exclusion zone

    val : float or bool
        The elements within the exclusion zone will be set to this value

    Returns
    -------
    None
    """
    check_dtype(a, dtype=type(val))
    _apply_exclusion_zone(a, idx, excl_zone, val)


def get_excl_zone(m):
    """
    Get the half width of the self-join exclusion zone for window size `m`

    Parameters
    ----------
    m : int
        Window size

    Returns
    -------
    excl_zone : int
        The half width of the exclusion zone
    """
    return m // config.MSTOMPY_EXCL_ZONE_DENOM


def distance_profile(T_A, m, idx, T_B=None):
    """
    Compute the distance profile of the subsequence `T_A[idx : idx + m]`

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence that the query subsequence is taken from

    m : int
        Window size

    idx : int
        The start index of the query subsequence in `T_A`

    T_B : numpy.ndarray, default None
        The time series or sequence to compare the query with. When `None`, this is
        a self-join against `T_A` and an exclusion zone is applied around `idx`.

    Returns
    -------
    D : numpy.ndarray
        Distance profile with length `len(T_B) - m + 1` (or `len(T_A) - m + 1`)

    Raises
    ------
    ValueError
        If the query subsequence reaches beyond the end of `T_A`
    """
    T_A = _preprocess(T_A)
    if T_B is None:
        T_B = T_A
        ignore_trivial = True
    else:
        T_B = _preprocess(T_B)
        ignore_trivial = False

    if idx < 0 or idx + m > T_A.shape[0]:
        msg = f"Index {idx} with window size {m} asks for data beyond the "
        msg += f"length of T_A, {T_A.shape[0]}"
        raise ValueError(msg)

    D = mass(T_A[idx : idx + m], T_B)

    if ignore_trivial:
        apply_exclusion_zone(D, idx, get_excl_zone(m), np.inf)

    return D


def _init_PI(shape):
    """
    Allocate a matrix profile filled with `np.inf` and matrix profile indices
    filled with `config.MSTOMPY_INDEX_SENTINEL`

    Parameters
    ----------
    shape : int or tuple
        The shape of the matrix profile

    Returns
    -------
    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        Matrix profile indices
    """
    P = np.full(shape, np.inf, dtype=np.float64)
    I = np.full(shape, config.MSTOMPY_INDEX_SENTINEL, dtype=np.int64)

    return P, I


@njit(fastmath=config.MSTOMPY_FASTMATH_FLAGS)
def _update_PI(D, idx, P, I):
    """
    A Numba JIT-compiled element-wise minimum of `D` and `P` (inplace). Ties are
    resolved in favor of `D` so that the latest `idx` wins.

    Parameters
    ----------
    D : numpy.ndarray
        Distance profile

    idx : int
        The subsequence index that produced `D`

    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        Matrix profile indices

    Returns
    -------
    None
    """
    for j in range(D.shape[0]):
        if D[j] <= P[j]:
            P[j] = D[j]
            I[j] = idx


def update_PI(D, idx, P, I):
    """
    Fold the distance profile `D` into the matrix profile `P` and the matrix
    profile indices `I` (inplace)

    Parameters
    ----------
    D : numpy.ndarray
        Distance profile

    idx : int
        The subsequence index that produced `D`

    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        Matrix profile indices

    Returns
    -------
    None

    Raises
    ------
    InvariantError
        If the distance profile and matrix profile lengths do not match
    """
    if D.shape[0] != P.shape[0]:
        msg = f"The distance profile length, {D.shape[0]}, and the initialized "
        msg += f"matrix profile length, {P.shape[0]}, do not match"
        raise InvariantError(msg)

    _update_PI(D, idx, P, I)
