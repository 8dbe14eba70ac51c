# MSTOMPY
# Portions derived from STUMPY, Copyright 2019 TD Ameritrade.
# Released under the terms of the 3-Clause BSD license.

import warnings

import numpy as np

from .stmp import _preprocess_join, _stmp


def stamp(T_A, m, T_B=None, sample=1.0):
    """
    Compute an approximate matrix profile and matrix profile indices using the
    "Scalable Time series Anytime Matrix Profile" (STAMP) algorithm and MASS

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

    sample : float, default 1.0
        The fraction, in `(0, 1]`, of query subsequences to process. The query
        subsequences are visited in a random order and the computation stops once
        `floor(sample * (len(T_A) - m + 1))` of them have been processed.

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
        If `sample` is not in `(0, 1]`, `T_A` is empty, `T_B` is empty (but not
        `None`) or `m` is out of bounds

    ZeroStdError
        If any of the sampled query subsequences of `T_A` is constant

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table III

    With `sample = 1.0` every query subsequence is processed and the result equals
    that of `stmp` (up to the ordering of ties).
    """
    if not 0.0 < sample <= 1.0:
        raise ValueError(f"`sample` must be in the interval (0, 1] but found {sample}")

    T_A, T_B, l = _preprocess_join(T_A, m, T_B)

    n_queries = T_A.shape[0] - m + 1
    n_samples = int(n_queries * sample)
    if n_samples == 0:
        msg = f"A `sample` of {sample} selects none of the {n_queries} "
        msg += "subsequences and so no neighbors will be found"
        warnings.warn(msg)

    indices = np.random.permutation(n_queries)[:n_samples]

    return _stmp(T_A, m, T_B, l, indices)
