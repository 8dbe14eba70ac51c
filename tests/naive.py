import numpy as np

from mstompy import config, core


def z_norm(a, axis=0):
    std = np.std(a, axis, keepdims=True)

    return (a - np.mean(a, axis, keepdims=True)) / std


def rolling_std(T, m):
    return np.std(core.rolling_window(T, m), axis=T.ndim)


def rolling_mean(T, m):
    return np.mean(core.rolling_window(T, m), axis=T.ndim)


def sliding_dot_product(Q, T):
    m = len(Q)
    l = len(T) - m + 1
    out = np.empty(l)
    for i in range(l):
        out[i] = np.dot(Q, T[i : i + m])

    return out


def apply_exclusion_zone(a, idx, excl_zone, val):
    start = max(0, idx - excl_zone)
    stop = min(a.shape[-1], idx + excl_zone)
    for i in range(start, stop):
        a[..., i] = val


def distance_profile(Q, T, m):
    T_subseqs = core.rolling_window(T, m)
    T_isconstant = np.ptp(T_subseqs, axis=1) == 0

    D = np.full(T_subseqs.shape[0], np.inf)
    if np.ptp(Q) == 0:
        return D

    T_subseqs = z_norm(T_subseqs[~T_isconstant], 1)
    D[~T_isconstant] = np.linalg.norm(T_subseqs - z_norm(Q), axis=1)

    return D


def stmp(T_A, m, T_B=None):
    ignore_trivial = T_B is None
    if ignore_trivial:
        T_B = T_A

    l = len(T_B) - m + 1
    excl_zone = m // config.MSTOMPY_EXCL_ZONE_DENOM
    P = np.full(l, np.inf)
    I = np.full(l, config.MSTOMPY_INDEX_SENTINEL, dtype=np.int64)
    for i in range(len(T_A) - m + 1):
        D = distance_profile(T_A[i : i + m], T_B, m)
        if ignore_trivial:
            apply_exclusion_zone(D, i, excl_zone, np.inf)
        for j in range(l):
            if D[j] <= P[j]:
                P[j] = D[j]
                I[j] = i

    return P, I


def mstomp(T, m):
    d, n = T.shape
    l = n - m + 1
    excl_zone = m // config.MSTOMPY_EXCL_ZONE_DENOM

    P = np.full((d, l), np.inf)
    I = np.full((d, l), config.MSTOMPY_INDEX_SENTINEL, dtype=np.int64)
    for idx in range(l):
        D = np.empty((d, l))
        for i in range(d):
            D[i] = distance_profile(T[i, idx : idx + m], T[i], m)
        apply_exclusion_zone(D, idx, excl_zone, np.inf)

        D = np.sort(D, axis=0)
        D_prime = np.zeros(l)
        for i in range(d):
            D_prime = D_prime + D[i]
            avg = D_prime / (i + 1)
            for j in range(l):
                if avg[j] <= P[i, j]:
                    P[i, j] = avg[j]
                    I[i, j] = idx

    return P, I
