# MSTOMPY
# Portions derived from STUMPY, Copyright 2019 TD Ameritrade.
# Released under the terms of the 3-Clause BSD license.

import warnings

import numpy as np

_MSTOMPY_DEFAULTS = {
    "MSTOMPY_EXCL_ZONE_DENOM": 2,
    "MSTOMPY_INDEX_SENTINEL": np.iinfo(np.int64).max,
    "MSTOMPY_FASTMATH_FLAGS": {"nsz", "arcp", "contract", "afn", "reassoc"},
}

# The fastmath flags must never contain "nnan" or "ninf" since `np.inf` marks
# a subsequence without any (non-trivial) neighbor

MSTOMPY_EXCL_ZONE_DENOM = _MSTOMPY_DEFAULTS["MSTOMPY_EXCL_ZONE_DENOM"]
MSTOMPY_INDEX_SENTINEL = _MSTOMPY_DEFAULTS["MSTOMPY_INDEX_SENTINEL"]
MSTOMPY_FASTMATH_FLAGS = _MSTOMPY_DEFAULTS["MSTOMPY_FASTMATH_FLAGS"]


def _reset(var=None):
    """
    Reset the value of a configuration variable(s) to their default value(s)

    Parameters
    ----------
    var : str, default None
        The name of the configuration variable. If None, then all
        configuration variables are reset to their default values.

    Returns
    -------
    None
    """
    config_vars = [
        k for k, _ in globals().items() if k.isupper() and k.startswith("MSTOMPY")
    ]

    if var is None:
        for config_var in config_vars:
            globals()[config_var] = _MSTOMPY_DEFAULTS[config_var]
    elif var in config_vars:
        globals()[var] = _MSTOMPY_DEFAULTS[var]
    else:
        msg = (
            f"Configuration reset was skipped for unrecognized '_MSTOMPY_DEFAULT[{var}]'"
        )
        warnings.warn(msg)

    return
