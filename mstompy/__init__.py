from importlib.metadata import PackageNotFoundError, distribution

from . import config  # noqa: F401
from .core import (  # noqa: F401
    InvariantError,
    ZeroStdError,
    compute_mean_std,
    distance_profile,
    mass,
    rolling_std,
    sliding_dot_product,
    z_norm,
)
from .mstomp import kmatrixprofile  # noqa: F401
from .stamp import stamp  # noqa: F401
from .stmp import stmp  # noqa: F401

try:
    _dist = distribution("mstompy")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "Please install this project with setup.py"
else:  # pragma: no cover
    __version__ = _dist.version
