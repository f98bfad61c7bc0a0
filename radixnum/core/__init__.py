"""Platform, backend and execution helpers shared by the digit kernels."""

from .backend import (
    HAS_CUPY,
    array_module,
    as_digit_stack,
    get_backend,
    set_backend,
    to_device,
    to_numpy,
    use_backend,
)
from .parallel import parallel_map
from .platform import HAS_NUMBA, kernel

__all__ = [
    "HAS_CUPY",
    "HAS_NUMBA",
    "array_module",
    "as_digit_stack",
    "get_backend",
    "kernel",
    "parallel_map",
    "set_backend",
    "to_device",
    "to_numpy",
    "use_backend",
]
