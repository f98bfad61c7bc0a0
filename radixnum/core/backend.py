"""NumPy or CuPy selection for digit stacks.

The batched functions in :mod:`radixnum.batch` look the array module up on
every call, so a backend chosen with :func:`use_backend` applies to the
current thread or task, and to calls handed out by
:func:`~radixnum.core.parallel.parallel_map`.
"""

from __future__ import annotations

import contextlib
import logging
from contextvars import ContextVar

import numpy as np

try:
    import cupy as cp

    HAS_CUPY = True
except ImportError:
    HAS_CUPY = False
    cp = None

__all__ = [
    "HAS_CUPY",
    "array_module",
    "as_digit_stack",
    "get_backend",
    "set_backend",
    "to_device",
    "to_numpy",
    "use_backend",
]

log = logging.getLogger(__name__)

_MODULES = {"numpy": np, "cupy": cp}
_active_backend: ContextVar[str] = ContextVar("radixnum_backend", default="numpy")


def set_backend(name):
    """Set the array module used by :mod:`radixnum.batch`.

    Parameters
    ----------
    name : {"numpy", "cupy"}
        Backend to activate. "cupy" needs CuPy and a CUDA device.
    """
    name = _check_backend(name)
    _active_backend.set(name)
    log.debug("array backend set to %r", name)


def get_backend():
    """Return the active array module, ``numpy`` or ``cupy``."""
    return _MODULES[_active_backend.get()]


@contextlib.contextmanager
def use_backend(name):
    """Activate a backend for the duration of a ``with`` block.

    The previous backend comes back on exit, including when the block
    raises.

    Parameters
    ----------
    name : {"numpy", "cupy"}
        Backend to activate.
    """
    token = _active_backend.set(_check_backend(name))
    try:
        yield
    finally:
        _active_backend.reset(token)


def array_module(*arrays):
    """Return ``cupy`` if any of ``arrays`` lives on the GPU, else ``numpy``.

    In-place batched functions use this instead of :func:`get_backend` so
    they always write into the caller's buffer.
    """
    if HAS_CUPY and any(isinstance(arr, cp.ndarray) for arr in arrays):
        return cp
    return np


def to_device(arr):
    """Return ``arr`` on the active backend's device."""
    if get_backend() is np:
        return to_numpy(arr)
    return cp.asarray(arr)


def to_numpy(arr):
    """Return ``arr`` as a host NumPy array, copying it off the GPU if needed."""
    if array_module(arr) is np:
        return np.asarray(arr)
    return cp.asnumpy(arr)


def as_digit_stack(stack, name, xp=None, radix=None):
    """Validate a digit stack and return it as an array of ``xp``.

    Parameters
    ----------
    stack : array_like
        Digit stack of shape (lanes, width). Host arrays are uploaded when
        ``xp`` is CuPy. GPU arrays are never copied back implicitly.
    name : str
        Argument name used in error messages.
    xp : module, optional
        Array module to convert to. Defaults to :func:`get_backend`.
    radix : int, optional
        When given, the stack's dtype must be able to hold ``radix - 1``.
        Pass it for stacks that are written in place.

    Returns
    -------
    ndarray
        The stack, two-dimensional with an integer dtype.
    """
    if xp is None:
        xp = get_backend()
    if xp is np and array_module(stack) is not np:
        raise TypeError(
            f"{name} is a CuPy array but the active backend is 'numpy'. "
            "Call to_numpy() on it or run inside use_backend('cupy')."
        )
    stack = xp.asarray(stack)
    if stack.ndim != 2:
        raise ValueError(f"{name} must be a 2-D digit stack of shape (lanes, length), got {stack.ndim} dimensions.")
    if stack.dtype.kind not in "iu":
        raise TypeError(f"{name} must hold integer digits, got dtype {stack.dtype}.")
    if radix is not None and xp.iinfo(stack.dtype).max < radix - 1:
        raise ValueError(f"{name} has dtype {stack.dtype}, which cannot hold digit {radix - 1} of radix {radix}.")
    return stack


def _check_backend(name):
    name = name.lower()
    if name not in _MODULES:
        raise ValueError(f"Unknown backend {name!r}. Choose 'numpy' or 'cupy'.")
    if name == "cupy":
        if not HAS_CUPY:
            raise ImportError("CuPy is not installed. Install the GPU extra with: pip install 'radixnum[gpu]'.")
        if not cp.is_available():
            raise RuntimeError("CuPy is installed but no CUDA GPU is available. Use backend='numpy' instead.")
    return name
