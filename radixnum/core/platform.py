"""Host compilation layer for the digit kernels."""

try:
    import numba as nb

    HAS_NUMBA = True
except ImportError:
    HAS_NUMBA = False
    nb = None

__all__ = [
    "HAS_NUMBA",
    "kernel",
]


def kernel(func):
    """Compile ``func`` for the host when Numba is available.

    Kernels are written once as plain Python over explicit arguments. With
    Numba installed the function is wrapped in ``numba.njit(cache=True)``;
    otherwise it is returned unchanged, so the arithmetic modules never
    branch on the platform themselves. The uncompiled function stays
    reachable through ``func.py_func`` in both cases.

    Parameters
    ----------
    func : callable
        Function using only Numba-compatible constructs.

    Returns
    -------
    callable
        The compiled dispatcher, or ``func`` itself.
    """
    if HAS_NUMBA:
        return nb.njit(cache=True)(func)
    func.py_func = func
    return func
