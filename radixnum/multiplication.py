"""Pluggable multiplication strategies for digit arrays."""

from __future__ import annotations

import contextlib
import logging
import threading
import warnings
from contextvars import ContextVar

from .digits import DIGIT_BASE, _check_multiplication_args, _long_multiplication_impl

__all__ = [
    "available_multiplication_strategies",
    "get_multiplication_strategy",
    "multiply",
    "register_multiplication_strategy",
    "resolve_multiplication_strategy",
    "set_multiplication_strategy",
    "use_multiplication_strategy",
]

log = logging.getLogger(__name__)

DEFAULT_STRATEGY = "grade_school"

# Names understood by the dispatcher but without an implementation yet.
_RESERVED = ("karatsuba",)
_ALIASES = {"long": "grade_school", "schoolbook": "grade_school"}
_strategies = {"grade_school": _long_multiplication_impl}
_registry_lock = threading.Lock()

_active_strategy: ContextVar[str] = ContextVar("radixnum_multiplication_strategy", default=DEFAULT_STRATEGY)


def _normalize_name(name):
    name = name.lower()
    return _ALIASES.get(name, name)


def available_multiplication_strategies():
    """Return the names of the strategies that can be selected right now."""
    with _registry_lock:
        return sorted(_strategies)


def register_multiplication_strategy(name, func):
    """Install a multiplication strategy under ``name``.

    A strategy is called as ``func(product, op1, op2, num_digits, radix)``
    with arguments already checked by :func:`multiply`: ``product`` is a
    writable array with room for ``2 * num_digits`` digits and both operands
    hold ``num_digits`` digits. It must leave the full product in
    ``product[:2 * num_digits]`` and must not allocate shared state, since
    strategies run concurrently on disjoint arrays.

    Registering ``"karatsuba"`` fills the reserved divide-and-conquer slot.

    Register strategies at import or setup time, before multiplications run
    on worker threads. Updates to the table are serialised by a lock, but a
    call that has already resolved its strategy keeps the old function.

    Parameters
    ----------
    name : str
        Strategy name (case-insensitive).
    func : callable
        Strategy implementation.
    """
    if not callable(func):
        raise TypeError(f"Multiplication strategy {name!r} must be callable, got {type(func).__name__}.")
    name = _normalize_name(name)
    with _registry_lock:
        replaced = name in _strategies
        _strategies[name] = func
    if replaced:
        warnings.warn(f"Replacing multiplication strategy {name!r}.", UserWarning, stacklevel=2)
    log.info("registered multiplication strategy %r", name)


def resolve_multiplication_strategy(name=None):
    """Return the implementation for ``name``, or for the active strategy.

    Parameters
    ----------
    name : str, optional
        Strategy name. ``None`` selects the strategy active in the current
        context.

    Returns
    -------
    callable
        The registered strategy function.
    """
    name = _validate_strategy_name(_active_strategy.get() if name is None else name)
    with _registry_lock:
        return _strategies[name]


def set_multiplication_strategy(name):
    """Set the strategy used by :func:`multiply` in the current context.

    Parameters
    ----------
    name : str
        A registered strategy name, e.g. ``"grade_school"``.
    """
    name = _validate_strategy_name(name)
    _active_strategy.set(name)
    log.debug("multiplication strategy set to %r", name)


def get_multiplication_strategy():
    """Return the name of the strategy active in the current context."""
    return _active_strategy.get()


@contextlib.contextmanager
def use_multiplication_strategy(name):
    """Context manager that temporarily activates a multiplication strategy.

    The previous strategy is restored when the context exits, even if an
    exception is raised.

    Parameters
    ----------
    name : str
        A registered strategy name.
    """
    name = _validate_strategy_name(name)
    token = _active_strategy.set(name)
    try:
        yield
    finally:
        _active_strategy.reset(token)


def multiply(product, op1, op2, num_digits, radix=DIGIT_BASE, strategy=None):
    """Compute ``product = op1 * op2`` with the selected strategy.

    Parameters
    ----------
    product : numpy.ndarray
        Output digit array with room for ``2 * num_digits`` digits. It is
        overwritten in place.
    op1, op2 : array_like
        Operands holding ``num_digits`` digits each.
    num_digits : int
        Operand width.
    radix : int, default 10
        Base of the digit representation, at most
        :data:`~radixnum.digits.MAX_RADIX`.
    strategy : str, optional
        Overrides the context's strategy for this call.

    Examples
    --------
    >>> import numpy as np
    >>> product = np.zeros(4, dtype=np.uint8)
    >>> multiply(product, [9, 9], [9, 9], 2)
    >>> product.tolist()
    [1, 0, 8, 9]
    """
    impl = resolve_multiplication_strategy(strategy)
    product, op1, op2, radix = _check_multiplication_args(product, op1, op2, num_digits, radix)
    impl(product, op1, op2, num_digits, radix)


def _validate_strategy_name(name):
    """Validate and normalise a strategy name.

    Parameters
    ----------
    name : str
        Strategy name (case-insensitive).

    Returns
    -------
    str
        Canonical registered name.
    """
    name = _normalize_name(name)
    with _registry_lock:
        registered = sorted(_strategies)
    if name in registered:
        return name
    if name in _RESERVED:
        raise NotImplementedError(
            f"The {name!r} multiplication strategy is not implemented. "
            f"Register one with register_multiplication_strategy({name!r}, func) "
            f"or use {DEFAULT_STRATEGY!r}."
        )
    choices = ", ".join(repr(s) for s in registered)
    raise ValueError(f"Unknown multiplication strategy {name!r}. Choose one of {choices}.")
