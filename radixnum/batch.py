"""Digit primitives over stacks of independent digit arrays.

A digit stack is a 2-D array of shape ``(lanes, length)`` whose rows are
separate little-endian numbers. Each function loops over digit positions
and vectorises across lanes with the active array module, so the same code
runs on NumPy and, with :func:`~radixnum.core.backend.use_backend`, on CuPy.
Row ``r`` of every result equals what the single-array primitive in
:mod:`radixnum.digits` produces for row ``r`` of the inputs.
"""

from .core.backend import array_module, as_digit_stack, get_backend
from .digits import _INT64_MAX, DIGIT_BASE, _check_radix, digit_dtype

__all__ = [
    "add_arrays_batch",
    "complement_batch",
    "is_zero_batch",
    "multiply_batch",
    "subtract_arrays_batch",
]


def _check_lanes(op1, op2):
    if op1.shape[0] != op2.shape[0]:
        raise ValueError(f"Operands have different lane counts: {op1.shape[0]} and {op2.shape[0]}.")
    return op1.shape[0]


def _column(xp, stack, i):
    """Digit column ``i`` widened to int64, or 0 past the stack's width."""
    if i < stack.shape[1]:
        return stack[:, i].astype(xp.int64)
    return 0


def _normalize(totals, carry, radix, out):
    """Write ``totals`` into ``out`` as digits, rippling ``carry`` upward."""
    for i in range(out.shape[1]):
        total = totals(i) + carry
        out[:, i] = total % radix
        carry = total // radix
    return carry


def is_zero_batch(stack, length=None):
    """Test each lane of a digit stack for zero.

    Parameters
    ----------
    stack : array_like
        Digit stack of shape (lanes, width).
    length : int, optional
        Number of low digits to inspect; defaults to the full width.

    Returns
    -------
    ndarray
        Boolean array of shape (lanes,).
    """
    xp = get_backend()
    stack = as_digit_stack(stack, "stack", xp)
    if length is None:
        length = stack.shape[1]
    if length < 0 or length > stack.shape[1]:
        raise ValueError(f"stack holds {stack.shape[1]} digits, cannot use a length of {length}.")
    return xp.all(stack[:, :length] == 0, axis=1)


def add_arrays_batch(op1, op2, length=None, radix=DIGIT_BASE):
    """Add two digit stacks lane by lane.

    Parameters
    ----------
    op1, op2 : array_like
        Digit stacks with the same number of lanes. Widths may differ; the
        narrower one reads as zero-padded.
    length : int, optional
        Width of the sum. Defaults to the wider operand's width.
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    sum : ndarray
        Digit stack of shape (lanes, length) on the active device.
    carry : ndarray
        Carry out of each lane's top digit, shape (lanes,).
    """
    xp = get_backend()
    op1 = as_digit_stack(op1, "op1", xp)
    op2 = as_digit_stack(op2, "op2", xp)
    lanes = _check_lanes(op1, op2)
    if length is None:
        length = max(op1.shape[1], op2.shape[1])

    out = xp.empty((lanes, length), dtype=digit_dtype(radix))
    carry = xp.zeros(lanes, dtype=xp.int64)
    carry = _normalize(lambda i: _column(xp, op1, i) + _column(xp, op2, i), carry, radix, out)
    return out, carry


def subtract_arrays_batch(op1, op2, length=None, radix=DIGIT_BASE):
    """Subtract two digit stacks lane by lane, modulo ``radix**length``.

    Parameters
    ----------
    op1, op2 : array_like
        Minuend and subtrahend stacks with the same number of lanes.
    length : int, optional
        Width of the difference. Defaults to the wider operand's width.
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    diff : ndarray
        Digit stack of shape (lanes, length) on the active device.
    carry : ndarray
        1 where ``op1 >= op2`` in that lane, 0 where the lane holds the
        radix complement of ``op2 - op1``.
    """
    xp = get_backend()
    op1 = as_digit_stack(op1, "op1", xp)
    op2 = as_digit_stack(op2, "op2", xp)
    lanes = _check_lanes(op1, op2)
    if length is None:
        length = max(op1.shape[1], op2.shape[1])

    out = xp.empty((lanes, length), dtype=digit_dtype(radix))
    carry = xp.ones(lanes, dtype=xp.int64)
    carry = _normalize(lambda i: _column(xp, op1, i) + ((radix - 1) - _column(xp, op2, i)), carry, radix, out)
    return out, carry


def complement_batch(stack, radix=DIGIT_BASE):
    """Replace every lane with its radix complement over the full width.

    Parameters
    ----------
    stack : ndarray
        Digit stack, updated in place. It stays on whichever device it
        already lives on.
    radix : int, default 10
        Base of the digit representation. The stack's dtype must hold
        ``radix - 1``.
    """
    xp = array_module(stack)
    if not isinstance(stack, xp.ndarray):
        raise TypeError(f"stack is updated in place and must be an ndarray, got {type(stack).__name__}.")
    radix = _check_radix(radix)
    as_digit_stack(stack, "stack", xp, radix=radix)

    flipped = (radix - 1) - stack.astype(xp.int64)
    carry = xp.ones(stack.shape[0], dtype=xp.int64)
    _normalize(lambda i: flipped[:, i], carry, radix, stack)


def multiply_batch(op1, op2, radix=DIGIT_BASE):
    """Multiply two digit stacks lane by lane.

    Partial products are summed per output column in int64 and carried
    once at the end, which yields the same digits as folding each partial
    product with a ripple carry. The column sums must fit in int64, so
    ``n * ((radix - 1)**2 + (radix - 1))`` may not exceed its maximum.

    Parameters
    ----------
    op1, op2 : array_like
        Digit stacks of identical shape (lanes, n).
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    ndarray
        Digit stack of shape (lanes, 2 * n) on the active device.
    """
    xp = get_backend()
    op1 = as_digit_stack(op1, "op1", xp)
    op2 = as_digit_stack(op2, "op2", xp)
    if op1.shape != op2.shape:
        raise ValueError(f"Operands must have the same shape, got {op1.shape} and {op2.shape}.")
    lanes, num_digits = op1.shape
    radix = _check_radix(radix)
    if num_digits * ((radix - 1) ** 2 + (radix - 1)) > _INT64_MAX:
        raise ValueError(
            f"Column sums of {num_digits}-digit products in radix {radix} would overflow int64. "
            "Use fewer digits per lane or multiply() on each lane."
        )

    a = op1.astype(xp.int64)
    b = op2.astype(xp.int64)
    columns = xp.zeros((lanes, 2 * num_digits), dtype=xp.int64)
    for i in range(num_digits):
        columns[:, i : i + num_digits] += b[:, i : i + 1] * a

    out = xp.empty((lanes, 2 * num_digits), dtype=digit_dtype(radix))
    carry = xp.zeros(lanes, dtype=xp.int64)
    _normalize(lambda i: columns[:, i], carry, radix, out)
    return out
