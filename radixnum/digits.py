"""Carry-aware primitives over little-endian arrays of single-radix digits.

Index 0 of a digit array holds the least significant digit. Arrays carry no
length of their own: every primitive takes the logical length explicitly,
and it may be shorter than the physical capacity of the buffer. Primitives
read and write only inside the lengths they are given and never allocate.

Compiled kernels accumulate in int64, so the radix is bounded by
:data:`MAX_RADIX`, the largest base for which ``(radix - 1)**2 + (radix - 1)``
(a digit product plus a full carry) still fits.
"""

import math

import numpy as np

from .core.platform import kernel

__all__ = [
    "DIGIT_BASE",
    "MAX_RADIX",
    "add_across",
    "add_arrays",
    "add_digit",
    "clip",
    "complement",
    "digit_dtype",
    "is_zero",
    "long_multiplication",
    "multiply_digit",
    "subtract_arrays",
]

DIGIT_BASE = 10

_INT64_MAX = int(np.iinfo(np.int64).max)
MAX_RADIX = (1 + math.isqrt(1 + 4 * _INT64_MAX)) // 2


def _check_radix(radix):
    """Return ``radix`` as an int, or raise unless ``2 <= radix <= MAX_RADIX``."""
    if radix < 2:
        raise ValueError(f"radix must be at least 2, got {radix}.")
    if radix > MAX_RADIX:
        raise ValueError(
            f"radix {radix} is too large: digit products would overflow int64. The largest supported radix is "
            f"{MAX_RADIX}."
        )
    return int(radix)


def digit_dtype(radix=DIGIT_BASE):
    """Return the smallest unsigned dtype that holds every digit of ``radix``.

    Parameters
    ----------
    radix : int, default 10
        Base of the digit representation, between 2 and :data:`MAX_RADIX`.

    Returns
    -------
    numpy.dtype
        ``uint8`` for radices up to 256, wider types beyond that.
    """
    radix = _check_radix(radix)
    return np.min_scalar_type(radix - 1)


@kernel
def _clip_impl(value, radix):
    return value % radix, value // radix


@kernel
def _add_digit_impl(a, b, carry_in, radix):
    return _clip_impl(int(a) + int(b) + int(carry_in), radix)


@kernel
def _multiply_digit_impl(a, b, carry_in, radix):
    return _clip_impl(int(a) * int(b) + int(carry_in), radix)


def clip(value, radix=DIGIT_BASE):
    """Split an accumulator into ``(value % radix, value // radix)``."""
    return _clip_impl(value, _check_radix(radix))


def add_digit(a, b, carry_in, radix=DIGIT_BASE):
    """Add two digits and a carry.

    Parameters
    ----------
    a, b : int
        Digits in ``[0, radix)``.
    carry_in : int
        Incoming carry. May exceed the radix while it is being accumulated.
    radix : int, default 10
        Base of the digit representation, at most :data:`MAX_RADIX`.

    Returns
    -------
    digit : int
        ``(a + b + carry_in) % radix``.
    carry_out : int
        ``(a + b + carry_in) // radix``.
    """
    return _add_digit_impl(a, b, carry_in, _check_radix(radix))


def multiply_digit(a, b, carry_in, radix=DIGIT_BASE):
    """Multiply two digits and add a carry.

    With radix 10 and no carry, ``3 * 5 = 15`` gives digit 5 and carry 1.

    Parameters
    ----------
    a, b : int
        Digits in ``[0, radix)``.
    carry_in : int
        Incoming carry, at most ``radix - 1`` for the result to be exact
        at the largest radices.
    radix : int, default 10
        Base of the digit representation, at most :data:`MAX_RADIX`.

    Returns
    -------
    digit : int
        ``(a * b + carry_in) % radix``.
    carry_out : int
        ``(a * b + carry_in) // radix``.

    Raises
    ------
    ValueError
        If ``radix`` exceeds :data:`MAX_RADIX`.
    """
    return _multiply_digit_impl(a, b, carry_in, _check_radix(radix))


@kernel
def _is_zero_impl(array, length):
    for i in range(length):
        if array[i] != 0:
            return False
    return True


@kernel
def _add_across_impl(array, length, extra, radix):
    """Ripple ``extra`` in from position 0 until the carry dies out."""
    carry = int(extra)
    i = 0
    while carry != 0 and i < length:
        digit, carry = _add_digit_impl(array[i], 0, carry, radix)
        array[i] = digit
        i += 1
    return carry


@kernel
def _complement_impl(array, length, radix):
    for i in range(length):
        array[i] = (radix - 1) - int(array[i])
    _add_across_impl(array, length, 1, radix)


@kernel
def _add_arrays_impl(out, out_length, op1, op1_length, op2, op2_length, radix):
    carry = 0
    for i in range(out_length):
        a = int(op1[i]) if i < op1_length else 0
        b = int(op2[i]) if i < op2_length else 0
        digit, carry = _add_digit_impl(a, b, carry, radix)
        out[i] = digit
    return carry


@kernel
def _subtract_arrays_impl(out, out_length, op1, op1_length, op2, op2_length, radix):
    """Add op1 to the radix complement of op2: seed carry 1, flip op2 digits."""
    carry = 1
    for i in range(out_length):
        a = int(op1[i]) if i < op1_length else 0
        b = (radix - 1) - (int(op2[i]) if i < op2_length else 0)
        digit, carry = _add_digit_impl(a, b, carry, radix)
        out[i] = digit
    return carry


@kernel
def _long_multiplication_impl(product, op1, op2, num_digits, radix):
    width = 2 * num_digits
    for i in range(width):
        product[i] = 0

    for i in range(num_digits):
        for j in range(num_digits):
            k = i + j
            digit, carry = _multiply_digit_impl(op2[i], op1[j], 0, radix)
            _add_across_impl(product[k:], width - k, digit, radix)
            _add_across_impl(product[k + 1 :], width - k - 1, carry, radix)


def _as_digits(array, name):
    """Return a read-only operand as a 1-D array without copying arrays."""
    array = np.asarray(array)
    if array.ndim != 1:
        raise ValueError(f"{name} must be a 1-D digit array, got {array.ndim} dimensions.")
    return array


def _as_writable_digits(array, name, radix):
    """Return an in-place digit array whose dtype can hold ``radix - 1``."""
    if not isinstance(array, np.ndarray):
        raise TypeError(f"{name} is updated in place and must be a numpy.ndarray, got {type(array).__name__}.")
    array = _as_digits(array, name)
    if not np.issubdtype(array.dtype, np.integer):
        raise TypeError(f"{name} must have an integer dtype, got {array.dtype}.")
    if np.iinfo(array.dtype).max < radix - 1:
        raise ValueError(
            f"{name} has dtype {array.dtype}, which cannot hold digit {radix - 1} of radix {radix}. "
            f"Use digit_dtype({radix}) or wider."
        )
    return array


def _check_length(array, length, name):
    if length < 0 or length > array.shape[0]:
        raise ValueError(f"{name} holds {array.shape[0]} digits, cannot use a length of {length}.")


def is_zero(array, length):
    """Return True if the first ``length`` digits are all zero.

    Parameters
    ----------
    array : array_like
        Digit array.
    length : int
        Number of digits to inspect. A length of 0 is vacuously zero.

    Returns
    -------
    bool
        Whether the number held in ``array[:length]`` is zero.
    """
    array = _as_digits(array, "array")
    _check_length(array, length, "array")
    return bool(_is_zero_impl(array, length))


def add_across(array, length, extra, radix=DIGIT_BASE):
    """Add a single digit to a digit array in place.

    ``extra`` enters as a carry at position 0 and ripples upward, stopping
    as soon as the carry is zero or the ``length`` digits are used up.

    Parameters
    ----------
    array : numpy.ndarray
        Digit array, updated in place.
    length : int
        Number of digits the carry may ripple through.
    extra : int
        Value injected at position 0. Usually a digit or a multiplication
        carry; it may exceed the radix.
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    int
        The carry left over after the last digit, 0 if it was absorbed.

    Notes
    -----
    A nonzero return value is dropped from the array: nothing outside
    ``array[:length]`` is written. Callers size ``array`` for the largest
    result they can produce, or inspect the return value.
    """
    radix = _check_radix(radix)
    array = _as_writable_digits(array, "array", radix)
    _check_length(array, length, "array")
    return int(_add_across_impl(array, length, extra, radix))


def complement(array, length, radix=DIGIT_BASE):
    """Replace a digit array with its radix complement in place.

    Over ``length`` digits the result represents ``radix**length - x``, so
    adding it performs subtraction of ``x``. For example with radix 10,
    239487 becomes 760512 + 1 = 760513. Zero maps to zero, and applying the
    complement twice gives back the original digits.

    Parameters
    ----------
    array : numpy.ndarray
        Digit array, updated in place.
    length : int
        Width of the complement.
    radix : int, default 10
        Base of the digit representation.
    """
    radix = _check_radix(radix)
    array = _as_writable_digits(array, "array", radix)
    _check_length(array, length, "array")
    _complement_impl(array, length, radix)


def add_arrays(sum_digits, sum_length, op1, op1_length, op2, op2_length, radix=DIGIT_BASE):
    """Compute ``sum_digits = op1 + op2`` over ``sum_length`` digits.

    Operands shorter than ``sum_length`` are read as if padded with zeros.

    Parameters
    ----------
    sum_digits : numpy.ndarray
        Output digit array, overwritten in place. Must not overlap the
        operands.
    sum_length : int
        Number of output digits to write.
    op1, op2 : array_like
        Operand digit arrays.
    op1_length, op2_length : int
        Logical lengths of the operands.
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    int
        Carry out of the top output digit, 0 if the sum fit.
    """
    radix = _check_radix(radix)
    sum_digits = _as_writable_digits(sum_digits, "sum_digits", radix)
    op1 = _as_digits(op1, "op1")
    op2 = _as_digits(op2, "op2")
    _check_length(sum_digits, sum_length, "sum_digits")
    _check_length(op1, op1_length, "op1")
    _check_length(op2, op2_length, "op2")
    return int(_add_arrays_impl(sum_digits, sum_length, op1, op1_length, op2, op2_length, radix))


def subtract_arrays(diff, diff_length, op1, op1_length, op2, op2_length, radix=DIGIT_BASE):
    """Compute ``diff = op1 - op2`` modulo ``radix**diff_length``.

    The subtraction is an addition of ``op1`` and the radix complement of
    ``op2``, formed digit by digit on the fly so no scratch buffer is
    needed.

    Parameters
    ----------
    diff : numpy.ndarray
        Output digit array, overwritten in place. Must not overlap the
        operands.
    diff_length : int
        Number of output digits to write.
    op1, op2 : array_like
        Minuend and subtrahend digit arrays.
    op1_length, op2_length : int
        Logical lengths of the operands.
    radix : int, default 10
        Base of the digit representation.

    Returns
    -------
    int
        1 when ``op1 >= op2`` over the window (no borrow). 0 when the result
        is the radix complement of ``op2 - op1``.
    """
    radix = _check_radix(radix)
    diff = _as_writable_digits(diff, "diff", radix)
    op1 = _as_digits(op1, "op1")
    op2 = _as_digits(op2, "op2")
    _check_length(diff, diff_length, "diff")
    _check_length(op1, op1_length, "op1")
    _check_length(op2, op2_length, "op2")
    return int(_subtract_arrays_impl(diff, diff_length, op1, op1_length, op2, op2_length, radix))


def long_multiplication(product, op1, op2, num_digits, radix=DIGIT_BASE):
    """Compute ``product = op1 * op2`` with grade-school multiplication.

    Every digit pair ``(op2[i], op1[j])`` is multiplied and the resulting
    digit and carry are folded into ``product`` at offsets ``i + j`` and
    ``i + j + 1`` with :func:`add_across`. Runs in ``O(num_digits**2)``.

    Parameters
    ----------
    product : numpy.ndarray
        Output digit array with room for ``2 * num_digits`` digits. Those
        digits are zeroed before accumulation.
    op1, op2 : array_like
        Operands holding ``num_digits`` digits each.
    num_digits : int
        Operand width.
    radix : int, default 10
        Base of the digit representation.
    """
    product, op1, op2, radix = _check_multiplication_args(product, op1, op2, num_digits, radix)
    _long_multiplication_impl(product, op1, op2, num_digits, radix)


def _check_multiplication_args(product, op1, op2, num_digits, radix):
    radix = _check_radix(radix)
    product = _as_writable_digits(product, "product", radix)
    op1 = _as_digits(op1, "op1")
    op2 = _as_digits(op2, "op2")
    _check_length(op1, num_digits, "op1")
    _check_length(op2, num_digits, "op2")
    _check_length(product, 2 * num_digits, "product")
    return product, op1, op2, radix
