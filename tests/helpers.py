"""Helpers for building and reading digit arrays in tests."""

import numpy as np

from radixnum import DIGIT_BASE, digit_dtype


def to_digits(value, length, radix=DIGIT_BASE):
    """Little-endian digits of ``value`` over exactly ``length`` positions."""
    out = np.zeros(length, dtype=digit_dtype(radix))
    for i in range(length):
        value, out[i] = divmod(value, radix)
    assert value == 0, "value does not fit in length digits"
    return out


def from_digits(digits, radix=DIGIT_BASE):
    """Integer value of a little-endian digit array."""
    value = 0
    for d in reversed(np.asarray(digits).tolist()):
        value = value * radix + int(d)
    return value


def to_stack(values, length, radix=DIGIT_BASE):
    """Digit stack with one lane per value."""
    return np.stack([to_digits(v, length, radix) for v in values])


def from_stack(stack, radix=DIGIT_BASE):
    """Integer values of every lane of a digit stack."""
    return [from_digits(row, radix) for row in np.asarray(stack)]
