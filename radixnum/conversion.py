"""Conversion between single decimal digits and their characters."""

__all__ = ["char_to_digit", "digit_to_char"]

_ZERO = ord("0")


def digit_to_char(d):
    """Return the character for a decimal digit ``d`` in ``[0, 9]``."""
    return chr(_ZERO + int(d))


def char_to_digit(c):
    """Return the digit value of a character in ``'0'..'9'``.

    Anything else, including the empty string and multi-character strings,
    reads as 0.
    """
    if len(c) != 1 or not "0" <= c <= "9":
        return 0
    return ord(c) - _ZERO
