"""Shared fixtures for radixnum tests."""

import numpy as np
import pytest

from radixnum import set_backend, set_multiplication_strategy
from radixnum.multiplication import DEFAULT_STRATEGY
from tests.helpers import from_digits

RADICES = [2, 10, 16, 256]


@pytest.fixture(autouse=True)
def _reset_configuration():
    """Start every test on the NumPy backend with the default strategy."""
    set_backend("numpy")
    set_multiplication_strategy(DEFAULT_STRATEGY)
    yield
    set_backend("numpy")
    set_multiplication_strategy(DEFAULT_STRATEGY)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(params=RADICES, ids=lambda r: f"radix{r}")
def radix(request):
    return request.param


@pytest.fixture
def operand_pairs(rng, radix):
    """Random operand pairs spanning short and long widths for one radix."""
    pairs = []
    for width in (1, 2, 3, 5, 8, 13):
        for _ in range(6):
            x = from_digits(rng.integers(0, radix, size=width), radix)
            y = from_digits(rng.integers(0, radix, size=width), radix)
            pairs.append((width, x, y))
        top = radix**width - 1
        pairs.append((width, top, top))
        pairs.append((width, 0, top))
    return pairs
