"""Fixed-radix arithmetic primitives over little-endian digit arrays."""

from .batch import (
    add_arrays_batch,
    complement_batch,
    is_zero_batch,
    multiply_batch,
    subtract_arrays_batch,
)
from .conversion import char_to_digit, digit_to_char
from .core import (
    HAS_CUPY,
    HAS_NUMBA,
    get_backend,
    parallel_map,
    set_backend,
    to_device,
    to_numpy,
    use_backend,
)
from .digits import (
    DIGIT_BASE,
    MAX_RADIX,
    add_across,
    add_arrays,
    add_digit,
    clip,
    complement,
    digit_dtype,
    is_zero,
    long_multiplication,
    multiply_digit,
    subtract_arrays,
)
from .multiplication import (
    available_multiplication_strategies,
    get_multiplication_strategy,
    multiply,
    register_multiplication_strategy,
    resolve_multiplication_strategy,
    set_multiplication_strategy,
    use_multiplication_strategy,
)

__version__ = "0.1.0"

__all__ = [
    # Digit and array primitives
    "DIGIT_BASE",
    "MAX_RADIX",
    "clip",
    "add_digit",
    "multiply_digit",
    "is_zero",
    "add_across",
    "complement",
    "add_arrays",
    "subtract_arrays",
    "long_multiplication",
    "digit_dtype",
    # Multiplication strategies
    "multiply",
    "available_multiplication_strategies",
    "get_multiplication_strategy",
    "register_multiplication_strategy",
    "resolve_multiplication_strategy",
    "set_multiplication_strategy",
    "use_multiplication_strategy",
    # Character conversion
    "digit_to_char",
    "char_to_digit",
    # Batched primitives
    "is_zero_batch",
    "add_arrays_batch",
    "subtract_arrays_batch",
    "complement_batch",
    "multiply_batch",
    # Backends and execution
    "HAS_CUPY",
    "HAS_NUMBA",
    "get_backend",
    "set_backend",
    "use_backend",
    "to_device",
    "to_numpy",
    "parallel_map",
]
