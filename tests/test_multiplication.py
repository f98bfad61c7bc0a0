"""Tests for multiplication strategy dispatch."""

import numpy as np
import pytest

from radixnum import (
    available_multiplication_strategies,
    get_multiplication_strategy,
    long_multiplication,
    multiply,
    parallel_map,
    register_multiplication_strategy,
    resolve_multiplication_strategy,
    set_multiplication_strategy,
    use_multiplication_strategy,
)
from radixnum import multiplication
from tests.helpers import from_digits, to_digits


@pytest.fixture
def isolated_registry(monkeypatch):
    """Let a test register strategies without leaking them."""
    monkeypatch.setattr(multiplication, "_strategies", dict(multiplication._strategies))


def _reference_strategy(product, op1, op2, num_digits, radix):
    value = from_digits(op1[:num_digits], radix) * from_digits(op2[:num_digits], radix)
    product[: 2 * num_digits] = to_digits(value, 2 * num_digits, radix)


class TestMultiply:
    @pytest.mark.parametrize(
        ("op1", "op2", "expected"),
        [([3], [5], [5, 1]), ([9, 9], [9, 9], [1, 0, 8, 9]), ([0, 0], [7, 3], [0, 0, 0, 0])],
    )
    def test_scenarios(self, op1, op2, expected):
        product = np.zeros(len(expected), dtype=np.uint8)
        multiply(product, op1, op2, len(op1))
        np.testing.assert_array_equal(product, expected)

    def test_matches_integer_product(self, radix, operand_pairs):
        for width, x, y in operand_pairs:
            product = np.zeros(2 * width + 1, dtype=np.uint16)
            multiply(product, to_digits(x, width, radix), to_digits(y, width, radix), width, radix=radix)
            assert from_digits(product, radix) == x * y

    def test_same_result_as_long_multiplication(self, rng):
        op1 = rng.integers(0, 10, size=20).astype(np.uint8)
        op2 = rng.integers(0, 10, size=20).astype(np.uint8)
        via_dispatch = np.zeros(40, dtype=np.uint8)
        direct = np.zeros(40, dtype=np.uint8)
        multiply(via_dispatch, op1, op2, 20)
        long_multiplication(direct, op1, op2, 20)
        np.testing.assert_array_equal(via_dispatch, direct)

    def test_rejects_short_product(self):
        with pytest.raises(ValueError, match="product holds"):
            multiply(np.zeros(1, dtype=np.uint8), [3], [5], 1)

    def test_rejects_list_product(self):
        with pytest.raises(TypeError, match="product is updated in place"):
            multiply([0, 0], [3], [5], 1)


class TestStrategySelection:
    def test_default_strategy(self):
        assert get_multiplication_strategy() == "grade_school"
        assert "grade_school" in available_multiplication_strategies()

    @pytest.mark.parametrize("alias", ["long", "schoolbook", "Grade_School"])
    def test_aliases_resolve_to_grade_school(self, alias):
        set_multiplication_strategy(alias)
        assert get_multiplication_strategy() == "grade_school"

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown multiplication strategy 'toom3'"):
            set_multiplication_strategy("toom3")

    def test_karatsuba_is_reserved(self):
        with pytest.raises(NotImplementedError, match="'karatsuba' multiplication strategy is not implemented"):
            set_multiplication_strategy("karatsuba")

    def test_per_call_override(self):
        with pytest.raises(NotImplementedError):
            multiply(np.zeros(2, dtype=np.uint8), [3], [5], 1, strategy="karatsuba")

    def test_context_manager_reverts(self):
        assert get_multiplication_strategy() == "grade_school"
        with use_multiplication_strategy("long"):
            assert get_multiplication_strategy() == "grade_school"
        assert get_multiplication_strategy() == "grade_school"

    def test_context_manager_reverts_on_exception(self, isolated_registry):
        register_multiplication_strategy("reference", _reference_strategy)
        with pytest.raises(ZeroDivisionError), use_multiplication_strategy("reference"):
            assert get_multiplication_strategy() == "reference"
            1 / 0  # noqa: B018
        assert get_multiplication_strategy() == "grade_school"


class TestRegistration:
    def test_registered_strategy_is_used(self, isolated_registry):
        calls = []

        def counting(product, op1, op2, num_digits, radix):
            calls.append(num_digits)
            _reference_strategy(product, op1, op2, num_digits, radix)

        register_multiplication_strategy("counting", counting)
        product = np.zeros(4, dtype=np.uint8)
        with use_multiplication_strategy("counting"):
            multiply(product, [9, 9], [9, 9], 2)
        assert calls == [2]
        np.testing.assert_array_equal(product, [1, 0, 8, 9])

    def test_filling_reserved_slot(self, isolated_registry):
        register_multiplication_strategy("karatsuba", _reference_strategy)
        assert resolve_multiplication_strategy("karatsuba") is _reference_strategy
        product = np.zeros(6, dtype=np.uint8)
        multiply(product, to_digits(123, 3), to_digits(456, 3), 3, strategy="karatsuba")
        assert from_digits(product) == 123 * 456

    def test_replacing_warns(self, isolated_registry):
        register_multiplication_strategy("reference", _reference_strategy)
        with pytest.warns(UserWarning, match="Replacing multiplication strategy 'reference'"):
            register_multiplication_strategy("reference", _reference_strategy)

    def test_rejects_non_callable(self, isolated_registry):
        with pytest.raises(TypeError, match="must be callable"):
            register_multiplication_strategy("broken", 42)

    def test_registration_does_not_leak(self):
        assert available_multiplication_strategies() == ["grade_school"]


class TestParallelStrategyPropagation:
    def test_strategy_reaches_worker_threads(self, isolated_registry):
        register_multiplication_strategy("reference", _reference_strategy)

        def current(_):
            return get_multiplication_strategy()

        with use_multiplication_strategy("reference"):
            results = parallel_map(current, [(i,) for i in range(4)], n_jobs=2)
        assert results == ["reference"] * 4

    def test_independent_products_in_parallel(self, rng):
        operands = [rng.integers(0, 10, size=8).astype(np.uint8) for _ in range(12)]
        products = [np.zeros(16, dtype=np.uint8) for _ in range(6)]
        args = [(products[k], operands[2 * k], operands[2 * k + 1], 8) for k in range(6)]

        parallel_map(multiply, args, n_jobs=3)

        for k in range(6):
            expected = from_digits(operands[2 * k]) * from_digits(operands[2 * k + 1])
            assert from_digits(products[k]) == expected

    def test_concurrent_registration_keeps_every_strategy(self, isolated_registry):
        names = [f"reference_{k}" for k in range(16)]

        parallel_map(register_multiplication_strategy, [(name, _reference_strategy) for name in names], n_jobs=4)

        assert set(names) <= set(available_multiplication_strategies())
        for name in names:
            assert resolve_multiplication_strategy(name) is _reference_strategy


def test_multiply_rejects_radix_past_int64_bound():
    product = np.zeros(2, dtype=np.uint64)
    with pytest.raises(ValueError, match="overflow int64"):
        multiply(product, [1], [1], 1, radix=2**32)
