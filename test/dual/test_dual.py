################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for dual number construction and arithmetic."""

from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest

from oasis_autodiff.dual.dual import Dual
from oasis_autodiff.dual.dual import bind


def test_constant_has_zero_derivative() -> None:
    """Checks a constant carries an all-zero derivative."""
    c: Dual = Dual[3](4.0)
    assert c.value == 4.0
    assert np.array_equal(c.derivative, np.zeros(3))


def test_seeded_input_is_unit_vector() -> None:
    """Checks seeding places a single 1 at the input index."""
    x: Dual = Dual[3](2.0, 1)
    assert x.value == 2.0
    assert np.array_equal(x.derivative, np.array([0.0, 1.0, 0.0]))


@pytest.mark.parametrize("width", [1, 2, 3, 7])
def test_out_of_range_seed_is_constant(width: int) -> None:
    """Checks out-of-range seeds, including the sentinel, give zero derivatives."""
    for index in (width, width + 5, -1, Dual.NO_INPUT):
        x: Dual = Dual[width](1.5, index)
        assert x.derivative.shape == (width,)
        assert np.array_equal(x.derivative, np.zeros(width))


def test_composite_construction_copies_vector() -> None:
    """Checks an explicit derivative vector is copied, not aliased."""
    source: np.ndarray = np.array([1.0, 2.0])
    x: Dual = Dual[2](3.0, source)
    source[0] = 99.0
    assert np.array_equal(x.derivative, np.array([1.0, 2.0]))


def test_composite_construction_rejects_wrong_length() -> None:
    """Checks a derivative of the wrong length is rejected."""
    with pytest.raises(ValueError):
        Dual[2](1.0, [1.0, 2.0, 3.0])


def test_unbound_dual_cannot_be_constructed() -> None:
    """Checks the width must be bound before construction."""
    with pytest.raises(TypeError):
        Dual(1.0)


def test_bound_types_are_cached() -> None:
    """Checks each (width, dtype) maps to one class."""
    assert Dual[3] is Dual[3]
    assert Dual[3] is bind(3)
    assert Dual[3, np.float32] is not Dual[3]
    assert Dual[3].WIDTH == 3
    assert Dual[3, np.float32].DTYPE == np.dtype(np.float32)


def test_bind_rejects_invalid_width_and_dtype() -> None:
    """Checks widths must be positive ints and dtypes floating."""
    with pytest.raises(ValueError):
        bind(0)
    with pytest.raises(ValueError):
        bind(2, np.int32)


def test_dual_is_immutable() -> None:
    """Checks attributes and the derivative buffer cannot be mutated."""
    x: Dual = Dual[2](1.0, 0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        x.value = 2.0  # type: ignore[misc]
    with pytest.raises(ValueError):
        x.derivative[0] = 5.0


def test_operators_do_not_alias_operands() -> None:
    """Checks results own their derivative vectors."""
    x: Dual = Dual[2](1.0, 0)
    y: Dual = x + 1.0
    assert y.derivative is not x.derivative
    assert np.array_equal(y.derivative, x.derivative)


@pytest.mark.parametrize("a,b", [(0.0, 0.0), (1.5, -2.0), (-3.0, 10.0)])
def test_linearity(a: float, b: float) -> None:
    """Checks the sum of two seeded inputs has derivative (1, 1)."""
    x: Dual = Dual[2](a, 0)
    y: Dual = Dual[2](b, 1)
    result: Dual = x + y
    assert result.value == a + b
    assert np.array_equal(result.derivative, np.array([1.0, 1.0]))


def test_subtraction() -> None:
    """Checks subtraction is addition of the negation."""
    x: Dual = Dual[2](5.0, 0)
    y: Dual = Dual[2](3.0, 1)
    result: Dual = x - y
    assert result.value == 2.0
    assert np.array_equal(result.derivative, np.array([1.0, -1.0]))


def test_product_rule() -> None:
    """Checks the product rule for two seeded inputs."""
    x: Dual = Dual[2](2.0, 0)
    y: Dual = Dual[2](3.0, 1)
    result: Dual = x * y
    assert result.value == 6.0
    assert np.array_equal(result.derivative, np.array([3.0, 2.0]))


def test_quotient_rule() -> None:
    """Checks the quotient rule for two seeded inputs."""
    x: Dual = Dual[2](6.0, 0)
    y: Dual = Dual[2](3.0, 1)
    result: Dual = x / y
    assert result.value == pytest.approx(2.0)
    assert np.allclose(result.derivative, np.array([1.0 / 3.0, -2.0 / 3.0]))


def test_scalar_operands_are_constants() -> None:
    """Checks plain scalars on either side act as zero-derivative constants."""
    x: Dual = Dual[1](2.0, 0)

    assert (x + 3.0).value == 5.0
    assert (3.0 + x).derivative[0] == 1.0
    assert (x - 3.0).value == -1.0
    assert (3.0 - x).value == 1.0
    assert (3.0 - x).derivative[0] == -1.0
    assert (x * 4.0).derivative[0] == 4.0
    assert (4.0 * x).derivative[0] == 4.0
    assert (x / 4.0).derivative[0] == pytest.approx(0.25)

    # d/dx (1 / x) = -1 / x^2
    recip: Dual = 1.0 / x
    assert recip.value == pytest.approx(0.5)
    assert recip.derivative[0] == pytest.approx(-0.25)


def test_numpy_scalars_are_constants() -> None:
    """Checks numpy scalars defer to the dual operators."""
    x: Dual = Dual[1](2.0, 0)
    result: Dual = np.float64(3.0) * x
    assert isinstance(result, Dual)
    assert result.derivative[0] == 3.0


@pytest.mark.parametrize("value", [0.0, 1.25, -7.5])
def test_double_negation(value: float) -> None:
    """Checks negating twice restores value and derivative."""
    x: Dual = Dual[3](value, np.array([1.0, -2.0, 0.5]))
    assert -(-x) == x
    assert +x == x


def test_mixed_widths_are_rejected() -> None:
    """Checks combining duals of different widths fails before any result."""
    a: Dual = Dual[2](1.0, 0)
    b: Dual = Dual[3](1.0, 0)
    with pytest.raises(TypeError):
        _ = a + b
    with pytest.raises(TypeError):
        _ = a * b
    with pytest.raises(TypeError):
        _ = a / b
    with pytest.raises(TypeError):
        _ = a < b


def test_mixed_dtypes_are_rejected() -> None:
    """Checks combining float32 and float64 duals fails."""
    a: Dual = Dual[2](1.0, 0)
    b: Dual = Dual[2, np.float32](1.0, 0)
    with pytest.raises(TypeError):
        _ = a - b


def test_float32_stays_float32() -> None:
    """Checks the scalar dtype is preserved through arithmetic."""
    x: Dual = Dual[2, np.float32](2.0, 0)
    y: Dual = x * 3.0 + x / 2.0
    assert isinstance(y.value, np.float32)
    assert y.derivative.dtype == np.float32


def test_equality_and_hash() -> None:
    """Checks equality is value semantics and hashing agrees with it."""
    a: Dual = Dual[2](1.0, [0.0, 1.0])
    b: Dual = Dual[2](1.0, [-0.0, 1.0])
    c: Dual = Dual[2](1.0, [1.0, 0.0])
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert a != 1.0


def test_ordering_compares_primal_values() -> None:
    """Checks ordering uses the value only, against duals and scalars."""
    a: Dual = Dual[2](1.0, 0)
    b: Dual = Dual[2](2.0, 1)
    assert a < b
    assert b > a
    assert a <= 1.0
    assert a >= 1.0
    assert 0.5 < a


def test_builtin_abs_ceil_floor_keep_dual() -> None:
    """Checks builtin abs and math.ceil/floor return duals."""
    x: Dual = Dual[1](-1.5, 0)
    assert abs(x).value == 1.5
    assert abs(x).derivative[0] == -1.0

    up: Dual = math.ceil(x)
    down: Dual = math.floor(x)
    assert isinstance(up, Dual)
    assert up.value == -1.0
    assert down.value == -2.0
    assert np.array_equal(down.derivative, np.zeros(1))
