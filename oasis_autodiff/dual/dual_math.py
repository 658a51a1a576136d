################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Scalar math functions that accept dual numbers

Each function dispatches on its operand. A Dual argument goes through the
chain-rule implementation on the Dual type. A plain scalar goes through the
matching numpy scalar function, so generic code runs unchanged on floats and
on duals.

Select-branch functions (max, min, abs) return one operand verbatim, chosen
by comparing primal values. The derivative is discontinuous at ties.
"""

from __future__ import annotations

from typing import Any
from typing import Union

import numpy as np

from oasis_autodiff.dual.dual import Dual


Scalar = Union[Dual, float]


def _nonfinite_ok(ufunc: Any, *args: Any) -> Any:
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return ufunc(*args)


def sqrt(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.sqrt()
    return _nonfinite_ok(np.sqrt, a)


def sin(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.sin()
    return np.sin(a)


def cos(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.cos()
    return np.cos(a)


def tan(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.tan()
    return np.tan(a)


def asin(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.arcsin()
    return _nonfinite_ok(np.arcsin, a)


def acos(a: Scalar) -> Scalar:
    """Arccosine; the primal is arccos(a), not arcsin(a)."""
    if isinstance(a, Dual):
        return a.arccos()
    return _nonfinite_ok(np.arccos, a)


def atan(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.arctan()
    return np.arctan(a)


def atan2(a: Scalar, b: Scalar) -> Scalar:
    """Two-argument arctangent; either argument may be a plain scalar."""
    if isinstance(a, Dual):
        return a.arctan2(b)
    if isinstance(b, Dual):
        return type(b)(a).arctan2(b)
    return np.arctan2(a, b)


def max(a: Scalar, b: Scalar) -> Scalar:  # noqa: A001
    """Return ``a`` if ``a >= b`` else ``b``, value and derivative together."""
    return a if a >= b else b


def min(a: Scalar, b: Scalar) -> Scalar:  # noqa: A001
    """Return ``a`` if ``a < b`` else ``b``, value and derivative together."""
    return a if a < b else b


def abs(a: Scalar) -> Scalar:  # noqa: A001
    """Return ``a`` if ``a >= 0`` else ``-a``."""
    return a if a >= 0 else -a


def ceil(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.ceil()
    return np.ceil(a)


def floor(a: Scalar) -> Scalar:
    if isinstance(a, Dual):
        return a.floor()
    return np.floor(a)


def fmod(a: Scalar, mod: float) -> Scalar:
    """Return ``a - floor(a / mod) * mod`` for a plain scalar modulus.

    Raises:
        TypeError: If the modulus is a Dual
    """
    if isinstance(mod, Dual):
        raise TypeError("fmod with a Dual modulus is not supported")
    if isinstance(a, Dual):
        return a.fmod(mod)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return a - np.floor(np.divide(a, mod)) * mod


def isnan(a: Scalar) -> bool:
    if isinstance(a, Dual):
        return a.isnan()
    return bool(np.isnan(a))


def isfinite(a: Scalar) -> bool:
    if isinstance(a, Dual):
        return a.isfinite()
    return bool(np.isfinite(a))


def isinf(a: Scalar) -> bool:
    if isinstance(a, Dual):
        return a.isinf()
    return bool(np.isinf(a))
