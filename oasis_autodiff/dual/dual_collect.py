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
Helpers for moving between float arrays and object arrays of duals

Vectors and matrices of duals are numpy arrays with ``dtype=object``. numpy
evaluates elementwise arithmetic, ``@`` and unary ufuncs such as ``np.sin`` on
them by calling the Dual operators and methods, so whole vector expressions
can be differentiated by substitution. A single dual combined with an ndarray
also gives an object array of duals.

``np.isnan``, ``np.isfinite`` and ``np.isinf`` have no object loop and raise
``TypeError`` on these arrays. Use ``np.vectorize(dual_math.isnan)`` and the
like instead.
"""

from __future__ import annotations

from typing import Any
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike
from numpy.typing import DTypeLike
from numpy.typing import NDArray

from oasis_autodiff.dual.dual import Dual
from oasis_autodiff.dual.dual import bind


def seed_inputs(x: ArrayLike, dtype: Optional[DTypeLike] = None) -> NDArray[Any]:
    """Seed a point as independent inputs.

    Args:
        x: Evaluation point, a non-empty vector of length N
        dtype: Scalar dtype of the duals, defaults to float64

    Returns:
        Object array of length N where element i is ``Dual[N](x[i], i)``

    Raises:
        ValueError: If x is not a non-empty vector
    """
    point: NDArray[Any] = np.asarray(x, dtype=dtype if dtype is not None else float)
    if point.ndim != 1 or point.size == 0:
        raise ValueError("x must be a non-empty vector")

    dual_type: type[Dual] = bind(point.size, point.dtype)
    inputs: NDArray[Any] = np.empty(point.size, dtype=object)
    for i in range(point.size):
        inputs[i] = dual_type(point[i], i)
    return inputs


def collect_values(duals: ArrayLike) -> NDArray[Any]:
    """Return the primal values of an array of duals or scalars."""
    items: NDArray[Any] = np.asarray(duals, dtype=object)
    dual_type: Optional[type[Dual]] = _find_dual_type(items)
    dtype: np.dtype = dual_type.DTYPE if dual_type is not None else np.dtype(float)

    values: NDArray[Any] = np.empty(items.shape, dtype=dtype)
    for idx, item in np.ndenumerate(items):
        values[idx] = item.value if isinstance(item, Dual) else item
    return values


def collect_derivatives(
    duals: ArrayLike, width: Optional[int] = None
) -> NDArray[Any]:
    """Stack the derivative vectors of a vector of duals into a Jacobian.

    Plain scalar entries are constants and contribute zero rows.

    Args:
        duals: Vector of M duals or scalars
        width: Derivative width N, needed only when no entry is a Dual

    Returns:
        Matrix with shape (M, N) whose row i is the derivative of entry i

    Raises:
        ValueError: If the input is not a vector, or N cannot be determined
        TypeError: If the entries mix Dual types
    """
    items: NDArray[Any] = np.asarray(duals, dtype=object)
    if items.ndim != 1:
        raise ValueError("duals must be a vector")

    dual_type: Optional[type[Dual]] = _find_dual_type(items)
    if dual_type is None:
        if width is None:
            raise ValueError("width is required when no entry is a Dual")
        dual_type = bind(width)
    elif width is not None and width != dual_type.WIDTH:
        raise ValueError(f"width {width} does not match Dual width {dual_type.WIDTH}")

    jacobian: NDArray[Any] = np.zeros(
        (items.size, dual_type.WIDTH), dtype=dual_type.DTYPE
    )
    for row, item in enumerate(items):
        if isinstance(item, Dual):
            jacobian[row, :] = item.derivative
    return jacobian


def _find_dual_type(items: NDArray[Any]) -> Optional[type[Dual]]:
    found: Optional[type[Dual]] = None
    for item in items.flat:
        if not isinstance(item, Dual):
            continue
        if found is None:
            found = type(item)
        elif type(item) is not found:
            raise TypeError(
                f"cannot mix {found.__name__} and {type(item).__name__} entries"
            )
    return found
