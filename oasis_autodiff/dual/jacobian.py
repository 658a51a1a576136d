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
Forward-mode Jacobian evaluation
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Callable
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike
from numpy.typing import NDArray

from oasis_autodiff.config.autodiff_config import AutodiffConfig
from oasis_autodiff.dual.dual_collect import collect_derivatives
from oasis_autodiff.dual.dual_collect import collect_values
from oasis_autodiff.dual.dual_collect import seed_inputs


_LOG: logging.Logger = logging.getLogger(__name__)


class JacobianEvaluator:
    """
    Evaluate a function and its Jacobian in one forward pass

    The function receives an object array of seeded duals, one per input, and
    may return a single dual, a scalar, or a sequence of them.
    """

    def __init__(self, config: Optional[AutodiffConfig] = None) -> None:
        self._config: AutodiffConfig = (
            config if config is not None else AutodiffConfig.from_params()
        )
        self._log_level: int = (
            logging.INFO if self._config.params.log_jacobian_shapes else logging.DEBUG
        )

    @property
    def config(self) -> AutodiffConfig:
        return self._config

    def evaluate(
        self, func: Callable[[NDArray[Any]], Any], x: ArrayLike
    ) -> tuple[NDArray[Any], NDArray[Any]]:
        """Return ``(f(x), J(x))`` with J shaped (M, N)."""
        inputs: NDArray[Any] = seed_inputs(x, self._config.dtype)
        width: int = inputs.size

        outputs: NDArray[Any] = np.asarray(func(inputs), dtype=object).reshape(-1)

        values: NDArray[Any] = collect_values(outputs).astype(
            self._config.dtype, copy=False
        )
        jacobian: NDArray[Any] = collect_derivatives(outputs, width)

        _LOG.log(
            self._log_level,
            "Evaluated %d x %d Jacobian",
            jacobian.shape[0],
            jacobian.shape[1],
        )
        return values, jacobian

    def jacobian(
        self, func: Callable[[NDArray[Any]], Any], x: ArrayLike
    ) -> NDArray[Any]:
        """Return only the Jacobian of ``func`` at ``x``."""
        return self.evaluate(func, x)[1]
