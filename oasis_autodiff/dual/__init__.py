################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Dual number type, math functions and Jacobian helpers."""

from oasis_autodiff.dual.dual import Dual
from oasis_autodiff.dual.dual import bind
from oasis_autodiff.dual.dual_collect import collect_derivatives
from oasis_autodiff.dual.dual_collect import collect_values
from oasis_autodiff.dual.dual_collect import seed_inputs
from oasis_autodiff.dual.jacobian import JacobianEvaluator


__all__ = [
    "Dual",
    "JacobianEvaluator",
    "bind",
    "collect_derivatives",
    "collect_values",
    "seed_inputs",
]
