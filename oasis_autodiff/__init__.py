################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Forward-mode automatic differentiation with dual numbers."""

from oasis_autodiff.dual.dual import Dual
from oasis_autodiff.dual.dual import bind
from oasis_autodiff.dual.jacobian import JacobianEvaluator


__all__ = [
    "Dual",
    "JacobianEvaluator",
    "bind",
]
