################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Pseudo-inverse and sparse vector helpers."""

from oasis_autodiff.linalg.pseudo_inverse import full_rank_cholesky
from oasis_autodiff.linalg.pseudo_inverse import geninv
from oasis_autodiff.linalg.sparse_vector import SparseVector


__all__ = [
    "SparseVector",
    "full_rank_cholesky",
    "geninv",
]
