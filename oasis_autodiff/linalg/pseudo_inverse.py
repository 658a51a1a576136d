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
Moore-Penrose pseudo-inverse via full-rank Cholesky factorization

Implements the geninv algorithm from:

    Courrieu, P. (2008). Fast Computation of Moore-Penrose Inverse Matrices,
    Neural Information Processing - Letters and Reviews, 8(2), 25-29.
    http://arxiv.org/abs/0804.4809

For G with shape (m, n) and A = G Gᵀ (m <= n) or A = Gᵀ G (m > n), a
full-rank factor L with A = L Lᵀ and M = (Lᵀ L)⁻¹ give:

    G⁺ = Gᵀ L M M Lᵀ     (m <= n)
    G⁺ = L M M Lᵀ Gᵀ     (m > n)

Only the smaller Gram matrix is factored, and only rank(G) columns of L are
kept, so rank-deficient inputs are handled without an SVD.
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike
from numpy.typing import NDArray

from oasis_autodiff.config.autodiff_config import AutodiffConfig


_LOG: logging.Logger = logging.getLogger(__name__)


def full_rank_cholesky(
    A: ArrayLike, tolerance_factor: float = 1.0
) -> tuple[NDArray[Any], int]:
    """Factor a symmetric PSD matrix as A = L Lᵀ with rank(A) columns.

    A pivot at or below ``tolerance_factor * n * eps * max(diag(A))`` marks a
    dependent column, which is dropped. This loses about one ulp of accuracy
    per row relative to the largest diagonal entry.

    Args:
        A: Symmetric positive semi-definite matrix with shape (n, n)
        tolerance_factor: Scale on the pivot tolerance, >= 0

    Returns:
        Tuple of the factor L with shape (n, rank) and the detected rank

    Raises:
        ValueError: If A is not square or the tolerance factor is negative
    """
    mat: NDArray[Any] = _as_float_matrix(A, None)
    n: int = mat.shape[0]
    if mat.shape != (n, n):
        raise ValueError("A must be square")
    if tolerance_factor < 0.0:
        raise ValueError("tolerance_factor must be >= 0")

    L: NDArray[Any] = np.zeros((n, n), dtype=mat.dtype)
    if n == 0:
        return L, 0

    eps: float = float(np.finfo(mat.dtype).eps)
    tol: float = tolerance_factor * n * eps * float(np.max(np.diag(mat)))

    rank: int = 0
    for k in range(n):
        L[k:, rank] = mat[k:, k] - L[k:, :rank] @ L[k, :rank]
        if L[k, rank] > tol:
            L[k, rank] = np.sqrt(L[k, rank])
            if k < n - 1:
                L[k + 1 :, rank] /= L[k, rank]
            rank += 1
        else:
            L[k:, rank] = 0.0

    return L[:, :rank], rank


def geninv(G: ArrayLike, config: Optional[AutodiffConfig] = None) -> NDArray[Any]:
    """Return the Moore-Penrose pseudo-inverse of G.

    Args:
        G: Matrix with shape (m, n)
        config: Supplies the dtype and rank tolerance factor, defaults apply
            when omitted

    Returns:
        Pseudo-inverse with shape (n, m); the zero matrix when G has rank 0

    Raises:
        ValueError: If G is not a 2-D matrix
    """
    if config is None:
        config = AutodiffConfig.from_params()

    mat: NDArray[Any] = _as_float_matrix(G, config.dtype)
    m: int
    n: int
    m, n = mat.shape

    transposed: bool = m <= n
    gram: NDArray[Any] = mat @ mat.T if transposed else mat.T @ mat

    L: NDArray[Any]
    rank: int
    L, rank = full_rank_cholesky(gram, config.rank_tolerance_factor)
    _LOG.debug("geninv of %d x %d matrix found rank %d", m, n, rank)

    if rank == 0:
        return np.zeros((n, m), dtype=mat.dtype)

    M: NDArray[Any] = np.linalg.inv(L.T @ L)
    if transposed:
        return mat.T @ L @ M @ M @ L.T
    return L @ M @ M @ L.T @ mat.T


def _as_float_matrix(a: ArrayLike, dtype: Optional[np.dtype]) -> NDArray[Any]:
    mat: NDArray[Any] = np.asarray(a)
    if dtype is not None:
        mat = mat.astype(dtype, copy=False)
    elif not np.issubdtype(mat.dtype, np.floating):
        mat = mat.astype(float)
    if mat.ndim != 2:
        raise ValueError("matrix must be 2-D")
    return mat
