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
Fixed-size vector that stores only a fixed set of populated indices
"""

from __future__ import annotations

from typing import Any
from typing import Optional
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike
from numpy.typing import DTypeLike
from numpy.typing import NDArray


class SparseVector:
    """Vector of length ``size`` with storage only for ``indices``.

    The populated indices are fixed at construction. All other entries are
    structurally zero and cannot be written. Use ``dtype=object`` to hold
    dual numbers.
    """

    # Make numpy arrays defer to the reflected operators
    __array_ufunc__ = None

    def __init__(
        self,
        size: int,
        indices: Sequence[int],
        data: Optional[ArrayLike] = None,
        dtype: DTypeLike = float,
    ) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        index_list: list[int] = [int(i) for i in indices]
        if len(set(index_list)) != len(index_list):
            raise ValueError("duplicate indices")
        if len(index_list) >= size:
            raise ValueError("more entries than elements, use a dense vector")
        for index in index_list:
            if index < 0 or index >= size:
                raise ValueError(f"index {index} does not fit in size {size}")

        self._size: int = size
        self._indices: NDArray[np.intp] = np.array(index_list, dtype=np.intp)
        self._compressed: dict[int, int] = {
            index: pos for pos, index in enumerate(index_list)
        }

        self._data: NDArray[Any]
        if data is None:
            self._data = np.zeros(len(index_list), dtype=dtype)
        else:
            self._data = np.array(data, dtype=dtype)
            if self._data.shape != (len(index_list),):
                raise ValueError(f"data must have length {len(index_list)}")

    @property
    def size(self) -> int:
        return self._size

    @property
    def indices(self) -> tuple[int, ...]:
        return tuple(int(i) for i in self._indices)

    def non_zeros(self) -> int:
        """Number of stored entries."""
        return int(self._indices.size)

    def index(self, i: int) -> int:
        """Dense index of the i-th stored entry."""
        return int(self._indices[i])

    def at(self, index: int) -> Any:
        """Read the entry at a populated dense index.

        Raises:
            KeyError: If the index is not populated
        """
        return self._data[self._position(index)]

    def set(self, index: int, value: Any) -> None:
        """Write the entry at a populated dense index.

        Raises:
            KeyError: If the index is not populated
        """
        self._data[self._position(index)] = value

    def set_zero(self) -> None:
        self._data[...] = 0.0

    def from_dense(self, vec: ArrayLike) -> SparseVector:
        """Copy the populated entries out of a dense vector."""
        dense: NDArray[Any] = np.asarray(vec, dtype=self._data.dtype)
        if dense.ndim != 1 or (self._indices.size and dense.size <= self._indices.max()):
            raise ValueError("dense vector is too short for the populated indices")
        self._data[:] = dense[self._indices]
        return self

    def to_dense(self) -> NDArray[Any]:
        dense: NDArray[Any] = np.zeros(self._size, dtype=self._data.dtype)
        dense[self._indices] = self._data
        return dense

    def dot(self, vec: ArrayLike) -> Any:
        """Inner product with a dense vector of length ``size``."""
        dense: NDArray[Any] = self._check_dense(vec)
        accum: Any = 0.0
        for pos in range(self._data.size):
            accum = accum + self._data[pos] * dense[self._indices[pos]]
        return accum

    def __add__(self, other: object) -> NDArray[Any]:
        if isinstance(other, SparseVector):
            return NotImplemented
        dense: NDArray[Any] = self._check_dense(other)
        out: NDArray[Any] = np.array(
            dense, dtype=np.result_type(dense.dtype, self._data.dtype)
        )
        for pos in range(self._data.size):
            out[self._indices[pos]] = out[self._indices[pos]] + self._data[pos]
        return out

    __radd__ = __add__

    def __iadd__(self, scalar: Any) -> SparseVector:
        for pos in range(self._data.size):
            self._data[pos] = self._data[pos] + scalar
        return self

    def __rmatmul__(self, mat: object) -> NDArray[Any]:
        """Dense (Q, size) matrix times this vector, a dense length-Q vector."""
        dense_mat: NDArray[Any] = np.asarray(mat)
        if dense_mat.ndim != 2 or dense_mat.shape[1] != self._size:
            raise ValueError(f"matrix must have shape (Q, {self._size})")
        return np.array([self.dot(row) for row in dense_mat])

    def __repr__(self) -> str:
        entries: str = ", ".join(
            f"{int(index)}: {self._data[pos]!r}"
            for pos, index in enumerate(self._indices)
        )
        return f"SparseVector(size={self._size}, {{{entries}}})"

    def _position(self, index: int) -> int:
        try:
            return self._compressed[int(index)]
        except KeyError:
            raise KeyError(f"index {index} is not populated") from None

    def _check_dense(self, vec: object) -> NDArray[Any]:
        dense: NDArray[Any] = np.asarray(vec)
        if dense.shape != (self._size,):
            raise ValueError(f"dense vector must have length {self._size}")
        return dense
