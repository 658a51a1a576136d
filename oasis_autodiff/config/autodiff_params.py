################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


_SUPPORTED_DTYPES: tuple[str, ...] = ("float64", "float32")


@dataclass(frozen=True, slots=True)
class AutodiffParams:
    """Configuration parameter definitions for the autodiff helpers.

    Responsibility:
        Document the parameters used by the Jacobian evaluator and the
        pseudo-inverse, with defaults and valid ranges.

    Data contract:
        - dtype: scalar type of dual values and factorizations, one of
          "float64" or "float32".
        - rank_tolerance_factor: scale applied to the full-rank Cholesky
          pivot tolerance ``n * eps * max(diag(A))``. Must be >= 0. Larger
          values drop more near-singular directions.
        - log_jacobian_shapes: log evaluated Jacobian shapes at INFO instead
          of DEBUG.

    Determinism and edge cases:
        - from_dict() rejects unknown keys and wrong types.
        - validate() rejects unsupported dtypes and negative tolerances.
    """

    dtype: str
    rank_tolerance_factor: float
    log_jacobian_shapes: bool

    @staticmethod
    def defaults() -> AutodiffParams:
        """Return a stable default parameter set."""
        params: AutodiffParams = AutodiffParams(
            dtype="float64",
            rank_tolerance_factor=1.0,
            log_jacobian_shapes=False,
        )
        params.validate()
        return params

    @classmethod
    def from_dict(cls, params: Mapping[str, object]) -> AutodiffParams:
        """Construct parameters from a mapping, rejecting unknown keys."""
        if not isinstance(params, Mapping):
            raise ValueError("params must be a mapping")
        unknown_keys: list[str] = sorted(set(params.keys()) - set(cls._field_order()))
        if unknown_keys:
            raise ValueError(f"unknown parameter: {unknown_keys[0]}")
        defaults: AutodiffParams = cls.defaults()
        return cls(
            dtype=cls._as_str("dtype", params.get("dtype", defaults.dtype)),
            rank_tolerance_factor=cls._as_float(
                "rank_tolerance_factor",
                params.get("rank_tolerance_factor", defaults.rank_tolerance_factor),
            ),
            log_jacobian_shapes=cls._as_bool(
                "log_jacobian_shapes",
                params.get("log_jacobian_shapes", defaults.log_jacobian_shapes),
            ),
        )

    def validate(self) -> None:
        """Validate parameters and raise ValueError on failure."""
        if self.dtype not in _SUPPORTED_DTYPES:
            raise ValueError(
                f"dtype must be one of {', '.join(_SUPPORTED_DTYPES)}"
            )
        if self.rank_tolerance_factor < 0.0:
            raise ValueError("rank_tolerance_factor must be >= 0")

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict representation."""
        return {
            "dtype": self.dtype,
            "rank_tolerance_factor": self.rank_tolerance_factor,
            "log_jacobian_shapes": self.log_jacobian_shapes,
        }

    @staticmethod
    def _as_float(name: str, value: object) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a float")
        return float(value)

    @staticmethod
    def _as_bool(name: str, value: object) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be a bool")
        return value

    @staticmethod
    def _as_str(name: str, value: object) -> str:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string")
        return value

    @staticmethod
    def _field_order() -> list[str]:
        return [
            "dtype",
            "rank_tolerance_factor",
            "log_jacobian_shapes",
        ]
