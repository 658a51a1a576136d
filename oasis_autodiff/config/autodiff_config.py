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
from typing import Optional

import numpy as np

from oasis_autodiff.config.autodiff_params import AutodiffParams


@dataclass(frozen=True, slots=True)
class AutodiffConfig:
    """Validated configuration shared by the autodiff helpers.

    Aggregates AutodiffParams and resolves the numpy dtype and its machine
    epsilon once, so consumers never parse dtype names themselves.
    """

    params: AutodiffParams
    dtype: np.dtype
    eps: float

    @classmethod
    def from_params(
        cls, params: Optional[AutodiffParams | Mapping[str, object]] = None
    ) -> AutodiffConfig:
        """Construct a configuration from parameters or a mapping."""
        if params is None:
            params_obj: AutodiffParams = AutodiffParams.defaults()
        elif isinstance(params, Mapping):
            params_obj = AutodiffParams.from_dict(params)
        elif isinstance(params, AutodiffParams):
            params_obj = params
        else:
            raise ValueError("params must be AutodiffParams or mapping")
        params_obj.validate()
        dtype: np.dtype = np.dtype(params_obj.dtype)
        config: AutodiffConfig = cls(
            params=params_obj, dtype=dtype, eps=float(np.finfo(dtype).eps)
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration and raise ValueError on failure."""
        self.params.validate()
        if self.dtype != np.dtype(self.params.dtype):
            raise ValueError("dtype must match params.dtype")
        if self.eps != float(np.finfo(self.dtype).eps):
            raise ValueError("eps must match the dtype machine epsilon")

    @property
    def rank_tolerance_factor(self) -> float:
        return self.params.rank_tolerance_factor

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict representation."""
        return {
            "eps": self.eps,
            "params": self.params.as_dict(),
        }
