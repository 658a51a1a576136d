################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for the AutodiffParams container."""

from __future__ import annotations

import pytest

from oasis_autodiff.config.autodiff_params import AutodiffParams


def test_defaults_validate() -> None:
    """Defaults produce a valid configuration."""
    params: AutodiffParams = AutodiffParams.defaults()
    params.validate()
    assert params.dtype == "float64"
    assert params.rank_tolerance_factor == 1.0
    assert params.log_jacobian_shapes is False


def test_from_dict_overrides_defaults() -> None:
    """from_dict fills unspecified keys from defaults."""
    params: AutodiffParams = AutodiffParams.from_dict({"dtype": "float32"})
    assert params.dtype == "float32"
    assert params.rank_tolerance_factor == 1.0


def test_from_dict_rejects_unknown_key() -> None:
    """from_dict rejects unknown parameters deterministically."""
    with pytest.raises(ValueError, match="unknown parameter: beta"):
        AutodiffParams.from_dict({"beta": 0.1, "dtype": "float64"})


@pytest.mark.parametrize(
    "params",
    [
        {"dtype": 64},
        {"rank_tolerance_factor": "large"},
        {"rank_tolerance_factor": True},
        {"log_jacobian_shapes": 1},
    ],
)
def test_from_dict_rejects_wrong_types(params: dict[str, object]) -> None:
    """from_dict rejects values of the wrong type."""
    with pytest.raises(ValueError):
        AutodiffParams.from_dict(params)


def test_validate_rejects_bad_values() -> None:
    """validate rejects unsupported dtypes and negative tolerances."""
    with pytest.raises(ValueError):
        AutodiffParams("float16", 1.0, False).validate()
    with pytest.raises(ValueError):
        AutodiffParams("float64", -1.0, False).validate()


def test_as_dict_round_trip() -> None:
    """as_dict round-trips through from_dict."""
    params: AutodiffParams = AutodiffParams.from_dict(
        {"rank_tolerance_factor": 10.0, "log_jacobian_shapes": True}
    )
    assert AutodiffParams.from_dict(params.as_dict()) == params
