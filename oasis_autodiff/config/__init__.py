################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from oasis_autodiff.config.autodiff_config import AutodiffConfig
from oasis_autodiff.config.autodiff_params import AutodiffParams


__all__ = [
    "AutodiffConfig",
    "AutodiffParams",
]
