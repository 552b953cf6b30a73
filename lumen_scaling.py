# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Exposure scaling of linear sRGB primaries ahead of gamma encoding.

Every policy returns ``(primaries, gamma_cal, scale_factor)``:

* :class:`ExplicitScale` multiplies the primaries by a fixed constant and
  reports that constant.
* :class:`AutoNormalize` leaves the primaries alone and reports
  ``1 / max(primaries)``.  When ``enabled`` the gamma encoder divides by the
  maximum internally; otherwise the factor is informational only.
* :class:`NoScale` is ``AutoNormalize(enabled=False)``.

A non-positive maximum (e.g. an all-black image) reports a scale factor of
1.0 and disables normalisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, TypeAlias, Union

import numpy as np

from lumen_calformat import ArrayFloat
from lumen_colorengine import srgb_gamma_correct
from lumen_errors import require_positive

__all__ = [
    "ScaleResult",
    "NoScale",
    "ExplicitScale",
    "AutoNormalize",
    "ScalePolicy",
    "max_scale_factor",
]

ScaleResult: TypeAlias = Tuple[ArrayFloat, ArrayFloat, float]


def max_scale_factor(primaries_cal: ArrayFloat) -> float:
    """Returns ``1 / max(primaries_cal)``, or 1.0 if the maximum is not positive."""
    if primaries_cal.size == 0:
        return 1.0
    max_value = float(np.max(primaries_cal))
    if max_value > 0:
        return 1.0 / max_value
    return 1.0


@dataclass(slots=True, frozen=True)
class ExplicitScale:
    """Multiply primaries by a fixed positive constant."""
    factor: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor",
                           require_positive(self.factor, "scale factor"))

    def apply(self, primaries_cal: ArrayFloat) -> ScaleResult:
        scaled = primaries_cal * self.factor
        return scaled, srgb_gamma_correct(scaled, scale=False), self.factor


@dataclass(slots=True, frozen=True)
class AutoNormalize:
    """Report the max-based scale factor; normalise inside the encoder if enabled."""
    enabled: bool = True

    def apply(self, primaries_cal: ArrayFloat) -> ScaleResult:
        scale_factor = max_scale_factor(primaries_cal)
        gamma_cal = srgb_gamma_correct(primaries_cal, scale=self.enabled)
        return primaries_cal, gamma_cal, scale_factor


@dataclass(slots=True, frozen=True)
class NoScale:
    """Gamma-encode as-is; the returned scale factor is informational."""

    def apply(self, primaries_cal: ArrayFloat) -> ScaleResult:
        return AutoNormalize(enabled=False).apply(primaries_cal)


ScalePolicy = Union[NoScale, ExplicitScale, AutoNormalize]
