# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Highlight Tone Mapping
======================
A deliberately simple operator: any pixel whose luminance Y exceeds a
ceiling is pulled down to that ceiling.  X and Z are scaled by the same
gain, so the xy chromaticity of a clamped pixel is unchanged.  This is
equivalent to truncating Y in xyY and converting back, without the
division by X+Y+Z that makes black pixels undefined in xyY.

The ceiling is either absolute (:class:`ThresholdToneMap`) or relative to
the image's mean luminance (:class:`FactorToneMap`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numba import njit

from lumen_calformat import ArrayFloat
from lumen_errors import InvalidArgumentError, require_positive

__all__ = [
    "basic_tone_map_cal_format",
    "mean_luminance",
    "NoToneMap",
    "ThresholdToneMap",
    "FactorToneMap",
    "ToneMapPolicy",
]


# fastmath=False: NaN pixels fail the ceiling test and pass through untouched.
@njit(cache=True, fastmath=False, error_model="numpy")
def _clamp_luminance_kernel(xyz_cal: ArrayFloat, max_lum: float) -> ArrayFloat:
    out = xyz_cal.copy()
    for j in range(xyz_cal.shape[1]):
        lum = xyz_cal[1, j]
        # A negative ceiling (negative mean Y) leaves non-positive Y alone.
        if lum > max_lum and lum > 0.0:
            gain = max_lum / lum
            out[0, j] = xyz_cal[0, j] * gain
            # Assigned, not multiplied: the ceiling must hold exactly.
            out[1, j] = max_lum
            out[2, j] = xyz_cal[2, j] * gain
    return out


def basic_tone_map_cal_format(xyz_cal: ArrayFloat, max_lum: float) -> ArrayFloat:
    """
    Truncates luminance above ``max_lum``, preserving chromaticity.

    Args:
        xyz_cal: XYZ data in calibration format, shape (3, N).
        max_lum: Luminance ceiling.

    Returns:
        A new (3, N) array; pixels with Y <= max_lum are copied unchanged.
    """
    xyz_cal = np.ascontiguousarray(xyz_cal, dtype=np.float64)
    if xyz_cal.ndim != 2 or xyz_cal.shape[0] != 3:
        raise InvalidArgumentError(
            f"xyz_cal must be a (3, N) calibration matrix, got {xyz_cal.shape}"
        )
    return _clamp_luminance_kernel(xyz_cal, float(max_lum))


def mean_luminance(xyz_cal: ArrayFloat) -> float:
    """Mean Y over all pixels of a calibration-format XYZ matrix (0 if empty)."""
    if xyz_cal.shape[1] == 0:
        return 0.0
    return float(np.mean(xyz_cal[1]))


# ---------------------------------------------------------------------------
# Tone-map policies
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class NoToneMap:
    """Leave luminance untouched."""

    def apply(self, xyz_cal: ArrayFloat) -> ArrayFloat:
        return xyz_cal


@dataclass(slots=True, frozen=True)
class ThresholdToneMap:
    """Clamp luminance at an absolute ceiling."""
    threshold: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "threshold",
                           require_positive(self.threshold, "threshold"))

    def ceiling(self, xyz_cal: ArrayFloat) -> float:
        return self.threshold

    def apply(self, xyz_cal: ArrayFloat) -> ArrayFloat:
        return basic_tone_map_cal_format(xyz_cal, self.ceiling(xyz_cal))


@dataclass(slots=True, frozen=True)
class FactorToneMap:
    """Clamp luminance at ``factor`` times the image's mean luminance."""
    factor: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor",
                           require_positive(self.factor, "factor"))

    def ceiling(self, xyz_cal: ArrayFloat) -> float:
        return self.factor * mean_luminance(xyz_cal)

    def apply(self, xyz_cal: ArrayFloat) -> ArrayFloat:
        return basic_tone_map_cal_format(xyz_cal, self.ceiling(xyz_cal))


ToneMapPolicy = Union[NoToneMap, ThresholdToneMap, FactorToneMap]
