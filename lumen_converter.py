# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

XYZ → sRGB Image Conversion
===========================
Standard colour conversion of an XYZ image plane into display sRGB.

Pipeline:
    1. Image plane (H, W, 3) → calibration format (3, H*W).
    2. Optional highlight tone mapping on luminance.
    3. XYZ → linear sRGB primaries (one 3x3 matrix multiply).
    4. Exposure scaling (explicit constant or max-based normalisation).
    5. sRGB gamma encoding, clipped to [0, 1].
    6. Raw primaries and gamma-encoded values back to image planes.

The conversion is a pure function of its inputs; the caller's array is
never modified.
"""

from typing import Any, NamedTuple

import numpy as np

from lumen_calformat import ArrayFloat, cal_format_to_image, image_to_cal_format
from lumen_colorengine import xyz_to_srgb_primary
from lumen_policies import resolve_policies, validate_image
from lumen_scaling import ScalePolicy
from lumen_tonemap import ToneMapPolicy

__all__ = [
    "XYZToSRGBResult",
    "xyz_to_srgb",
    "convert_with_policies",
]


class XYZToSRGBResult(NamedTuple):
    """Output of :func:`xyz_to_srgb`; unpacks as ``gamma, raw, scale``."""
    gamma_image: ArrayFloat
    raw_image: ArrayFloat
    scale_factor: float


def convert_with_policies(
    image: Any,
    tone_map: ToneMapPolicy,
    scale: ScalePolicy,
) -> XYZToSRGBResult:
    """
    Converts an XYZ image to sRGB using pre-built policies.

    Args:
        image: XYZ image of shape (H, W, 3), integer or floating dtype.
        tone_map: One of ``NoToneMap``, ``ThresholdToneMap``, ``FactorToneMap``.
        scale: One of ``NoScale``, ``ExplicitScale``, ``AutoNormalize``.

    Returns:
        XYZToSRGBResult with the gamma-corrected image, the linear primaries
        (after explicit scaling, if any) and the effective or informational
        scale factor.
    """
    return _convert(validate_image(image), tone_map, scale)


def _convert(image: np.ndarray, tone_map: ToneMapPolicy, scale: ScalePolicy) -> XYZToSRGBResult:
    # image_to_cal_format always returns a fresh float64 array.
    xyz_cal, m, n = image_to_cal_format(image)
    xyz_cal = tone_map.apply(xyz_cal)

    primaries_cal = xyz_to_srgb_primary(xyz_cal)
    primaries_cal, gamma_cal, scale_factor = scale.apply(primaries_cal)

    return XYZToSRGBResult(
        gamma_image=cal_format_to_image(gamma_cal, m, n),
        raw_image=cal_format_to_image(primaries_cal, m, n),
        scale_factor=float(scale_factor),
    )


def xyz_to_srgb(
    image: Any,
    *,
    tone_map_factor: float = 0,
    tone_map_threshold: float = 0,
    is_scale: bool = False,
    scale_factor: float = 0,
) -> XYZToSRGBResult:
    """
    Converts an image in XYZ space to sRGB.

    Args:
        image: XYZ image of shape (H, W, 3).
        tone_map_factor: Truncate luminance above this factor times the mean
            luminance.  0 (default) disables it.
        tone_map_threshold: Truncate luminance above this absolute value.
            Takes precedence over ``tone_map_factor``.  0 (default) disables it.
        is_scale: If True, normalise by the maximum primary before gamma
            encoding.  Ignored when ``scale_factor`` is positive.
        scale_factor: Multiply linear primaries by this constant before gamma
            encoding.  0 (default) disables it.

    Returns:
        XYZToSRGBResult ``(gamma_image, raw_image, scale_factor)``.  When no
        explicit scale is given, ``scale_factor`` is ``1 / max(raw_image)``
        (1.0 for an image with no positive primary); it is only applied to
        ``gamma_image`` if ``is_scale`` is True.

    Raises:
        InvalidArgumentError: If the image is not a real numeric (H, W, 3)
            array, a numeric parameter is not a real number, or ``is_scale``
            is not a bool.
    """
    image = validate_image(image)
    tone_map, scale = resolve_policies(
        tone_map_threshold=tone_map_threshold,
        tone_map_factor=tone_map_factor,
        scale_factor=scale_factor,
        is_scale=is_scale,
        stacklevel=3,
    )
    return _convert(image, tone_map, scale)
