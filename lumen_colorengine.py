# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

sRGB Colour Engine
==================
Primary transform and transfer function for the sRGB display space,
operating on calibration-format ``(3, N)`` matrices.

The matrices are stored in column form (``M @ cal``) since calibration
format keeps one pixel per column.  The OETF runs as a JIT-compiled Numba
kernel with a strict IEEE 754 fallback selectable at runtime.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - CIE 15:2004 "Colorimetry"
"""

from typing import Final

import numpy as np
from numba import njit

from lumen_calformat import ArrayFloat
from lumen_errors import InvalidArgumentError

__all__ = [
    # --- Constants ---
    "REF_WHITE_D65",
    "SRGB_LINEAR_THRESHOLD",
    "M_XYZ_TO_SRGB",
    "M_SRGB_TO_XYZ",

    # --- Configuration ---
    "set_strict_ieee",
    "is_strict_ieee",

    # --- Transforms ---
    "xyz_to_srgb_primary",
    "srgb_primary_to_xyz",
    "srgb_gamma_correct",
]

# --- Constants ---

# D65: Average daylight (approx 6500K), Y=1.0
REF_WHITE_D65: Final[ArrayFloat] = np.array([0.95047, 1.00000, 1.08883], dtype=np.float64)

# IEC 61966-2-1 breakpoint between the linear toe and the power segment.
SRGB_LINEAR_THRESHOLD: Final[float] = 0.0031308

# sRGB Matrices
# Defined by IEC 61966-2-1.  Column form: primaries = M_XYZ_TO_SRGB @ xyz_cal.
M_XYZ_TO_SRGB: Final[ArrayFloat] = np.array([
    [ 3.2404542, -1.5371385, -0.4985314],
    [-0.9692660,  1.8760108,  0.0415560],
    [ 0.0556434, -0.2040259,  1.0572252]
], dtype=np.float64)

M_SRGB_TO_XYZ: Final[ArrayFloat] = np.array([
    [ 0.4124564,  0.3575761,  0.1804375],
    [ 0.2126729,  0.7151522,  0.0721750],
    [ 0.0193339,  0.1191920,  0.9503041]
], dtype=np.float64)


# --- Runtime Configuration ---
# When True, the OETF uses the fastmath=False kernel that preserves strict
# IEEE 754 semantics (inf / NaN propagation, no FP reassociation).
#
# Toggle at runtime via:
#     import lumen_colorengine as ce
#     ce.set_strict_ieee(True)   # enable strict mode
#     ce.set_strict_ieee(False)  # back to fast mode (default)
_STRICT_IEEE: bool = False

def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 Numba kernels.

    Args:
        enabled: If True, use strict IEEE mode.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)

def is_strict_ieee() -> bool:
    """Returns True when the strict IEEE 754 kernels are active."""
    return _STRICT_IEEE


# =============================================================================
# 1. LOW-LEVEL MATH KERNELS (Numba Optimized)
# =============================================================================

@njit(cache=True, fastmath=True)
def _fast_gamma_srgb(linear: ArrayFloat) -> ArrayFloat:
    """
    Applies sRGB OETF (Gamma Correction).

    Standard: IEC 61966-2-1

    Performance Note:
        Uses an explicit loop instead of `np.where` to avoid allocating a
        boolean mask array.
    """
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        # IEC 61966-2-1 defines the slope as exactly 12.92
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0/2.4)) - 0.055
    return out

@njit(cache=True, fastmath=False)
def _fast_gamma_srgb_strict(linear: ArrayFloat) -> ArrayFloat:
    """sRGB OETF — strict IEEE 754 variant."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0/2.4)) - 0.055
    return out

def _gamma_srgb(linear: ArrayFloat) -> ArrayFloat:
    """Dispatch sRGB OETF to fast or strict kernel."""
    # out.ravel() inside the kernels must be a view.
    linear = np.ascontiguousarray(linear, dtype=np.float64)
    if _STRICT_IEEE:
        return _fast_gamma_srgb_strict(linear)
    return _fast_gamma_srgb(linear)


# =============================================================================
# 2. CALIBRATION-FORMAT TRANSFORMS
# =============================================================================

def _check_tristimulus(cal: np.ndarray, label: str) -> ArrayFloat:
    cal = np.asarray(cal, dtype=np.float64)
    if cal.ndim != 2 or cal.shape[0] != 3:
        raise InvalidArgumentError(
            f"{label} must be a (3, N) calibration matrix, got {cal.shape}"
        )
    return cal

def xyz_to_srgb_primary(xyz_cal: ArrayFloat) -> ArrayFloat:
    """
    Converts calibration-format XYZ to linear sRGB primaries.

    No clipping is applied; out-of-gamut colours produce negative or >1
    primaries which are left for the caller to handle.

    Args:
        xyz_cal: XYZ data, shape (3, N).

    Returns:
        Linear sRGB primaries, shape (3, N).
    """
    xyz_cal = _check_tristimulus(xyz_cal, "xyz_cal")
    return M_XYZ_TO_SRGB @ xyz_cal

def srgb_primary_to_xyz(primaries_cal: ArrayFloat) -> ArrayFloat:
    """Converts calibration-format linear sRGB primaries back to XYZ."""
    primaries_cal = _check_tristimulus(primaries_cal, "primaries_cal")
    return M_SRGB_TO_XYZ @ primaries_cal

def srgb_gamma_correct(primaries_cal: ArrayFloat, scale: bool = False) -> ArrayFloat:
    """
    Gamma-encodes linear sRGB primaries for display.

    Args:
        primaries_cal: Linear primaries, shape (3, N).
        scale: If True, divide by the maximum primary value before encoding
               so the brightest channel maps to 1.  Skipped when the
               maximum is not positive (e.g. an all-black image).

    Returns:
        Gamma-corrected primaries in [0, 1], shape (3, N).
    """
    linear = np.asarray(primaries_cal, dtype=np.float64)
    if scale and linear.size:
        max_value = linear.max()
        if max_value > 0:
            linear = linear / max_value
    linear = np.clip(linear, 0.0, 1.0)
    return _gamma_srgb(linear)
