# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Argument validation and resolution of the keyword interface into policies.

The four keyword parameters form two mutually exclusive pairs with a fixed
precedence:

    tone_map_threshold  >  tone_map_factor
    scale_factor        >  is_scale

A value that is not strictly positive (including NaN) leaves its policy
disabled.  When both members of a pair are active the lower-priority one is
ignored and a :class:`PolicyConflictWarning` is issued.
"""

from __future__ import annotations

import numbers
import warnings
from typing import Any, Tuple

import numpy as np

from lumen_errors import InvalidArgumentError, PolicyConflictWarning
from lumen_scaling import AutoNormalize, ExplicitScale, NoScale, ScalePolicy
from lumen_tonemap import FactorToneMap, NoToneMap, ThresholdToneMap, ToneMapPolicy

__all__ = [
    "validate_image",
    "validate_number",
    "validate_flag",
    "resolve_tone_map",
    "resolve_scale",
    "resolve_policies",
]

# Integer and floating dtypes only; bool, complex and object are rejected.
_NUMERIC_KINDS = frozenset("iuf")


def validate_image(image: Any) -> np.ndarray:
    """Returns ``image`` as an ndarray after checking dtype and (H, W, 3) shape."""
    if isinstance(image, np.ndarray):
        arr = image
    else:
        try:
            arr = np.asarray(image)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"image is not a numeric array: {exc}") from exc

    if arr.dtype.kind not in _NUMERIC_KINDS:
        raise InvalidArgumentError(
            f"image must hold real numbers, got dtype {arr.dtype}"
        )
    if arr.ndim != 3 or arr.shape[-1] != 3:
        raise InvalidArgumentError(
            f"image must have shape (height, width, 3), got {arr.shape}"
        )
    return arr


def validate_number(value: Any, name: str) -> float:
    # bool is a numbers.Integral subclass; exclude it explicitly.
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(
            f"{name} must be a real number, got {type(value).__name__}"
        )
    return float(value)


def validate_flag(value: Any, name: str) -> bool:
    if not isinstance(value, (bool, np.bool_)):
        raise InvalidArgumentError(
            f"{name} must be a bool, got {type(value).__name__}"
        )
    return bool(value)


def _select_tone_map(threshold: float, factor: float, stacklevel: int) -> ToneMapPolicy:
    if threshold > 0:
        if factor > 0:
            warnings.warn(
                f"tone_map_threshold={threshold} takes precedence; "
                f"tone_map_factor={factor} is ignored.",
                PolicyConflictWarning,
                stacklevel=stacklevel,
            )
        return ThresholdToneMap(threshold)
    if factor > 0:
        return FactorToneMap(factor)
    return NoToneMap()


def _select_scale(factor: float, normalize: bool, stacklevel: int) -> ScalePolicy:
    if factor > 0:
        if normalize:
            warnings.warn(
                f"scale_factor={factor} takes precedence; is_scale=True is ignored.",
                PolicyConflictWarning,
                stacklevel=stacklevel,
            )
        return ExplicitScale(factor)
    if normalize:
        return AutoNormalize(enabled=True)
    return NoScale()


def resolve_tone_map(
    tone_map_threshold: float,
    tone_map_factor: float,
    *,
    stacklevel: int = 2,
) -> ToneMapPolicy:
    """
    Maps the tone-map keyword pair onto a :data:`ToneMapPolicy`.

    ``stacklevel`` follows :func:`warnings.warn`: 2 attributes a conflict
    warning to the caller of this function.
    """
    threshold = validate_number(tone_map_threshold, "tone_map_threshold")
    factor = validate_number(tone_map_factor, "tone_map_factor")
    return _select_tone_map(threshold, factor, stacklevel + 1)


def resolve_scale(
    scale_factor: float,
    is_scale: bool,
    *,
    stacklevel: int = 2,
) -> ScalePolicy:
    """Maps the scaling keyword pair onto a :data:`ScalePolicy`."""
    factor = validate_number(scale_factor, "scale_factor")
    normalize = validate_flag(is_scale, "is_scale")
    return _select_scale(factor, normalize, stacklevel + 1)


def resolve_policies(
    tone_map_threshold: float = 0,
    tone_map_factor: float = 0,
    scale_factor: float = 0,
    is_scale: bool = False,
    *,
    stacklevel: int = 2,
) -> Tuple[ToneMapPolicy, ScalePolicy]:
    """
    Validates all four keyword parameters, then resolves both policies.

    Every parameter is validated before either policy is resolved.
    """
    threshold = validate_number(tone_map_threshold, "tone_map_threshold")
    factor = validate_number(tone_map_factor, "tone_map_factor")
    scale = validate_number(scale_factor, "scale_factor")
    normalize = validate_flag(is_scale, "is_scale")
    return (
        _select_tone_map(threshold, factor, stacklevel + 1),
        _select_scale(scale, normalize, stacklevel + 1),
    )
