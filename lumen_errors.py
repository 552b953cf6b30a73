# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Exception and warning types raised by the conversion pipeline.
"""

__all__ = ["InvalidArgumentError", "PolicyConflictWarning", "require_positive"]


class InvalidArgumentError(ValueError):
    """Raised when an image or conversion parameter fails validation."""

    pass


class PolicyConflictWarning(UserWarning):
    """Emitted when a lower-priority parameter is ignored in favour of another."""

    pass


def require_positive(value: float, label: str) -> float:
    """Coerce ``value`` to float, raising unless it is strictly positive."""
    value = float(value)
    if not value > 0:
        raise InvalidArgumentError(f"{label} must be a positive number, got {value}")
    return value
