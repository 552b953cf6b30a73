# -*- coding: utf-8 -*-
"""
Lumen: Rendering CIE XYZ radiance into display sRGB
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Calibration Format
==================
Colour transforms in Lumen operate on a ``(k, N)`` matrix where each column
is one pixel and each row one channel.  Working in this layout turns every
per-pixel linear transform into a single matrix multiply.

Pixels are laid out in row-major (C) order: column ``j`` holds the pixel at
``(j // width, j % width)``.
"""

from typing import Tuple, TypeAlias

import numpy as np
import numpy.typing as npt

from lumen_errors import InvalidArgumentError

__all__ = [
    "ArrayFloat",
    "image_to_cal_format",
    "cal_format_to_image",
]

ArrayFloat: TypeAlias = npt.NDArray[np.floating]


def image_to_cal_format(image: np.ndarray) -> Tuple[ArrayFloat, int, int]:
    """
    Reshapes an ``(m, n, k)`` image into a ``(k, m*n)`` calibration matrix.

    Args:
        image: Image plane data with any number of channels ``k``.

    Returns:
        Tuple ``(cal, m, n)``: the contiguous float64 calibration matrix and
        the image height and width needed to undo the reshape.
    """
    arr = np.asarray(image)
    if arr.ndim != 3:
        raise InvalidArgumentError(
            f"Expected an image of shape (height, width, channels), got {arr.shape}"
        )
    m, n, k = arr.shape
    # .T of a C-ordered (m*n, k) array is F-ordered; force C so the Numba
    # kernels can ravel() without copying.
    cal = np.ascontiguousarray(arr.reshape(m * n, k).T, dtype=np.float64)
    return cal, m, n


def cal_format_to_image(cal: np.ndarray, m: int, n: int) -> ArrayFloat:
    """
    Inverse of :func:`image_to_cal_format`.

    Args:
        cal: Calibration matrix of shape ``(k, m*n)``.
        m: Image height.
        n: Image width.

    Returns:
        Image plane data of shape ``(m, n, k)``.
    """
    cal = np.asarray(cal)
    if cal.ndim != 2 or cal.shape[1] != m * n:
        raise InvalidArgumentError(
            f"Calibration matrix of shape {cal.shape} cannot hold a {m}x{n} image"
        )
    return np.ascontiguousarray(cal.T.reshape(m, n, cal.shape[0]))
