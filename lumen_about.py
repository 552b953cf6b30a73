# -*- coding: utf-8 -*-
# Lumen: Rendering CIE XYZ radiance into display sRGB.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for the opticsWolf Lumen.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "Lumen"
__description__: Final[str] = (
    "Conversion of CIE XYZ images to display sRGB with simple "
    "highlight tone mapping and exposure scaling."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "author": __author__,
        "license": __license__,
        "description": __description__,
        "copyright": __copyright__,
    }
