from __future__ import annotations

"""
Core type aliases, small value objects, errors, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str  # "rrggbb", no leading '#'

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
OklabArray = NDArray[np.float64]  # (..., 3) Oklab (L, a, b)
RgbArray = NDArray[np.float64]  # (..., 3) sRGB in 0..1
ThresholdMap = Tuple[Tuple[int, ...], ...]


# Errors


class PaletteParseError(ValueError):
    """A palette entry is not exactly six hexadecimal digits."""


class ConfigPreconditionViolation(ValueError):
    """Threshold map, palette or dither settings are unusable."""


# Value objects


@dataclass(frozen=True)
class PaletteItem:
    """Palette entry with its 8-bit RGB and precomputed Oklab row."""

    hex: HexStr
    rgb: RGBTuple
    oklab: OklabArray  # shape (3,)


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> str:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def assert_u8_image_rgba(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if (
        not isinstance(image, np.ndarray)
        or image.dtype != np.uint8
        or image.ndim != 3
        or image.shape[-1] != 4
    ):
        raise TypeError("expected uint8 (H,W,4) RGBA image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "OklabArray",
    "RgbArray",
    "ThresholdMap",
    # errors
    "PaletteParseError",
    "ConfigPreconditionViolation",
    # value objects
    "PaletteItem",
    # helpers
    "rgb_to_hex",
    "assert_u8_image_rgba",
]
