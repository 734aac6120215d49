# pixel_filter/colour_convert.py
from __future__ import annotations

"""
Colour conversions between sRGB and Oklab.

Exports:
  srgb_to_linear(srgb)
  linear_to_srgb(linear)
  rgb_to_oklab(rgb)
  oklab_to_rgb(oklab)

All functions are vectorised over leading dimensions: a single colour is
shape (3,), a palette (P,3), an image (H,W,3). Maths runs in float64.
"""

import numpy as np

from .core_types import OklabArray, RgbArray

# Linear sRGB -> LMS
_M1 = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ],
    dtype=np.float64,
)

# LMS' -> Oklab
_M2 = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ],
    dtype=np.float64,
)

# Exact inverses so the round trip closes to float64 precision.
_M1_INV = np.linalg.inv(_M1)
_M2_INV = np.linalg.inv(_M2)


# sRGB transfer function


def srgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array[...] in 0..1 (float)
    Returns:
      float64 array, same shape
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
    )


def linear_to_srgb(linear: np.ndarray) -> np.ndarray:
    """Linear RGB (0..1) to sRGB (0..1). Values are clipped to 0..1 first."""
    lin = np.clip(np.asarray(linear, dtype=np.float64), 0.0, 1.0)
    return np.where(
        lin <= 0.0031308, 12.92 * lin, 1.055 * np.power(lin, 1.0 / 2.4) - 0.055
    )


# sRGB <-> Oklab


def rgb_to_oklab(rgb: np.ndarray) -> OklabArray:
    """
    sRGB to Oklab.
    Accepts uint8 [0..255] or float [0..1]. Preserves shape (...,3). Returns float64.
    """
    rgb_arr = np.asarray(rgb)
    if rgb_arr.dtype == np.uint8:
        rgb_f = rgb_arr.astype(np.float64) / 255.0
    else:
        rgb_f = rgb_arr.astype(np.float64, copy=False)

    lms = srgb_to_linear(rgb_f) @ _M1.T
    return np.cbrt(lms) @ _M2.T


def oklab_to_rgb(oklab: np.ndarray) -> RgbArray:
    """
    Oklab to sRGB float [0..1]. Preserves shape (...,3). Returns float64.
    Out-of-gamut colours are clipped in linear light.
    """
    lms_cbrt = np.asarray(oklab, dtype=np.float64) @ _M2_INV.T
    linear = (lms_cbrt**3) @ _M1_INV.T
    return linear_to_srgb(linear)


__all__ = [
    "srgb_to_linear",
    "linear_to_srgb",
    "rgb_to_oklab",
    "oklab_to_rgb",
]
