# pixel_filter/palette_lock.py
from __future__ import annotations

"""
Palette checks and reports on quantized output.

Functions:
  palette_set(palette) -> set of RGB tuples
  is_palette_only(rgba, pal_set) -> bool
  colour_usage_report(rgba) -> [(hex, count), ...]

Use cases:
  - palette_set + is_palette_only: confirm an image is already a fixed point
    of the filter (palette colours, alpha 0 or 255)
  - colour_usage_report: per-colour pixel counts for CLI output
"""

from typing import List, Set, Tuple

import numpy as np

from .core_types import PaletteItem, RGBTuple, U8Image, rgb_to_hex


def palette_set(palette: List[PaletteItem]) -> Set[RGBTuple]:
    """Return a set of all RGB tuples present in the palette."""
    return {p.rgb for p in palette}


def _unique_rgb(rgb_rows: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    if rgb_rows.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.uint8), np.zeros((0,), dtype=np.int64)
    uniques, counts = np.unique(rgb_rows, axis=0, return_counts=True)
    return uniques, counts


def is_palette_only(rgba: U8Image, pal_set: Set[RGBTuple]) -> bool:
    """True if every pixel is a palette colour and every alpha is 0 or 255."""
    alpha = rgba[..., 3]
    if np.any((alpha != 0) & (alpha != 255)):
        return False
    uniques, _ = _unique_rgb(rgba[..., :3].reshape(-1, 3))
    for r, g, b in uniques.tolist():
        if (int(r), int(g), int(b)) not in pal_set:
            return False
    return True


def colour_usage_report(rgba: U8Image) -> List[Tuple[str, int]]:
    """
    Colour usage over visible pixels (alpha > 0).

    Returns a list of (hex, count) sorted by count descending.
    """
    visible_mask = rgba[..., 3] > 0
    uniques, counts = _unique_rgb(rgba[..., :3][visible_mask].reshape(-1, 3))
    report: List[Tuple[str, int]] = []
    for rgb_row, count in sorted(zip(uniques.tolist(), counts.tolist()), key=lambda x: -x[1]):
        report.append((rgb_to_hex((rgb_row[0], rgb_row[1], rgb_row[2])), int(count)))
    return report


__all__ = [
    "palette_set",
    "is_palette_only",
    "colour_usage_report",
]
