"""
Ordered-dither API.

Provides:
  quantize(image, config=None, *, workers=1, debug=False, progress=False) -> U8Image
    Map an RGBA image to a fixed palette with per-pixel error feedback and
    threshold-map selection.

    Args:
      image   : uint8 [H,W,4]
      config  : FilterConfig (threshold map, dither coefficients, palette)
      workers : int, threads over row spans
      debug   : bool, print palette/map/timing details
      progress: bool, print a one-line span counter

    Returns:
      new uint8 [H,W,4] image. The input is never modified.

Notes:
  - Candidates per pixel = map_size ** 2, generated by local error feedback.
  - Colours are ranked by Oklab lightness, alphas numerically.
  - Alpha output is binary (0 or 255).
"""

from .candidates import generate_candidates, round_half_away
from .run import composite_pixels, quantize
from .select import select_candidates, sort_candidates, threshold_indices

__all__ = [
    "generate_candidates",
    "round_half_away",
    "sort_candidates",
    "threshold_indices",
    "select_candidates",
    "composite_pixels",
    "quantize",
]
