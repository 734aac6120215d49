"""
pixel_filter package.

Purpose:
  Quantize RGBA images to a small fixed palette with ordered dithering and
  binary alpha. See pixel_filter.cli for the CLI.

Public API:
  quantize        : whole-image entry point.
  FilterConfig    : threshold map, dither coefficients and palette.
  dither          : candidate generation, threshold selection, compositing.
  colour_convert  : sRGB <-> Oklab transforms.
  palette_data    : built-in palette, hex parsing and Oklab palette builders.
  core_types      : shared type aliases, PaletteItem and error classes.
  image_io        : Pillow load/save helpers.
  utils           : shared helpers (nearest search, logging).

Quick start:
  from pixel_filter import quantize, FilterConfig
  out = quantize(rgba, FilterConfig(color_dither=0.1))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import palette_data
from . import utils
from . import dither

from .config import FilterConfig, bayer_matrix, parse_threshold_map  # noqa: E402
from .constants import PALETTE_HEX  # noqa: E402
from .core_types import ConfigPreconditionViolation, PaletteParseError  # noqa: E402
from .dither.run import quantize  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "palette_data",
    "utils",
    "dither",
    "FilterConfig",
    "bayer_matrix",
    "parse_threshold_map",
    "PALETTE_HEX",
    "PaletteParseError",
    "ConfigPreconditionViolation",
    "quantize",
]
