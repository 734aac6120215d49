from __future__ import annotations

"""
Palette parsing and builders.

Exports:
  PALETTE_HEX: tuple[str, ...]  # built-in palette, 'rrggbb'
  parse_hex(hex_str) -> sRGB float [3] in 0..1
  build_perceptual_palette(hex_list) -> Oklab float [P,3]
  build_palette(hex_list=PALETTE_HEX) -> (items: list[PaletteItem], pal_oklab: [P,3])
  load_palette_file(path) -> list[str]
"""

from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from .colour_convert import rgb_to_oklab
from .constants import PALETTE_HEX
from .core_types import OklabArray, PaletteItem, PaletteParseError, RgbArray

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _parse_hex_u8(hex_str: str) -> Tuple[int, int, int]:
    """'rrggbb' to an 8-bit RGB tuple; raises PaletteParseError."""
    if not isinstance(hex_str, str) or len(hex_str) != 6:
        raise PaletteParseError(f"invalid hex colour code {hex_str!r}: need 6 digits")
    if not all(ch in _HEX_DIGITS for ch in hex_str):
        raise PaletteParseError(f"invalid hex colour code {hex_str!r}: non-hex digit")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def parse_hex(hex_str: str) -> RgbArray:
    """
    Parse exactly six hex digits (no leading '#') into sRGB floats in 0..1.
    Raises PaletteParseError on wrong length or a non-hex character.
    """
    return np.array(_parse_hex_u8(hex_str), dtype=np.float64) / 255.0


def build_perceptual_palette(hex_list: Sequence[str]) -> OklabArray:
    """
    Parse every entry and convert it to Oklab, preserving order.
    The first bad entry aborts the whole build.
    """
    rgbs = [parse_hex(hx) for hx in hex_list]
    if not rgbs:
        return np.zeros((0, 3), dtype=np.float64)
    return rgb_to_oklab(np.stack(rgbs))


def build_palette(
    hex_list: Sequence[str] = PALETTE_HEX,
) -> Tuple[List[PaletteItem], OklabArray]:
    """
    Convert a list of hex strings into:
      items: list[PaletteItem] with hex, rgb, oklab
      pal_oklab: float64 array [P,3]
    """
    rgbs_u8 = [_parse_hex_u8(hx) for hx in hex_list]
    pal_oklab = build_perceptual_palette(hex_list)

    items: List[PaletteItem] = []
    for i, hx in enumerate(hex_list):
        items.append(
            PaletteItem(hex=hx.lower(), rgb=rgbs_u8[i], oklab=pal_oklab[i].copy())
        )
    return items, pal_oklab


def load_palette_file(path: Path) -> List[str]:
    """
    Read a '.hex' style palette: one colour per line, optional leading '#'.
    Blank lines and comment lines (';' or '# ') are skipped.
    Entries are validated here so a bad file fails before any image work.
    """
    entries: List[str] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if not text or text.startswith(";") or text.startswith("# "):
            continue
        if text.startswith("#"):
            text = text[1:]
        _parse_hex_u8(text)
        entries.append(text)
    return entries


__all__ = [
    "PALETTE_HEX",
    "parse_hex",
    "build_perceptual_palette",
    "build_palette",
    "load_palette_file",
]
