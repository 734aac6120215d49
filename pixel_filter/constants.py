"""
Default filter settings.

- PALETTE_HEX: built-in 48-colour palette (six hex digits, no '#')
- THRESHOLD_MAP, COLOR_DITHER, ALPHA_DITHER: ordered-dither defaults
- OUTPUT_SUFFIX: stem suffix for files written by the CLI
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Built-in palette (hex)
# =========================
PALETTE_HEX: Tuple[str, ...] = (
    "1b112c", "413047", "543e54", "75596f", "91718b", "b391aa", "ccb3c6", "e3cfe3",
    "fff7ff", "fffbb5", "faf38e", "f7d076", "fa9c69", "eb7363", "e84545", "c22e53",
    "943054", "612147", "3d173c", "3f233c", "66334b", "8c4b63", "c16a7d", "e5959f",
    "ffccd0", "dd8d9f", "c8658d", "b63f82", "9e2083", "731f7a", "47195d", "2a143d",
    "183042", "1e5451", "2a6957", "3b804d", "5aa653", "86cf74", "caf095", "e0f0bd",
    "3f275e", "3f317a", "3c548f", "456aa1", "4a84b0", "56aec4", "92d7d9", "c3ebe3",
)  # fmt: skip

# ==================
# Ordered dithering
# ==================
THRESHOLD_MAP: Tuple[Tuple[int, ...], ...] = ((0, 2), (3, 1))
COLOR_DITHER: float = 0.04
ALPHA_DITHER: float = 0.12

# ==================
# CLI
# ==================
OUTPUT_SUFFIX: str = "_filtered"
IMAGE_EXTS = frozenset({".png", ".jpg", ".jpeg", ".webp"})

__all__ = [
    "PALETTE_HEX",
    "THRESHOLD_MAP",
    "COLOR_DITHER",
    "ALPHA_DITHER",
    "OUTPUT_SUFFIX",
    "IMAGE_EXTS",
]
