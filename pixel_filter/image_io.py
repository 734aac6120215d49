from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import U8Image, assert_u8_image_rgba

"""
Image I/O helpers (RGBA in sRGB) and resize utilities.

Alpha is loaded as-is; the quantizer does the binarisation.
"""


def pillow_resample_from_name(name: str) -> Image.Resampling:
    """Map a string to a Pillow resampling filter enum."""
    if name == "bilinear":
        return Image.Resampling.BILINEAR
    if name == "bicubic":
        return Image.Resampling.BICUBIC
    if name == "lanczos":
        return Image.Resampling.LANCZOS
    return Image.Resampling.NEAREST  # default, keeps hard pixel edges


def load_image_rgba(path: Path) -> U8Image:
    """Load any Pillow-readable image as uint8 [H,W,4] with EXIF orientation applied."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0).convert("RGBA")
    return np.array(im, dtype=np.uint8)


def save_image_rgba(path: Path, rgba: U8Image) -> Path:
    """Write uint8 [H,W,4] as PNG. A non-.png suffix is replaced."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    rgba = assert_u8_image_rgba(rgba)
    Image.fromarray(np.ascontiguousarray(rgba)).save(path)
    return path


def resize_rgba_height(
    rgba: U8Image,
    dst_h: Optional[int],
    resample: Image.Resampling = Image.Resampling.NEAREST,
) -> U8Image:
    """Scale so height == dst_h, keeping aspect ratio. Never upscales."""
    H0, W0 = int(rgba.shape[0]), int(rgba.shape[1])
    if dst_h is None or dst_h <= 0 or dst_h >= H0:
        return rgba

    dst_w = max(1, int(round(W0 * (dst_h / float(H0)))))
    im = Image.fromarray(np.ascontiguousarray(rgba))
    im2 = im.resize((dst_w, dst_h), resample=resample)
    return np.array(im2, dtype=np.uint8)


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "pillow_resample_from_name",
    "load_image_rgba",
    "save_image_rgba",
    "resize_rgba_height",
    "is_image_file",
]
