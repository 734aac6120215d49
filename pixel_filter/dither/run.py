from __future__ import annotations

"""
Ordered-dither quantizer.

Maps every pixel of an RGBA image to a palette colour and a binary alpha:
Oklab conversion, per-pixel error-feedback candidates, threshold-map rank
selection, and conversion back to 8-bit sRGB. Pixels are independent, so
the image is split into row spans that may run on worker threads.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from pixel_filter.colour_convert import oklab_to_rgb, rgb_to_oklab
from pixel_filter.config import FilterConfig
from pixel_filter.core_types import OklabArray, U8Image, assert_u8_image_rgba
from pixel_filter.dither.candidates import generate_candidates
from pixel_filter.dither.select import (
    select_candidates,
    sort_candidates,
    threshold_indices,
)
from pixel_filter.palette_data import build_perceptual_palette
from pixel_filter.utils import (
    debug_log,
    format_seconds_compact,
    key_value_pairs_to_string,
    print_progress_line,
    split_rows_into_parts,
)

# Pixels per candidate batch; bounds the [pixels, N, 3] candidate arrays.
_BLOCK_PIXELS = 32_768


def composite_pixels(colour: OklabArray, alpha: np.ndarray) -> U8Image:
    """
    Chosen Oklab colour and 0/1 alpha to RGBA8.
    Channels are scaled by 255, rounded, and clipped to 0..255.
    """
    rgb = oklab_to_rgb(colour)
    out = np.empty(rgb.shape[:-1] + (4,), dtype=np.uint8)
    out[..., :3] = np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)
    out[..., 3] = np.clip(np.rint(np.asarray(alpha) * 255.0), 0, 255).astype(
        np.uint8
    )
    return out


def _quantize_rows(
    image: U8Image,
    out: U8Image,
    y0: int,
    y1: int,
    pal_oklab: OklabArray,
    config: FilterConfig,
) -> None:
    """Quantize rows [y0, y1) of `image` into the same rows of `out`."""
    width = int(image.shape[1])
    step = max(1, _BLOCK_PIXELS // max(1, width))
    xs = np.arange(width)[None, :]

    for start in range(y0, y1, step):
        end = min(start + step, y1)
        block = image[start:end]
        colour = rgb_to_oklab(block[..., :3])
        alpha = block[..., 3].astype(np.float64) / 255.0

        cand_c, cand_a = generate_candidates(
            colour,
            alpha,
            pal_oklab,
            config.candidate_count,
            config.color_dither,
            config.alpha_dither,
        )
        sorted_c, sorted_a = sort_candidates(cand_c, cand_a)
        index = threshold_indices(
            config.threshold_map, xs, np.arange(start, end)[:, None]
        )
        chosen_c, chosen_a = select_candidates(sorted_c, sorted_a, index)
        out[start:end] = composite_pixels(chosen_c, chosen_a)


def quantize(
    image: U8Image,
    config: Optional[FilterConfig] = None,
    *,
    workers: int = 1,
    debug: bool = False,
    progress: bool = False,
) -> U8Image:
    """
    Quantize an RGBA image to the configured palette with ordered dithering.

    Args:
      image   : uint8 [H,W,4]; never modified
      config  : FilterConfig, defaults to the built-in palette and 2x2 map
      workers : threads over row spans; output does not depend on it
      debug   : print palette/map/timing details
      progress: print a one-line span counter while running
    Returns:
      new uint8 [H,W,4] image; colours are palette entries, alpha is 0 or 255
    Raises:
      TypeError for a non-RGBA8 buffer, PaletteParseError for a bad palette
      entry. Both happen before any pixel is processed.
    """
    t_start = time.perf_counter()
    image = assert_u8_image_rgba(image)
    if config is None:
        config = FilterConfig()

    pal_oklab = build_perceptual_palette(config.palette)
    height, width = int(image.shape[0]), int(image.shape[1])
    out: U8Image = np.zeros_like(image)
    if height == 0 or width == 0:
        return out

    spans = split_rows_into_parts(height, workers if workers > 1 else 1)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Size", f"{width}x{height}"),
                    ("Palette", int(pal_oklab.shape[0])),
                    ("Map", f"{config.map_size}x{config.map_size}"),
                    ("Colour dither", config.color_dither),
                    ("Alpha dither", config.alpha_dither),
                    ("Spans", len(spans)),
                ]
            )
        )

    if len(spans) == 1:
        _quantize_rows(image, out, 0, height, pal_oklab, config)
        if progress:
            print_progress_line("quantize 1/1 spans", final=True)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_quantize_rows, image, out, s, e, pal_oklab, config)
                for s, e in spans
            ]
            for done, fut in enumerate(futures, start=1):
                fut.result()
                if progress:
                    print_progress_line(
                        f"quantize {done}/{len(futures)} spans",
                        final=done == len(futures),
                    )

    if debug:
        debug_log(f"quantize took {format_seconds_compact(time.perf_counter() - t_start)}")
    return out


__all__ = ["composite_pixels", "quantize"]
