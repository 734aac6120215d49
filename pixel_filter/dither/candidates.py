from __future__ import annotations

from typing import Tuple

import numpy as np

from ..core_types import OklabArray
from ..utils import nearest_palette_colour


def round_half_away(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, halves away from zero (0.5 -> 1, -0.5 -> -1)."""
    v = np.asarray(values, dtype=np.float64)
    return np.where(v >= 0.0, np.floor(v + 0.5), np.ceil(v - 0.5))


def generate_candidates(
    colour: OklabArray,
    alpha: np.ndarray | float,
    pal_oklab: OklabArray,
    count: int,
    color_dither: float,
    alpha_dither: float,
) -> Tuple[OklabArray, np.ndarray]:
    """
    Build `count` candidate colours and binary alphas per pixel.

    Each step samples the pixel plus its own accumulated error scaled by the
    dither coefficient, snaps the sample (nearest palette colour / rounded
    alpha), and adds the residual to the error. The error is local to one
    pixel; nothing is carried to neighbours.

    Args:
      colour: Oklab [...,3], one row per pixel (a single pixel may be (3,))
      alpha: float [...] in 0..1, leading shape of `colour`
      pal_oklab: Oklab [P,3]
      count: candidates per pixel (map_size ** 2)
    Returns:
      (cand_colour [...,count,3], cand_alpha [...,count]) in generation order
    """
    base_c = np.asarray(colour, dtype=np.float64)
    base_a = np.asarray(alpha, dtype=np.float64)
    if base_a.shape != base_c.shape[:-1]:
        raise ValueError(
            f"alpha shape {base_a.shape} does not match colour shape {base_c.shape}"
        )

    cand_c = np.empty(base_c.shape[:-1] + (count, 3), dtype=np.float64)
    cand_a = np.empty(base_a.shape + (count,), dtype=np.float64)

    err_c = np.zeros_like(base_c)
    err_a = np.zeros_like(base_a)
    for i in range(count):
        pick_c = nearest_palette_colour(pal_oklab, base_c + err_c * color_dither)
        cand_c[..., i, :] = pick_c
        err_c = err_c + (base_c - pick_c)

        pick_a = round_half_away(base_a + err_a * alpha_dither)
        cand_a[..., i] = pick_a
        err_a = err_a + (base_a - pick_a)

    return cand_c, cand_a


__all__ = ["round_half_away", "generate_candidates"]
