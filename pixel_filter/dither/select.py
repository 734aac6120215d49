from __future__ import annotations

"""
Threshold-map selection.

Candidates are ranked (colours by Oklab lightness, alphas numerically) and
each pixel takes the rank its threshold-map cell names:
  index = threshold_map[x % N][y % N]
"""

from typing import Tuple

import numpy as np

from ..core_types import OklabArray, ThresholdMap


def sort_candidates(
    cand_colour: OklabArray, cand_alpha: np.ndarray
) -> Tuple[OklabArray, np.ndarray]:
    """
    Sort candidates ascending: colours by L (stable), alphas by value.
    Non-finite keys have no defined rank and raise ValueError.
    """
    lightness = cand_colour[..., 0]
    if not np.all(np.isfinite(lightness)) or not np.all(np.isfinite(cand_alpha)):
        raise ValueError("cannot rank non-finite candidates")
    order = np.argsort(lightness, axis=-1, kind="stable")
    sorted_colour = np.take_along_axis(cand_colour, order[..., None], axis=-2)
    sorted_alpha = np.sort(cand_alpha, axis=-1, kind="stable")
    return sorted_colour, sorted_alpha


def threshold_indices(
    threshold_map: ThresholdMap, xs: np.ndarray, ys: np.ndarray
) -> np.ndarray:
    """
    Candidate rank for each (x, y). Broadcasts xs against ys, e.g.
    xs = arange(W)[None, :], ys = arange(y0, y1)[:, None] gives [rows, W].
    """
    tmap = np.asarray(threshold_map, dtype=np.int64)
    size = tmap.shape[0]
    return tmap[np.asarray(xs) % size, np.asarray(ys) % size]


def select_candidates(
    sorted_colour: OklabArray, sorted_alpha: np.ndarray, index: np.ndarray
) -> Tuple[OklabArray, np.ndarray]:
    """Pick rank `index` per pixel. Returns (colour [...,3], alpha [...])."""
    idx = np.asarray(index, dtype=np.int64)
    colour = np.take_along_axis(sorted_colour, idx[..., None, None], axis=-2)
    alpha = np.take_along_axis(sorted_alpha, idx[..., None], axis=-1)
    return colour[..., 0, :], alpha[..., 0]


__all__ = ["sort_candidates", "threshold_indices", "select_candidates"]
