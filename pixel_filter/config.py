from __future__ import annotations

"""
Filter configuration.

Exports:
  FilterConfig                 : frozen settings for one quantize() call
  validate_threshold_map(rows) : square + bijection onto 0..N*N-1
  bayer_matrix(order)          : recursive Bayer matrix of size 2**order
  parse_threshold_map(text)    : "0,2;3,1" -> ((0, 2), (3, 1))

Notes:
  - Every FilterConfig is validated when constructed, so a bad map or dither
    value fails before any image work starts.
  - Palette entries are parsed later, when the Oklab palette is built.
"""

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .constants import ALPHA_DITHER, COLOR_DITHER, PALETTE_HEX, THRESHOLD_MAP
from .core_types import ConfigPreconditionViolation, ThresholdMap


def validate_threshold_map(rows: Sequence[Sequence[int]]) -> ThresholdMap:
    """
    Check that `rows` is a non-empty N x N integer matrix holding every value
    in 0..N*N-1 exactly once. Returns it as a tuple of tuples.
    """
    size = len(rows)
    if size == 0:
        raise ConfigPreconditionViolation("threshold map is empty")

    out = []
    for row in rows:
        if len(row) != size:
            raise ConfigPreconditionViolation(
                f"threshold map must be square, got a row of {len(row)} in a {size}-row map"
            )
        vals = []
        for v in row:
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise ConfigPreconditionViolation(
                    f"threshold map values must be integers, got {v!r}"
                )
            vals.append(int(v))
        out.append(tuple(vals))

    flat = sorted(v for row in out for v in row)
    if flat != list(range(size * size)):
        raise ConfigPreconditionViolation(
            f"threshold map must contain each of 0..{size * size - 1} exactly once"
        )
    return tuple(out)


def bayer_matrix(order: int) -> ThresholdMap:
    """
    Bayer index matrix of size 2**order.
    bayer_matrix(1) == ((0, 2), (3, 1)).
    """
    if order < 1:
        raise ConfigPreconditionViolation("bayer order must be >= 1")
    mat = np.array([[0, 2], [3, 1]], dtype=np.int64)
    for _ in range(order - 1):
        mat = np.block([[4 * mat, 4 * mat + 2], [4 * mat + 3, 4 * mat + 1]])
    return tuple(tuple(int(v) for v in row) for row in mat.tolist())


def parse_threshold_map(text: str) -> ThresholdMap:
    """Parse 'a,b;c,d' (rows by ';', values by ',') and validate it."""
    rows = []
    for chunk in text.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            rows.append([int(tok) for tok in chunk.split(",")])
        except ValueError:
            raise ConfigPreconditionViolation(
                f"invalid threshold map row {chunk!r}"
            ) from None
    return validate_threshold_map(rows)


def _check_dither(name: str, value: float) -> float:
    val = float(value)
    if not math.isfinite(val) or val < 0.0 or val > 1.0:
        raise ConfigPreconditionViolation(f"{name} must be within [0, 1], got {value!r}")
    return val


@dataclass(frozen=True)
class FilterConfig:
    """Settings for one quantize() call. Defaults match the built-in filter."""

    threshold_map: ThresholdMap = THRESHOLD_MAP
    color_dither: float = COLOR_DITHER
    alpha_dither: float = ALPHA_DITHER
    palette: Sequence[str] = field(default=PALETTE_HEX)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Normalise fields in place and raise ConfigPreconditionViolation if unusable."""
        object.__setattr__(
            self, "threshold_map", validate_threshold_map(self.threshold_map)
        )
        object.__setattr__(
            self, "color_dither", _check_dither("color_dither", self.color_dither)
        )
        object.__setattr__(
            self, "alpha_dither", _check_dither("alpha_dither", self.alpha_dither)
        )
        if isinstance(self.palette, str):
            raise ConfigPreconditionViolation("palette must be a list of hex strings")
        palette = tuple(self.palette)
        if not palette:
            raise ConfigPreconditionViolation("palette is empty")
        object.__setattr__(self, "palette", palette)

    @property
    def map_size(self) -> int:
        return len(self.threshold_map)

    @property
    def candidate_count(self) -> int:
        return self.map_size * self.map_size


__all__ = [
    "FilterConfig",
    "validate_threshold_map",
    "bayer_matrix",
    "parse_threshold_map",
]
