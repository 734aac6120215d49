from __future__ import annotations

"""
Shared utilities for pixel_filter.

Includes time formatting, the nearest-palette search, row partitioning for
threaded work, progress output, and tidy logging.
"""

from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import OklabArray

# Colour x palette pairs evaluated per step; the (rows, P, 3) float64
# difference tensor stays near 24 MB whatever the palette size.
_NEAREST_BUDGET = 1 << 20


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Nearest-colour search


def nearest_chunk_rows(palette_size: int) -> int:
    """Colours per nearest-search step for a palette of `palette_size` rows."""
    return max(1, _NEAREST_BUDGET // max(1, int(palette_size)))


def nearest_palette_indices(colours: OklabArray, pal_oklab: OklabArray) -> np.ndarray:
    """
    For each Oklab colour, index of the nearest palette row by squared
    Euclidean distance. The first palette row wins exact ties.

    Args:
      colours: float [...,3]; a single colour may be shape (3,)
      pal_oklab: float [P,3], P >= 1
    Returns:
      int64 array with the leading shape of `colours`
    """
    src = np.asarray(colours, dtype=np.float64)
    pal = np.asarray(pal_oklab, dtype=np.float64)
    lead_shape = src.shape[:-1]
    flat = src.reshape(-1, 3)
    out = np.empty((flat.shape[0],), dtype=np.int64)
    chunk = nearest_chunk_rows(pal.shape[0])
    for start in range(0, flat.shape[0], chunk):
        rows = flat[start : start + chunk]
        diff = rows[:, None, :] - pal[None, :, :]
        dist2 = np.sum(diff * diff, axis=2)
        # argmin keeps the first minimum, same as a strict '<' scan.
        out[start : start + rows.shape[0]] = np.argmin(dist2, axis=1)
    return out.reshape(lead_shape)


def nearest_palette_colour(pal_oklab: OklabArray, colour: OklabArray) -> OklabArray:
    """Nearest palette row itself (not its index) for one or many colours."""
    pal = np.asarray(pal_oklab, dtype=np.float64)
    return pal[nearest_palette_indices(colour, pal)]


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = max(1, (height + parts - 1) // parts)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


#  CLI / progress logging


def print_progress_line(message: str, final: bool = False) -> None:
    """Print a single-line progress message that overwrites previous output."""
    import sys as _sys

    _sys.stdout.write("\r\033[K" + message)
    _sys.stdout.flush()
    if final:
        _sys.stdout.write("\n")
        _sys.stdout.flush()


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    import sys

    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [filter] Palette: 48  Map: 2x2  Colour dither: 0.04  Alpha dither: 0.12
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    import sys

    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    # nearest search
    "nearest_chunk_rows",
    "nearest_palette_indices",
    "nearest_palette_colour",
    "split_rows_into_parts",
    # logging / progress
    "print_progress_line",
    "enable_line_buffered_stdout",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
