"""
pixel_filter CLI
Quantize RGBA images to a fixed palette with ordered dithering.

Usage:
  python -m pixel_filter SRC [--outdir DIR] [--threshold-map "0,2;3,1" | --bayer K]
                             [--color-dither F] [--alpha-dither F]
                             [--palette HEX,HEX,... | --palette-file FILE]
                             [--height H] [--jobs J] [--workers W] [--debug]

Input:
  Any Pillow-readable image, or a folder of .png/.jpg/.jpeg/.webp files.

Output:
  PNG. Writes <stem>_filtered.png next to each input, or into --outdir.
  Alpha is binary (0 or 255).

Notes:
  Palette, threshold map and dither defaults come from pixel_filter.constants.
  Files are processed in parallel with --jobs; rows within a file with --workers.
"""

from __future__ import annotations

import argparse
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import UnidentifiedImageError

from pixel_filter.config import FilterConfig, bayer_matrix, parse_threshold_map
from pixel_filter.constants import (
    ALPHA_DITHER,
    COLOR_DITHER,
    IMAGE_EXTS,
    OUTPUT_SUFFIX,
    PALETTE_HEX,
    THRESHOLD_MAP,
)
from pixel_filter.core_types import ConfigPreconditionViolation, PaletteParseError
from pixel_filter.dither.run import quantize
from pixel_filter.image_io import (
    is_image_file,
    load_image_rgba,
    pillow_resample_from_name,
    resize_rgba_height,
    save_image_rgba,
)
from pixel_filter.palette_data import build_palette, load_palette_file
from pixel_filter.palette_lock import colour_usage_report, is_palette_only, palette_set
from pixel_filter.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        threshold_map / bayer: optional threshold map source
        color_dither / alpha_dither: floats in [0,1]
        palette / palette_file: optional palette source
        height: optional int max output height
        resample: resize filter name
        jobs: parallel file workers
        workers: row-span threads per image
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="pixel_filter",
        description="Quantize image(s) to a fixed palette with ordered dithering.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    tmap = parser.add_mutually_exclusive_group()
    tmap.add_argument(
        "--threshold-map",
        default=None,
        help='Square threshold map, rows by ";" and values by ",". Default "0,2;3,1".',
    )
    tmap.add_argument(
        "--bayer",
        type=int,
        default=None,
        help="Use a Bayer threshold map of size 2**K.",
    )
    parser.add_argument(
        "--color-dither",
        type=float,
        default=COLOR_DITHER,
        help=f"Colour error feedback in [0,1] (default {COLOR_DITHER}).",
    )
    parser.add_argument(
        "--alpha-dither",
        type=float,
        default=ALPHA_DITHER,
        help=f"Alpha error feedback in [0,1] (default {ALPHA_DITHER}).",
    )
    pal = parser.add_mutually_exclusive_group()
    pal.add_argument(
        "--palette",
        default=None,
        help="Comma-separated 6-digit hex colours (no '#').",
    )
    pal.add_argument(
        "--palette-file",
        type=Path,
        default=None,
        help="Palette file with one hex colour per line.",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Resize so height<=H before filtering. Omit for no resize.",
    )
    parser.add_argument(
        "--resample",
        choices=["nearest", "bilinear", "bicubic", "lanczos"],
        default="nearest",
        help="Scaling filter used with --height.",
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--workers", type=int, default=_default_workers(), help="Row-span threads"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> FilterConfig:
    """
    FilterConfig from parsed args.
    Raises ConfigPreconditionViolation or PaletteParseError on bad input.
    """
    if args.threshold_map is not None:
        threshold_map = parse_threshold_map(args.threshold_map)
    elif args.bayer is not None:
        threshold_map = bayer_matrix(args.bayer)
    else:
        threshold_map = THRESHOLD_MAP

    if args.palette_file is not None:
        palette: Sequence[str] = load_palette_file(args.palette_file)
    elif args.palette is not None:
        palette = [p.strip() for p in args.palette.split(",") if p.strip()]
    else:
        palette = PALETTE_HEX

    return FilterConfig(
        threshold_map=threshold_map,
        color_dither=args.color_dither,
        alpha_dither=args.alpha_dither,
        palette=palette,
    )


def _output_path(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


# Per-file processing


@dataclass
class FileResult:
    """Outcome of filtering one file; reported by the main thread."""

    src: Path
    written: Path
    loaded_size: Tuple[int, int]  # (width, height) before resize
    rgba: np.ndarray  # quantized output
    load_secs: float
    filter_secs: float
    save_secs: float


def _filter_file(
    src_path: Path,
    out_path: Path,
    config: FilterConfig,
    height_cap: Optional[int],
    resample_name: str,
    workers: int,
    debug: bool,
) -> FileResult:
    """Load -> optional resize -> quantize -> save. Prints nothing itself."""
    t_start = time.perf_counter()
    rgba = load_image_rgba(src_path)
    loaded_size = (int(rgba.shape[1]), int(rgba.shape[0]))
    rgba = resize_rgba_height(rgba, height_cap, pillow_resample_from_name(resample_name))

    t_map0 = time.perf_counter()
    mapped = quantize(rgba, config, workers=workers, debug=debug)
    t_map1 = time.perf_counter()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    written = save_image_rgba(out_path, mapped)
    t_saved = time.perf_counter()

    return FileResult(
        src=src_path,
        written=written,
        loaded_size=loaded_size,
        rgba=mapped,
        load_secs=t_map0 - t_start,
        filter_secs=t_map1 - t_map0,
        save_secs=t_saved - t_map1,
    )


def _report(result: FileResult, config: FilterConfig, debug: bool) -> None:
    """Banner, output summary and colour usage for one filtered file."""
    print_banner(result.src.name)
    mapped = result.rgba
    height, width = int(mapped.shape[0]), int(mapped.shape[1])

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{result.loaded_size[0]}x{result.loaded_size[1]}"),
                    ("Filtered", f"{width}x{height}"),
                    ("Alpha=255", int(np.count_nonzero(mapped[..., 3] == 255))),
                    ("Alpha=0", int(np.count_nonzero(mapped[..., 3] == 0))),
                ]
            )
        )

    log(
        f"Wrote {result.written.name} | size={width}x{height} | palette_size={len(config.palette)}"
    )
    log("Colours used:")
    for hex_code, count in colour_usage_report(mapped):
        log(f"  {hex_code}: {count:,}")
    log(f"Visible pixels: {int(np.count_nonzero(mapped[..., 3])):,}")

    total_secs = result.load_secs + result.filter_secs + result.save_secs
    if debug:
        items, _ = build_palette(config.palette)
        debug_log(f"palette only: {is_palette_only(mapped, palette_set(items))}")
        if result.filter_secs > 0:
            mpx = (width * height) / 1e6
            debug_log(
                f"throughput {mpx / result.filter_secs:.2f} MPx/s  "
                f"({mpx:.2f} MPx in {format_seconds_compact(result.filter_secs)})"
            )
        debug_log(
            f"Total {format_total_duration_compact(total_secs)}  "
            f"(load={format_seconds_compact(result.load_secs)}, "
            f"filter={format_seconds_compact(result.filter_secs)}, "
            f"save={format_seconds_compact(result.save_secs)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(total_secs)}")


def _collect_files(src: Path) -> List[Path]:
    files = [
        p
        for p in src.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit code.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. A file that cannot be decoded
    is reported and skipped; the run then exits 1. Bad settings, a missing
    input or a non-image single file exit 2.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    try:
        config = build_config(args)
        # Parse the palette once up front so a bad entry stops the run here.
        build_palette(config.palette)
    except (ConfigPreconditionViolation, PaletteParseError, OSError) as exc:
        error(str(exc))
        return 2

    workers = max(1, int(args.workers))
    print_config_line(
        "filter",
        [
            ("Palette", len(config.palette)),
            ("Map", f"{config.map_size}x{config.map_size}"),
            ("Colour dither", config.color_dither),
            ("Alpha dither", config.alpha_dither),
            ("Workers", workers),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )

    if not src.is_dir():
        if src.stem.endswith(OUTPUT_SUFFIX):
            print_banner(src.name)
            warn(f"skipped output artifact ({OUTPUT_SUFFIX})")
            return 0
        if not is_image_file(src):
            error(f"not an image: {src}")
            return 2
        try:
            result = _filter_file(
                src,
                _output_path(src, args.outdir),
                config,
                args.height,
                args.resample,
                workers,
                args.debug,
            )
        except OSError as exc:
            error(f"{src.name}: {exc}")
            return 1
        _report(result, config, args.debug)
        return 0

    files = _collect_files(src)
    if args.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))

    failed = 0
    if args.jobs <= 1:
        for p in files:
            try:
                result = _filter_file(
                    p,
                    _output_path(p, args.outdir),
                    config,
                    args.height,
                    args.resample,
                    workers,
                    args.debug,
                )
            except (UnidentifiedImageError, OSError) as exc:
                error(f"{p.name}: {exc}")
                failed += 1
                continue
            _report(result, config, args.debug)
    else:
        # Reports are printed on this thread, in file order.
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(
                    _filter_file,
                    p,
                    _output_path(p, args.outdir),
                    config,
                    args.height,
                    args.resample,
                    workers,
                    args.debug,
                )
                for p in files
            ]
            for p, fut in zip(files, futures):
                try:
                    result = fut.result()
                except (UnidentifiedImageError, OSError) as exc:
                    error(f"{p.name}: {exc}")
                    failed += 1
                    continue
                _report(result, config, args.debug)

    if failed:
        warn(f"{failed} of {len(files)} file(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
