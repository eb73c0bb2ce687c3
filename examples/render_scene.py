#!/usr/bin/env python3
"""Render the showcase scene.

This script renders the showcase scene (checkered floor, ringed back wall,
hollow glass ball, mirror cube and patterned spheres) with the Whitted ray
tracer and writes a PNG or PPM image.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --height HEIGHT         Image height in pixels (default: 225)
    --depth DEPTH           Reflection/refraction depth budget, 0-16 (default: 5)
    --output OUTPUT         Output file, .png or .ppm (default: showcase.png)
    --backend BACKEND       "taichi" or "python" (default: taichi)
    --rows-per-batch ROWS   Scanlines per progress update (default: 16)
    --cpu                   Force the Taichi CPU backend
    --verbose               Enable debug logging
    --quiet                 Suppress progress output
    --preview               Show the result in a Matplotlib window
    --compare               With --preview, also render with the python
                            backend and show both images and their difference

Example:
    python -m examples.render_scene --width 320 --height 180 --output scene.ppm
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=225,
        help="Image height in pixels (default: 225)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=5,
        help="Reflection/refraction depth budget, 0-16 (default: 5)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="showcase.png",
        help="Output file path, .png or .ppm (default: showcase.png)",
    )
    parser.add_argument(
        "--backend",
        choices=("taichi", "python"),
        default="taichi",
        help="Render backend (default: taichi)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=16,
        help="Scanlines per progress update (default: 16)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the Taichi CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window (needs the preview extra)",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="With --preview, show a python-backend reference and the difference",
    )
    return parser.parse_args()


def render_scene(
    width: int = 400,
    height: int = 225,
    max_depth: int = 5,
    output_path: str = "showcase.png",
    backend: str = "taichi",
    rows_per_batch: int = 16,
    quiet: bool = False,
    preview: bool = False,
    compare: bool = False,
) -> Path:
    """Render the showcase scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection/refraction depth budget.
        output_path: Output file path (.png or .ppm).
        backend: "taichi" or "python".
        rows_per_batch: Number of scanlines between progress updates.
        quiet: If True, suppress progress output.
        preview: If True, show the image in a Matplotlib window.
        compare: If True (with preview), also render with the python backend
            and show the difference.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.preview.display import show_preview
    from whitted.preview.export import compute_rmse, save_image
    from whitted.scene.showcase import ShowcaseParams, create_showcase_scene

    world, camera = create_showcase_scene(ShowcaseParams(width=width, height=height))
    logger.info("Created showcase scene with %d shapes", len(world.shapes))

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            rows_per_sec = rows_done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    canvas = camera.render(
        world,
        backend=backend,
        max_depth=max_depth,
        rows_per_batch=rows_per_batch,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_image(canvas, output_file, gamma=1.0)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        reference = None
        if compare:
            reference = camera.render(world, backend="python", max_depth=max_depth)
            rmse = compute_rmse(canvas.to_numpy(), reference.to_numpy())
            logger.info("RMSE against python backend: %.6f", rmse)
            if not quiet:
                print(f"RMSE against python backend: {rmse:.6f}")
        show_preview(canvas, reference=reference)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
        except RuntimeError:
            logger.warning("GPU backend unavailable, falling back to CPU")
            ti.init(arch=ti.cpu)

    try:
        render_scene(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            output_path=args.output,
            backend=args.backend,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
            preview=args.preview,
            compare=args.compare,
        )
        return 0
    except (ValueError, RuntimeError, OSError, ImportError) as e:
        logger.error("Render failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
