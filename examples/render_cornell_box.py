#!/usr/bin/env python3
"""Render the Cornell box scene.

Builds the Cornell box, renders it progressively with the path sampler and
writes a tone-mapped PNG.

Usage:
    python examples/render_cornell_box.py [options]

Options:
    --width WIDTH           Image width in pixels (default: 128)
    --height HEIGHT         Image height in pixels (default: 128)
    --iterations N          Progressive iterations (default: 16)
    --first-hit-samples N   Stratified samples at the first hit (default: 4)
    --max-bounces N         Maximum bounce depth (default: 4)
    --workers N             Worker threads (default: 4)
    --seed SEED             Random seed (default: none)
    --output OUTPUT         Output file path (default: cornell_box.png)
    --quiet                 Suppress progress output

Example:
    python examples/render_cornell_box.py --width 64 --height 64 --iterations 4
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from pathtracer.core.progressive import ProgressiveRenderer
from pathtracer.core.sampler import PathSampler, SpecularMode
from pathtracer.preview.export import save_png
from pathtracer.scene.cornell_box import create_cornell_box_scene

logger = logging.getLogger("render_cornell_box")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Render the Cornell box scene.")
    parser.add_argument("--width", type=int, default=128, help="Image width in pixels (default: 128)")
    parser.add_argument("--height", type=int, default=128, help="Image height in pixels (default: 128)")
    parser.add_argument("--iterations", type=int, default=16, help="Progressive iterations (default: 16)")
    parser.add_argument(
        "--first-hit-samples",
        type=int,
        default=4,
        help="Stratified samples at the first hit (default: 4)",
    )
    parser.add_argument("--max-bounces", type=int, default=4, help="Maximum bounce depth (default: 4)")
    parser.add_argument("--workers", type=int, default=4, help="Worker threads (default: 4)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: none)")
    parser.add_argument(
        "--output",
        type=str,
        default="cornell_box.png",
        help="Output file path (default: cornell_box.png)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def render_cornell_box(args: argparse.Namespace) -> Path:
    """Render the Cornell box with the given options and save it."""
    scene, camera = create_cornell_box_scene()
    camera.aspect_ratio = args.width / args.height
    camera.update()

    sampler = PathSampler(
        first_hit_samples=args.first_hit_samples,
        max_bounces=args.max_bounces,
        specular_mode=SpecularMode.FIRST,
    )
    renderer = ProgressiveRenderer(
        scene,
        camera,
        sampler,
        args.width,
        args.height,
        seed=args.seed,
        workers=args.workers,
    )

    start_time = time.perf_counter()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.perf_counter() - start_time
            print(f"\r  Progress: {current}/{target} iterations ({elapsed:.1f}s)", end="", flush=True)

    renderer.render(num_samples=args.iterations, callback=progress_callback)
    if not args.quiet:
        print()

    output_file = Path(args.output)
    save_png(renderer, output_file, tone_map="reinhard", gamma=2.2)
    logger.info("Saved %s in %.2fs", output_file.absolute(), time.perf_counter() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        render_cornell_box(args)
    except (ValueError, OSError) as e:
        logger.error("Render failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
