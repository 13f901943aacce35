#!/usr/bin/env python3
"""Render two glass spheres over a white floor.

A clear sphere and a slightly glossy one sit on a diffuse floor under a
single spherical light. Every bounce is split into diffuse and specular
lobes (SpecularMode.ALL) so caustic paths through the glass converge.

Usage:
    python examples/render_refraction.py [--width W] [--height H]
        [--iterations N] [--workers N] [--seed SEED] [--output PATH]
        [--texture PATH]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.progressive import ProgressiveRenderer
from pathtracer.core.sampler import PathSampler, SpecularMode
from pathtracer.geometry.quad import Quad
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import clear_material, diffuse_material, light_material
from pathtracer.scene.scene import Scene
from pathtracer.scene.texture import load_texture

logger = logging.getLogger("render_refraction")


def build_scene(texture_path: str | None = None) -> tuple[Scene, PinholeCamera]:
    """Glass spheres, floor and light, with an optional environment map."""
    texture = load_texture(texture_path) if texture_path else None
    scene = Scene(color=(0.02, 0.02, 0.03), texture=texture)

    scene.add(Sphere((-1.5, 0.0, 0.5), 1.0, clear_material(1.5)))
    scene.add(Sphere((1.5, 0.0, 0.5), 1.0, clear_material(1.5, gloss=0.05)))
    scene.add(Quad((-10.0, -10.0, -1.0), (20.0, 0.0, 0.0), (0.0, 20.0, 0.0), diffuse_material((1.0, 1.0, 1.0))))
    scene.add(Sphere((0.0, 0.0, 5.0), 1.0, light_material((1.0, 1.0, 1.0), 30.0)))

    camera = PinholeCamera(
        lookfrom=(0.0, -5.0, 5.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 0.0, 1.0),
        vfov=50.0,
        aspect_ratio=16.0 / 9.0,
    )
    return scene, camera


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render glass spheres over a floor.")
    parser.add_argument("--width", type=int, default=192)
    parser.add_argument("--height", type=int, default=108)
    parser.add_argument("--iterations", type=int, default=8)
    parser.add_argument("--workers", type=int, default=4)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", type=str, default="refraction.png")
    parser.add_argument("--texture", type=str, default=None, help="Optional environment map image")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")

    try:
        scene, camera = build_scene(args.texture)
        camera.aspect_ratio = args.width / args.height
        camera.update()
        sampler = PathSampler(first_hit_samples=16, max_bounces=8, specular_mode=SpecularMode.ALL)
        renderer = ProgressiveRenderer(
            scene,
            camera,
            sampler,
            args.width,
            args.height,
            seed=args.seed,
            workers=args.workers,
        )
        for current, target in renderer.render_progressive(args.iterations):
            logger.info("%d/%d iterations", current, target)
        renderer.save_image(Path(args.output), tone_map="reinhard")
    except (ValueError, OSError) as e:
        logger.error("Render failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
