"""Cornell box scene configuration.

The classic global illumination test scene, built from the engine's own
primitives:

- Five diffuse walls (red left, green right, white back, floor, ceiling)
- A rectangular emitter just below the ceiling
- Three spheres: diffuse white, polished metal and clear glass

The box spans [0, box_size] on every axis with the open side facing -Z,
where the camera sits.

Example:
    >>> from pathtracer.scene.cornell_box import CornellBoxParams, create_cornell_box_scene
    >>> scene, camera = create_cornell_box_scene(params=CornellBoxParams(light_intensity=20.0))
    >>> len(scene.lights)
    1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.geometry.quad import Quad
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import (
    clear_material,
    diffuse_material,
    light_material,
    metallic_material,
)
from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

LIGHT_WIDTH = 130.0
LIGHT_DEPTH = 105.0

SPHERE_RADIUS = 80.0
GLASS_SPHERE_IOR = 1.5
METAL_SPHERE_COLOR = (0.95, 0.93, 0.88)
METAL_SPHERE_GLOSS = 0.05  # radians


@dataclass
class CornellBoxParams:
    """Adjustable parts of the Cornell box.

    Attributes:
        light_intensity: Emittance of the ceiling light.
        light_color: RGB color of the light.
        left_wall_color: RGB albedo of the left wall (red).
        right_wall_color: RGB albedo of the right wall (green).
        white_color: RGB albedo of the back wall, floor, ceiling and the
            diffuse sphere.
        vfov: Camera vertical field of view in degrees.
        aspect_ratio: Camera aspect ratio (width / height).
    """

    light_intensity: float = 15.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    right_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    white_color: tuple[float, float, float] = (0.73, 0.73, 0.73)
    vfov: float = 40.0
    aspect_ratio: float = 1.0


def create_cornell_box_scene(
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
) -> tuple[Scene, PinholeCamera]:
    """Build the Cornell box and a camera looking into it.

    Args:
        box_size: Edge length of the box.
        params: Colors, light and camera settings (defaults if None).

    Returns:
        (scene, camera). The scene holds 6 quads and 3 spheres; the ceiling
        light is its only emitter.

    Raises:
        ValueError: If box_size is not positive or the light intensity is
            not positive.
    """
    if box_size <= 0.0:
        raise ValueError(f"box_size must be positive, got {box_size}")
    if params is None:
        params = CornellBoxParams()

    s = box_size
    red = diffuse_material(params.left_wall_color)
    green = diffuse_material(params.right_wall_color)
    white = diffuse_material(params.white_color)
    light = light_material(params.light_color, params.light_intensity)

    scene = Scene()

    # Walls (quads are two-sided)
    scene.add(Quad((0.0, 0.0, 0.0), (0.0, s, 0.0), (0.0, 0.0, s), red))  # left, x = 0
    scene.add(Quad((s, 0.0, s), (0.0, s, 0.0), (0.0, 0.0, -s), green))  # right, x = s
    scene.add(Quad((0.0, 0.0, s), (s, 0.0, 0.0), (0.0, s, 0.0), white))  # back, z = s
    scene.add(Quad((0.0, 0.0, 0.0), (s, 0.0, 0.0), (0.0, 0.0, s), white))  # floor, y = 0
    scene.add(Quad((0.0, s, s), (s, 0.0, 0.0), (0.0, 0.0, -s), white))  # ceiling, y = s

    # Light slightly below the ceiling
    light_width = LIGHT_WIDTH * s / BOX_SIZE
    light_depth = LIGHT_DEPTH * s / BOX_SIZE
    scene.add(
        Quad(
            ((s - light_width) / 2.0, s - s / BOX_SIZE, (s - light_depth) / 2.0),
            (light_width, 0.0, 0.0),
            (0.0, 0.0, light_depth),
            light,
        )
    )

    r = SPHERE_RADIUS * s / BOX_SIZE
    scene.add(Sphere((s * 0.27, r, s * 0.35), r, diffuse_material(params.white_color)))
    scene.add(Sphere((s * 0.73, r, s * 0.35), r, metallic_material(METAL_SPHERE_COLOR, gloss=METAL_SPHERE_GLOSS)))
    scene.add(Sphere((s * 0.5, r, s * 0.65), r, clear_material(GLASS_SPHERE_IOR)))

    # Camera outside the open front, looking at the middle of the box
    camera = PinholeCamera(
        lookfrom=(s / 2.0, s / 2.0, -800.0 * s / BOX_SIZE),
        lookat=(s / 2.0, s / 2.0, s / 2.0),
        vup=(0.0, 1.0, 0.0),
        vfov=params.vfov,
        aspect_ratio=params.aspect_ratio,
    )

    logger.debug("Built Cornell box: %d shapes, %d lights", len(scene), len(scene.lights))
    return scene, camera
