"""Scene container and nearest-hit queries.

The Scene is the geometric query interface consumed by the integrator. It
holds an ordered list of shapes, remembers which of them emit light, and
answers "what is the nearest surface along this ray". Rays that escape the
scene see either an environment texture or a flat background color.

Intersection is a linear scan over the shapes; there is no acceleration
structure. Once rendering starts the scene is treated as read-only and may be
shared between worker threads without locking.

Example:
    >>> from pathtracer.geometry import Sphere
    >>> from pathtracer.materials import diffuse_material, light_material
    >>> from pathtracer.scene import Scene
    >>> scene = Scene(color=(0.1, 0.1, 0.1))
    >>> scene.add(Sphere((0, 0, 0), 1.0, diffuse_material((0.8, 0.8, 0.8))))
    >>> scene.add(Sphere((0, 5, 0), 0.5, light_material((1, 1, 1), 20.0)))
    >>> len(scene), len(scene.lights)
    (2, 1)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from pathtracer.core.color import Color, as_color
from pathtracer.core.ray import Ray, Vec3
from pathtracer.geometry.box import Box, box_for_shapes
from pathtracer.geometry.shape import Shape
from pathtracer.materials.material import Texture
from pathtracer.scene.intersection import NO_HIT, Hit
from pathtracer.scene.texture import texture_direction_uv

logger = logging.getLogger(__name__)


class Scene:
    """An ordered collection of shapes plus background lighting.

    Attributes:
        color: Background color returned for rays that miss everything.
        texture: Optional environment texture, sampled instead of color.
        texture_angle: Longitude rotation of the environment texture.
    """

    def __init__(
        self,
        color=(0.0, 0.0, 0.0),
        texture: Texture | None = None,
        texture_angle: float = 0.0,
    ) -> None:
        self.color = as_color(color)
        self.color.setflags(write=False)
        self.texture = texture
        self.texture_angle = float(texture_angle)
        self._shapes: list[Shape] = []
        self._lights: list[Shape] = []

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return tuple(self._shapes)

    @property
    def lights(self) -> tuple[Shape, ...]:
        """Shapes whose material is emissive, in insertion order."""
        return tuple(self._lights)

    def add(self, shape: Shape) -> None:
        """Add a shape. Emissive shapes are also registered as lights."""
        self._shapes.append(shape)
        material = shape.material_at(shape.bounding_box().center())
        if material.is_emissive:
            self._lights.append(shape)
            logger.debug("Added light %r (emittance %.3g)", shape, material.emittance)
        else:
            logger.debug("Added shape %r", shape)

    def extend(self, shapes: Iterable[Shape]) -> None:
        for shape in shapes:
            self.add(shape)

    def intersect(self, ray: Ray) -> Hit:
        """Return the nearest hit along the ray, or NO_HIT."""
        nearest = NO_HIT
        for shape in self._shapes:
            hit = shape.intersect(ray)
            if hit.ok and hit.t < nearest.t:
                nearest = hit
        return nearest

    def background(self, direction: Vec3) -> Color:
        """Radiance seen by a ray that leaves the scene in direction."""
        if self.texture is not None:
            u, v = texture_direction_uv(direction, self.texture_angle)
            return np.maximum(self.texture.sample(u, v), 0.0)
        return self.color.copy()

    def bounding_box(self) -> Box | None:
        """Bounding box of all shapes, or None for an empty scene."""
        return box_for_shapes(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __repr__(self) -> str:
        return f"Scene(shapes={len(self._shapes)}, lights={len(self._lights)})"
