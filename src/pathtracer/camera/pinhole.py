"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that generates primary rays for
rendering. The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view in degrees
- Arbitrary aspect ratios
- Jittered sampling for anti-aliasing

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

Example:
    >>> from pathtracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(
    ...     lookfrom=(0.0, 0.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=60.0,
    ...     aspect_ratio=16.0 / 9.0,
    ... )
    >>> ray = camera.get_ray(0.5, 0.5)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from pathtracer.core.ray import Ray, Vec3, as_vec3, cross, length, normalize


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    The basis and viewport are derived from the parameters when the camera is
    created; call update() after changing any field.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees (typically 40-90).
        aspect_ratio: Width divided by height of the output image.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float

    _origin: Vec3 = field(init=False, repr=False, compare=False)
    _u: Vec3 = field(init=False, repr=False, compare=False)
    _v: Vec3 = field(init=False, repr=False, compare=False)
    _w: Vec3 = field(init=False, repr=False, compare=False)
    _horizontal: Vec3 = field(init=False, repr=False, compare=False)
    _vertical: Vec3 = field(init=False, repr=False, compare=False)
    _lower_left: Vec3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.update()

    def update(self) -> None:
        """Recompute the camera basis and viewport from the parameters.

        The viewport is a virtual image plane at unit distance from the
        camera.

        Raises:
            ValueError: If the field of view or aspect ratio is out of range,
                or lookfrom, lookat and vup do not define a frame.
        """
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")

        theta = math.radians(self.vfov)
        h = math.tan(theta / 2.0)
        viewport_height = 2.0 * h
        viewport_width = self.aspect_ratio * viewport_height

        lookfrom = as_vec3(self.lookfrom)
        lookat = as_vec3(self.lookat)
        vup = as_vec3(self.vup)

        # w points from lookat toward lookfrom (backward)
        w = lookfrom - lookat
        if length(w) < 1e-12:
            raise ValueError("lookfrom and lookat must differ")
        w = normalize(w)

        # u points right (perpendicular to w and vup)
        u = cross(vup, w)
        if length(u) < 1e-12:
            raise ValueError("vup must not be parallel to the view direction")
        u = normalize(u)

        # v points up in the camera's frame
        v = cross(w, u)

        self._origin = lookfrom
        self._u, self._v, self._w = u, v, w
        self._horizontal = viewport_width * u
        self._vertical = viewport_height * v
        # Origin - w (move forward) - horizontal/2 (left) - vertical/2 (down)
        self._lower_left = lookfrom - w - self._horizontal / 2.0 - self._vertical / 2.0

    @property
    def origin(self) -> Vec3:
        return self._origin.copy()

    @property
    def basis(self) -> tuple[Vec3, Vec3, Vec3]:
        """The (u, v, w) basis: right, up, backward."""
        return self._u.copy(), self._v.copy(), self._w.copy()

    def get_ray(self, s: float, t: float) -> Ray:
        """Generate a ray through normalized image coordinates (s, t).

        Args:
            s: Horizontal coordinate in [0, 1] (left to right).
            t: Vertical coordinate in [0, 1] (bottom to top).

        Returns:
            A Ray with origin at the camera position and unit direction toward
            the specified point on the image plane.
        """
        point_on_viewport = self._lower_left + s * self._horizontal + t * self._vertical
        return Ray(self._origin, normalize(point_on_viewport - self._origin))

    def cast_ray(self, x: int, y: int, width: int, height: int, u: float, v: float) -> Ray:
        """Generate a ray through pixel (x, y) with sub-pixel offset (u, v).

        Pixel rows are counted from the top of the image, as in the image
        buffers. With u = v = 0.5 the ray passes through the pixel center.

        Args:
            x: Pixel column (0 = left).
            y: Pixel row (0 = top).
            width: Image width in pixels.
            height: Image height in pixels.
            u: Horizontal offset within the pixel, in [0, 1).
            v: Vertical offset within the pixel, in [0, 1).
        """
        s = (x + u) / width
        t = 1.0 - (y + v) / height
        return self.get_ray(s, t)
