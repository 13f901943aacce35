"""Sphere primitive with robust ray-sphere intersection.

This module provides a Sphere shape using the robust quadratic formula from
Ray Tracing Gems to avoid floating-point artifacts.

The robust quadratic formula avoids catastrophic cancellation when b^2 is
nearly equal to 4ac by using a reformulated calculation that maintains
numerical stability.

Spheres also expose their exact bounding sphere, which the direct light
estimator uses instead of the looser sphere around the bounding box.

Example:
    >>> from pathtracer.core.ray import Ray, vec3
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials import diffuse_material
    >>> sphere = Sphere((0, 0, -1), 0.5, diffuse_material((0.8, 0.8, 0.8)))
    >>> sphere.intersect(Ray(vec3(0, 0, 0), vec3(0, 0, -1))).t
    0.5
"""

from __future__ import annotations

import math

from pathtracer.core.ray import EPS, Ray, Vec3, as_vec3, dot, normalize
from pathtracer.geometry.box import Box
from pathtracer.materials.material import Material
from pathtracer.scene.intersection import NO_HIT, Hit


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-12:
        # Tangent ray, fall back to the standard formula
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: The surface material.
    """

    def __init__(self, center, radius: float, material: Material) -> None:
        """Create a sphere.

        Raises:
            ValueError: If radius is not positive.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = as_vec3(center)
        self.center.setflags(write=False)
        self.radius = float(radius)
        self.material = material
        r = self.radius
        self._box = Box(self.center - r, self.center + r)

    def bounding_box(self) -> Box:
        return self._box

    def bounding_sphere(self) -> tuple[Vec3, float]:
        """Exact center and radius, used for light sampling."""
        return self.center, self.radius

    def intersect(self, ray: Ray) -> Hit:
        """Test for ray-sphere intersection.

        The intersection is found by solving:
            |origin + t * direction - center|^2 = radius^2

        i.e. a*t^2 + 2*h*t + c = 0 with
            a = dot(direction, direction)
            h = dot(direction, oc)
            c = dot(oc, oc) - radius^2
            oc = origin - center

        Returns:
            The nearest Hit with t > EPS, or NO_HIT.
        """
        oc = ray.origin - self.center
        a = dot(ray.direction, ray.direction)
        h = dot(ray.direction, oc)
        c = dot(oc, oc) - self.radius * self.radius

        discriminant = h * h - a * c
        if discriminant < 0.0 or a < EPS:
            return NO_HIT

        t0, t1 = _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))
        if t0 > EPS:
            return Hit(self, t0)
        if t1 > EPS:
            return Hit(self, t1)
        return NO_HIT

    def material_at(self, point: Vec3) -> Material:
        return self.material

    def normal_at(self, point: Vec3) -> Vec3:
        """Outward unit normal at a point on the surface."""
        return normalize(point - self.center)

    def uv(self, point: Vec3) -> Vec3:
        """Longitude/latitude texture coordinates in [0, 1]."""
        p = normalize(point - self.center)
        u = math.atan2(p[2], p[0])
        v = math.atan2(p[1], math.hypot(p[0], p[2]))
        u = 1.0 - (u + math.pi) / (2.0 * math.pi)
        v = (v + math.pi / 2.0) / math.pi
        return as_vec3((u, v, 0.0))

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self.radius})"
