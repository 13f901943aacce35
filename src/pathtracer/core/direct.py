"""Next-event (direct light) estimation.

At every diffuse bounce the sampler asks for an explicit estimate of the
light arriving straight from the scene's emitters. One light is chosen
uniformly at random, a point is sampled on the disk of its bounding sphere
facing the shading point, and a shadow ray checks that the light is actually
visible from there.

The contribution uses the cone subtended by the bounding sphere as a
solid-angle coverage factor:

    theta = asin(radius / distance)
    coverage = min(tan(theta)^2, 1)       (1 inside the bounding sphere)
    result = color * emittance * cos * coverage * light_count

Multiplying by light_count undoes the 1 / light_count probability of the
uniform light choice. Lights are not weighted by power or solid angle, so
scenes with many dim lights and one bright one converge slowly.
"""

from __future__ import annotations

import math

import numpy as np

from pathtracer.core.color import Color, black
from pathtracer.core.ray import (
    EPS,
    Ray,
    cross,
    dot,
    length,
    normalize,
    random_in_unit_disk,
    random_unit_vector,
)
from pathtracer.geometry.shape import bounding_sphere
from pathtracer.materials.material import material_at
from pathtracer.scene.scene import Scene


def _disk_axes(axis, rng: np.random.Generator):
    """Two unit vectors perpendicular to axis and to each other.

    The first axis is built from a random unit vector, so the sampled disk has
    a random rotation about the shading-point-to-light direction.
    """
    while True:
        u = cross(axis, random_unit_vector(rng))
        n = length(u)
        if n > 1e-6:
            u = u / n
            return u, cross(axis, u)


def light_coverage(distance: float, radius: float) -> float:
    """Fraction of the hemisphere weight given to a light of this size.

    Args:
        distance: Distance from the shading point to the light's center.
        radius: Radius of the light's bounding sphere.

    Returns:
        tan(asin(radius / distance))^2 clamped to 1; exactly 1 when the
        shading point lies inside the bounding sphere.
    """
    if distance <= radius:
        return 1.0
    theta = math.asin(radius / distance)
    coverage = math.tan(theta) ** 2
    return min(coverage, 1.0)


def estimate_direct(scene: Scene, shading_ray: Ray, rng: np.random.Generator) -> Color:
    """Estimate direct lighting at a shading point.

    Args:
        scene: The scene (its lights are sampled, its shapes occlude).
        shading_ray: Ray whose origin is the (offset) shading point and whose
            direction is the surface normal.
        rng: Random source for the light choice and the point on the light.

    Returns:
        The direct light contribution, black if there are no lights or the
        sampled point is behind the surface or occluded.
    """
    lights = scene.lights
    if not lights:
        return black()

    light = lights[int(rng.integers(len(lights)))]
    center, radius = bounding_sphere(light)
    origin = shading_ray.origin

    to_center = center - origin
    distance = length(to_center)
    if distance < EPS:
        return black()

    # Random point on the light's disk as seen from the shading point
    x, y = random_in_unit_disk(rng)
    axis = to_center / distance
    disk_u, disk_v = _disk_axes(axis, rng)
    point = center + disk_u * (x * radius) + disk_v * (y * radius)

    direction = normalize(point - origin)
    diffuse = dot(direction, shading_ray.direction)
    if diffuse <= 0.0:
        return black()

    hit = scene.intersect(Ray(origin, direction))
    if not hit.ok or hit.shape is not light:
        return black()

    coverage = light_coverage(distance, radius)
    material = material_at(light, point)
    return material.color * (material.emittance * diffuse * coverage * len(lights))
