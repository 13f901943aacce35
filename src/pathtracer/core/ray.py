"""Ray data structure and vector utilities for Monte Carlo ray tracing.

This module provides the fundamental Ray dataclass together with the vector
and sampling helpers used throughout the path tracer. Vectors are NumPy
float64 arrays of shape (3,); every helper returns a new array and never
mutates its arguments, so rays and hit records can be shared freely between
recursive calls.

Random sampling helpers take an explicit ``numpy.random.Generator`` instead of
touching global random state. Each worker owns its generator.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.ray import Ray, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> ray.at(5.0)
    array([ 0.,  0., -5.])
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Type alias for 3D vectors
Vec3 = npt.NDArray[np.float64]

# Smallest ray parameter accepted as a hit (avoids self-intersection)
EPS = 1e-9

# Offset applied along the normal when spawning secondary rays
RAY_EPSILON = 1e-4

# Ray parameter used for "no hit"
INF = math.inf


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value) -> Vec3:
    """Convert a sequence of three numbers to a new float64 vector."""
    result = np.array(value, dtype=np.float64)
    if result.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {result.shape}")
    return result


def _readonly(value) -> Vec3:
    result = np.array(value, dtype=np.float64)
    result.setflags(write=False)
    return result


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Both vectors are copied into read-only arrays on construction, so a ray
    cannot be changed after it is built.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Should be unit length; use
            make_ray() to normalize an arbitrary direction.
    """

    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", _readonly(self.origin))
        object.__setattr__(self, "direction", _readonly(self.direction))

    def at(self, t: float) -> Vec3:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point origin + t * direction.
        """
        return self.origin + t * self.direction

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


def make_ray(origin, direction) -> Ray:
    """Create a ray from an origin and an arbitrary (non-zero) direction.

    The direction is normalized before the ray is built.
    """
    return Ray(as_vec3(origin), normalize(as_vec3(direction)))


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product of two vectors."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Returns:
        A unit vector in the same direction as v. A zero-length vector
        normalizes to the zero vector instead of producing NaNs.
    """
    n = length(v)
    if n < EPS:
        return np.zeros(3, dtype=np.float64)
    return v / n


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The mirror direction incident - 2 * dot(incident, normal) * normal.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(incident: Vec3, normal: Vec3, n1: float, n2: float) -> Vec3 | None:
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal facing the incoming ray (normalized).
        n1: Index of refraction on the incident side.
        n2: Index of refraction on the transmitted side.

    Returns:
        The unit refracted direction, or None under total internal reflection
        (negative discriminant).
    """
    nr = n1 / n2
    cos_i = min(-dot(normal, incident), 1.0)
    sin_t2 = nr * nr * (1.0 - cos_i * cos_i)
    if sin_t2 > 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin_t2)
    return normalize(nr * incident + (nr * cos_i - cos_t) * normal)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Uses rejection sampling inside the unit ball, then normalizes.
    """
    while True:
        x, y, z = rng.random(3) * 2.0 - 1.0
        d = x * x + y * y + z * z
        if EPS < d <= 1.0:
            return vec3(x, y, z) / math.sqrt(d)


def random_in_unit_disk(rng: np.random.Generator) -> tuple[float, float]:
    """Generate a random point (x, y) inside the unit disk by rejection."""
    while True:
        x, y = rng.random(2) * 2.0 - 1.0
        if x * x + y * y <= 1.0:
            return float(x), float(y)


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if abs(normal[0]) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


def local_to_world(local_dir, tangent: Vec3, bitangent: Vec3, normal: Vec3) -> Vec3:
    """Transform a direction from local (z-up) to world coordinates."""
    return local_dir[0] * tangent + local_dir[1] * bitangent + local_dir[2] * normal


def cosine_weighted_direction(normal: Vec3, u: float, v: float) -> Vec3:
    """Map two uniform samples to a cosine-weighted hemisphere direction.

    The distribution has PDF = cos(theta) / pi, so a Lambertian BRDF sampled
    this way carries a weight of exactly one.

    Args:
        normal: The surface normal defining the hemisphere orientation.
        u: Uniform sample in [0, 1), controls the polar angle.
        v: Uniform sample in [0, 1), controls the azimuth.

    Returns:
        A unit direction in the hemisphere around normal.
    """
    radius = math.sqrt(u)
    phi = 2.0 * math.pi * v
    local_dir = (
        radius * math.cos(phi),
        radius * math.sin(phi),
        math.sqrt(max(0.0, 1.0 - u)),
    )
    tangent, bitangent, n = build_onb_from_normal(normal)
    return normalize(local_to_world(local_dir, tangent, bitangent, n))


def cone(direction: Vec3, theta: float, u: float, v: float) -> Vec3:
    """Perturb a direction inside a cone of half angle theta.

    A zero angle returns the direction unchanged, which keeps perfect mirrors
    deterministic.

    Args:
        direction: The ideal (unit) direction at the center of the cone.
        theta: The cone half angle in radians.
        u: Uniform sample in [0, 1), controls the angle from the axis.
        v: Uniform sample in [0, 1), controls the rotation about the axis.

    Returns:
        A unit direction within theta of direction.
    """
    if theta < EPS:
        return direction
    theta = theta * (1.0 - (2.0 * math.acos(min(max(u, 0.0), 1.0)) / math.pi))
    m1 = math.sin(theta)
    m2 = math.cos(theta)
    a = v * 2.0 * math.pi
    tangent, bitangent, axis = build_onb_from_normal(direction)
    local_dir = (m1 * math.cos(a), m1 * math.sin(a), m2)
    return normalize(local_to_world(local_dir, tangent, bitangent, axis))
