"""Hit records produced by scene intersection.

Two records describe an intersection:

    Hit: what the geometry returns. The nearest shape and the ray parameter
        t, nothing more. NO_HIT is the sentinel for a miss.
    HitInfo: what the integrator shades with. Computed once per hit from the
        Hit and the ray that produced it: position, normal facing the ray,
        material at the point, and the offset shading ray that starts the
        next path segment.

Example:
    >>> from pathtracer.scene.intersection import NO_HIT
    >>> NO_HIT.ok
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.ray import INF, RAY_EPSILON, Ray, Vec3, dot, normalize
from pathtracer.materials.material import Material, material_at

if TYPE_CHECKING:
    from pathtracer.geometry.shape import Shape


@dataclass(frozen=True, eq=False)
class HitInfo:
    """Shading data for a confirmed intersection.

    Attributes:
        shape: The intersected shape (owned by the scene).
        position: The intersection point.
        normal: Unit surface normal, oriented against the incoming ray.
        ray: Shading ray: origin offset from position along normal by
            RAY_EPSILON, direction equal to normal.
        material: The material at position, with textures resolved.
        inside: True if the geometric normal had to be flipped, i.e. the
            ray arrived from inside the surface.
    """

    shape: Shape
    position: Vec3
    normal: Vec3
    ray: Ray
    material: Material
    inside: bool


@dataclass(frozen=True, eq=False)
class Hit:
    """Nearest intersection along a ray.

    Attributes:
        shape: The intersected shape, or None for a miss.
        t: Ray parameter of the intersection (INF for a miss).
        info: Optional precomputed HitInfo, returned as is by hit_info().
    """

    shape: Shape | None
    t: float
    info: HitInfo | None = None

    @property
    def ok(self) -> bool:
        """True if this record is an actual hit."""
        return self.shape is not None and self.t < INF

    def __bool__(self) -> bool:
        return self.ok


# Sentinel for "ray hit nothing"
NO_HIT = Hit(None, INF)


def hit_info(hit: Hit, ray: Ray) -> HitInfo:
    """Compute shading information for a hit.

    Args:
        hit: A hit returned by a shape or scene intersection. Must be ok.
        ray: The ray that produced the hit.

    Returns:
        The HitInfo for the hit.

    Raises:
        ValueError: If hit is a miss.
    """
    if not hit.ok:
        raise ValueError("Cannot compute hit info for a miss")
    if hit.info is not None:
        return hit.info

    shape = hit.shape
    position = ray.at(hit.t)
    normal = normalize(shape.normal_at(position))
    material = material_at(shape, position)

    inside = False
    if dot(normal, ray.direction) > 0.0:
        normal = -normal
        inside = True

    shading_ray = Ray(position + normal * RAY_EPSILON, normal)
    return HitInfo(
        shape=shape,
        position=position,
        normal=normal,
        ray=shading_ray,
        material=material,
        inside=inside,
    )
