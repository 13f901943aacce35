"""Shape capability interface.

The path tracer never switches on concrete shape classes. A shape is anything
that provides the methods of the Shape protocol; spheres additionally expose
an exact bounding sphere through the optional ``bounding_sphere`` capability,
which the direct light estimator prefers over the box-derived sphere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathtracer.core.ray import Ray, Vec3
    from pathtracer.geometry.box import Box
    from pathtracer.materials.material import Material
    from pathtracer.scene.intersection import Hit


@runtime_checkable
class Shape(Protocol):
    """Geometric primitive as seen by the scene and the integrator."""

    def bounding_box(self) -> Box: ...

    def intersect(self, ray: Ray) -> Hit: ...

    def material_at(self, point: Vec3) -> Material: ...

    def normal_at(self, point: Vec3) -> Vec3: ...

    def uv(self, point: Vec3) -> Vec3: ...


def bounding_sphere(shape: Shape) -> tuple[Vec3, float]:
    """Center and radius of a sphere enclosing the shape.

    Uses the shape's own ``bounding_sphere()`` when it has one, otherwise the
    sphere circumscribing its bounding box.
    """
    exact = getattr(shape, "bounding_sphere", None)
    if exact is not None:
        return exact()
    box = shape.bounding_box()
    return box.center(), box.outer_radius()
