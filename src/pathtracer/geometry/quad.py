"""Quad primitive with ray-quad intersection.

A quad is defined by:
- corner: A corner point of the quad
- edge_u: Edge vector from corner to adjacent corner
- edge_v: Edge vector from corner to other adjacent corner

The quad spans the parallelogram from corner to corner+edge_u+edge_v. The
normal is normalize(cross(edge_u, edge_v)), pointing in the direction
determined by the right-hand rule.

Ray-quad intersection uses the parametric plane test:
1. Find where ray intersects the plane containing the quad
2. Check if the intersection point lies within the quad bounds

Quads have no exact bounding sphere, so quad lights are sampled through the
sphere around their bounding box.

Example:
    >>> from pathtracer.geometry.quad import Quad
    >>> from pathtracer.materials import diffuse_material
    >>> # Floor quad at y=0, spanning x=[0,1] and z=[0,1]
    >>> floor = Quad((0, 0, 0), (0, 0, 1), (1, 0, 0), diffuse_material((1, 1, 1)))
    >>> floor.normal.tolist()
    [0.0, 1.0, 0.0]
"""

from __future__ import annotations

from pathtracer.core.ray import EPS, Ray, Vec3, as_vec3, cross, dot, length, normalize
from pathtracer.geometry.box import Box
from pathtracer.materials.material import Material
from pathtracer.scene.intersection import NO_HIT, Hit


class Quad:
    """A quad (parallelogram) defined by a corner point and two edge vectors.

    The quad represents the parallelogram with vertices at:
        corner, corner+edge_u, corner+edge_v, corner+edge_u+edge_v

    Attributes:
        corner: The corner point of the quad.
        edge_u: Edge vector from corner to adjacent corner.
        edge_v: Edge vector from corner to other adjacent corner.
        normal: Unit normal, normalize(cross(edge_u, edge_v)).
        material: The surface material.
    """

    def __init__(self, corner, edge_u, edge_v, material: Material) -> None:
        """Create a quad and precompute its plane frame.

        Raises:
            ValueError: If the edges are parallel or zero length.
        """
        self.corner = as_vec3(corner)
        self.edge_u = as_vec3(edge_u)
        self.edge_v = as_vec3(edge_v)
        self.material = material

        n = cross(self.edge_u, self.edge_v)
        n_dot_n = dot(n, n)
        if n_dot_n < 1e-12:
            raise ValueError("Degenerate quad: edge vectors are parallel or zero")

        self.normal = normalize(n)
        # Plane equation: dot(normal, P) = d
        self._d = dot(self.normal, self.corner)
        # alpha = dot(w_u, P - Q), beta = dot(w_v, P - Q)
        # satisfy dot(w_u, u) = 1, dot(w_u, v) = 0, dot(w_v, u) = 0, dot(w_v, v) = 1
        self._w_u = cross(self.edge_v, n) / n_dot_n
        self._w_v = cross(n, self.edge_u) / n_dot_n
        self._box = Box.from_points(
            (
                self.corner,
                self.corner + self.edge_u,
                self.corner + self.edge_v,
                self.corner + self.edge_u + self.edge_v,
            )
        )

    @property
    def area(self) -> float:
        return length(cross(self.edge_u, self.edge_v))

    def bounding_box(self) -> Box:
        return self._box

    def _local(self, point: Vec3) -> tuple[float, float]:
        p_minus_q = point - self.corner
        return dot(self._w_u, p_minus_q), dot(self._w_v, p_minus_q)

    def intersect(self, ray: Ray) -> Hit:
        """Test for ray-quad intersection.

        The ray-plane intersection is found by solving:
            origin + t * direction = corner + alpha * edge_u + beta * edge_v

        Taking the dot product with the normal:
            t = (d - dot(normal, origin)) / dot(normal, direction)

        Returns:
            Hit with t > EPS inside the quad bounds, or NO_HIT.
        """
        denom = dot(self.normal, ray.direction)
        # Ray parallel to plane
        if abs(denom) < 1e-12:
            return NO_HIT

        t = (self._d - dot(self.normal, ray.origin)) / denom
        if t <= EPS:
            return NO_HIT

        alpha, beta = self._local(ray.at(t))
        if 0.0 <= alpha <= 1.0 and 0.0 <= beta <= 1.0:
            return Hit(self, t)
        return NO_HIT

    def material_at(self, point: Vec3) -> Material:
        return self.material

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def uv(self, point: Vec3) -> Vec3:
        """The quad's own (alpha, beta) coordinates of point."""
        alpha, beta = self._local(point)
        return as_vec3((alpha, beta, 0.0))

    def __repr__(self) -> str:
        return (
            f"Quad(corner={self.corner.tolist()}, edge_u={self.edge_u.tolist()}, "
            f"edge_v={self.edge_v.tolist()})"
        )
