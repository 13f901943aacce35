"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    shape: The Shape capability protocol and bounding-sphere lookup
    box: Axis-aligned bounding boxes
    sphere: Sphere primitive with robust ray-sphere intersection
    quad: Parallelogram primitive (walls, area lights)

Spatial acceleration is deliberately absent: the scene tests every shape.

Ray-object intersection follows the pattern:
    hit = shape.intersect(ray)  # Hit with t > EPS, or NO_HIT
"""

from .box import Box, box_for_shapes
from .quad import Quad
from .shape import Shape, bounding_sphere
from .sphere import Sphere

__all__ = [
    "Box",
    "Quad",
    "Shape",
    "Sphere",
    "bounding_sphere",
    "box_for_shapes",
]
