"""Axis-aligned bounding boxes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Vec3, as_vec3, length

if TYPE_CHECKING:
    from pathtracer.geometry.shape import Shape


@dataclass(frozen=True, eq=False)
class Box:
    """An axis-aligned box spanning min to max (inclusive)."""

    min: Vec3
    max: Vec3

    def __post_init__(self) -> None:
        lo = as_vec3(self.min)
        hi = as_vec3(self.max)
        lo.setflags(write=False)
        hi.setflags(write=False)
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    @classmethod
    def from_points(cls, points: Iterable) -> Box:
        """Smallest box containing every point."""
        stacked = np.array([as_vec3(p) for p in points])
        return cls(stacked.min(axis=0), stacked.max(axis=0))

    def center(self) -> Vec3:
        return (self.min + self.max) * 0.5

    def size(self) -> Vec3:
        return self.max - self.min

    def outer_radius(self) -> float:
        """Radius of the sphere through the box corners, centered on the box."""
        return length(self.min - self.center())

    def extend(self, other: Box) -> Box:
        """Smallest box containing both boxes."""
        return Box(np.minimum(self.min, other.min), np.maximum(self.max, other.max))

    def contains(self, point) -> bool:
        p = as_vec3(point)
        return bool(np.all(p >= self.min) and np.all(p <= self.max))

    def __repr__(self) -> str:
        return f"Box(min={self.min.tolist()}, max={self.max.tolist()})"


def box_for_shapes(shapes: Iterable[Shape]) -> Box | None:
    """Bounding box of a collection of shapes, or None if it is empty."""
    result = None
    for shape in shapes:
        box = shape.bounding_box()
        result = box if result is None else result.extend(box)
    return result
