"""Surface material model.

A Material is a small immutable value describing how a surface scatters and
emits light. The path tracer does not dispatch on material "types"; every
surface is a mixture controlled by a handful of parameters:

    - color: linear RGB base color (may exceed 1 for emitters)
    - emittance: radiant intensity multiplier (> 0 marks a light)
    - index: index of refraction (1.0 = no refraction)
    - transparency: fraction of non-reflected light that is refracted
    - reflectivity: specular probability, or None to use the Fresnel term
    - gloss: cone half angle (radians) around the ideal specular direction
    - tint: how much the base color modulates specular light

The factory functions below build the common presets (diffuse, glossy,
glass, metal, light).

Example:
    >>> from pathtracer.materials import glossy_material, light_material
    >>> plastic = glossy_material((0.8, 0.2, 0.2), index=1.5, gloss=0.1)
    >>> lamp = light_material((1.0, 1.0, 1.0), emittance=30.0)
    >>> lamp.is_emissive
    True
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import numpy as np

from pathtracer.core.color import Color, as_color, black, white

if TYPE_CHECKING:
    from pathtracer.core.ray import Vec3
    from pathtracer.geometry.shape import Shape


class Texture(Protocol):
    """Anything that maps (u, v) coordinates to a color."""

    def sample(self, u: float, v: float) -> Color: ...


@dataclass(frozen=True, eq=False)
class Material:
    """Surface scattering and emission parameters.

    Attributes:
        color: Linear RGB base color, components >= 0.
        texture: Optional texture replacing color at the surface UV.
        emittance: Emission multiplier, >= 0. Positive values mark lights.
        index: Index of refraction, > 0.
        gloss: Specular cone half angle in radians, >= 0 (0 = perfect mirror).
        tint: Blend in [0, 1] between passing specular light through
            unmodified (0) and multiplying it by color (1).
        reflectivity: Specular probability in [0, 1], or None to derive it
            from the Fresnel equations at each hit.
        transparency: Fraction in [0, 1] of the non-reflected light that is
            refracted instead of diffusely scattered.
    """

    color: Color = field(default_factory=white)
    texture: Texture | None = None
    emittance: float = 0.0
    index: float = 1.0
    gloss: float = 0.0
    tint: float = 0.0
    reflectivity: float | None = None
    transparency: float = 0.0

    def __post_init__(self) -> None:
        color = as_color(self.color)
        if not np.all(np.isfinite(color)) or np.any(color < 0.0):
            raise ValueError(f"Material color must be finite and non-negative, got {color.tolist()}")
        color.setflags(write=False)
        object.__setattr__(self, "color", color)

        if not math.isfinite(self.emittance) or self.emittance < 0.0:
            raise ValueError(f"Emittance must be non-negative, got {self.emittance}")
        if not math.isfinite(self.index) or self.index <= 0.0:
            raise ValueError(f"Index of refraction must be positive, got {self.index}")
        if self.gloss < 0.0:
            raise ValueError(f"Gloss must be non-negative, got {self.gloss}")
        if not 0.0 <= self.tint <= 1.0:
            raise ValueError(f"Tint must be in [0, 1], got {self.tint}")
        if not 0.0 <= self.transparency <= 1.0:
            raise ValueError(f"Transparency must be in [0, 1], got {self.transparency}")
        if self.reflectivity is not None and not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"Reflectivity must be in [0, 1] or None, got {self.reflectivity}")

    @property
    def is_emissive(self) -> bool:
        """True if the material emits light."""
        return self.emittance > 0.0

    @property
    def is_transparent(self) -> bool:
        """True if any light is refracted through the surface."""
        return self.transparency > 0.0

    def replace(self, **changes) -> Material:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


# =============================================================================
# Material Presets
# =============================================================================


def diffuse_material(color) -> Material:
    """Ideal diffuse (Lambertian) surface."""
    return Material(color=color)


def specular_material(color, index: float) -> Material:
    """Diffuse base with a Fresnel-weighted mirror coat (e.g. polished plastic)."""
    return Material(color=color, index=index)


def glossy_material(color, index: float, gloss: float) -> Material:
    """Diffuse base with a Fresnel-weighted glossy coat."""
    return Material(color=color, index=index, gloss=gloss)


def clear_material(index: float, gloss: float = 0.0) -> Material:
    """Colorless glass. Refracted and reflected light pass through untinted."""
    return Material(color=black(), index=index, gloss=gloss, transparency=1.0)


def transparent_material(color, index: float, gloss: float = 0.0, tint: float = 0.0) -> Material:
    """Colored glass; tint controls how strongly color filters the light."""
    return Material(color=color, index=index, gloss=gloss, tint=tint, transparency=1.0)


def metallic_material(color, gloss: float = 0.0, tint: float = 1.0) -> Material:
    """Opaque metal: every bounce is specular."""
    return Material(color=color, gloss=gloss, tint=tint, reflectivity=1.0)


def light_material(color, emittance: float) -> Material:
    """Diffuse emitter.

    Raises:
        ValueError: If emittance is not positive.
    """
    if emittance <= 0.0:
        raise ValueError(f"Light emittance must be positive, got {emittance}")
    return Material(color=color, emittance=emittance)


def material_at(shape: Shape, point: Vec3) -> Material:
    """Look up a shape's material at a point, resolving its texture.

    If the material carries a texture, the returned copy has its color
    replaced by the texture sampled at the shape's UV for point.
    """
    material = shape.material_at(point)
    if material.texture is None:
        return material
    uv = shape.uv(point)
    color = np.maximum(material.texture.sample(float(uv[0]), float(uv[1])), 0.0)
    return material.replace(color=color, texture=None)
