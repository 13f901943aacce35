"""Materials module for surface scattering and emission.

Components:
    material: The Material value, presets and texture resolution

A single Material type covers diffuse, glossy, metallic, refractive and
emissive surfaces; the bounce protocol (pathtracer.core.bounce) decides how a
path continues from its parameters.
"""

from .material import (
    Material,
    Texture,
    clear_material,
    diffuse_material,
    glossy_material,
    light_material,
    material_at,
    metallic_material,
    specular_material,
    transparent_material,
)

__all__ = [
    "Material",
    "Texture",
    "clear_material",
    "diffuse_material",
    "glossy_material",
    "light_material",
    "material_at",
    "metallic_material",
    "specular_material",
    "transparent_material",
]
