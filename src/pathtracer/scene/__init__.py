"""Scene module for geometry containers and hit records.

Components:
    intersection: Hit / HitInfo records and the NO_HIT sentinel
    texture: Image textures and environment-map direction mapping
    scene: The Scene container (nearest-hit queries, lights, background)
    cornell_box: Factory for the classic Cornell box test scene

Import the Cornell box factory from ``pathtracer.scene.cornell_box``.
"""

from .intersection import NO_HIT, Hit, HitInfo, hit_info
from .scene import Scene
from .texture import ImageTexture, load_texture, texture_direction_uv

__all__ = [
    "NO_HIT",
    "Hit",
    "HitInfo",
    "ImageTexture",
    "Scene",
    "hit_info",
    "load_texture",
    "texture_direction_uv",
]
