"""Image output for rendered results.

Components:
    display: Tone mapping and gamma encoding of linear radiance
    export: 8-bit conversion and PNG export via Pillow

Example:
    >>> from pathtracer.preview import save_png
    >>> save_png(renderer, "output.png", tone_map="reinhard", gamma=2.2)
"""

from .display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    tone_map_exposure,
    tone_map_reinhard,
)
from .export import compute_rmse, image_to_uint8, save_png, save_png_from_array

__all__ = [
    "ToneMapMethod",
    "apply_gamma",
    "compute_rmse",
    "image_to_uint8",
    "process_image_for_display",
    "save_png",
    "save_png_from_array",
    "tone_map_exposure",
    "tone_map_reinhard",
]
