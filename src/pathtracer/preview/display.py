"""Display transforms for linear radiance images.

The path sampler produces unbounded linear radiance. Before an image can be
shown or written as 8-bit sRGB it goes through the pipeline in
process_image_for_display():

1. Exposure scaling and optional tone mapping (Reinhard or exponential)
2. Gamma encoding
3. Clamping to [0, 1]
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

ToneMapMethod = Literal["none", "reinhard", "exposure"]

TONE_MAP_METHODS: tuple[str, ...] = ("none", "reinhard", "exposure")


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Global Reinhard operator, c / (1 + c), applied per channel."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Exponential exposure curve, 1 - exp(-c * exposure).

    Raises:
        ValueError: If exposure is not positive.
    """
    if exposure <= 0.0:
        raise ValueError(f"exposure must be positive, got {exposure}")
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Encode a [0, 1] image with out = in ** (1 / gamma).

    Values are clamped first so negative or HDR pixels never produce NaN.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return np.asarray(image, dtype=np.float32)
    return np.power(np.clip(image, 0.0, 1.0), 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Turn a linear radiance image into display values in [0, 1].

    Args:
        image: Linear image of shape (H, W, 3).
        tone_map: One of "none", "reinhard" or "exposure".
        gamma: Display gamma (2.2 for sRGB, 1.0 to skip).
        exposure: Exposure used by the "exposure" tone map.

    Raises:
        ValueError: For an unknown tone mapping method.
    """
    if tone_map not in TONE_MAP_METHODS:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = np.array(image, dtype=np.float32)
    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)
