"""Image textures for surface colors and environment maps.

An ImageTexture wraps a linear float RGB array of shape (H, W, 3) and samples
it bilinearly with wrap-around addressing. The same class serves as an
equirectangular environment map: texture_direction_uv() converts a ray
direction into longitude/latitude texture coordinates.

Example:
    >>> import numpy as np
    >>> from pathtracer.scene.texture import ImageTexture
    >>> sky = ImageTexture(np.full((4, 8, 3), 0.5))
    >>> sky.sample(0.25, 0.75).tolist()
    [0.5, 0.5, 0.5]
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pathtracer.core.color import Color
from pathtracer.core.ray import Vec3

logger = logging.getLogger(__name__)

# Gamma used to linearize 8-bit image files
TEXTURE_GAMMA = 2.2


class ImageTexture:
    """Bilinearly filtered RGB texture.

    Coordinates wrap around in both directions. v = 0 addresses the bottom
    row of the image and v = 1 the top row.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        data: Read-only linear RGB array of shape (height, width, 3).
    """

    def __init__(self, data: npt.ArrayLike) -> None:
        """Create a texture from a linear RGB array.

        Raises:
            ValueError: If data is not a finite, non-negative, non-empty
                (H, W, 3) array.
        """
        array = np.array(data, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3 or array.shape[0] == 0 or array.shape[1] == 0:
            raise ValueError(f"Texture data must have shape (H, W, 3), got {array.shape}")
        if not np.all(np.isfinite(array)):
            raise ValueError("Texture data must be finite")
        if np.any(array < 0.0):
            raise ValueError(f"Texture data must be non-negative, got minimum {array.min()}")
        array.setflags(write=False)
        self.data = array
        self.height, self.width = array.shape[:2]

    def sample(self, u: float, v: float) -> Color:
        """Sample the texture at (u, v) with bilinear filtering."""
        u = u % 1.0
        v = v % 1.0
        x = u * (self.width - 1)
        y = (1.0 - v) * (self.height - 1)
        x0 = int(x)
        y0 = int(y)
        x1 = min(x0 + 1, self.width - 1)
        y1 = min(y0 + 1, self.height - 1)
        fx = x - x0
        fy = y - y0

        d = self.data
        top = d[y0, x0] * (1.0 - fx) + d[y0, x1] * fx
        bottom = d[y1, x0] * (1.0 - fx) + d[y1, x1] * fx
        return top * (1.0 - fy) + bottom * fy

    def __repr__(self) -> str:
        return f"ImageTexture(width={self.width}, height={self.height})"


def texture_direction_uv(direction: Vec3, angle: float = 0.0) -> tuple[float, float]:
    """Map a direction to equirectangular (u, v) coordinates.

    Longitude comes from atan2(z, x) rotated by angle, latitude from the
    elevation of y above the xz-plane. Both are remapped to [0, 1].

    Args:
        direction: Unit direction (e.g. of a ray leaving the scene).
        angle: Longitude rotation in radians.

    Returns:
        Tuple (u, v).
    """
    dx, dy, dz = float(direction[0]), float(direction[1]), float(direction[2])
    u = math.atan2(dz, dx) + angle
    v = math.atan2(dy, math.hypot(dx, dz))
    u = (u + math.pi) / (2.0 * math.pi)
    v = (v + math.pi / 2.0) / math.pi
    return u, v


def load_texture(filepath: str | Path, gamma: float = TEXTURE_GAMMA) -> ImageTexture:
    """Load an image file as a linear texture.

    Args:
        filepath: Any image format Pillow can read.
        gamma: Decoding gamma applied to the normalized 8-bit values.

    Returns:
        An ImageTexture with linear RGB data.
    """
    with PILImage.open(filepath) as image:
        rgb8 = np.asarray(image.convert("RGB"), dtype=np.float64)
    texture = ImageTexture(np.power(rgb8 / 255.0, gamma))
    logger.info("Loaded texture %s (%dx%d)", filepath, texture.width, texture.height)
    return texture
