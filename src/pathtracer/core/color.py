"""Linear RGB color helpers.

Colors are NumPy float64 arrays of shape (3,) so the usual arithmetic
operators give componentwise add, multiply and scale. Values are never
clamped here: emissive colors routinely exceed one.
"""

import numpy as np
import numpy.typing as npt

Color = npt.NDArray[np.float64]


def rgb(r: float, g: float, b: float) -> Color:
    """Create a color from its components."""
    return np.array((r, g, b), dtype=np.float64)


def black() -> Color:
    """Return a new zero color."""
    return np.zeros(3, dtype=np.float64)


def white() -> Color:
    """Return a new (1, 1, 1) color."""
    return np.ones(3, dtype=np.float64)


def as_color(value) -> Color:
    """Convert a sequence of three numbers to a new color array.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    result = np.array(value, dtype=np.float64)
    if result.shape != (3,):
        raise ValueError(f"Expected an RGB triple, got shape {result.shape}")
    return result


def mix(a: Color, b: Color, pct: float) -> Color:
    """Linearly blend from a (pct=0) to b (pct=1)."""
    return a * (1.0 - pct) + b * pct


def hex_color(value: int) -> Color:
    """Create a linear color from a 0xRRGGBB integer (sRGB, gamma 2.2)."""
    r = ((value >> 16) & 0xFF) / 255.0
    g = ((value >> 8) & 0xFF) / 255.0
    b = (value & 0xFF) / 255.0
    return np.power(rgb(r, g, b), 2.2)
