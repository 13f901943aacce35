"""Camera module for primary ray generation.

Components:
    pinhole: Perspective pinhole camera with look-at positioning

The camera maps pixel coordinates (plus a sub-pixel jitter) to primary rays
for the path sampler.
"""

from .pinhole import PinholeCamera

__all__ = ["PinholeCamera"]
