"""Path sampler: the recursive Monte Carlo integrator.

PathSampler.sample() estimates the radiance arriving along a camera ray. At
each hit it:

1. Adds the surface's emission when it is eligible (see below).
2. Splits the remaining sample budget into an n x n jittered grid,
   n = floor(sqrt(samples)), and bounces once per cell (and per lobe when
   the specular mode splits diffuse and specular sampling).
3. Recurses along each bounce with a budget of one sample and one less
   bounce of depth, adding next-event direct lighting at diffuse bounces.

Only the primary hit gets the full first_hit_samples budget; every deeper
level collapses to a single sample, so the branching factor below the first
hit is one or two.

Emission eligibility: with direct lighting enabled, a light reached through a
diffuse bounce has already been counted by the direct light estimator and
contributes nothing. Camera rays and specular/refractive continuations still
see emitters directly.

Paths are cut at max_bounces with no Russian roulette, so the estimate is
biased low for shallow depth limits (energy carried by longer paths is lost).

Example:
    >>> import numpy as np
    >>> from pathtracer.core.ray import make_ray
    >>> from pathtracer.core.sampler import PathSampler, SpecularMode
    >>> from pathtracer.scene import Scene
    >>> sampler = PathSampler(first_hit_samples=16, max_bounces=4,
    ...                       specular_mode=SpecularMode.FIRST)
    >>> scene = Scene(color=(0.2, 0.2, 0.2))
    >>> sampler.sample(scene, make_ray((0, 0, 0), (0, 0, -1)), np.random.default_rng(0))
    array([0.2, 0.2, 0.2])
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from pathtracer.core.bounce import BounceMode, bounce
from pathtracer.core.color import Color, black, mix
from pathtracer.core.direct import estimate_direct
from pathtracer.core.ray import Ray
from pathtracer.scene.intersection import hit_info
from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)


class SpecularMode(IntEnum):
    """Policy for splitting diffuse and specular sampling.

    NAIVE: never split; each cell takes one ANY bounce.
    FIRST: split into DIFFUSE and SPECULAR bounces only while the grid has
        more than one cell (in practice, at the first hit).
    ALL: always split.
    """

    NAIVE = 0
    FIRST = 1
    ALL = 2


@dataclass(frozen=True)
class PathSampler:
    """Immutable path tracing configuration and entry point.

    A sampler holds no mutable state; one instance can be shared by any
    number of threads as long as each thread passes its own random
    generator.

    Attributes:
        first_hit_samples: Sample budget at the primary hit (>= 1). A perfect
            square is recommended since the grid is floor(sqrt(n)) wide.
        max_bounces: Maximum recursion depth (>= 0).
        direct_lighting: Sample lights explicitly at diffuse bounces.
        specular_mode: Diffuse/specular split policy.
    """

    first_hit_samples: int = 16
    max_bounces: int = 4
    direct_lighting: bool = True
    specular_mode: SpecularMode = SpecularMode.NAIVE

    def __post_init__(self) -> None:
        if self.first_hit_samples < 1:
            raise ValueError(f"first_hit_samples must be >= 1, got {self.first_hit_samples}")
        if self.max_bounces < 0:
            raise ValueError(f"max_bounces must be >= 0, got {self.max_bounces}")
        object.__setattr__(self, "first_hit_samples", int(self.first_hit_samples))
        object.__setattr__(self, "max_bounces", int(self.max_bounces))
        object.__setattr__(self, "specular_mode", SpecularMode(self.specular_mode))
        logger.debug("Configured %r", self)

    def sample(self, scene: Scene, ray: Ray, rng: np.random.Generator) -> Color:
        """Estimate the radiance arriving along a camera ray.

        Args:
            scene: The scene to render (read-only).
            ray: The primary ray.
            rng: This caller's random generator. Do not share a generator
                between concurrent calls.

        Returns:
            A finite RGB color with non-negative components.
        """
        return self._sample(scene, ray, True, self.first_hit_samples, self.max_bounces, rng)

    def bounce_modes(self, n: int) -> tuple[BounceMode, ...]:
        """Bounce modes to evaluate per cell of an n x n grid."""
        if self.specular_mode == SpecularMode.ALL or (self.specular_mode == SpecularMode.FIRST and n > 1):
            return (BounceMode.DIFFUSE, BounceMode.SPECULAR)
        return (BounceMode.ANY,)

    def _sample(
        self,
        scene: Scene,
        ray: Ray,
        emission: bool,
        samples: int,
        depth: int,
        rng: np.random.Generator,
    ) -> Color:
        if depth < 0:
            return black()

        hit = scene.intersect(ray)
        if not hit.ok:
            return scene.background(ray.direction)

        info = hit_info(hit, ray)
        material = info.material
        result = black()

        if material.is_emissive:
            if self.direct_lighting and not emission:
                return black()
            # Scaled by samples because the total is divided by n * n below
            result = result + material.color * (material.emittance * samples)

        n = max(math.isqrt(samples), 1)
        modes = self.bounce_modes(n)
        for cell_u in range(n):
            for cell_v in range(n):
                for mode in modes:
                    fu = (cell_u + rng.random()) / n
                    fv = (cell_v + rng.random()) / n
                    new_ray, reflected, weight = bounce(ray, info, fu, fv, mode, rng)
                    if mode == BounceMode.ANY:
                        weight = 1.0
                    if weight <= 0.0:
                        continue

                    if reflected:
                        indirect = self._sample(scene, new_ray, True, 1, depth - 1, rng)
                        tinted = mix(indirect, material.color * indirect, material.tint)
                        result = result + tinted * weight
                    else:
                        indirect = self._sample(scene, new_ray, False, 1, depth - 1, rng)
                        direct = black()
                        if self.direct_lighting:
                            direct = estimate_direct(scene, info.ray, rng)
                        result = result + material.color * (direct + indirect) * weight

        return result / (n * n)
