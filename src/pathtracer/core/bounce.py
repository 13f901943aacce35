"""Bounce protocol: how a path continues from a surface.

Given a hit, two uniform samples and a requested BounceMode, bounce() picks
the next ray, tells whether it was a specular/refractive ("reflected")
continuation or a diffuse one, and returns the weight of that choice.

Every surface is a mixture of a specular lobe and a non-specular remainder:

    p = material.reflectivity              if set
    p = fresnel_reflectance(n1, n2, cos_i)  otherwise

With probability mass p the ray reflects (perturbed inside a gloss cone).
The remaining 1 - p is either refracted (transparent materials) or scattered
diffusely with a cosine-weighted direction.

Bounce modes:
    ANY: one stochastic choice covers the whole mixture; the caller treats
        the result as a full-BSDF sample (weight 1).
    DIFFUSE: only the non-specular remainder (refraction or diffuse), with
        weight 1 - p.
    SPECULAR: only the reflection lobe, with weight p.

A mode that selects an empty lobe (SPECULAR on a pure diffuse surface,
DIFFUSE on a perfect mirror) returns weight 0 and the caller skips it. This
lets the sampler split its budget between the two lobes without counting
anything twice.

Example:
    >>> from pathtracer.core.bounce import fresnel_reflectance
    >>> round(fresnel_reflectance(1.0, 1.5, 1.0), 4)
    0.04
"""

from __future__ import annotations

import math
from enum import IntEnum

import numpy as np

from pathtracer.core.ray import (
    RAY_EPSILON,
    Ray,
    cone,
    cosine_weighted_direction,
    dot,
    reflect,
    refract,
)
from pathtracer.scene.intersection import HitInfo

# Denominators below this are treated as grazing incidence
_GRAZING = 1e-12


class BounceMode(IntEnum):
    """Which lobe of the material a bounce should sample."""

    ANY = 0
    DIFFUSE = 1
    SPECULAR = 2


def fresnel_reflectance(n1: float, n2: float, cos_i: float) -> float:
    """Unpolarized Fresnel reflectance at a smooth interface.

    Args:
        n1: Index of refraction on the incident side.
        n2: Index of refraction on the transmitted side.
        cos_i: Cosine of the angle between the incident ray and the normal
            (clamped to [0, 1]).

    Returns:
        Fraction of light reflected, in [0, 1]. Total internal reflection and
        exactly grazing incidence both return 1. Matching indices have no
        interface and return 0.
    """
    if n1 == n2:
        return 0.0
    cos_i = min(max(cos_i, 0.0), 1.0)
    nr = n1 / n2
    sin_t2 = nr * nr * (1.0 - cos_i * cos_i)
    if sin_t2 > 1.0:
        return 1.0
    cos_t = math.sqrt(1.0 - sin_t2)

    denom_orth = n1 * cos_i + n2 * cos_t
    denom_par = n2 * cos_i + n1 * cos_t
    if denom_orth < _GRAZING or denom_par < _GRAZING:
        return 1.0
    r_orth = (n1 * cos_i - n2 * cos_t) / denom_orth
    r_par = (n2 * cos_i - n1 * cos_t) / denom_par
    return min((r_orth * r_orth + r_par * r_par) / 2.0, 1.0)


def specular_probability(ray: Ray, info: HitInfo) -> float:
    """Probability mass of the specular lobe for this hit."""
    material = info.material
    if material.reflectivity is not None:
        return material.reflectivity
    n1, n2 = 1.0, material.index
    if info.inside:
        n1, n2 = n2, n1
    return fresnel_reflectance(n1, n2, -dot(info.normal, ray.direction))


def bounce(
    ray: Ray,
    info: HitInfo,
    u: float,
    v: float,
    mode: BounceMode,
    rng: np.random.Generator,
) -> tuple[Ray, bool, float]:
    """Continue a path from a surface hit.

    Args:
        ray: The incoming ray that produced the hit.
        info: Shading information for the hit.
        u: Uniform sample in [0, 1) for the direction.
        v: Uniform sample in [0, 1) for the direction.
        mode: Which lobe to sample.
        rng: Random source for the lobe choice and transparency coin flip.

    Returns:
        Tuple (new_ray, reflected, weight). reflected is True for specular
        and refracted continuations and False for diffuse ones. A weight of
        0 means the requested lobe is empty and the sample must be skipped.
    """
    material = info.material
    p = specular_probability(ray, info)

    if mode == BounceMode.ANY:
        reflected = rng.random() < p
    elif mode == BounceMode.SPECULAR:
        if p <= 0.0:
            return info.ray, True, 0.0
        reflected = True
    else:
        if 1.0 - p <= 0.0:
            return info.ray, False, 0.0
        reflected = False

    if reflected:
        direction = cone(reflect(ray.direction, info.normal), material.gloss, u, v)
        return Ray(info.ray.origin, direction), True, p

    if material.transparency > 0.0 and (material.transparency >= 1.0 or rng.random() < material.transparency):
        n1, n2 = 1.0, material.index
        if info.inside:
            n1, n2 = n2, n1
        refracted = refract(ray.direction, info.normal, n1, n2)
        if refracted is None:
            # Total internal reflection
            direction = cone(reflect(ray.direction, info.normal), material.gloss, u, v)
            return Ray(info.ray.origin, direction), True, 1.0 - p
        origin = info.position - info.normal * RAY_EPSILON
        return Ray(origin, cone(refracted, material.gloss, u, v)), True, 1.0 - p

    direction = cosine_weighted_direction(info.normal, u, v)
    return Ray(info.ray.origin, direction), False, 1.0 - p
