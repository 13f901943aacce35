"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector utilities and sampling helpers
    color: Linear RGB color helpers
    bounce: The bounce protocol (diffuse / specular / refractive continuation)
    direct: Next-event (direct light) estimation
    sampler: The recursive Monte Carlo integrator (PathSampler)
    progressive: Iterative, multi-worker accumulation of sampler results

The integrator solves the rendering equation by recursively sampling bounce
directions from camera rays, stratifying the first hit and sampling lights
explicitly at diffuse bounces. Every sampling routine takes an explicit
``numpy.random.Generator``; nothing here touches global random state.

Only the dependency-free leaves are re-exported here. Import the integrator
from ``pathtracer.core.sampler`` (or the top-level ``pathtracer`` package).
"""

from .color import Color, as_color, black, hex_color, mix, rgb, white
from .ray import (
    EPS,
    INF,
    RAY_EPSILON,
    Ray,
    Vec3,
    as_vec3,
    build_onb_from_normal,
    cone,
    cosine_weighted_direction,
    cross,
    dot,
    length,
    local_to_world,
    make_ray,
    normalize,
    random_in_unit_disk,
    random_unit_vector,
    reflect,
    refract,
    vec3,
)

__all__ = [
    "Color",
    "EPS",
    "INF",
    "RAY_EPSILON",
    "Ray",
    "Vec3",
    "as_color",
    "as_vec3",
    "black",
    "build_onb_from_normal",
    "cone",
    "cosine_weighted_direction",
    "cross",
    "dot",
    "hex_color",
    "length",
    "local_to_world",
    "make_ray",
    "mix",
    "normalize",
    "random_in_unit_disk",
    "random_unit_vector",
    "reflect",
    "refract",
    "rgb",
    "vec3",
    "white",
]
