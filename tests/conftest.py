"""Pytest configuration for path tracer tests.

Shared fixtures: a seeded random generator and a few small scenes that
several test modules render or intersect against.
"""

import numpy as np
import pytest

from pathtracer.geometry.quad import Quad
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import diffuse_material, light_material
from pathtracer.scene.scene import Scene


@pytest.fixture
def rng():
    """Seeded generator so stochastic tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def white_floor():
    """A 10x10 white diffuse quad in the z = 0 plane, normal +z."""
    return Quad((-5.0, -5.0, 0.0), (10.0, 0.0, 0.0), (0.0, 10.0, 0.0), diffuse_material((1.0, 1.0, 1.0)))


@pytest.fixture
def small_light():
    """Small, bright spherical light 5 units above the origin."""
    return Sphere((0.0, 0.0, 5.0), 0.25, light_material((1.0, 1.0, 1.0), 100.0))


@pytest.fixture
def floor_scene(white_floor):
    """The white floor alone, grey background."""
    scene = Scene(color=(0.2, 0.2, 0.2))
    scene.add(white_floor)
    return scene


@pytest.fixture
def lit_floor_scene(white_floor, small_light):
    """White floor under a small spherical light, black background."""
    scene = Scene()
    scene.add(white_floor)
    scene.add(small_light)
    return scene


@pytest.fixture
def closed_scene():
    """Camera-sized room: the inside of a grey diffuse sphere with a light inside."""
    scene = Scene()
    scene.add(Sphere((0.0, 0.0, 0.0), 10.0, diffuse_material((0.5, 0.5, 0.5))))
    scene.add(Sphere((0.0, 6.0, 0.0), 1.0, light_material((1.0, 1.0, 1.0), 5.0)))
    return scene
