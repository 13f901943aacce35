"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere
- Spheres behind the ray origin
- Texture coordinates and bounding volumes
"""

import math

import numpy as np
import pytest

from pathtracer.core.ray import EPS, make_ray
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import diffuse_material


@pytest.fixture
def unit_sphere():
    return Sphere((0.0, 0.0, 0.0), 1.0, diffuse_material((0.5, 0.5, 0.5)))


class TestSphereBasics:
    """Tests for Sphere construction and bounds."""

    def test_rejects_non_positive_radius(self):
        """Test that zero or negative radii raise ValueError."""
        with pytest.raises(ValueError, match="radius"):
            Sphere((0, 0, 0), 0.0, diffuse_material((1, 1, 1)))

    def test_bounding_box(self):
        """Test the box spans center +/- radius."""
        sphere = Sphere((1.0, 2.0, 3.0), 0.5, diffuse_material((1, 1, 1)))
        box = sphere.bounding_box()
        np.testing.assert_allclose(box.min, [0.5, 1.5, 2.5])
        np.testing.assert_allclose(box.max, [1.5, 2.5, 3.5])

    def test_bounding_sphere_is_exact(self):
        """Test that the bounding sphere is the sphere itself."""
        sphere = Sphere((1.0, 2.0, 3.0), 0.5, diffuse_material((1, 1, 1)))
        center, radius = sphere.bounding_sphere()
        np.testing.assert_allclose(center, [1.0, 2.0, 3.0])
        assert radius == 0.5


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self, unit_sphere):
        """Test ray hitting sphere head-on from outside."""
        ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        hit = unit_sphere.intersect(ray)
        assert hit.ok
        assert hit.shape is unit_sphere
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(unit_sphere.normal_at(ray.at(hit.t)), [0.0, 0.0, 1.0])

    def test_miss(self, unit_sphere):
        """Test ray passing beside the sphere."""
        ray = make_ray((2.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert not unit_sphere.intersect(ray).ok

    def test_sphere_behind_ray(self, unit_sphere):
        """Test that a sphere behind the origin is not hit."""
        ray = make_ray((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))
        assert not unit_sphere.intersect(ray)

    def test_ray_from_inside_hits_far_side(self, unit_sphere):
        """Test that a ray starting inside returns the exit point."""
        ray = make_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        hit = unit_sphere.intersect(ray)
        assert hit.t == pytest.approx(1.0)

    def test_hits_have_positive_t(self, unit_sphere, rng):
        """Test that every reported hit has t > EPS."""
        for _ in range(200):
            origin = rng.uniform(-3.0, 3.0, 3)
            direction = rng.normal(size=3)
            hit = unit_sphere.intersect(make_ray(origin, direction))
            if hit.ok:
                assert hit.t > EPS

    def test_large_distance_is_stable(self):
        """Test a small sphere far from the ray origin."""
        sphere = Sphere((0.0, 0.0, -1e6), 1.0, diffuse_material((1, 1, 1)))
        hit = sphere.intersect(make_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)))
        assert hit.t == pytest.approx(1e6 - 1.0, rel=1e-9)


class TestSphereUV:
    """Tests for spherical texture coordinates."""

    def test_uv_in_unit_range(self, unit_sphere, rng):
        """Test that u and v are always within [0, 1]."""
        for _ in range(100):
            p = rng.normal(size=3)
            p /= np.linalg.norm(p)
            u, v, w = unit_sphere.uv(p)
            assert 0.0 <= u <= 1.0
            assert 0.0 <= v <= 1.0
            assert w == 0.0

    def test_poles(self, unit_sphere):
        """Test that the poles map to v = 0 and v = 1."""
        assert unit_sphere.uv(np.array([0.0, 1.0, 0.0]))[1] == pytest.approx(1.0)
        assert unit_sphere.uv(np.array([0.0, -1.0, 0.0]))[1] == pytest.approx(0.0)

    def test_equator_longitude(self, unit_sphere):
        """Test the longitude of a point on the equator."""
        u = unit_sphere.uv(np.array([0.0, 0.0, 1.0]))[0]
        assert u == pytest.approx(1.0 - (math.pi / 2.0 + math.pi) / (2.0 * math.pi))
