"""Tests for the recursive path sampler.

Tests cover:
- Configuration validation
- Miss path and depth termination
- Recursion depth bookkeeping
- Stratified first-hit grid and specular splitting
- Emission eligibility and next-event estimation
- Energy on a white diffuse floor under a small light
- Non-negativity and reproducibility
"""

import math
from collections import Counter

import numpy as np
import pytest

import pathtracer.core.sampler as sampler_module
from pathtracer.core.bounce import BounceMode
from pathtracer.core.ray import RAY_EPSILON, make_ray
from pathtracer.core.sampler import PathSampler, SpecularMode
from pathtracer.geometry.quad import Quad
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import (
    clear_material,
    diffuse_material,
    glossy_material,
    light_material,
    metallic_material,
)
from pathtracer.scene.scene import Scene

DOWN_AT_FLOOR = make_ray((0.5, 0.0, 3.0), (0.0, 0.0, -1.0))


class TestSamplerConfiguration:
    """Tests for PathSampler construction."""

    def test_defaults(self):
        """Test the default configuration."""
        sampler = PathSampler()
        assert sampler.first_hit_samples == 16
        assert sampler.max_bounces == 4
        assert sampler.direct_lighting is True
        assert sampler.specular_mode == SpecularMode.NAIVE

    def test_invalid_samples(self):
        """Test that fewer than one first-hit sample raises."""
        with pytest.raises(ValueError, match="first_hit_samples"):
            PathSampler(first_hit_samples=0)

    def test_invalid_depth(self):
        """Test that a negative bounce limit raises."""
        with pytest.raises(ValueError, match="max_bounces"):
            PathSampler(max_bounces=-1)

    def test_is_immutable(self):
        """Test that a sampler cannot be reconfigured in place."""
        sampler = PathSampler()
        with pytest.raises(AttributeError):
            sampler.max_bounces = 2

    def test_bounce_modes(self):
        """Test which lobes each specular mode evaluates."""
        split = (BounceMode.DIFFUSE, BounceMode.SPECULAR)
        assert PathSampler(specular_mode=SpecularMode.NAIVE).bounce_modes(4) == (BounceMode.ANY,)
        assert PathSampler(specular_mode=SpecularMode.FIRST).bounce_modes(4) == split
        assert PathSampler(specular_mode=SpecularMode.FIRST).bounce_modes(1) == (BounceMode.ANY,)
        assert PathSampler(specular_mode=SpecularMode.ALL).bounce_modes(1) == split


class TestTermination:
    """Tests for the miss path and depth cutoff."""

    def test_miss_returns_background_exactly(self, rng):
        """Test that a ray hitting nothing returns the background color."""
        scene = Scene(color=(0.2, 0.2, 0.2))
        result = PathSampler().sample(scene, make_ray((0, 0, 0), (0, 0, -1)), rng)
        np.testing.assert_array_equal(result, [0.2, 0.2, 0.2])

    def test_environment_miss_is_non_negative(self, rng):
        """Test that a texture returning negative values cannot darken below zero."""

        class SignedTexture:
            def sample(self, u, v):
                return np.array([-1.0, 0.5, -0.25])

        scene = Scene(texture=SignedTexture())
        result = PathSampler().sample(scene, make_ray((0, 0, 0), (0, 0, 1)), rng)
        np.testing.assert_array_equal(result, [0.0, 0.5, 0.0])

    def test_negative_depth_is_black(self, floor_scene, rng):
        """Test that the base case returns zero without touching the scene."""
        result = PathSampler()._sample(floor_scene, DOWN_AT_FLOOR, True, 16, -1, rng)
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_depth_decreases_by_one_per_bounce(self, monkeypatch, rng):
        """Test that every recursive call has exactly one less depth."""
        scene = Scene()
        scene.add(Sphere((0.0, 0.0, 0.0), 10.0, diffuse_material((0.5, 0.5, 0.5))))
        depths = []
        original = PathSampler._sample

        def recording(self, scene, ray, emission, samples, depth, rng):
            depths.append(depth)
            return original(self, scene, ray, emission, samples, depth, rng)

        monkeypatch.setattr(PathSampler, "_sample", recording)
        sampler = PathSampler(first_hit_samples=1, max_bounces=3, direct_lighting=False)
        sampler.sample(scene, make_ray((0, 0, 0), (1, 0, 0)), rng)
        assert depths == [3, 2, 1, 0, -1]

    def test_only_first_hit_is_stratified(self, monkeypatch, rng):
        """Test that deeper levels take a single sample each."""
        scene = Scene()
        scene.add(Sphere((0.0, 0.0, 0.0), 10.0, diffuse_material((0.5, 0.5, 0.5))))
        calls = []
        original = PathSampler._sample

        def recording(self, scene, ray, emission, samples, depth, rng):
            calls.append((depth, samples))
            return original(self, scene, ray, emission, samples, depth, rng)

        monkeypatch.setattr(PathSampler, "_sample", recording)
        sampler = PathSampler(first_hit_samples=4, max_bounces=2, direct_lighting=False)
        sampler.sample(scene, make_ray((0, 0, 0), (1, 0, 0)), rng)

        assert Counter(calls) == Counter({(2, 4): 1, (1, 1): 4, (0, 1): 4, (-1, 1): 4})


class TestStratification:
    """Tests for the n x n first-hit grid."""

    def _record_bounces(self, monkeypatch, sampler, scene, rng):
        calls = []

        def fake_bounce(ray, info, u, v, mode, rng):
            calls.append((u, v, mode))
            return info.ray, False, 0.0

        monkeypatch.setattr(sampler_module, "bounce", fake_bounce)
        sampler.sample(scene, DOWN_AT_FLOOR, rng)
        return calls

    @staticmethod
    def _cells(calls, mode):
        return sorted((int(u * 4), int(v * 4)) for u, v, m in calls if m == mode)

    def test_sixteen_samples_naive(self, monkeypatch, floor_scene, rng):
        """Test 16 samples -> a 4x4 grid with one ANY bounce per cell."""
        sampler = PathSampler(first_hit_samples=16, max_bounces=0, direct_lighting=False)
        calls = self._record_bounces(monkeypatch, sampler, floor_scene, rng)

        assert len(calls) == 16
        assert self._cells(calls, BounceMode.ANY) == [(i, j) for i in range(4) for j in range(4)]

    def test_sixteen_samples_split(self, monkeypatch, floor_scene, rng):
        """Test that split modes issue a diffuse and a specular bounce per cell."""
        sampler = PathSampler(
            first_hit_samples=16,
            max_bounces=0,
            direct_lighting=False,
            specular_mode=SpecularMode.ALL,
        )
        calls = self._record_bounces(monkeypatch, sampler, floor_scene, rng)

        grid = [(i, j) for i in range(4) for j in range(4)]
        assert len(calls) == 32
        assert self._cells(calls, BounceMode.DIFFUSE) == grid
        assert self._cells(calls, BounceMode.SPECULAR) == grid

    def test_first_mode_splits_at_first_hit(self, monkeypatch, floor_scene, rng):
        """Test that FIRST splits the 4x4 primary grid."""
        sampler = PathSampler(
            first_hit_samples=16,
            max_bounces=0,
            direct_lighting=False,
            specular_mode=SpecularMode.FIRST,
        )
        assert len(self._record_bounces(monkeypatch, sampler, floor_scene, rng)) == 32

    def test_non_square_budget_uses_floor_sqrt(self, monkeypatch, floor_scene, rng):
        """Test that 20 samples still make a 4x4 grid."""
        sampler = PathSampler(first_hit_samples=20, max_bounces=0, direct_lighting=False)
        assert len(self._record_bounces(monkeypatch, sampler, floor_scene, rng)) == 16


class TestEmission:
    """Tests for emitted light and its eligibility."""

    @pytest.fixture
    def light_scene(self):
        scene = Scene()
        scene.add(Sphere((0.0, 0.0, 5.0), 0.25, light_material((1.0, 1.0, 1.0), 100.0)))
        return scene

    def test_camera_ray_sees_emitter(self, light_scene, rng):
        """Test that a primary ray into a light returns its emission."""
        sampler = PathSampler(first_hit_samples=16, max_bounces=0)
        result = sampler.sample(light_scene, make_ray((0, 0, 0), (0, 0, 1)), rng)
        np.testing.assert_allclose(result, [100.0, 100.0, 100.0])

    def test_diffuse_continuation_skips_emitter(self, light_scene, rng):
        """Test that an ineligible hit on a light is black with direct lighting on."""
        sampler = PathSampler(max_bounces=0, direct_lighting=True)
        result = sampler._sample(light_scene, make_ray((0, 0, 0), (0, 0, 1)), False, 1, 0, rng)
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_emitter_counted_without_direct_lighting(self, light_scene, rng):
        """Test that without next-event estimation every path may see emitters."""
        sampler = PathSampler(max_bounces=0, direct_lighting=False)
        result = sampler._sample(light_scene, make_ray((0, 0, 0), (0, 0, 1)), False, 1, 0, rng)
        np.testing.assert_allclose(result, [100.0, 100.0, 100.0])

    def test_mirror_reflects_emitter(self, light_scene, rng):
        """Test that a specular continuation still sees the light."""
        light_scene.add(Quad((-5, -5, 0), (10, 0, 0), (0, 10, 0), metallic_material((1.0, 1.0, 1.0))))
        sampler = PathSampler(first_hit_samples=4, max_bounces=1)
        result = sampler.sample(light_scene, make_ray((0, 0, 3), (0, 0, -1)), rng)
        np.testing.assert_allclose(result, [100.0, 100.0, 100.0])

    @pytest.mark.parametrize(
        "tint, expected",
        [(0.0, [100.0, 100.0, 100.0]), (0.5, [100.0, 50.0, 50.0]), (1.0, [100.0, 0.0, 0.0])],
    )
    def test_colored_mirror_tints_reflection(self, light_scene, rng, tint, expected):
        """Test that tint blends reflected light toward the mirror color."""
        mirror = metallic_material((1.0, 0.0, 0.0), tint=tint)
        light_scene.add(Quad((-5, -5, 0), (10, 0, 0), (0, 10, 0), mirror))
        sampler = PathSampler(first_hit_samples=4, max_bounces=1)
        result = sampler.sample(light_scene, make_ray((0, 0, 3), (0, 0, -1)), rng)
        np.testing.assert_allclose(result, expected)


class TestEnergy:
    """Tests for radiometric behavior."""

    def test_white_floor_under_small_light(self, lit_floor_scene, rng):
        """Test the depth-0 estimate on a white diffuse floor."""
        sampler = PathSampler(first_hit_samples=64, max_bounces=0, direct_lighting=True)
        result = sampler.sample(lit_floor_scene, DOWN_AT_FLOOR, rng)

        distance = math.hypot(0.5, 5.0 - RAY_EPSILON)
        coverage = 0.25**2 / (distance**2 - 0.25**2)
        expected = 100.0 * coverage * (5.0 - RAY_EPSILON) / distance
        np.testing.assert_allclose(result, [expected] * 3, rtol=0.03)

    def test_depth_zero_without_direct_light_is_black(self, lit_floor_scene, rng):
        """Test that a diffuse floor gets nothing when no path may reach the light."""
        sampler = PathSampler(first_hit_samples=16, max_bounces=0, direct_lighting=False)
        result = sampler.sample(lit_floor_scene, DOWN_AT_FLOOR, rng)
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    @pytest.mark.parametrize("mode", list(SpecularMode))
    def test_results_are_finite_and_non_negative(self, closed_scene, mode):
        """Test non-negativity across materials and specular modes."""
        closed_scene.add(Sphere((3.0, 0.0, 0.0), 1.5, clear_material(1.5)))
        closed_scene.add(Sphere((-3.0, 0.0, 0.0), 1.5, glossy_material((0.8, 0.2, 0.2), 1.5, 0.2)))
        closed_scene.add(Sphere((0.0, -3.0, 0.0), 1.5, metallic_material((0.9, 0.9, 0.9), gloss=0.1)))
        sampler = PathSampler(first_hit_samples=4, max_bounces=3, specular_mode=mode)
        rng = np.random.default_rng(11)

        for direction in rng.normal(size=(20, 3)):
            result = sampler.sample(closed_scene, make_ray((0.0, 0.0, 0.5), direction), rng)
            assert np.all(np.isfinite(result))
            assert np.all(result >= 0.0)

    def test_same_seed_same_result(self, closed_scene):
        """Test that the estimate depends only on scene, ray and generator state."""
        sampler = PathSampler(first_hit_samples=4, max_bounces=3)
        ray = make_ray((0.0, 0.0, 0.0), (1.0, 0.2, 0.1))
        first = sampler.sample(closed_scene, ray, np.random.default_rng(5))
        second = sampler.sample(closed_scene, ray, np.random.default_rng(5))
        np.testing.assert_array_equal(first, second)
