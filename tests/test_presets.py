"""Tests for the preset scenes."""

import math

import numpy as np
import pytest


class TestThreeSpheresScene:
    """Tests for three_spheres_scene."""

    def test_contents(self):
        """Test the ground, diffuse, glass and metal spheres."""
        from spheretrace.materials import Dielectric, Lambertian, Metal
        from spheretrace.scene.presets import three_spheres_scene

        scene, _ = three_spheres_scene()
        assert len(scene) == 4
        ground, diffuse, glass, metal = scene.spheres
        assert ground.radius == 100.0
        assert ground.material == Lambertian((0.8, 0.8, 0.0))
        assert diffuse.center == (0.0, 0.0, -1.0)
        assert glass.material == Dielectric(1.5)
        assert isinstance(metal.material, Metal)
        assert metal.material.fuzz == 0.0

    def test_camera(self):
        """Test the camera focuses on the center sphere."""
        from spheretrace.scene.presets import three_spheres_scene

        scene, camera = three_spheres_scene(aspect_ratio=1.5)
        assert camera.aspect_ratio == 1.5
        assert camera.aperture == 2.0
        assert camera.vfov == 20.0
        assert camera.focus_dist == pytest.approx(math.sqrt(9.0 + 9.0 + 9.0))
        assert scene.camera is camera


class TestRandomScene:
    """Tests for random_scene."""

    def test_feature_spheres(self):
        """Test the ground and the three large spheres."""
        from spheretrace.materials import Dielectric, Lambertian, Metal
        from spheretrace.scene.presets import random_scene

        scene, camera = random_scene(np.random.default_rng(1))
        assert scene.spheres[0].radius == 1000.0
        glass, diffuse, metal = scene.spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert glass.material == Dielectric(1.5)
        assert diffuse.material == Lambertian((0.4, 0.2, 0.1))
        assert metal.material == Metal((0.7, 0.6, 0.5), 0.0)
        assert camera.lookfrom == (13.0, 2.0, 3.0)
        assert camera.focus_dist == 10.0
        assert camera.aperture == 0.1

    def test_small_spheres_clear_of_feature(self):
        """Test that small spheres keep their distance from (4, 0.2, 0)."""
        from spheretrace.scene.presets import random_scene

        scene, _ = random_scene(np.random.default_rng(2))
        small = scene.spheres[1:-3]
        assert 0 < len(small) <= 22 * 22
        for sphere in small:
            assert sphere.radius == 0.2
            assert sphere.center[1] == 0.2
            assert math.dist(sphere.center, (4.0, 0.2, 0.0)) > 0.9

    def test_small_spheres_within_their_cells(self):
        """Test that each small sphere is jittered within its grid cell."""
        from spheretrace.scene.presets import random_scene

        scene, _ = random_scene(np.random.default_rng(3))
        for sphere in scene.spheres[1:-3]:
            x, _, z = sphere.center
            assert -11.0 <= x < 10.9
            assert -11.0 <= z < 10.9
            assert x - math.floor(x) <= 0.9

    def test_material_mix(self):
        """Test the rough diffuse / metal / glass split and valid parameters."""
        from spheretrace.materials import Dielectric, Lambertian, Metal
        from spheretrace.scene.presets import random_scene

        scene, _ = random_scene(np.random.default_rng(4))
        small = scene.spheres[1:-3]
        kinds = [type(s.material) for s in small]
        diffuse_share = kinds.count(Lambertian) / len(small)
        assert 0.7 < diffuse_share < 0.9
        assert Metal in kinds
        assert Dielectric in kinds
        for sphere in small:
            sphere.material.validate()
            if isinstance(sphere.material, Metal):
                assert all(0.5 <= c <= 1.0 for c in sphere.material.albedo)
                assert 0.0 <= sphere.material.fuzz <= 0.5

    def test_seeded_generator_is_reproducible(self):
        """Test that the same seed gives the same scene."""
        from spheretrace.scene.presets import random_scene

        first, _ = random_scene(np.random.default_rng(5))
        second, _ = random_scene(np.random.default_rng(5))
        assert first == second

    def test_fits_world_storage(self):
        """Test that the scene uploads within capacity."""
        from spheretrace.scene.presets import random_scene
        from spheretrace.scene.world import get_sphere_count

        scene, _ = random_scene(np.random.default_rng(6))
        scene.apply()
        assert get_sphere_count() == len(scene)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
