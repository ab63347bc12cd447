"""Tests for the dielectric (glass) material.

Tests cover:
- Description validation
- Reflect probability from Schlick's approximation
- Refraction entering and leaving the medium
- Total internal reflection forces reflection
"""

import math

import pytest
import taichi as ti


def _scatter_with_sample(direction, normal, u, ref_idx=1.5):
    """Scatter one ray at the origin with a fixed uniform sample."""
    from spheretrace.core.ray import make_ray
    from spheretrace.core.records import HitRecord, Material
    from spheretrace.materials.dielectric import (
        reflect_probability,
        scatter_dielectric_with_sample,
        vec3,
    )

    result_dir = ti.field(dtype=ti.math.vec3, shape=())
    result_att = ti.field(dtype=ti.math.vec3, shape=())
    result_scatter = ti.field(dtype=ti.i32, shape=())
    result_prob = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(d: vec3, nrm: vec3, sample: ti.f32, eta: ti.f32):
        rec = HitRecord(
            hit=1,
            t=1.0,
            p=vec3(0.0, 0.0, 0.0),
            normal=nrm,
            on_edge=0,
            material=Material(kind=2, albedo=vec3(1.0, 1.0, 1.0), fuzz=0.0, ref_idx=eta),
        )
        ray_in = make_ray(vec3(0.0, 0.0, 0.0) - d, d)
        srec = scatter_dielectric_with_sample(eta, ray_in, rec, sample)
        result_dir[None] = srec.scattered.direction
        result_att[None] = srec.attenuation
        result_scatter[None] = srec.did_scatter
        result_prob[None] = reflect_probability(eta, ray_in, rec)

    test_kernel(vec3(*direction), vec3(*normal), u, ref_idx)
    return result_dir[None], result_att[None], result_scatter[None], result_prob[None]


class TestDielectricDescription:
    """Tests for the Dielectric dataclass."""

    def test_default_is_glass(self):
        """Test the default index of refraction."""
        from spheretrace.core.records import MaterialKind
        from spheretrace.materials import Dielectric

        kind, albedo, _, ref_idx = Dielectric().to_fields()
        assert kind == MaterialKind.DIELECTRIC
        assert albedo == (1.0, 1.0, 1.0)
        assert ref_idx == 1.5

    def test_non_positive_index_rejected(self):
        """Test that a non-positive index of refraction is rejected."""
        from spheretrace.materials import Dielectric

        with pytest.raises(ValueError, match="Index of refraction"):
            Dielectric(0.0).validate()
        with pytest.raises(ValueError, match="Index of refraction"):
            Dielectric(-1.5).validate()


class TestDielectricScatter:
    """Tests for dielectric scattering."""

    def test_normal_incidence_refracts_straight(self):
        """Test that a sample above the reflectance refracts straight through."""
        direction, attenuation, did_scatter, prob = _scatter_with_sample(
            (0.0, -1.0, 0.0), (0.0, 1.0, 0.0), 0.99
        )

        assert did_scatter == 1
        assert abs(prob - 0.04) < 1e-5
        assert abs(direction[0]) < 1e-5
        assert abs(direction[1] + 1.0) < 1e-5
        for c in range(3):
            assert abs(attenuation[c] - 1.0) < 1e-6

    def test_normal_incidence_reflects_with_small_sample(self):
        """Test that a sample below the reflectance reflects."""
        direction, _, did_scatter, _ = _scatter_with_sample((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), 0.01)

        assert did_scatter == 1
        assert abs(direction[1] - 1.0) < 1e-5

    def test_oblique_entry_obeys_snell(self):
        """Test refraction into glass at 45 degrees."""
        direction, _, _, prob = _scatter_with_sample((1.0, -1.0, 0.0), (0.0, 1.0, 0.0), 0.999)

        length = math.sqrt(direction[0] ** 2 + direction[1] ** 2 + direction[2] ** 2)
        sin_t = direction[0] / length
        assert abs(sin_t - math.sin(math.radians(45.0)) / 1.5) < 1e-5
        assert direction[1] < 0.0
        assert 0.04 < prob < 1.0

    def test_total_internal_reflection(self):
        """Test that leaving glass at a grazing angle always reflects."""
        # Inside the sphere, heading out at 60 degrees from the normal
        incoming = (math.cos(math.radians(30.0)), 0.5, 0.0)
        direction, _, did_scatter, prob = _scatter_with_sample(incoming, (0.0, 1.0, 0.0), 0.999)

        assert did_scatter == 1
        assert abs(prob - 1.0) < 1e-6
        assert abs(direction[0] - incoming[0]) < 1e-5
        assert abs(direction[1] + 0.5) < 1e-5

    def test_exit_along_normal_refracts(self):
        """Test leaving the medium along the normal continues straight on."""
        direction, _, _, prob = _scatter_with_sample((0.0, 1.0, 0.0), (0.0, 1.0, 0.0), 0.5)

        # Schlick is evaluated with cosine = ref_idx * cos(theta) when exiting
        assert abs(prob - (0.04 + 0.96 * (1.0 - 1.5) ** 5)) < 1e-5
        assert abs(direction[0]) < 1e-5
        assert abs(direction[1] - 1.0) < 1e-5

    def test_random_choice_frequency(self):
        """Test that the drawn choice reflects with the Schlick probability."""
        from spheretrace.core.ray import make_ray
        from spheretrace.core.records import HitRecord, Material
        from spheretrace.materials.dielectric import (
            reflect_probability,
            scatter_dielectric,
            vec3,
        )

        n = 4000
        reflected = ti.field(dtype=ti.i32, shape=n)
        prob = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            for i in range(n):
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    p=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    on_edge=0,
                    material=Material(kind=2, albedo=vec3(1.0, 1.0, 1.0), fuzz=0.0, ref_idx=1.5),
                )
                ray_in = make_ray(vec3(-4.0, 1.0, 0.0), vec3(4.0, -1.0, 0.0))
                srec = scatter_dielectric(1.5, ray_in, rec)
                reflected[i] = 1 if srec.scattered.direction.y > 0.0 else 0
                if i == 0:
                    prob[None] = reflect_probability(1.5, ray_in, rec)

        test_kernel()
        frequency = reflected.to_numpy().mean()
        assert abs(frequency - prob[None]) < 0.03


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
