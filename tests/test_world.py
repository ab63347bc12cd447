"""Tests for world storage and closest-hit queries.

Tests cover:
- Adding spheres and validation errors
- Capacity limit
- Empty world misses
- Closest hit wins regardless of insertion order
"""

import pytest
import taichi as ti


def _probe_world(origin, direction, t_min=0.001, t_max=1000.0):
    """Run hit_world in a kernel and return (hit, t, p, material kind)."""
    from spheretrace.core.ray import make_ray, vec3
    from spheretrace.scene.world import hit_world

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    kind = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, lo: ti.f32, hi: ti.f32):
        record = hit_world(make_ray(o, d), lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.p
        kind[None] = record.material.kind

    test_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    return hit[None], t_val[None], point[None], kind[None]


class TestWorldStorage:
    """Tests for adding spheres to the world."""

    def test_add_sphere_returns_index(self):
        """Test that spheres are numbered in insertion order."""
        from spheretrace.materials import Dielectric, Lambertian
        from spheretrace.scene.world import add_sphere, get_primitive_count, get_sphere_count

        assert add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5))) == 0
        assert add_sphere((1.0, 0.0, -1.0), 0.5, Dielectric(1.5)) == 1
        assert get_sphere_count() == 2
        assert get_primitive_count() == 2

    def test_clear_world(self):
        """Test that clear_world empties the world."""
        from spheretrace.materials import Lambertian
        from spheretrace.scene.world import add_sphere, clear_world, get_sphere_count

        add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5)))
        clear_world()
        assert get_sphere_count() == 0

    def test_rejects_non_positive_radius(self):
        """Test that a zero or negative radius is rejected."""
        from spheretrace.materials import Lambertian
        from spheretrace.scene.world import add_sphere

        with pytest.raises(ValueError, match="radius"):
            add_sphere((0.0, 0.0, 0.0), 0.0, Lambertian((0.5, 0.5, 0.5)))
        with pytest.raises(ValueError, match="radius"):
            add_sphere((0.0, 0.0, 0.0), -0.5, Lambertian((0.5, 0.5, 0.5)))

    def test_rejects_invalid_material(self):
        """Test that material validation runs when adding a sphere."""
        from spheretrace.materials import Lambertian, Metal
        from spheretrace.scene.world import add_sphere, get_sphere_count

        with pytest.raises(ValueError, match="energy conservation"):
            add_sphere((0.0, 0.0, 0.0), 1.0, Lambertian((1.5, 0.5, 0.5)))
        with pytest.raises(ValueError, match="Fuzz"):
            add_sphere((0.0, 0.0, 0.0), 1.0, Metal((0.5, 0.5, 0.5), fuzz=2.0))
        assert get_sphere_count() == 0

    def test_capacity_exceeded(self):
        """Test that adding past MAX_SPHERES raises RuntimeError."""
        from spheretrace.materials import Lambertian
        from spheretrace.scene.world import MAX_SPHERES, add_sphere

        material = Lambertian((0.5, 0.5, 0.5))
        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1, material)

        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 0.1, material)


class TestClosestHit:
    """Tests for hit_world."""

    def test_empty_world_misses(self):
        """Test that nothing is hit in an empty world."""
        hit, _, _, _ = _probe_world((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_closest_hit_far_sphere_first(self):
        """Test that the near sphere wins when the far sphere is added first."""
        from spheretrace.materials import Lambertian, Metal
        from spheretrace.scene.world import add_sphere

        add_sphere((0.0, 0.0, -6.0), 1.5, Metal((0.5, 0.5, 0.5)))
        add_sphere((0.0, 0.0, -5.0), 1.0, Lambertian((0.5, 0.5, 0.5)))

        hit, t, p, kind = _probe_world((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert abs(p[2] + 4.0) < 1e-5
        assert kind == 0

    def test_closest_hit_near_sphere_first(self):
        """Test that the near sphere wins when it is added first."""
        from spheretrace.materials import Lambertian, Metal
        from spheretrace.scene.world import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, Lambertian((0.5, 0.5, 0.5)))
        add_sphere((0.0, 0.0, -6.0), 1.5, Metal((0.5, 0.5, 0.5)))

        hit, t, _, kind = _probe_world((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert kind == 0

    def test_t_max_excludes_distant_spheres(self):
        """Test that spheres beyond t_max are ignored."""
        from spheretrace.materials import Lambertian
        from spheretrace.scene.world import add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0, Lambertian((0.5, 0.5, 0.5)))

        hit, _, _, _ = _probe_world((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=5.0)
        assert hit == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
