"""Records shared between geometry, materials and the integrator.

Materials form a closed tagged union: a single ``Material`` record whose
``kind`` selects which of its parameters are meaningful. Records are plain
values; a hit record carries a copy of the material of the shape it struck.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialKind(IntEnum):
    """Tag of the material union, used for scatter dispatch."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Tagged material record.

    Attributes:
        kind: The MaterialKind of this material.
        albedo: Reflectance color (Lambertian and Metal).
        fuzz: Reflection blur in [0, 1] (Metal).
        ref_idx: Refractive index (Dielectric).
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f32
    ref_idx: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a ray-shape intersection test.

    Attributes:
        hit: 1 if the ray struck the shape, 0 for a miss. All other fields
            are only meaningful when hit == 1.
        t: Ray parameter of the intersection.
        p: World-space hit point, equal to point_at_parameter(ray, t).
        normal: Outward unit normal at p.
        on_edge: 1 for near-tangent (grazing) hits.
        material: Copy of the material of the struck shape.
    """

    hit: ti.i32
    t: ti.f32
    p: vec3
    normal: vec3
    on_edge: ti.i32
    material: Material


@ti.dataclass
class ScatterRecord:
    """Outcome of scattering a ray off a material.

    Attributes:
        attenuation: Color factor applied to the continuation ray's radiance.
        scattered: The outgoing ray.
        did_scatter: 1 if the ray continues, 0 if it was absorbed.
    """

    attenuation: vec3
    scattered: Ray
    did_scatter: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        p=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        on_edge=0,
        material=Material(
            kind=int(MaterialKind.LAMBERTIAN),
            albedo=vec3(0.0, 0.0, 0.0),
            fuzz=0.0,
            ref_idx=1.0,
        ),
    )
