"""World storage and closest-hit queries over all primitives.

The world is an ordered list of hittables kept in Taichi fields. Each entry
of the primitive table names a shape kind and an index into that kind's
storage; ``hit_world`` scans the table linearly and keeps the closest hit by
shrinking its upper bound to each accepted hit. Supporting a new shape kind
means adding its storage and a branch in ``_hit_primitive``; the scan itself
does not change.

Sphere storage uses a Structure-of-Arrays layout. Materials are stored per
sphere so that a hit record can carry the material by value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials import Lambertian
    >>> from spheretrace.scene.world import add_sphere, clear_world
    >>> clear_world()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.8, 0.3, 0.3)))
    0
    >>> # Use hit_world within a Taichi kernel
"""

from enum import IntEnum
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.records import HitRecord, Material, make_miss_record
from spheretrace.geometry.sphere import Sphere, hit_sphere

if TYPE_CHECKING:
    from spheretrace.materials.material import MaterialSpec

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Kinds of shape stored in the primitive table."""

    SPHERE = 0


# Maximum number of primitives supported in the world
MAX_SPHERES = 1024
MAX_PRIMITIVES = MAX_SPHERES

# Primitive table: (shape kind, index into that kind's storage)
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_indices = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_ref_idx = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_world() -> None:
    """Remove all primitives from the world.

    Resets the counts to zero. Field data is overwritten as new primitives
    are added.
    """
    num_primitives[None] = 0
    num_spheres[None] = 0


def _add_primitive(kind: ShapeKind, index: int) -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    primitive_kinds[idx] = int(kind)
    primitive_indices[idx] = index
    num_primitives[None] = idx + 1
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: "MaterialSpec",
) -> int:
    """Append a sphere to the world.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material: A Lambertian, Metal or Dielectric description.

    Returns:
        The index of the sphere in sphere storage.

    Raises:
        ValueError: If the radius is not positive or the material is invalid.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if not radius > 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive")
    material.validate()

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    kind, albedo, fuzz, ref_idx = material.to_fields()
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = float(radius)
    sphere_material_kinds[idx] = kind
    sphere_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    sphere_fuzz[idx] = fuzz
    sphere_ref_idx[idx] = ref_idx
    num_spheres[None] = idx + 1

    _add_primitive(ShapeKind.SPHERE, idx)
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the world."""
    return int(num_spheres[None])


def get_primitive_count() -> int:
    """Get the number of entries in the primitive table."""
    return int(num_primitives[None])


@ti.func
def load_sphere(index: ti.i32) -> Sphere:
    """Assemble the Sphere record stored at the given index."""
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        material=Material(
            kind=sphere_material_kinds[index],
            albedo=sphere_albedos[index],
            fuzz=sphere_fuzz[index],
            ref_idx=sphere_ref_idx[index],
        ),
    )


@ti.func
def _hit_primitive(slot: ti.i32, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Dispatch a hit test to the shape stored in a primitive table slot."""
    result = make_miss_record()
    if primitive_kinds[slot] == int(ShapeKind.SPHERE):
        result = hit_sphere(ray, load_sphere(primitive_indices[slot]), t_min, t_max)
    return result


@ti.func
def hit_world(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Find the closest hit of a ray against every primitive in the world.

    Each candidate is tested with the closest hit found so far as its upper
    bound, so a later primitive only wins when it is strictly closer.

    Args:
        ray: The ray to test.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The HitRecord of the closest intersection, or a miss record if the
        world is empty or nothing is hit.
    """
    closest_so_far = t_max
    result = make_miss_record()

    # A while loop is never parallelised, even when this function is inlined
    # at the top level of a kernel.
    n = num_primitives[None]
    slot = 0
    while slot < n:
        rec = _hit_primitive(slot, ray, t_min, closest_so_far)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec
        slot += 1

    return result
