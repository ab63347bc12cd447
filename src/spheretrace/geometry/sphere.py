"""Sphere primitive with ray-sphere intersection.

The intersection solves the full quadratic ``a*t^2 + b*t + c = 0`` for the
ray ``origin + t * direction`` against ``|p - center|^2 = radius^2``:

    a = dot(direction, direction)
    b = 2 * dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

The smaller root is tried first, then the larger one. Hits whose discriminant
falls below EDGE_EPSILON are flagged as grazing (``on_edge``); the normals
preview shading paints them as an outline.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray, point_at_parameter
from spheretrace.core.records import HitRecord, Material, make_miss_record
from spheretrace.core.vector import dot

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Discriminant below which a hit counts as grazing the silhouette
EDGE_EPSILON = 0.0005


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        material: The material of the sphere surface.
    """

    center: vec3
    radius: ti.f32
    material: Material


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test a ray against a sphere.

    Args:
        ray: The ray to test. Its direction need not be normalised.
        sphere: The sphere to test against.
        t_min: Hits at or below this parameter are rejected.
        t_max: Hits at or beyond this parameter are rejected.

    Returns:
        A HitRecord for the nearest root strictly inside (t_min, t_max), or a
        miss record (hit == 0) when there is none. The normal is the outward
        normal ``(p - center) / radius`` regardless of which side the ray
        came from.
    """
    oc = ray.origin - sphere.center
    a = dot(ray.direction, ray.direction)
    b = 2.0 * dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t = (-b - sqrt_d) / (2.0 * a)
        valid = t_min < t < t_max

        if not valid:
            t = (-b + sqrt_d) / (2.0 * a)
            valid = t_min < t < t_max

        if valid:
            p = point_at_parameter(ray, t)
            result = HitRecord(
                hit=1,
                t=t,
                p=p,
                normal=(p - sphere.center) / sphere.radius,
                on_edge=1 if discriminant < EDGE_EPSILON else 0,
                material=sphere.material,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material: Material) -> Sphere:
    """Create a sphere within a Taichi kernel."""
    return Sphere(center=center, radius=radius, material=material)
