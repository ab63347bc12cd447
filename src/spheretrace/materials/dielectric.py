"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when refraction has no real solution

The side of the surface is decided from the sign of dot(direction, normal).
A positive sign means the ray travels inside the sphere: the normal is
flipped and the index ratio is ``ref_idx``. Otherwise the ray enters and the
ratio is ``1 / ref_idx``. One uniform draw then chooses between the reflected
and the refracted ray with the Schlick reflectance as the probability of
reflecting (1 under total internal reflection).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials.dielectric import Dielectric, scatter_dielectric
    >>> glass = Dielectric(ref_idx=1.5)
    >>> # Use within a Taichi kernel:
    >>> # srec = scatter_dielectric(ref_idx, ray_in, rec)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.records import HitRecord, MaterialKind, ScatterRecord
from spheretrace.core.vector import dot, length, reflect, refract, schlick

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Dielectric:
    """Transparent material description.

    Attributes:
        ref_idx: Index of refraction (> 0). Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ref_idx: float = 1.5

    def validate(self) -> None:
        if not self.ref_idx > 0.0:
            raise ValueError(f"Index of refraction = {self.ref_idx} must be positive")

    def to_fields(self) -> tuple[int, tuple[float, float, float], float, float]:
        """Flatten into (kind, albedo, fuzz, ref_idx) for field storage."""
        return int(MaterialKind.DIELECTRIC), (1.0, 1.0, 1.0), 0.0, float(self.ref_idx)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "dielectric", "ref_idx": self.ref_idx}


@ti.func
def _refract_with_reflectance(ref_idx: ti.f32, ray_in: Ray, rec: HitRecord):
    """Orient the interface, refract and compute the reflect probability.

    Returns:
        A tuple ``(prob, refracted_direction)``. ``prob`` is the Schlick
        reflectance for the incidence angle, or 1.0 when the ray is totally
        internally reflected (the direction is then the zero vector).
    """
    d = dot(ray_in.direction, rec.normal)
    outward_normal = rec.normal
    ni_over_nt = 1.0 / ref_idx
    cosine = -d / length(ray_in.direction)
    if d > 0.0:
        # Ray travels inside the medium towards the boundary
        outward_normal = -rec.normal
        ni_over_nt = ref_idx
        cosine = ref_idx * d / length(ray_in.direction)

    refracted, direction = refract(ray_in.direction, outward_normal, ni_over_nt)
    prob = 1.0
    if refracted == 1:
        prob = schlick(cosine, ref_idx)
    return prob, direction


@ti.func
def reflect_probability(ref_idx: ti.f32, ray_in: Ray, rec: HitRecord) -> ti.f32:
    """Probability that the dielectric reflects rather than refracts."""
    prob, _ = _refract_with_reflectance(ref_idx, ray_in, rec)
    return prob


@ti.func
def scatter_dielectric_with_sample(
    ref_idx: ti.f32, ray_in: Ray, rec: HitRecord, u: ti.f32
) -> ScatterRecord:
    """Scatter a ray off a dielectric using a caller-supplied uniform sample.

    Args:
        ref_idx: Index of refraction of the material.
        ray_in: The incoming ray.
        rec: The hit being shaded. Its normal is the outward sphere normal.
        u: Uniform sample in [0, 1) deciding between reflection and refraction.

    Returns:
        A ScatterRecord with white attenuation that always scatters. The ray
        is reflected when ``u`` is below the reflect probability, otherwise
        refracted.
    """
    prob, direction = _refract_with_reflectance(ref_idx, ray_in, rec)
    if u < prob:
        direction = reflect(ray_in.direction, rec.normal)

    return ScatterRecord(
        attenuation=vec3(1.0, 1.0, 1.0),
        scattered=Ray(origin=rec.p, direction=direction),
        did_scatter=1,
    )


@ti.func
def scatter_dielectric(ref_idx: ti.f32, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a dielectric, drawing the reflect/refract choice."""
    return scatter_dielectric_with_sample(ref_idx, ray_in, rec, ti.random(ti.f32))
