"""Metal (specular reflective) material implementation.

The incoming direction is normalised and mirrored about the normal:

    R = I - 2(I . N)N

then blurred by adding ``fuzz`` times a random point of the unit ball. A
perfect mirror has fuzz 0. When the blurred direction points below the
surface the ray is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials.metal import Metal, scatter_metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
    >>> # Use within a Taichi kernel:
    >>> # srec = scatter_metal(albedo, fuzz, ray_in, rec)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.records import HitRecord, MaterialKind, ScatterRecord
from spheretrace.core.vector import dot, random_in_unit_sphere, reflect, unit_vector
from spheretrace.materials.lambertian import validate_albedo

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Metal:
    """Reflective material description.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Reflection blur in [0, 1]. 0 = perfect mirror.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def validate(self) -> None:
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(f"Fuzz = {self.fuzz} is outside [0, 1]")

    def to_fields(self) -> tuple[int, tuple[float, float, float], float, float]:
        """Flatten into (kind, albedo, fuzz, ref_idx) for field storage."""
        albedo = (float(self.albedo[0]), float(self.albedo[1]), float(self.albedo[2]))
        return int(MaterialKind.METAL), albedo, float(self.fuzz), 1.0

    def to_dict(self) -> dict[str, Any]:
        return {"type": "metal", "albedo": list(self.albedo), "fuzz": self.fuzz}


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: Reflection blur in [0, 1].
        ray_in: The incoming ray.
        rec: The hit being shaded.

    Returns:
        A ScatterRecord with attenuation = albedo. did_scatter is 0 when the
        blurred reflection does not leave on the normal's side.
    """
    reflected = reflect(unit_vector(ray_in.direction), rec.normal)
    scattered = Ray(origin=rec.p, direction=reflected + fuzz * random_in_unit_sphere())
    return ScatterRecord(
        attenuation=albedo,
        scattered=scattered,
        did_scatter=1 if dot(scattered.direction, rec.normal) > 0.0 else 0,
    )
