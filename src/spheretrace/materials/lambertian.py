"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters towards a random point of the unit sphere tangent
to the hit point: the target is ``p + normal + s`` where ``s`` is drawn from
the unit ball by rejection sampling. The resulting distribution is the
classic cosine-leaning diffuse lobe; attenuation is the albedo and the ray
always scatters.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials.lambertian import Lambertian, scatter_lambertian
    >>> matte = Lambertian(albedo=(0.8, 0.3, 0.3))
    >>> # Use within a Taichi kernel:
    >>> # srec = scatter_lambertian(albedo, rec)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.records import HitRecord, MaterialKind, ScatterRecord
from spheretrace.core.vector import random_in_unit_sphere

# Type alias for 3D vectors
vec3 = tm.vec3


def validate_albedo(albedo: tuple[float, float, float]) -> None:
    """Check that an albedo has three components in [0, 1].

    Raises:
        ValueError: If the albedo has the wrong length or a component is
            outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Lambertian:
    """Diffuse material description.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    def validate(self) -> None:
        validate_albedo(self.albedo)

    def to_fields(self) -> tuple[int, tuple[float, float, float], float, float]:
        """Flatten into (kind, albedo, fuzz, ref_idx) for field storage."""
        albedo = (float(self.albedo[0]), float(self.albedo[1]), float(self.albedo[2]))
        return int(MaterialKind.LAMBERTIAN), albedo, 0.0, 1.0

    def to_dict(self) -> dict[str, Any]:
        return {"type": "lambertian", "albedo": list(self.albedo)}


@ti.func
def scatter_lambertian(albedo: vec3, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color.
        rec: The hit being shaded.

    Returns:
        A ScatterRecord whose ray starts at the hit point and heads for a
        random point on the unit sphere tangent at the hit point.
    """
    target = rec.p + rec.normal + random_in_unit_sphere()
    return ScatterRecord(
        attenuation=albedo,
        scattered=Ray(origin=rec.p, direction=target - rec.p),
        did_scatter=1,
    )
