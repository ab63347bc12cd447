"""Material union and scatter dispatch.

The material model is a closed set of three variants. On the Python side a
material is one of the frozen dataclasses ``Lambertian``, ``Metal`` or
``Dielectric``; inside kernels it is the tagged ``Material`` record and
``scatter`` dispatches on its kind.

Example:
    >>> from spheretrace.materials.material import material_from_dict
    >>> material_from_dict({"type": "metal", "albedo": [0.8, 0.8, 0.8], "fuzz": 0.1})
    Metal(albedo=(0.8, 0.8, 0.8), fuzz=0.1)
"""

from typing import Any, Union

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.core.records import HitRecord, Material, MaterialKind, ScatterRecord
from spheretrace.materials.dielectric import Dielectric, scatter_dielectric
from spheretrace.materials.lambertian import Lambertian, scatter_lambertian
from spheretrace.materials.metal import Metal, scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3

# Python-side material description
MaterialSpec = Union[Lambertian, Metal, Dielectric]


def material_from_dict(data: dict[str, Any]) -> MaterialSpec:
    """Build a material description from its dictionary form.

    Args:
        data: A mapping with a "type" key ("lambertian", "metal" or
            "dielectric") and the parameters of that variant.

    Returns:
        The material description. It is not validated here; validation
        happens when the material is added to a scene.

    Raises:
        ValueError: If the type is unknown or a parameter is missing.
    """
    kind = data.get("type")
    try:
        if kind == "lambertian":
            return Lambertian(albedo=tuple(data["albedo"]))
        if kind == "metal":
            return Metal(albedo=tuple(data["albedo"]), fuzz=float(data.get("fuzz", 0.0)))
        if kind == "dielectric":
            return Dielectric(ref_idx=float(data["ref_idx"]))
    except KeyError as e:
        raise ValueError(f"Material {kind!r} is missing parameter {e.args[0]!r}") from e
    raise ValueError(f"Unknown material type: {kind!r}")


@ti.func
def scatter(material: Material, ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray according to the material that was hit.

    Args:
        material: The material record of the struck shape.
        ray_in: The incoming ray.
        rec: The hit being shaded.

    Returns:
        A ScatterRecord of (attenuation, scattered ray, did_scatter).
    """
    result = ScatterRecord(
        attenuation=vec3(0.0, 0.0, 0.0),
        scattered=Ray(origin=rec.p, direction=vec3(0.0, 0.0, 0.0)),
        did_scatter=0,
    )

    if material.kind == int(MaterialKind.LAMBERTIAN):
        result = scatter_lambertian(material.albedo, rec)
    elif material.kind == int(MaterialKind.METAL):
        result = scatter_metal(material.albedo, material.fuzz, ray_in, rec)
    elif material.kind == int(MaterialKind.DIELECTRIC):
        result = scatter_dielectric(material.ref_idx, ray_in, rec)

    return result
