"""Materials module for scattering models.

Components:
    lambertian: Ideal diffuse reflection
    metal: Specular reflection blurred by a fuzz factor
    dielectric: Glass-like refraction with Schlick reflectance
    material: Material union and scatter dispatch

Each variant provides a frozen dataclass description used when building
scenes and a Taichi scatter function returning a ScatterRecord.
"""

from .dielectric import (
    Dielectric,
    reflect_probability,
    scatter_dielectric,
    scatter_dielectric_with_sample,
)
from .lambertian import Lambertian, scatter_lambertian, validate_albedo
from .material import MaterialSpec, material_from_dict, scatter
from .metal import Metal, scatter_metal

__all__ = [
    "Lambertian",
    "Metal",
    "Dielectric",
    "MaterialSpec",
    "material_from_dict",
    "validate_albedo",
    "scatter",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "scatter_dielectric_with_sample",
    "reflect_probability",
]
