"""Core rendering module.

Components:
    vector: Vector algebra on ti.math.vec3 and rejection samplers
    ray: Ray data structure
    records: Material, hit and scatter records
    integrator: Depth-bounded color integrator and render target
    progressive: Sample-accumulating renderer wrapper

All per-ray operations are Taichi functions for parallel execution.
"""

from .ray import Ray, make_ray, point_at_parameter
from .records import HitRecord, Material, MaterialKind, ScatterRecord, make_miss_record
from .vector import (
    cross,
    dot,
    length,
    random_in_unit_disk,
    random_in_unit_sphere,
    reflect,
    refract,
    schlick,
    squared_length,
    unit_vector,
    vec3,
)

# Note: integrator and progressive are NOT imported here; they allocate
# Taichi fields at import time and must be imported after ti.init().

__all__ = [
    "Ray",
    "make_ray",
    "point_at_parameter",
    "HitRecord",
    "Material",
    "MaterialKind",
    "ScatterRecord",
    "make_miss_record",
    "vec3",
    "dot",
    "cross",
    "length",
    "squared_length",
    "unit_vector",
    "reflect",
    "refract",
    "schlick",
    "random_in_unit_sphere",
    "random_in_unit_disk",
]
