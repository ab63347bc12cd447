"""Scene module for world storage and scene descriptions.

Components:
    world: Taichi field storage of spheres and closest-hit queries
    builder: Python-side Scene description, validation and JSON files
    presets: Ready-made scenes with matching cameras

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for sphere data
    - A primitive table mapping each hittable to its shape storage
"""

from .builder import Scene, SphereSpec, load_scene, save_scene
from .presets import PRESETS, random_scene, three_spheres_scene
from .world import (
    MAX_PRIMITIVES,
    MAX_SPHERES,
    ShapeKind,
    add_sphere,
    clear_world,
    get_primitive_count,
    get_sphere_count,
    hit_world,
)

__all__ = [
    # World storage
    "ShapeKind",
    "MAX_SPHERES",
    "MAX_PRIMITIVES",
    "add_sphere",
    "clear_world",
    "get_sphere_count",
    "get_primitive_count",
    "hit_world",
    # Scene descriptions
    "Scene",
    "SphereSpec",
    "load_scene",
    "save_scene",
    "PRESETS",
    "three_spheres_scene",
    "random_scene",
]
