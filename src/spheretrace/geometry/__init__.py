"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection

Intersection routines are Taichi functions returning a HitRecord whose
``hit`` flag is 0 on a miss.
"""

from .sphere import EDGE_EPSILON, Sphere, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "EDGE_EPSILON",
]
