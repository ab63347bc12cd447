"""Taichi-based sphere path tracer.

Renders scenes of spheres by tracing camera rays, scattering them off
Lambertian, metal and dielectric materials until they escape to the sky
gradient or exhaust a 50-bounce depth budget.

Subpackages:
    core: Vector/ray algebra, records, integrator and render loop
    geometry: Sphere primitive and ray-sphere intersection
    materials: Scattering models and material dispatch
    scene: World storage, scene descriptions and preset scenes
    camera: Thin-lens camera with depth of field
    output: Gamma-2 quantisation, PPM and PNG writers
"""

__version__ = "0.1.0"
