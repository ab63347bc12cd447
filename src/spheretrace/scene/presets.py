"""Ready-made scenes and their cameras.

- three_spheres_scene: a diffuse, a glass and a metal sphere on a large
  ground sphere, seen from above and to the side with a wide aperture.
- random_scene: a ground sphere covered with a 22x22 grid of small random
  spheres around three large feature spheres.

Both return ``(scene, camera)``. The camera aspect ratio is a parameter so
that callers can match the output image.

Example:
    >>> import numpy as np
    >>> from spheretrace.scene.presets import random_scene
    >>> scene, camera = random_scene(np.random.default_rng(7), aspect_ratio=3.0 / 2.0)
    >>> scene.apply()  # after ti.init
"""

import math
from typing import Optional

import numpy as np

from spheretrace.camera.thin_lens import ThinLensCamera
from spheretrace.materials import Dielectric, Lambertian, Metal
from spheretrace.scene.builder import Scene

# Small spheres are kept at least this far from the large metal sphere
FEATURE_CLEARANCE = 0.9
SMALL_RADIUS = 0.2
GRID_RANGE = range(-11, 11)


def three_spheres_scene(aspect_ratio: float = 2.0) -> tuple[Scene, ThinLensCamera]:
    """Build the three-sphere showcase scene.

    Args:
        aspect_ratio: Width over height of the image to be rendered.

    Returns:
        The scene and a camera focused on the center sphere.
    """
    scene = Scene()
    scene.add_sphere((0.0, -100.5, -1.0), 100.0, Lambertian((0.8, 0.8, 0.0)))
    scene.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.1, 0.2, 0.5)))
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, Dielectric(1.5))
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, Metal((0.8, 0.6, 0.2), fuzz=0.0))

    lookfrom = (3.0, 3.0, 2.0)
    lookat = (0.0, 0.0, -1.0)
    camera = ThinLensCamera(
        lookfrom=lookfrom,
        lookat=lookat,
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=2.0,
        focus_dist=math.dist(lookfrom, lookat),
    )
    scene.camera = camera
    return scene, camera


def random_scene(
    rng: Optional[np.random.Generator] = None,
    aspect_ratio: float = 3.0 / 2.0,
) -> tuple[Scene, ThinLensCamera]:
    """Build the random sphere field.

    For every grid cell (a, b) one small sphere is placed at
    ``(a + 0.9 * rand, 0.2, b + 0.9 * rand)`` unless it would crowd the
    large metal sphere. Its material is diffuse with probability 0.8, metal
    with probability 0.15 and glass otherwise.

    Args:
        rng: Random generator. A fresh unseeded generator is used when omitted.
        aspect_ratio: Width over height of the image to be rendered.

    Returns:
        The scene and a camera looking at the origin from (13, 2, 3).
    """
    if rng is None:
        rng = np.random.default_rng()

    scene = Scene()
    scene.add_sphere((0.0, -1000.0, 0.0), 1000.0, Lambertian((0.5, 0.5, 0.5)))

    feature = np.array([4.0, SMALL_RADIUS, 0.0])
    for a in GRID_RANGE:
        for b in GRID_RANGE:
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()])
            if np.linalg.norm(center - feature) <= FEATURE_CLEARANCE:
                continue

            if choose_mat < 0.8:
                albedo = rng.random(3) * rng.random(3)
                material = Lambertian(tuple(float(c) for c in albedo))
            elif choose_mat < 0.95:
                albedo = 0.5 * (1.0 + rng.random(3))
                material = Metal(tuple(float(c) for c in albedo), fuzz=float(0.5 * rng.random()))
            else:
                material = Dielectric(1.5)
            scene.add_sphere(tuple(float(c) for c in center), SMALL_RADIUS, material)

    scene.add_sphere((0.0, 1.0, 0.0), 1.0, Dielectric(1.5))
    scene.add_sphere((-4.0, 1.0, 0.0), 1.0, Lambertian((0.4, 0.2, 0.1)))
    scene.add_sphere((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), fuzz=0.0))

    camera = ThinLensCamera(
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )
    scene.camera = camera
    return scene, camera


PRESETS = {
    "three-spheres": three_spheres_scene,
    "random": random_scene,
}
