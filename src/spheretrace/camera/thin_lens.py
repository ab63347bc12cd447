"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: unit vector from lookat back to lookfrom
- u: image-plane right, perpendicular to vup and w
- v: image-plane up, completing the basis

The viewport is placed on the focus plane, ``focus_dist`` along -w. Rays
start on a lens disk of radius ``aperture / 2`` around the camera origin and
all pass through the same focus-plane point for a given (s, t), so objects
on the focus plane stay sharp. A zero aperture gives a pinhole camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera.thin_lens import ThinLensCamera, setup_camera, get_ray
    >>>
    >>> camera = ThinLensCamera(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ...     focus_dist=10.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.vector import random_in_unit_disk

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ThinLensCamera:
    """Configuration for a thin-lens (perspective) camera.

    Attributes:
        lookfrom: Eye position; also the center of the lens.
        lookat: Point the view is centered on.
        vup: World direction that should appear upward in the image.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Image width over image height.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_dist: Distance from the camera to the plane in perfect focus.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_dist: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view = {self.vfov} must be in (0, 180)")
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"Aspect ratio = {self.aspect_ratio} must be positive")
        if self.aperture < 0.0:
            raise ValueError(f"Aperture = {self.aperture} must not be negative")
        if not self.focus_dist > 0.0:
            raise ValueError(f"Focus distance = {self.focus_dist} must be positive")
        if tuple(self.lookfrom) == tuple(self.lookat):
            raise ValueError("lookfrom and lookat must be different points")

    def to_dict(self) -> dict[str, Any]:
        return {
            "lookfrom": list(self.lookfrom),
            "lookat": list(self.lookat),
            "vup": list(self.vup),
            "vfov": self.vfov,
            "aspect_ratio": self.aspect_ratio,
            "aperture": self.aperture,
            "focus_dist": self.focus_dist,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ThinLensCamera":
        return cls(
            lookfrom=tuple(data["lookfrom"]),
            lookat=tuple(data["lookat"]),
            vup=tuple(data.get("vup", (0.0, 1.0, 0.0))),
            vfov=float(data["vfov"]),
            aspect_ratio=float(data["aspect_ratio"]),
            aperture=float(data.get("aperture", 0.0)),
            focus_dist=float(data.get("focus_dist", 1.0)),
        )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())

# Viewport vectors on the focus plane
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())

_lens_radius = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Setup (Python scope, once per camera)
# =============================================================================


def setup_camera(camera: ThinLensCamera) -> None:
    """Derive the camera state from its configuration.

    Computes the orthonormal basis, the viewport on the focus plane and the
    lens radius, and stores them in Taichi fields. Must be called from Python
    scope before rendering.

    Args:
        camera: Camera configuration with position, orientation, FOV and lens.
    """
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h
    viewport_width = camera.aspect_ratio * viewport_height

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    w = lookfrom - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    horizontal = camera.focus_dist * viewport_width * u
    vertical = camera.focus_dist * viewport_height * v
    lower_left = lookfrom - horizontal / 2.0 - vertical / 2.0 - camera.focus_dist * w

    _camera_origin[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _lens_radius[None] = camera.aperture / 2.0


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    With a non-zero lens radius the origin is offset by a random point of the
    lens disk; the direction is not normalised.

    Args:
        s: Horizontal coordinate in [0, 1].
        t: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the (possibly offset) camera origin through the focus-plane
        point ``lower_left + s * horizontal + t * vertical``.
    """
    offset = vec3(0.0, 0.0, 0.0)
    lens_radius = _lens_radius[None]
    if lens_radius > 0.0:
        rd = lens_radius * random_in_unit_disk()
        offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y

    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + s * _viewport_horizontal[None]
        + t * _viewport_vertical[None]
        - origin
        - offset
    )
    return make_ray(origin + offset, direction)


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a ray through a random point of a pixel for anti-aliasing.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The ray for ``s = (i + rand) / width``, ``t = (j + rand) / height``.
    """
    s = (ti.cast(pixel_i, ti.f32) + ti.random(ti.f32)) / ti.cast(width, ti.f32)
    t = (ti.cast(pixel_j, ti.f32) + ti.random(ti.f32)) / ti.cast(height, ti.f32)
    return get_ray(s, t)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, Any]:
    """Read back the derived camera state as plain Python values.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        (as float tuples) and lens_radius.
    """

    def _as_tuple(field: Any) -> tuple[float, float, float]:
        vec = field[None]
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "u": _as_tuple(_camera_u),
        "v": _as_tuple(_camera_v),
        "w": _as_tuple(_camera_w),
        "horizontal": _as_tuple(_viewport_horizontal),
        "vertical": _as_tuple(_viewport_vertical),
        "lower_left": _as_tuple(_lower_left_corner),
        "lens_radius": float(_lens_radius[None]),
    }
