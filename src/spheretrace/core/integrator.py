"""Color integrator and render target.

This module estimates the color seen along a ray by following it through
the world: every hit scatters the ray according to the struck material and
multiplies the path throughput by the attenuation, every miss returns the
sky gradient. Paths are cut off after MAX_DEPTH bounces and contribute black.

The per-pixel estimates are summed into a preallocated render target, one
sample per pixel per kernel launch, and averaged when the image is read back.

Key features:
    - Scattering by Lambertian, metal and dielectric materials
    - Depth-bounded paths with a black cutoff
    - White-to-blue sky gradient for escaped rays
    - Normals preview mode that paints grazing (edge) hits red

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.integrator import render_image, setup_render_target
    >>> from spheretrace.camera.thin_lens import setup_camera
    >>> from spheretrace.scene.presets import three_spheres_scene
    >>>
    >>> scene, camera = three_spheres_scene(aspect_ratio=2.0)
    >>> scene.apply()
    >>> setup_camera(camera)
    >>> setup_render_target(200, 100)
    >>> render_image(num_samples=100)
"""

from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretrace.camera.thin_lens import get_ray_jittered
from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.vector import unit_vector
from spheretrace.materials.material import scatter
from spheretrace.scene.world import hit_world

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# t_min and t_max for ray intersection; t_min skips self-hits at the origin
T_MIN = 0.001
T_MAX = tm.inf

# Sky gradient end points
WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# Preview color for grazing hits
EDGE_COLOR = vec3(1.0, 0.0, 0.0)


class RenderMode(IntEnum):
    """What a sample measures."""

    PATH = 0  # Full path-traced color
    NORMALS = 1  # Surface normals with edge highlighting


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Buffers are allocated once at the largest size; kernels see the active size
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Active image size
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of samples (preallocated to max size)
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of samples summed into each pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Set once setup_render_target() has run
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Choose the active image size and zero the sums.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Drop all samples, keeping the image size."""
    _color_sum.fill(0.0)
    _sample_count.fill(0)


def reset_render_target() -> None:
    """Clear the buffers and mark the render target as not set up."""
    clear_render_target()
    _image_width[None] = 0
    _image_height[None] = 0
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Raise RuntimeError unless setup_render_target() has run."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Color Integrator
# =============================================================================


@ti.func
def background(ray: Ray) -> vec3:
    """Sky color for a ray that escapes the world.

    Blends linearly from white straight down to light blue straight up.
    """
    unit_direction = unit_vector(ray.direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * WHITE + t * SKY_BLUE


@ti.func
def color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the color carried back along a ray.

    Equivalent to the recursive definition

        color(r, d) = background(r)                          on a miss
                    = black                                  if d >= MAX_DEPTH
                    = black                                  if absorbed
                    = attenuation * color(scattered, d + 1)  otherwise

    evaluated as a loop that carries the product of attenuations.

    Args:
        ray: The ray to follow.
        depth: Number of bounces already taken (0 for camera rays).

    Returns:
        The estimated RGB color. Not clamped.
    """
    result = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    bounce = depth

    # Active flag for path continuation (no break out of ti.func loops)
    active = 1
    while active == 1:
        rec = hit_world(current, T_MIN, T_MAX)
        if rec.hit == 0:
            result = throughput * background(current)
            active = 0
        elif bounce >= MAX_DEPTH:
            active = 0
        else:
            srec = scatter(rec.material, current, rec)
            if srec.did_scatter == 0:
                # Absorbed
                active = 0
            else:
                throughput *= srec.attenuation
                current = srec.scattered
                bounce += 1

    return result


@ti.func
def shade_normals(ray: Ray) -> vec3:
    """Preview color showing surface normals.

    Hits are colored ``0.5 * (normal + 1)``; hits whose discriminant was
    nearly zero (the ray grazes the silhouette) are painted red. Misses get
    the sky gradient.
    """
    rec = hit_world(ray, T_MIN, T_MAX)
    result = background(ray)
    if rec.hit == 1:
        if rec.on_edge == 1:
            result = EDGE_COLOR
        else:
            result = 0.5 * (unit_vector(rec.normal) + 1.0)
    return result


@ti.func
def _sample(ray: Ray, depth: ti.i32, mode: ti.i32) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    if mode == int(RenderMode.NORMALS):
        result = shade_normals(ray)
    else:
        result = color(ray, depth)
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, mode: ti.i32):
    """Render one sample per pixel and add it to the sum buffer."""
    for i, j in ti.ndrange(width, height):
        ray = get_ray_jittered(i, j, width, height)
        _color_sum[i, j] += _sample(ray, 0, mode)
        _sample_count[i, j] += 1


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32, mode: ti.i32) -> vec3:
    return _sample(make_ray(origin, direction), depth, mode)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    mode: RenderMode = RenderMode.PATH,
) -> tuple[float, float, float]:
    """Estimate the color along a single ray against the current world.

    Launches a one-thread kernel, so it is meant for tests and probing.
    Whole images go through render_image().

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth: Bounces already taken.
        mode: Path tracing or normals preview.

    Returns:
        The (r, g, b) estimate.
    """
    result = _trace_ray_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        depth,
        int(mode),
    )
    return (float(result[0]), float(result[1]), float(result[2]))


def render_image(num_samples: int = 1, mode: RenderMode = RenderMode.PATH) -> None:
    """Add num_samples samples to every pixel.

    Adds samples to the sum buffer. Can be called multiple times to add
    more samples for convergence.

    Args:
        num_samples: Samples per pixel to add.
        mode: Path tracing or normals preview.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    for _ in range(num_samples):
        _render_one_spp(width, height, int(mode))


def get_total_samples() -> int:
    """Get the number of samples per pixel rendered so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_sample_count[0, 0])


def get_image_numpy() -> np.ndarray:
    """Get the averaged linear image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32, top row first.
    Values are not clamped; pixels without samples are black.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    sums = _color_sum.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height]

    image = np.zeros_like(sums)
    np.divide(sums, counts[:, :, None], out=image, where=counts[:, :, None] > 0)

    # Fields are indexed [x, y]; images are [row, column]
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (pixel j = 0 is the bottom row, images use top-left)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
