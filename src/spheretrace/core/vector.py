"""Vector algebra and random sampling helpers for the path tracer.

All functions here are Taichi functions operating on ``ti.math.vec3`` and are
meant to be called from within kernels. Positions and free vectors share the
same representation; the distinction is purely by convention.

None of the operations trap numerical failures: normalising a zero-length
vector or dividing by zero yields IEEE Inf/NaN, which propagates to the
caller.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.vector import unit_vector, vec3
    >>> @ti.kernel
    ... def probe() -> ti.f32:
    ...     return unit_vector(vec3(3.0, 0.0, 4.0)).z
    >>> round(probe(), 4)
    0.8
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def squared_length(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(squared_length(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The caller must ensure the vector has non-zero length; a zero vector
    yields NaN components.
    """
    return v / length(v)


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror ``v`` about the normal ``n``.

    Computes ``v - 2 * dot(v, n) * n``. The normal should be unit length.
    """
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: ti.f32):
    """Refract ``v`` through a surface with normal ``n`` using Snell's law.

    The incident direction is normalised first. Refraction is possible only
    when the discriminant ``1 - ni_over_nt^2 * (1 - dt^2)`` is strictly
    positive; otherwise the light is totally internally reflected.

    Args:
        v: Incident direction (any length).
        n: Unit surface normal facing against the incident direction.
        ni_over_nt: Ratio of refractive indices (incident over transmitted).

    Returns:
        A tuple ``(refracted, direction)`` where ``refracted`` is 1 if
        refraction succeeded and 0 on total internal reflection. The direction
        is the zero vector when refraction fails.
    """
    uv = unit_vector(v)
    dt = dot(uv, n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    refracted = 0
    direction = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        refracted = 1
        direction = ni_over_nt * (uv - n * dt) - n * ti.sqrt(discriminant)
    return refracted, direction


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Approximate the Fresnel reflectance with Schlick's polynomial.

    Args:
        cosine: Cosine of the incidence angle.
        ref_idx: Refractive index of the material.

    Returns:
        ``r0 + (1 - r0) * (1 - cosine)^5`` with
        ``r0 = ((1 - ref_idx) / (1 + ref_idx))^2``.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities
# =============================================================================


@ti.func
def random_in_unit_sphere() -> vec3:
    """Draw a random point inside the unit ball by rejection sampling.

    Candidates are drawn uniformly from the cube [-1, 1]^3 and rejected while
    their squared length is at least 1.

    Returns:
        A random point with squared length < 1.
    """
    p = vec3(1.0, 1.0, 1.0)
    while squared_length(p) >= 1.0:
        p = 2.0 * vec3(ti.random(ti.f32), ti.random(ti.f32), ti.random(ti.f32)) - vec3(
            1.0, 1.0, 1.0
        )
    return p


@ti.func
def random_in_unit_disk() -> vec3:
    """Draw a random point inside the unit disk in the xy-plane.

    Candidates are drawn uniformly from the square [-1, 1]^2 and rejected
    while they fall on or outside the unit circle. Used for lens sampling.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(1.0, 1.0, 0.0)
    while squared_length(p) >= 1.0:
        p = vec3(2.0 * ti.random(ti.f32) - 1.0, 2.0 * ti.random(ti.f32) - 1.0, 0.0)
    return p
