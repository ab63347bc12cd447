"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the fields allocated by already imported modules.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_world_and_render_target():
    """Clear the world and the render target before and after each test."""
    # Import here so that Taichi is initialized before fields are allocated
    from spheretrace.core.integrator import reset_render_target
    from spheretrace.scene.world import clear_world

    def _clear_all():
        clear_world()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def look_down_z_camera():
    """Pinhole camera at the origin looking down -z with a 90 degree FOV."""
    from spheretrace.camera.thin_lens import ThinLensCamera, setup_camera

    camera = ThinLensCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=1.0,
    )
    setup_camera(camera)
    return camera
