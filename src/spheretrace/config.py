"""Render settings and Taichi backend initialisation.

Example:
    >>> from spheretrace.config import RenderSettings, init_backend
    >>> settings = RenderSettings(width=400, height=200, samples=50, seed=7)
    >>> init_backend(settings.arch, settings.seed)
    'cpu'
"""

from dataclasses import dataclass
from typing import Optional

import taichi as ti

ARCHES = ("cpu", "gpu")
MODES = ("path", "normals")

DEFAULT_WIDTH = 200
DEFAULT_HEIGHT = 100
DEFAULT_SAMPLES = 100


@dataclass
class RenderSettings:
    """Everything needed to run one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel.
        batch_size: Samples rendered between progress updates.
        scene: Name of a preset scene.
        scene_file: JSON scene file used instead of the preset when set.
        mode: "path" for path tracing, "normals" for the normals preview.
        seed: Seed for Taichi's random generator and random scene layout.
        arch: Taichi backend, "cpu" or "gpu".
        output: Output image path (.ppm or .png).
        quiet: Suppress progress output.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    samples: int = DEFAULT_SAMPLES
    batch_size: int = 10
    scene: str = "three-spheres"
    scene_file: Optional[str] = None
    mode: str = "path"
    seed: int = 0
    arch: str = "cpu"
    output: str = "output.ppm"
    quiet: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions ({self.width}x{self.height}) must be positive")
        if self.samples <= 0:
            raise ValueError(f"Samples per pixel = {self.samples} must be positive")
        if self.batch_size <= 0:
            raise ValueError(f"Batch size = {self.batch_size} must be positive")
        if self.mode not in MODES:
            raise ValueError(f"Unknown render mode {self.mode!r}; expected one of {MODES}")
        if self.arch not in ARCHES:
            raise ValueError(f"Unknown backend {self.arch!r}; expected one of {ARCHES}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def init_backend(arch: str = "cpu", seed: int = 0) -> str:
    """Initialise Taichi with a seeded random generator.

    Must be called before importing modules that allocate Taichi fields.

    Args:
        arch: "cpu" or "gpu". A GPU request falls back to the CPU when no
            GPU backend can be initialised.
        seed: Seed for ``ti.random``.

    Returns:
        The backend actually used, "cpu" or "gpu".
    """
    if arch not in ARCHES:
        raise ValueError(f"Unknown backend {arch!r}; expected one of {ARCHES}")

    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, random_seed=seed)
            return "gpu"
        except Exception:
            ti.init(arch=ti.cpu, random_seed=seed)
            return "cpu"
    ti.init(arch=ti.cpu, random_seed=seed)
    return "cpu"
