"""Sample-by-sample rendering driver.

This module wraps the core integrator with:
- Batches of samples per call
- Progress callbacks and a generator variant for reporting
- Reset and resize of the render target
- Quantised output and saving to PPM or PNG

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>> from spheretrace.camera.thin_lens import setup_camera
    >>> from spheretrace.scene.presets import random_scene
    >>>
    >>> scene, camera = random_scene(aspect_ratio=1.5)
    >>> scene.apply()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(300, 200)
    >>> renderer.render(100)  # 100 samples per pixel
    >>> renderer.save_image("random.ppm")
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Optional, Union

import numpy as np
import numpy.typing as npt

from spheretrace.core.integrator import (
    RenderMode,
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from spheretrace.output.export import save_image
from spheretrace.output.ppm import to_rgb8

# Called with (samples so far, samples requested)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """Drives the integrator and keeps the running sample sums.

    The renderer keeps width, height and render mode and delegates to the
    global integrator buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        mode: What each sample measures (path tracing or normals preview).
    """

    def __init__(self, width: int, height: int, mode: RenderMode = RenderMode.PATH) -> None:
        """Set up a render target of the given size.

        Raises:
            ValueError: If dimensions are not positive or exceed 2048.
        """
        self._width = width
        self._height = height
        self.mode = RenderMode(mode)
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def sample_count(self) -> int:
        """Samples per pixel summed so far."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear accumulated samples without changing the image dimensions."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Change the image size and drop all samples.

        Raises:
            ValueError: If dimensions are not positive or exceed 2048.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: Optional[ProgressCallback] = None,
    ) -> None:
        """Add samples to the image, reporting after each batch.

        Samples are added on top of what is already there, so repeated
        calls keep refining the same image.

        Args:
            num_samples: Samples per pixel to add.
            batch_size: Samples per pixel between callbacks.
            callback: Called after each batch with (samples so far, samples
                requested).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Generator form of render().

        Yields:
            (samples so far, samples requested) after each batch.

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"Batch size = {batch_size} must be positive")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.mode)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear image, shape (height, width, 3), top row first."""
        return get_image_numpy()

    def get_image_rgb8(self) -> npt.NDArray[np.uint8]:
        """Get the gamma-2 quantised image as uint8, shape (height, width, 3)."""
        return to_rgb8(self.get_image_numpy())

    def save_image(self, filepath: Union[str, Path]) -> None:
        """Save the rendered image as .ppm or .png.

        Raises:
            ValueError: If the file suffix is not supported.
        """
        save_image(filepath, self.get_image_numpy())

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"mode={self.mode.name.lower()}, samples={self.sample_count})"
        )
