"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain text P3, see ``spheretrace.output.ppm``)
    - PNG (8-bit via Pillow)

Both formats receive the same gamma-2 quantised pixels.

Example:
    >>> from spheretrace.output.export import save_image
    >>> from spheretrace.core.integrator import get_image_numpy
    >>> save_image("output.png", get_image_numpy())
"""

from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from spheretrace.output.ppm import save_ppm, to_rgb8

SUPPORTED_SUFFIXES = (".ppm", ".png")


def save_png(filepath: Union[str, Path], rgb8: npt.NDArray[np.uint8]) -> None:
    """Save an 8-bit image of shape (height, width, 3) as a PNG file."""
    pil_image = PILImage.fromarray(np.ascontiguousarray(rgb8, dtype=np.uint8))
    pil_image.save(filepath, format="PNG")


def save_image(filepath: Union[str, Path], image: npt.ArrayLike) -> None:
    """Quantise a linear image and save it in the format named by the suffix.

    Args:
        filepath: Output path ending in .ppm or .png.
        image: Linear float image of shape (height, width, 3), top row first.

    Raises:
        ValueError: If the file suffix is not supported.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported image format {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    rgb8 = to_rgb8(image)
    if suffix == ".ppm":
        save_ppm(filepath, rgb8)
    else:
        save_png(filepath, rgb8)
