"""Quantisation and plain PPM output.

Linear colors are gamma corrected with gamma 2 (a square root per channel),
scaled by 255.999 and truncated, so 1.0 maps to 255 and every 8-bit value
covers an equal slice of [0, 1). Images are written as plain-text ``P3``
files: a three-line header followed by one ``r g b`` line per pixel, top row
first and left to right within a row.

Example:
    >>> import numpy as np
    >>> from spheretrace.output.ppm import to_rgb8
    >>> to_rgb8(np.array([[[0.25, 1.0, 0.0]]], dtype=np.float32))[0, 0].tolist()
    [127, 255, 0]
"""

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO, Union

import numpy as np
import numpy.typing as npt

# Scale applied after gamma correction before truncation
RGB8_SCALE = 255.999


def to_rgb8(image: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to gamma-2 corrected 8-bit values.

    Args:
        image: Array of shape (height, width, 3) with linear colors.

    Returns:
        uint8 array of the same shape. NaN becomes 0 and values are clipped
        to [0, 1] before the square root.
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    linear = np.clip(linear, 0.0, 1.0)
    return (np.sqrt(linear) * RGB8_SCALE).astype(np.uint8)


def iter_pixels(rgb8: npt.NDArray[np.uint8]) -> Iterator[tuple[int, int, int]]:
    """Yield (r, g, b) triples row by row, top row first."""
    height, width = rgb8.shape[:2]
    for row in range(height):
        for col in range(width):
            r, g, b = rgb8[row, col]
            yield (int(r), int(g), int(b))


def write_ppm(
    stream: TextIO,
    width: int,
    height: int,
    pixels: Iterable[tuple[int, int, int]],
) -> None:
    """Write pixels to a text stream in plain PPM (P3) format.

    Args:
        stream: Writable text stream.
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Exactly width * height (r, g, b) triples in row-major order,
            top row first.

    Raises:
        ValueError: If the number of pixels does not match the dimensions.
    """
    # Nothing is written unless the pixel count matches
    lines = [f"{r} {g} {b}\n" for r, g, b in pixels]
    if len(lines) != width * height:
        raise ValueError(
            f"Expected {width * height} pixels for {width}x{height}, got {len(lines)}"
        )
    stream.write(f"P3\n{width} {height}\n255\n")
    stream.writelines(lines)


def save_ppm(filepath: Union[str, Path], rgb8: npt.NDArray[np.uint8]) -> None:
    """Save an 8-bit image of shape (height, width, 3) as a plain PPM file.

    Raises:
        ValueError: If the array is not shaped (height, width, 3).
    """
    if rgb8.ndim != 3 or rgb8.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {rgb8.shape}")
    height, width = rgb8.shape[:2]
    with open(filepath, "w") as f:
        write_ppm(f, width, height, iter_pixels(rgb8))
