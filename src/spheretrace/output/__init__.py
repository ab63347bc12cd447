"""Output module for turning rendered images into files.

Components:
    ppm: Gamma-2 quantisation and plain PPM writing
    export: Format selection and PNG export via Pillow
"""

from .export import SUPPORTED_SUFFIXES, save_image, save_png
from .ppm import RGB8_SCALE, iter_pixels, save_ppm, to_rgb8, write_ppm

__all__ = [
    "RGB8_SCALE",
    "SUPPORTED_SUFFIXES",
    "to_rgb8",
    "iter_pixels",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
