"""Command-line entry point.

Renders a preset or a JSON scene file and writes a .ppm or .png image.

Usage:
    spheretrace [options]

Options:
    --width WIDTH         Image width in pixels (default: 200)
    --height HEIGHT       Image height in pixels (default: 100)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --batch-size SIZE     Samples per progress update (default: 10)
    --scene NAME          Preset scene: three-spheres or random
    --scene-file PATH     JSON scene file (overrides --scene)
    --mode MODE           path or normals (default: path)
    --seed SEED           Random seed (default: 0)
    --arch ARCH           cpu or gpu (default: cpu)
    --output OUTPUT       Output file path, .ppm or .png (default: output.ppm)
    --quiet               Suppress progress output

Example:
    spheretrace --scene random --width 300 --height 200 --samples 20 --output random.png
"""

import argparse
import dataclasses
import sys
import time
from pathlib import Path
from typing import Optional

from spheretrace.config import (
    ARCHES,
    DEFAULT_HEIGHT,
    DEFAULT_SAMPLES,
    DEFAULT_WIDTH,
    MODES,
    RenderSettings,
    init_backend,
)

SCENES = ("three-spheres", "random")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="spheretrace",
        description="Render a scene of spheres with a path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SAMPLES,
        help=f"Number of samples per pixel (default: {DEFAULT_SAMPLES})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="three-spheres",
        help="Preset scene (default: three-spheres)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="JSON scene file to render instead of a preset",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="path",
        help="path: path-traced color, normals: normal preview (default: path)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--arch",
        choices=ARCHES,
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output.ppm",
        help="Output file path, .ppm or .png (default: output.ppm)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def parse_args(argv: Optional[list[str]] = None) -> RenderSettings:
    """Parse command-line arguments into render settings.

    Raises:
        ValueError: If the parsed values are out of range.
    """
    args = build_parser().parse_args(argv)
    return RenderSettings(
        width=args.width,
        height=args.height,
        samples=args.samples,
        batch_size=args.batch_size,
        scene=args.scene,
        scene_file=args.scene_file,
        mode=args.mode,
        seed=args.seed,
        arch=args.arch,
        output=args.output,
        quiet=args.quiet,
    )


def render(settings: RenderSettings) -> Path:
    """Render the configured scene and save it.

    Taichi must already be initialised.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    import numpy as np

    from spheretrace.camera.thin_lens import setup_camera
    from spheretrace.core.integrator import RenderMode
    from spheretrace.core.progressive import ProgressiveRenderer
    from spheretrace.output.export import SUPPORTED_SUFFIXES
    from spheretrace.scene.builder import load_scene
    from spheretrace.scene.presets import PRESETS

    quiet = settings.quiet
    output_file = Path(settings.output)
    if output_file.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported image format {output_file.suffix!r}; "
            f"expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    if settings.scene_file is not None:
        if not quiet:
            print(f"Loading scene from {settings.scene_file}...")
        scene = load_scene(settings.scene_file)
        if scene.camera is None:
            raise ValueError(f"Scene file {settings.scene_file} has no camera")
        camera = dataclasses.replace(scene.camera, aspect_ratio=settings.aspect_ratio)
    else:
        if not quiet:
            print(f"Creating {settings.scene} scene ({settings.width}x{settings.height})...")
        if settings.scene == "random":
            scene, camera = PRESETS["random"](
                np.random.default_rng(settings.seed), aspect_ratio=settings.aspect_ratio
            )
        else:
            scene, camera = PRESETS[settings.scene](aspect_ratio=settings.aspect_ratio)

    scene.apply()
    setup_camera(camera)

    mode = RenderMode[settings.mode.upper()]
    renderer = ProgressiveRenderer(settings.width, settings.height, mode)

    if not quiet:
        print(f"Rendering {len(scene)} spheres, {settings.samples} samples per pixel...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=settings.samples,
        batch_size=settings.batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    renderer.save_image(output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    try:
        settings = parse_args(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    backend = init_backend(settings.arch, settings.seed)
    if not settings.quiet:
        print(f"Using {backend.upper()} backend")

    try:
        render(settings)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
