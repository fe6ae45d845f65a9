"""Public API for escape-time rendering and complex-plane image transforms."""

from .escape import MAX_ITERATIONS, colorize, escape_time, escape_times
from .generator import (
    DEFAULT_VIEWPORT,
    GeneratorParameters,
    assemble_image,
    compute_escape_grid,
    viewport_around,
)
from .geometry import (
    ComplexBounds,
    ComplexCoordinate,
    ImageBounds,
    PixelCoordinate,
    complex_bounds_for,
    complex_to_pixel,
    complex_to_pixels,
    pixel_to_complex,
    pixels_to_complex,
)
from .image import ComplexPixel, Image, Pixel
from .imaging import (
    ImageDecodeError,
    ImageEncodeError,
    ImageIOError,
    ImageNotFoundError,
    ImageReadError,
    ImageWriteError,
    read_image,
    write_image,
)
from .transform import (
    TRANSFORM_MULTIPLIER,
    enclosing_complex_bounds,
    enclosing_pixel_bounds,
    sort_pixels,
    transform_image,
    transform_points,
)

__all__ = [
    "ComplexBounds",
    "ComplexCoordinate",
    "ComplexPixel",
    "DEFAULT_VIEWPORT",
    "GeneratorParameters",
    "Image",
    "ImageBounds",
    "ImageDecodeError",
    "ImageEncodeError",
    "ImageIOError",
    "ImageNotFoundError",
    "ImageReadError",
    "ImageWriteError",
    "MAX_ITERATIONS",
    "Pixel",
    "PixelCoordinate",
    "TRANSFORM_MULTIPLIER",
    "assemble_image",
    "colorize",
    "complex_bounds_for",
    "complex_to_pixel",
    "complex_to_pixels",
    "compute_escape_grid",
    "enclosing_complex_bounds",
    "enclosing_pixel_bounds",
    "escape_time",
    "escape_times",
    "pixel_to_complex",
    "pixels_to_complex",
    "read_image",
    "sort_pixels",
    "transform_image",
    "transform_points",
    "viewport_around",
    "write_image",
]
