"""Complex-plane transform of an existing image."""

from __future__ import annotations

import math

import numpy as np

from .geometry import (
    ComplexBounds,
    ComplexCoordinate,
    ImageBounds,
    complex_bounds_for,
    complex_to_pixels,
    pixels_to_complex,
)
from .image import ComplexPixel, Image
from .logs import log

# Fixed rotation and scale applied to every point.
TRANSFORM_MULTIPLIER = complex(1.0, 0.1)


def to_complex_points(image: Image) -> np.ndarray:
    """Reinterpret every pixel of ``image`` in its default complex viewport."""

    viewport = complex_bounds_for(image.bounds)
    return pixels_to_complex(image.coordinates[:, 0], image.coordinates[:, 1], image.bounds, viewport)


def complex_pixels(image: Image) -> list[ComplexPixel]:
    """Per-pixel record view of :func:`to_complex_points`, for inspection.

    :func:`transform_image` works on the arrays directly and never builds
    these records.
    """

    points = to_complex_points(image)
    return [
        ComplexPixel(ComplexCoordinate.from_complex(point), (r, g, b))
        for point, (r, g, b) in zip(points.tolist(), image.colors.tolist())
    ]


def transform_points(values: np.ndarray, multiplier: complex = TRANSFORM_MULTIPLIER) -> np.ndarray:
    return np.asarray(values, dtype=np.complex128) * np.complex128(multiplier)


def enclosing_complex_bounds(values: np.ndarray) -> ComplexBounds:
    """Smallest axis-aligned rectangle containing every point of ``values``."""

    values = np.asarray(values, dtype=np.complex128)
    if values.size == 0:
        raise ValueError("Cannot bound an empty set of points.")
    re = values.real
    im = values.imag
    return ComplexBounds(
        top_left=ComplexCoordinate(float(re.min()), float(im.max())),
        bottom_right=ComplexCoordinate(float(re.max()), float(im.min())),
    )


def enclosing_pixel_bounds(coordinates: np.ndarray) -> ImageBounds:
    """Bounds reaching one past the largest ``x`` and ``y``, measured from 0."""

    coordinates = np.asarray(coordinates, dtype=np.int64).reshape(-1, 2)
    if coordinates.shape[0] == 0:
        return ImageBounds(0, 0)
    return ImageBounds(int(coordinates[:, 0].max()) + 1, int(coordinates[:, 1].max()) + 1)


def grid_bounds_for(viewport: ComplexBounds) -> ImageBounds:
    """Pixel grid holding one pixel per complex unit, at least one per axis."""

    return ImageBounds(max(1, math.ceil(viewport.width)), max(1, math.ceil(viewport.height)))


def sort_pixels(image: Image) -> Image:
    """Stable raster-order sort keyed by ``y * width + x``.

    Entries sharing a destination keep their input order; none are dropped.
    """

    keys = image.coordinates[:, 1] * image.bounds.width + image.coordinates[:, 0]
    order = np.argsort(keys, kind="stable")
    return Image(image.bounds, image.coordinates[order], image.colors[order])


def transform_image(image: Image, multiplier: complex = TRANSFORM_MULTIPLIER) -> Image:
    """Run the full transform: reinterpret, multiply, re-bound, re-map, sort."""

    if len(image) == 0 or image.bounds.is_empty:
        log("Input image has no pixels, nothing to transform")
        return Image.empty()

    points = transform_points(to_complex_points(image), multiplier)
    viewport = enclosing_complex_bounds(points)
    grid = grid_bounds_for(viewport)
    coordinates = complex_to_pixels(points, grid, viewport)
    bounds = enclosing_pixel_bounds(coordinates)
    log(
        "Transformed %dx%d image into %dx%d (viewport re [%g, %g], im [%g, %g])"
        % (
            image.bounds.width,
            image.bounds.height,
            bounds.width,
            bounds.height,
            viewport.top_left.re,
            viewport.bottom_right.re,
            viewport.bottom_right.im,
            viewport.top_left.im,
        )
    )
    return sort_pixels(Image(bounds, coordinates, image.colors))
