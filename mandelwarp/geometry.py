"""Mapping between pixel space and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PixelCoordinate:
    """Integer pixel position; origin top-left, ``y`` grows downward."""

    x: int
    y: int


@dataclass(frozen=True)
class ComplexCoordinate:
    """Point in the complex plane; ``im`` grows upward."""

    re: float
    im: float

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexCoordinate":
        return cls(float(value.real), float(value.imag))

    def to_complex(self) -> complex:
        return complex(self.re, self.im)


@dataclass(frozen=True)
class ImageBounds:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Image bounds must be non-negative, got {self.width}x{self.height}.")

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class ComplexBounds:
    """Axis-aligned rectangle of the complex plane (a viewport)."""

    top_left: ComplexCoordinate
    bottom_right: ComplexCoordinate

    def __post_init__(self) -> None:
        if self.top_left.re > self.bottom_right.re or self.top_left.im < self.bottom_right.im:
            raise ValueError(
                "top_left must lie left of and above bottom_right, "
                f"got {self.top_left} and {self.bottom_right}."
            )

    @property
    def width(self) -> float:
        return self.bottom_right.re - self.top_left.re

    @property
    def height(self) -> float:
        return self.top_left.im - self.bottom_right.im


def _require_area(bounds: ImageBounds) -> None:
    if bounds.is_empty:
        raise ValueError(f"Cannot map coordinates on a degenerate {bounds.width}x{bounds.height} image.")


def complex_bounds_for(bounds: ImageBounds) -> ComplexBounds:
    """Default viewport: one complex unit per pixel, centred on the origin."""

    half_width = bounds.width / 2.0
    half_height = bounds.height / 2.0
    return ComplexBounds(
        top_left=ComplexCoordinate(-half_width, half_height),
        bottom_right=ComplexCoordinate(half_width, -half_height),
    )


def pixel_to_complex(coord: PixelCoordinate, bounds: ImageBounds, complex_bounds: ComplexBounds) -> ComplexCoordinate:
    """Linearly interpolate ``coord`` within ``bounds`` onto ``complex_bounds``.

    The products are taken before the division so that exact grid points stay
    exact in floating point.
    """

    _require_area(bounds)
    tl = complex_bounds.top_left
    re = tl.re + complex_bounds.width * coord.x / bounds.width
    im = tl.im - complex_bounds.height * coord.y / bounds.height
    return ComplexCoordinate(re, im)


def complex_to_pixel(value: ComplexCoordinate, bounds: ImageBounds, complex_bounds: ComplexBounds) -> PixelCoordinate:
    """Inverse of :func:`pixel_to_complex`, truncating toward zero."""

    _require_area(bounds)
    tl = complex_bounds.top_left
    x = (value.re - tl.re) * bounds.width / complex_bounds.width if complex_bounds.width else 0.0
    y = (tl.im - value.im) * bounds.height / complex_bounds.height if complex_bounds.height else 0.0
    return PixelCoordinate(int(x), int(y))


def pixels_to_complex(
    xs: np.ndarray,
    ys: np.ndarray,
    bounds: ImageBounds,
    complex_bounds: ComplexBounds,
) -> np.ndarray:
    """Vectorised :func:`pixel_to_complex` returning a complex128 array."""

    _require_area(bounds)
    tl = complex_bounds.top_left
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    re = np.float64(tl.re) + np.float64(complex_bounds.width) * xs / np.float64(bounds.width)
    im = np.float64(tl.im) - np.float64(complex_bounds.height) * ys / np.float64(bounds.height)
    return re + 1j * im


def _axis_to_pixels(offsets: np.ndarray, span: float, size: int) -> np.ndarray:
    if span == 0.0:
        return np.zeros(offsets.shape, dtype=np.int64)
    return np.trunc(offsets * np.float64(size) / np.float64(span)).astype(np.int64)


def complex_to_pixels(values: np.ndarray, bounds: ImageBounds, complex_bounds: ComplexBounds) -> np.ndarray:
    """Vectorised :func:`complex_to_pixel`.

    Returns an ``(N, 2)`` int64 array of ``x, y`` columns. An axis whose
    complex span is zero maps every point to coordinate 0.
    """

    _require_area(bounds)
    values = np.asarray(values, dtype=np.complex128)
    tl = complex_bounds.top_left
    xs = _axis_to_pixels(values.real - np.float64(tl.re), complex_bounds.width, bounds.width)
    ys = _axis_to_pixels(np.float64(tl.im) - values.imag, complex_bounds.height, bounds.height)
    return np.stack((xs, ys), axis=-1)
