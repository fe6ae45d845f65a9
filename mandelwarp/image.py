"""In-memory image representation shared by both pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .geometry import ComplexCoordinate, ImageBounds, PixelCoordinate

Color = tuple[int, int, int]


@dataclass(frozen=True)
class Pixel:
    coordinate: PixelCoordinate
    color: Color


@dataclass(frozen=True)
class ComplexPixel:
    """A pixel reinterpreted as a point of the complex plane."""

    coordinate: ComplexCoordinate
    color: Color


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Image:
    """Bounds plus an ordered pixel sequence.

    ``coordinates`` is an ``(N, 2)`` int64 array of ``x, y`` columns and
    ``colors`` the matching ``(N, 3)`` uint8 array. Both are copied and made
    read-only on construction, so stages always hand over fresh arrays.
    """

    bounds: ImageBounds
    coordinates: np.ndarray
    colors: np.ndarray

    def __post_init__(self) -> None:
        coordinates = np.asarray(self.coordinates, dtype=np.int64).reshape(-1, 2)
        colors = np.asarray(self.colors, dtype=np.uint8).reshape(-1, 3)
        if coordinates.shape[0] != colors.shape[0]:
            raise ValueError(
                f"Got {coordinates.shape[0]} coordinates but {colors.shape[0]} colors."
            )
        if coordinates.size:
            if coordinates.min() < 0:
                raise ValueError("Pixel coordinates must be non-negative.")
            if coordinates[:, 0].max() >= self.bounds.width or coordinates[:, 1].max() >= self.bounds.height:
                raise ValueError(
                    f"Pixel coordinates exceed the {self.bounds.width}x{self.bounds.height} bounds."
                )
        object.__setattr__(self, "coordinates", _frozen(coordinates))
        object.__setattr__(self, "colors", _frozen(colors))

    def __len__(self) -> int:
        return int(self.coordinates.shape[0])

    @classmethod
    def empty(cls) -> "Image":
        return cls(ImageBounds(0, 0), np.empty((0, 2), dtype=np.int64), np.empty((0, 3), dtype=np.uint8))

    @classmethod
    def from_array(cls, rgb: np.ndarray) -> "Image":
        """Build an image from a ``height x width x 3`` array in raster order."""

        rgb = np.asarray(rgb, dtype=np.uint8)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"Expected an RGB array of shape (height, width, 3), got {rgb.shape}.")
        height, width = rgb.shape[:2]
        ys, xs = np.indices((height, width)).reshape(2, -1)
        coordinates = np.stack((xs, ys), axis=-1)
        return cls(ImageBounds(width, height), coordinates, rgb.reshape(-1, 3))

    def to_array(self) -> np.ndarray:
        """Rasterize onto a black canvas; later duplicates overwrite earlier ones."""

        canvas = np.zeros((self.bounds.height * self.bounds.width, 3), dtype=np.uint8)
        if len(self):
            linear = self.coordinates[:, 1] * self.bounds.width + self.coordinates[:, 0]
            _, reversed_first = np.unique(linear[::-1], return_index=True)
            last = len(linear) - 1 - reversed_first
            canvas[linear[last]] = self.colors[last]
        return canvas.reshape(self.bounds.height, self.bounds.width, 3)

    def pixels(self) -> Iterator[Pixel]:
        for (x, y), (r, g, b) in zip(self.coordinates.tolist(), self.colors.tolist()):
            yield Pixel(PixelCoordinate(x, y), (r, g, b))
