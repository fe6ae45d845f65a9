"""Assemble escape-time images over a regular pixel grid."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .escape import ESCAPE_PALETTE, colorize, escape_times
from .geometry import ComplexBounds, ComplexCoordinate, ImageBounds, pixels_to_complex
from .image import Image
from .logs import log

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_VIEWPORT = ComplexBounds(
    top_left=ComplexCoordinate(-1.1, 1.1),
    bottom_right=ComplexCoordinate(1.1, -1.1),
)

Evaluator = Callable[[np.ndarray], np.ndarray]


def viewport_around(x_center: float, y_center: float, x_width: float, y_width: float) -> ComplexBounds:
    half_x = np.float64(x_width) / 2.0
    half_y = np.float64(y_width) / 2.0
    return ComplexBounds(
        top_left=ComplexCoordinate(float(x_center - half_x), float(y_center + half_y)),
        bottom_right=ComplexCoordinate(float(x_center + half_x), float(y_center - half_y)),
    )


@dataclass(frozen=True)
class GeneratorParameters:
    """Parameters that describe a single escape-time render."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    viewport: ComplexBounds = DEFAULT_VIEWPORT
    palette: str = ESCAPE_PALETTE
    workers: Optional[int] = None

    @property
    def bounds(self) -> ImageBounds:
        return ImageBounds(self.width, self.height)


def _worker_count(requested: Optional[int], rows: int) -> int:
    workers = requested if requested is not None else (os.cpu_count() or 1)
    return max(1, min(int(workers), rows))


def _row_bands(height: int, bands: int) -> list[tuple[int, int]]:
    edges = np.linspace(0, height, bands + 1, dtype=np.int64)
    return [(int(start), int(stop)) for start, stop in zip(edges[:-1], edges[1:]) if stop > start]


def compute_escape_grid(params: GeneratorParameters, evaluate: Evaluator = escape_times) -> np.ndarray:
    """Escape index of every pixel as a ``(height, width)`` uint8 array.

    Rows are split into bands evaluated on a thread pool. Results are gathered
    by band index, so the output is in raster order whatever order the
    workers finish in.
    """

    bounds = params.bounds
    if bounds.is_empty:
        raise ValueError(f"Cannot generate a {bounds.width}x{bounds.height} image.")

    workers = _worker_count(params.workers, bounds.height)
    bands = _row_bands(bounds.height, workers)
    xs = np.arange(bounds.width, dtype=np.int64)

    def evaluate_band(band: tuple[int, int]) -> np.ndarray:
        start, stop = band
        ys = np.arange(start, stop, dtype=np.int64)
        grid_x, grid_y = np.meshgrid(xs, ys)
        values = pixels_to_complex(grid_x, grid_y, bounds, params.viewport)
        return np.asarray(evaluate(values), dtype=np.uint8).reshape(stop - start, bounds.width)

    log("Evaluating %dx%d pixels in %d bands" % (bounds.width, bounds.height, len(bands)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(evaluate_band, bands))
    return np.concatenate(results, axis=0)


def assemble_image(params: GeneratorParameters, evaluate: Evaluator = escape_times) -> Image:
    """Render ``params`` into an :class:`Image` whose pixels are in raster order."""

    escape = compute_escape_grid(params, evaluate)
    return Image.from_array(colorize(escape, params.palette))
