import numpy as np
import pytest

from mandelwarp.geometry import ImageBounds, PixelCoordinate
from mandelwarp.image import Image, Pixel


def _checkerboard():
    rgb = np.zeros((2, 3, 3), dtype=np.uint8)
    rgb[0, 1] = (255, 0, 0)
    rgb[1, 2] = (0, 0, 255)
    return rgb


def test_from_array_enumerates_in_raster_order():
    image = Image.from_array(_checkerboard())
    assert image.bounds == ImageBounds(3, 2)
    assert image.coordinates.tolist() == [[0, 0], [1, 0], [2, 0], [0, 1], [1, 1], [2, 1]]
    assert image.colors[1].tolist() == [255, 0, 0]
    assert image.colors[5].tolist() == [0, 0, 255]


def test_to_array_restores_raster():
    rgb = _checkerboard()
    assert np.array_equal(Image.from_array(rgb).to_array(), rgb)


def test_to_array_fills_gaps_black_and_last_duplicate_wins():
    image = Image(
        ImageBounds(2, 2),
        [[1, 1], [0, 0], [1, 1]],
        [[10, 10, 10], [20, 20, 20], [30, 30, 30]],
    )
    canvas = image.to_array()
    assert canvas[1, 1].tolist() == [30, 30, 30]
    assert canvas[0, 0].tolist() == [20, 20, 20]
    assert canvas[0, 1].tolist() == [0, 0, 0]
    assert len(image) == 3


def test_pixels_yields_named_records():
    pixels = list(Image.from_array(_checkerboard()).pixels())
    assert pixels[1] == Pixel(PixelCoordinate(1, 0), (255, 0, 0))
    assert len(pixels) == 6


def test_arrays_are_copied_and_read_only():
    coordinates = np.array([[0, 0]])
    image = Image(ImageBounds(1, 1), coordinates, [[1, 2, 3]])
    coordinates[0, 0] = 5
    assert image.coordinates[0, 0] == 0
    with pytest.raises(ValueError):
        image.colors[0, 0] = 9


def test_coordinates_must_fit_bounds():
    with pytest.raises(ValueError):
        Image(ImageBounds(2, 2), [[2, 0]], [[0, 0, 0]])
    with pytest.raises(ValueError):
        Image(ImageBounds(2, 2), [[-1, 0]], [[0, 0, 0]])


def test_coordinate_and_color_counts_must_match():
    with pytest.raises(ValueError):
        Image(ImageBounds(2, 2), [[0, 0], [1, 1]], [[0, 0, 0]])


def test_from_array_rejects_non_rgb():
    with pytest.raises(ValueError):
        Image.from_array(np.zeros((2, 2), dtype=np.uint8))


def test_empty_image():
    image = Image.empty()
    assert image.bounds.is_empty
    assert len(image) == 0
    assert image.to_array().shape == (0, 0, 3)
