import numpy as np
import pytest

from mandelwarp.escape import MAX_ITERATIONS, colorize, escape_time, escape_times

KNOWN_POINTS = [
    (0j, 255),
    (10 + 10j, 0),
    (-2 + 0j, 0),
    (1 + 0j, 1),
    (1j, 1),
    (0.5 + 0j, 2),
    (-1 + 0j, 255),
    (0.25 + 0j, 255),
]


@pytest.mark.parametrize("c,expected", KNOWN_POINTS)
def test_escape_time_known_points(c, expected):
    assert escape_time(c) == expected


def test_escape_time_is_bounded():
    assert MAX_ITERATIONS == 256
    for c in (0j, -1 + 0j, -0.1 + 0.1j, 0.3 - 0.5j):
        assert 0 <= escape_time(c) <= 255


def test_escape_time_respects_custom_cap():
    assert escape_time(0j, max_iterations=10) == 9
    assert escape_time(0.5 + 0j, max_iterations=2) == 1


def test_batched_escape_times_match_scalar():
    values = np.array([c for c, _ in KNOWN_POINTS], dtype=np.complex128)
    result = escape_times(values)
    assert result.dtype == np.uint8
    assert result.tolist() == [expected for _, expected in KNOWN_POINTS]


def test_batched_escape_times_keep_shape():
    values = np.array([[0j, 10 + 10j], [1 + 0j, -1 + 0j]])
    result = escape_times(values)
    assert result.shape == (2, 2)
    assert result.tolist() == [[255, 0], [1, 255]]


def test_batched_escape_times_empty():
    result = escape_times(np.empty((0, 3), dtype=np.complex128))
    assert result.shape == (0, 3)
    assert result.dtype == np.uint8


def test_escape_palette_is_affine_with_white_interior():
    rgb = colorize(np.array([0, 1, 2, 100, 255], dtype=np.uint8))
    assert rgb.dtype == np.uint8
    assert rgb.tolist() == [
        [0, 0, 0],
        [1, 2, 3],
        [2, 4, 6],
        [100, 200, 44],
        [255, 255, 255],
    ]


def test_gray_palette_repeats_index():
    rgb = colorize(np.array([[0, 7], [128, 255]], dtype=np.uint8), "gray")
    assert rgb.shape == (2, 2, 3)
    assert rgb[1, 0].tolist() == [128, 128, 128]


def test_matplotlib_palette():
    rgb = colorize(np.array([0, 255], dtype=np.uint8), "viridis")
    assert rgb.shape == (2, 3)
    assert rgb.dtype == np.uint8
    assert not np.array_equal(rgb[0], rgb[1])


def test_unknown_palette_raises():
    with pytest.raises(ValueError):
        colorize(np.array([1], dtype=np.uint8), "no-such-palette")


def test_batched_and_scalar_agree_on_random_points():
    rng = np.random.default_rng(1234)
    values = rng.uniform(-2.0, 1.0, 4000) + 1j * rng.uniform(-1.2, 1.2, 4000)
    batched = escape_times(values)
    assert batched.tolist() == [escape_time(c) for c in values.tolist()]


def test_late_escape_near_the_cap():
    # Just right of the cusp at 0.25 the orbit lingers near 0.5 before leaving.
    c = 0.2505 + 0j
    expected = escape_time(c)
    assert 50 < expected < 255
    assert escape_times(np.array([c])).tolist() == [expected]
