import numpy as np
import pytest

from mandelwarp.geometry import ImageBounds
from mandelwarp.image import Image
from mandelwarp.imaging import (
    ImageDecodeError,
    ImageEncodeError,
    ImageIOError,
    ImageNotFoundError,
    ImageReadError,
    ImageWriteError,
    read_image,
    write_image,
)


def _gradient(width=5, height=3):
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :] * 40
    rgb[..., 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis] * 60
    rgb[..., 2] = 7
    return rgb


@pytest.mark.parametrize("name", ["out.png", "out.bmp", "out.tiff", "out.ppm"])
def test_write_then_read_is_lossless(tmp_path, name):
    rgb = _gradient()
    path = tmp_path / name
    write_image(path, Image.from_array(rgb))
    loaded = read_image(path)
    assert loaded.bounds == ImageBounds(5, 3)
    assert np.array_equal(loaded.to_array(), rgb)


def test_write_without_suffix_uses_png(tmp_path):
    path = tmp_path / "noext"
    write_image(path, Image.from_array(_gradient()))
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_write_creates_parent_and_leaves_no_temporary_files(tmp_path):
    path = tmp_path / "nested" / "dir" / "out.png"
    write_image(path, Image.from_array(_gradient()))
    assert [p.name for p in path.parent.iterdir()] == ["out.png"]


def test_missing_input(tmp_path):
    with pytest.raises(ImageNotFoundError) as info:
        read_image(tmp_path / "missing.png")
    assert isinstance(info.value, FileNotFoundError)
    assert isinstance(info.value, ImageReadError)


def test_directory_input_is_unreadable(tmp_path):
    with pytest.raises(ImageReadError):
        read_image(tmp_path)


def test_malformed_input(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    with pytest.raises(ImageDecodeError):
        read_image(path)


def test_grayscale_input_is_converted_to_rgb(tmp_path):
    import PIL.Image

    path = tmp_path / "gray.png"
    PIL.Image.fromarray(np.full((2, 3), 90, dtype=np.uint8)).save(path)
    image = read_image(path)
    assert image.bounds == ImageBounds(3, 2)
    assert np.all(image.colors == 90)


def test_lossy_output_is_rejected_without_writing(tmp_path):
    path = tmp_path / "out.jpg"
    with pytest.raises(ImageEncodeError):
        write_image(path, Image.from_array(_gradient()))
    assert list(tmp_path.iterdir()) == []


def test_empty_image_cannot_be_encoded(tmp_path):
    with pytest.raises(ImageEncodeError):
        write_image(tmp_path / "out.png", Image.empty())
    assert list(tmp_path.iterdir()) == []


def test_unwritable_destination(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("not a directory")
    with pytest.raises(ImageWriteError) as info:
        write_image(blocker / "out.png", Image.from_array(_gradient()))
    assert isinstance(info.value, ImageIOError)


def test_sparse_image_is_written_with_black_gaps(tmp_path):
    image = Image(ImageBounds(3, 2), [[2, 1]], [[200, 100, 50]])
    path = tmp_path / "sparse.png"
    write_image(path, image)
    canvas = read_image(path).to_array()
    assert canvas[1, 2].tolist() == [200, 100, 50]
    assert canvas[0, 0].tolist() == [0, 0, 0]


@pytest.mark.parametrize("error", [TypeError("encoder failed"), KeyboardInterrupt()])
def test_interrupted_save_leaves_no_temporary_file(tmp_path, monkeypatch, error):
    import PIL.Image

    def failing_save(self, *args, **kwargs):
        raise error

    monkeypatch.setattr(PIL.Image.Image, "save", failing_save)
    with pytest.raises(type(error)):
        write_image(tmp_path / "out.png", Image.from_array(_gradient()))
    assert list(tmp_path.iterdir()) == []


def test_failed_save_keeps_previous_output(tmp_path, monkeypatch):
    import PIL.Image

    path = tmp_path / "out.png"
    write_image(path, Image.from_array(_gradient()))
    before = path.read_bytes()

    def failing_save(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(PIL.Image.Image, "save", failing_save)
    with pytest.raises(ImageWriteError):
        write_image(path, Image.from_array(_gradient(2, 2)))
    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]
