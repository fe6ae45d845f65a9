"""Reading and writing images on disk."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

import imageio.v3 as iio
import numpy as np
import PIL.Image
from imageio.core.request import InitializationError

from .image import Image
from .logs import log

PathLike = Union[str, os.PathLike]

_LOSSLESS_FORMATS = {
    "PNG": "PNG",
    "BMP": "BMP",
    "TIF": "TIFF",
    "TIFF": "TIFF",
    "PPM": "PPM",
}


class ImageIOError(Exception):
    """Base class for failures while loading or saving an image."""


class ImageReadError(ImageIOError):
    """The input path exists but cannot be read."""


class ImageNotFoundError(ImageReadError, FileNotFoundError):
    pass


class ImageDecodeError(ImageIOError):
    """The input file is not an image that can be decoded."""


class ImageEncodeError(ImageIOError):
    """The image cannot be encoded in the requested format."""


class ImageWriteError(ImageIOError):
    """The encoded image could not be stored at the output path."""


def read_image(path: PathLike) -> Image:
    """Decode ``path`` into an RGB :class:`Image` with pixels in raster order."""

    path = Path(path)
    if not path.exists():
        raise ImageNotFoundError(f"No such file: {path}")
    if not path.is_file() or not os.access(path, os.R_OK):
        raise ImageReadError(f"Cannot read {path}")

    try:
        rgb = iio.imread(path, index=0, plugin="pillow", mode="RGB")
    except PermissionError as exc:
        raise ImageReadError(f"Cannot read {path}: {exc}") from exc
    except (OSError, ValueError, RuntimeError, SyntaxError, InitializationError, PIL.Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Cannot decode {path}: {exc}") from exc

    log("Read %s (%dx%d)" % (path, rgb.shape[1], rgb.shape[0]))
    return Image.from_array(rgb)


def _pil_format_name(path: Path) -> str:
    ext = path.suffix.lstrip(".").upper()
    if not ext:
        return "PNG"
    try:
        return _LOSSLESS_FORMATS[ext]
    except KeyError:
        raise ImageEncodeError(
            f"Unsupported output format '{path.suffix}'; choose one of "
            f"{', '.join(sorted('.' + name.lower() for name in _LOSSLESS_FORMATS))}."
        ) from None


def write_image(path: PathLike, image: Image) -> None:
    """Encode ``image`` losslessly and store it at ``path``.

    The data goes to a temporary file beside ``path`` that is renamed over the
    destination only once encoding succeeded.
    """

    path = Path(path)
    pil_format = _pil_format_name(path)
    if image.bounds.is_empty:
        raise ImageEncodeError(
            f"Cannot encode an empty {image.bounds.width}x{image.bounds.height} image."
        )

    try:
        picture = PIL.Image.fromarray(np.ascontiguousarray(image.to_array()))
    except (TypeError, ValueError) as exc:
        raise ImageEncodeError(f"Cannot encode image: {exc}") from exc

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        os.close(handle)
    except OSError as exc:
        raise ImageWriteError(f"Cannot write {path}: {exc}") from exc

    replaced = False
    try:
        try:
            # mkstemp creates the file 0600; give the output the usual umask mode.
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(temp_name, 0o666 & ~umask)
            picture.save(temp_name, format=pil_format)
        except (KeyError, ValueError) as exc:
            raise ImageEncodeError(f"Cannot encode {path} as {pil_format}: {exc}") from exc
        except OSError as exc:
            raise ImageWriteError(f"Cannot write {path}: {exc}") from exc
        try:
            os.replace(temp_name, path)
        except OSError as exc:
            raise ImageWriteError(f"Cannot write {path}: {exc}") from exc
        replaced = True
    finally:
        if not replaced:
            Path(temp_name).unlink(missing_ok=True)

    log("Wrote %s (%dx%d, %s)" % (path, image.bounds.width, image.bounds.height, pil_format))
