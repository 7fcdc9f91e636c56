"""
Frame Codec
===========

Dedicated module for moving frames between PNG files and packed pixels.

Design Rules:
    - This is the ONLY place in the codebase that decodes or encodes images
    - Pixels are packed as uint32 ARGB: (a << 24) | (r << 16) | (g << 8) | b
    - Grayscale and BGR inputs decode with alpha 0xFF
    - 16-bit channels are reduced to their high byte
    - Writes are always 4-channel PNG so every packed bit survives
    - Fails fast on unreadable or unsupported files
"""

import logging
import shutil
from pathlib import Path
from typing import Tuple, Union

import cv2
import numpy as np

from deltalapse.errors import (
    DimensionMismatchError,
    FrameIOError,
    FrameReadError,
    FrameWriteError,
    ProbeError,
)
from deltalapse.models.frame import Frame


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_PNG_COMPRESSION = 6


def pack_bgra(bgra: np.ndarray) -> np.ndarray:
    """
    Pack an (H, W, 4) BGRA uint8 array into (H, W) ARGB uint32 words.

    Args:
        bgra: Channels in OpenCV order (blue, green, red, alpha)

    Returns:
        Packed pixels, dtype=uint32
    """
    b = bgra[..., 0].astype(np.uint32)
    g = bgra[..., 1].astype(np.uint32)
    r = bgra[..., 2].astype(np.uint32)
    a = bgra[..., 3].astype(np.uint32)
    return (a << 24) | (r << 16) | (g << 8) | b


def unpack_to_bgra(pixels: np.ndarray) -> np.ndarray:
    """
    Split (H, W) ARGB uint32 words into an (H, W, 4) BGRA uint8 array.

    Inverse of pack_bgra.
    """
    pixels = pixels.astype(np.uint32, copy=False)
    return np.stack(
        [
            pixels & 0xFF,
            (pixels >> 8) & 0xFF,
            (pixels >> 16) & 0xFF,
            pixels >> 24,
        ],
        axis=-1,
    ).astype(np.uint8)


def _to_bgra(image: np.ndarray, path: Path) -> np.ndarray:
    """Normalize whatever cv2.imread returned into 8-bit BGRA."""
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise FrameReadError(f"Unsupported pixel depth in {path}: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    if image.ndim == 3 and image.shape[2] == 4:
        return image

    raise FrameReadError(f"Unsupported image shape in {path}: {image.shape}")


def read_frame(path: PathLike) -> Frame:
    """
    Decode an image file into a packed-pixel Frame.

    Args:
        path: Image file to read

    Returns:
        Frame named after the file's basename

    Raises:
        FrameReadError: If the file is missing, corrupt or has an
            unsupported layout
    """
    path = Path(path)
    try:
        image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise FrameReadError(f"Failed to decode {path}: {e}") from e

    if image is None:
        raise FrameReadError(f"Failed to decode {path}: cv2.imread returned None")

    return Frame(name=path.name, pixels=pack_bgra(_to_bgra(image, path)))


def read_frame_checked(path: PathLike, size: Tuple[int, int]) -> Frame:
    """
    Decode a frame and require it to be exactly (width, height).

    Raises:
        FrameReadError: If decoding fails
        DimensionMismatchError: If the raster size differs
    """
    frame = read_frame(path)
    if frame.size != tuple(size):
        raise DimensionMismatchError(frame.name, tuple(size), frame.size)
    return frame


def write_frame(
    frame: Frame,
    path: PathLike,
    compression: int = DEFAULT_PNG_COMPRESSION,
) -> Path:
    """
    Encode a Frame as a 4-channel PNG.

    Args:
        frame: Frame to write
        path: Destination file (format follows its extension)
        compression: PNG zlib level, 0-9

    Returns:
        The path written

    Raises:
        FrameWriteError: If encoding or writing fails
    """
    path = Path(path)
    bgra = unpack_to_bgra(frame.pixels)
    try:
        ok = cv2.imwrite(str(path), bgra, [cv2.IMWRITE_PNG_COMPRESSION, compression])
    except cv2.error as e:
        raise FrameWriteError(f"Failed to encode {path}: {e}") from e

    if not ok:
        raise FrameWriteError(f"Failed to write {path}: cv2.imwrite returned False")

    return path


def probe_dimensions(path: PathLike) -> Tuple[int, int]:
    """
    Get (width, height) of an image file.

    The whole image is decoded; OpenCV has no header-only read.

    Raises:
        ProbeError: If the file cannot be decoded
    """
    try:
        frame = read_frame(path)
    except FrameReadError as e:
        raise ProbeError(path, str(e)) from e
    return frame.size


def copy_frame_file(src: PathLike, dst: PathLike) -> Path:
    """
    Copy a frame file byte-for-byte, replacing any existing target.

    Raises:
        FrameIOError: If the copy fails
    """
    try:
        return Path(shutil.copyfile(src, dst))
    except OSError as e:
        raise FrameIOError(f"Failed to copy {src} -> {dst}: {e}") from e
