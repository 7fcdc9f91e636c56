"""
Frame Catalog
=============

Discovers frame files in a directory and orders them by capture number.

Ordering:
    The key is the FIRST run of ASCII digits 0-9 in the filename, read left
    to right. "img10_v2.png" sorts as 10. Ties keep directory-listing order.

Design Rules:
    - No recursion into subdirectories
    - A single filename without digits fails the whole catalog; a partial
      sequence would silently corrupt the delta chain
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Union

from deltalapse.errors import EmptyInputError, NoMatchError
from deltalapse.models.frame import FrameRef, FrameSequence


logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".png"

_ORDER_KEY_PATTERN = re.compile(r"[0-9]+")


def extract_order_key(filename: str) -> int:
    """
    Extract the ordering key from a filename.

    Args:
        filename: Basename of a frame file

    Returns:
        Integer value of the first digit run

    Raises:
        NoMatchError: If the filename contains no digits
    """
    match = _ORDER_KEY_PATTERN.search(filename)
    if match is None:
        raise NoMatchError(filename)
    return int(match.group(0))


def list_frames(
    directory: Union[str, Path],
    extension: str = DEFAULT_EXTENSION,
) -> FrameSequence:
    """
    List frame files in a directory, ordered by their embedded number.

    Args:
        directory: Directory to scan (not recursed)
        extension: Recognized file extension, matched case-sensitively

    Returns:
        FrameSequence sorted ascending by order key

    Raises:
        EmptyInputError: If no file has the extension
        NoMatchError: If any candidate lacks an ordering number
    """
    directory = Path(directory)

    candidates: List[str] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file() and entry.name.endswith(extension):
                candidates.append(entry.name)

    if not candidates:
        raise EmptyInputError(directory, extension)

    refs = [
        FrameRef(path=directory / name, order_key=extract_order_key(name))
        for name in candidates
    ]
    # sorted() is stable, so equal keys keep listing order
    refs = sorted(refs, key=lambda ref: ref.order_key)

    logger.info(f"Found {len(refs)} frames in {directory}")
    return FrameSequence(refs, directory)


class FrameCatalog:
    """
    Catalog bound to one file extension.

    Example:
        catalog = FrameCatalog(extension=".png")
        frames = catalog.list("screenshots")
    """

    def __init__(self, extension: str = DEFAULT_EXTENSION) -> None:
        self.extension = extension

    def list(self, directory: Union[str, Path]) -> FrameSequence:
        """List and order the frames in a directory."""
        return list_frames(directory, extension=self.extension)
