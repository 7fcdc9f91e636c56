"""
Frame Data Models
=================

Internal frame representations for the delta pipeline.

Two levels exist:
    - FrameRef: an un-decoded file reference with its ordering key
    - Frame: a decoded raster of packed 32-bit ARGB pixels

Design Rules:
    - Frames are created per pairwise step and never cached
    - Pixel values are opaque uint32 words (alpha in bits 31..24)
    - FrameSequence order is fixed at construction
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple, Union, overload

import numpy as np


@dataclass(frozen=True, slots=True)
class FrameRef:
    """
    Reference to a frame file on disk.

    Attributes:
        path: Location of the image file
        order_key: Integer extracted from the filename, used for sorting
    """

    path: Path
    order_key: int

    @property
    def name(self) -> str:
        """Filename, which is the frame's identity."""
        return self.path.name


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Decoded raster image.

    Attributes:
        name: Source filename
        pixels: (H, W) array of packed ARGB values, dtype=uint32
    """

    name: str
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) of the raster."""
        return (self.width, self.height)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel array."""
        return f"Frame(name={self.name!r}, size={self.width}x{self.height})"


class FrameSequence:
    """
    Ordered, immutable sequence of frame references.

    Sorted ascending by order key when built by the catalog. Supports
    len(), indexing, slicing and iteration.
    """

    __slots__ = ("_refs", "_directory")

    def __init__(self, refs: Sequence[FrameRef], directory: Union[str, Path]) -> None:
        self._refs: Tuple[FrameRef, ...] = tuple(refs)
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """Directory the frames were listed from."""
        return self._directory

    @property
    def names(self) -> List[str]:
        return [ref.name for ref in self._refs]

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> Iterator[FrameRef]:
        return iter(self._refs)

    @overload
    def __getitem__(self, index: int) -> FrameRef: ...

    @overload
    def __getitem__(self, index: slice) -> "FrameSequence": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return FrameSequence(self._refs[index], self._directory)
        return self._refs[index]

    def rebased(self, directory: Union[str, Path]) -> "FrameSequence":
        """
        Same names and order keys, located in another directory.

        Stage outputs are named after their inputs, so this is the
        sequence a stage wrote to directory, regardless of any other
        files already there.
        """
        directory = Path(directory)
        return FrameSequence(
            [FrameRef(path=directory / ref.name, order_key=ref.order_key) for ref in self._refs],
            directory,
        )

    def __repr__(self) -> str:
        return f"FrameSequence(directory={str(self._directory)!r}, frames={len(self)})"
