"""
Error Types
===========

Exception hierarchy shared by every stage of the pipeline.

All errors are fatal for the stage that raises them. Nothing in the core
retries; the CLI turns these into a non-zero exit code.
"""

from pathlib import Path
from typing import Tuple, Union


class DeltaLapseError(Exception):
    """Base class for all deltalapse errors."""
    pass


class ProbeError(DeltaLapseError):
    """Raised when a frame's dimensions cannot be determined."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to probe image dimensions: {path} ({reason})")


class NoMatchError(DeltaLapseError):
    """Raised when a frame filename has no embedded ordering digits."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"No ordering number in filename: {filename}")


class EmptyInputError(DeltaLapseError):
    """Raised when a directory contains no candidate frame files."""

    def __init__(self, directory: Union[str, Path], extension: str) -> None:
        self.directory = Path(directory)
        self.extension = extension
        super().__init__(f"No '*{extension}' frames found in {directory}")


class DimensionMismatchError(DeltaLapseError):
    """Raised when a frame's size differs from the size probed for the run."""

    def __init__(
        self,
        name: str,
        expected: Tuple[int, int],
        actual: Tuple[int, int],
    ) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Frame {name} is {actual[0]}x{actual[1]}, "
            f"expected {expected[0]}x{expected[1]}"
        )


class LengthMismatchError(DeltaLapseError, ValueError):
    """Raised when two sequences to compare have different lengths."""

    def __init__(self, len_a: int, len_b: int) -> None:
        self.len_a = len_a
        self.len_b = len_b
        super().__init__(f"Sequence lengths differ: {len_a} != {len_b}")


class FrameIOError(DeltaLapseError, OSError):
    """Raised when a frame file cannot be read, written or copied."""
    pass


class FrameReadError(FrameIOError):
    """Raised when a frame file cannot be decoded."""
    pass


class FrameWriteError(FrameIOError):
    """Raised when a frame file cannot be encoded or written."""
    pass
