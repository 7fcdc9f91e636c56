"""
Verifier
========

Pixel-exact comparison of two frame sequences.

Frames are matched by position after each sequence's own ordering;
filenames may differ. A differing pixel is reported as a Mismatch record,
never raised, so a corrupted run can be diagnosed in one pass. Structural
problems (different lengths or sizes) are still errors.

Read-only: neither sequence's files are modified.
"""

import logging
from typing import List, Optional

import numpy as np

from deltalapse.errors import FrameReadError, LengthMismatchError, ProbeError
from deltalapse.imaging import read_frame, read_frame_checked
from deltalapse.models.frame import FrameSequence
from deltalapse.models.report import Mismatch


logger = logging.getLogger(__name__)

DEFAULT_MAX_LOGGED_MISMATCHES = 100


class Verifier:
    """
    Compares sequences frame by frame.

    Attributes:
        max_logged_mismatches: Per-pixel warnings to emit before going
            quiet (0 = unlimited). Every mismatch is still returned.
    """

    def __init__(
        self,
        max_logged_mismatches: int = DEFAULT_MAX_LOGGED_MISMATCHES,
        progress: Optional[logging.Logger] = None,
    ) -> None:
        self.max_logged_mismatches = max_logged_mismatches
        self.progress = progress or logger

    def compare(self, seq_a: FrameSequence, seq_b: FrameSequence) -> List[Mismatch]:
        """
        Collect every differing pixel between two sequences.

        Args:
            seq_a: Reference sequence (e.g. originals)
            seq_b: Sequence under test (e.g. reconstruction)

        Returns:
            Mismatches in frame order, then row-major pixel order

        Raises:
            LengthMismatchError: If the sequences differ in length
            ProbeError: If the first frame of seq_a cannot be decoded
            DimensionMismatchError: If any frame differs in size
        """
        if len(seq_a) != len(seq_b):
            raise LengthMismatchError(len(seq_a), len(seq_b))
        if len(seq_a) == 0:
            return []

        first_ref = seq_a[0]
        try:
            first = read_frame(first_ref.path)
        except FrameReadError as e:
            raise ProbeError(first_ref.path, str(e)) from e
        size = first.size
        total = len(seq_a)
        self.progress.info("Running comparison of decompression vs original...")

        mismatches: List[Mismatch] = []
        for index in range(total):
            ref_a = seq_a[index]
            ref_b = seq_b[index]
            self.progress.info(f"Image {index + 1} of {total}: {ref_b.name}")

            if index == 0:
                pixels_a = first.pixels
            else:
                pixels_a = read_frame_checked(ref_a.path, size).pixels
            pixels_b = read_frame_checked(ref_b.path, size).pixels

            ys, xs = np.nonzero(pixels_a != pixels_b)
            if len(ys) == 0:
                continue

            for y, x in zip(ys.tolist(), xs.tolist()):
                mismatch = Mismatch(
                    frame_index=index,
                    x=x,
                    y=y,
                    pixel_a=int(pixels_a[y, x]),
                    pixel_b=int(pixels_b[y, x]),
                )
                if self._should_log(len(mismatches)):
                    self.progress.warning(
                        f"Invalid diff at y={y} x={x} in images "
                        f"{ref_a.path} <==> {ref_b.path} pixel diff: "
                        f"{mismatch.pixel_a:08x} <==> {mismatch.pixel_b:08x}"
                    )
                mismatches.append(mismatch)

            self.progress.warning(
                f"Frame {index} ({ref_a.name} <==> {ref_b.name}): "
                f"{len(ys)} differing pixels"
            )

        if mismatches:
            self.progress.warning(f"Verification found {len(mismatches)} differing pixels")
        else:
            self.progress.info(f"Verification passed: {total} frames identical")

        return mismatches

    def _should_log(self, already_reported: int) -> bool:
        if self.max_logged_mismatches == 0:
            return True
        return already_reported < self.max_logged_mismatches


def compare(seq_a: FrameSequence, seq_b: FrameSequence) -> List[Mismatch]:
    """Compare two sequences with a default Verifier."""
    return Verifier().compare(seq_a, seq_b)
