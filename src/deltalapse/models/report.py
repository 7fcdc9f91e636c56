"""
Report Models
=============

Result records produced by the verifier and the pipeline.

A Mismatch is data, not an error: the verifier collects them so a corrupted
run can be diagnosed in one pass.
"""

from dataclasses import dataclass, field
from typing import List

from deltalapse.models.frame import FrameSequence


@dataclass(frozen=True, slots=True)
class Mismatch:
    """
    A single differing pixel between two sequences.

    Attributes:
        frame_index: Position in both sequences
        x: Column of the pixel
        y: Row of the pixel
        pixel_a: Packed ARGB value in the first sequence
        pixel_b: Packed ARGB value in the second sequence
    """

    frame_index: int
    x: int
    y: int
    pixel_a: int
    pixel_b: int

    def __str__(self) -> str:
        return (
            f"frame {self.frame_index} at x={self.x} y={self.y}: "
            f"{self.pixel_a:08x} <==> {self.pixel_b:08x}"
        )


@dataclass(frozen=True, slots=True)
class StageTimings:
    """Wall-clock seconds spent in each pipeline stage."""

    encode: float
    decode: float
    verify: float

    @property
    def total(self) -> float:
        return self.encode + self.decode + self.verify


@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of a full encode -> decode -> verify run.

    Attributes:
        original: Catalog of the input directory
        compressed: Catalog of the delta directory
        decompressed: Catalog of the reconstructed directory
        mismatches: Every differing pixel found by verification
        input_bytes: Total size of the input frame files
        compressed_bytes: Total size of the delta frame files
        timings: Per-stage wall-clock durations
    """

    original: FrameSequence
    compressed: FrameSequence
    decompressed: FrameSequence
    input_bytes: int
    compressed_bytes: int
    timings: StageTimings
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return len(self.original)

    @property
    def verified(self) -> bool:
        """True when the reconstruction matched the input bit-for-bit."""
        return not self.mismatches

    @property
    def compression_ratio(self) -> float:
        """input_bytes / compressed_bytes (0.0 if nothing was written)."""
        if self.compressed_bytes == 0:
            return 0.0
        return self.input_bytes / self.compressed_bytes
