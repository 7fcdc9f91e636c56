"""
Data Models
===========

Frame references, decoded frames and result records.

Models:
    Frames:
        - FrameRef: File reference with its ordering key
        - Frame: Decoded packed-ARGB raster
        - FrameSequence: Ordered collection of FrameRefs

    Reports:
        - Mismatch: One differing pixel between two sequences
        - StageTimings: Per-stage durations
        - PipelineResult: Outcome of a full run
"""

from deltalapse.models.frame import Frame, FrameRef, FrameSequence
from deltalapse.models.report import Mismatch, PipelineResult, StageTimings

__all__ = [
    # Frames
    "Frame",
    "FrameRef",
    "FrameSequence",
    # Reports
    "Mismatch",
    "StageTimings",
    "PipelineResult",
]
