"""
Pipeline
========

Fixed three-stage run over a set of working directories:

    input_dir --encode--> compressed_dir --decode--> decompressed_dir
                                 verify(input_dir, decompressed_dir)

Output directories are created if absent. Later stages read exactly the
files the previous stage wrote, so leftovers from earlier runs in those
directories are ignored. There is no retry and no
rollback; the first stage error propagates to the caller.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from deltalapse.catalog import FrameCatalog
from deltalapse.config import Settings
from deltalapse.delta import DeltaDecoder, DiffEncoder
from deltalapse.models.frame import FrameSequence
from deltalapse.models.report import PipelineResult, StageTimings
from deltalapse.verify import Verifier


logger = logging.getLogger(__name__)


def sequence_bytes(frames: FrameSequence) -> int:
    """Total on-disk size of a sequence's files."""
    return sum(ref.path.stat().st_size for ref in frames)


def run_pipeline(
    input_dir: Union[str, Path],
    compressed_dir: Union[str, Path],
    decompressed_dir: Union[str, Path],
    settings: Optional[Settings] = None,
) -> PipelineResult:
    """
    Encode, decode and verify a timelapse directory.

    Args:
        input_dir: Directory of original frames
        compressed_dir: Destination for anchor + delta frames
        decompressed_dir: Destination for reconstructed frames
        settings: Stage configuration (defaults if None)

    Returns:
        PipelineResult with catalogs, sizes, timings and mismatches

    Raises:
        DeltaLapseError: From whichever stage failed
    """
    settings = settings or Settings()
    compressed_dir = Path(compressed_dir)
    decompressed_dir = Path(decompressed_dir)
    compressed_dir.mkdir(parents=True, exist_ok=True)
    decompressed_dir.mkdir(parents=True, exist_ok=True)

    catalog = FrameCatalog(extension=settings.catalog.extension)
    encoder = DiffEncoder(
        max_workers=settings.encoder.max_workers,
        chunk_strategy=settings.encoder.chunk_strategy,
        png_compression=settings.image.png_compression,
    )
    decoder = DeltaDecoder(png_compression=settings.image.png_compression)
    verifier = Verifier(max_logged_mismatches=settings.verifier.max_logged_mismatches)

    original = catalog.list(input_dir)

    started = time.perf_counter()
    encoder.encode(original, compressed_dir)
    encode_seconds = time.perf_counter() - started

    compressed = original.rebased(compressed_dir)

    started = time.perf_counter()
    decoder.decode(compressed, decompressed_dir)
    decode_seconds = time.perf_counter() - started

    decompressed = compressed.rebased(decompressed_dir)

    started = time.perf_counter()
    mismatches = verifier.compare(original, decompressed)
    verify_seconds = time.perf_counter() - started

    result = PipelineResult(
        original=original,
        compressed=compressed,
        decompressed=decompressed,
        input_bytes=sequence_bytes(original),
        compressed_bytes=sequence_bytes(compressed),
        timings=StageTimings(
            encode=encode_seconds,
            decode=decode_seconds,
            verify=verify_seconds,
        ),
        mismatches=mismatches,
    )

    logger.info(
        f"Pipeline finished: {result.frame_count} frames, "
        f"{result.input_bytes} -> {result.compressed_bytes} bytes "
        f"(ratio {result.compression_ratio:.2f}), "
        f"{len(mismatches)} mismatches, {result.timings.total:.1f}s"
    )
    return result
