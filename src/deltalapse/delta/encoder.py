"""
Diff Encoder
============

Parallel delta encoding of an ordered frame sequence.

The first frame is copied verbatim as the anchor. Every later frame i+1 is
written as compute_delta(frame i, frame i+1) under its own filename.

Concurrency:
    Pair indices are split into contiguous ranges (see partition.py), one
    per worker thread. Workers own disjoint output filenames, so no two
    threads ever write the same file. OpenCV I/O and numpy arithmetic
    release the GIL.

    The first worker failure sets a shared cancel event. Ranges not yet
    started are cancelled, running workers stop before their next pair,
    and encode() re-raises that failure once every worker has returned.
    Files already written stay in place.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from deltalapse.delta.arithmetic import compute_delta
from deltalapse.delta.partition import WorkRange, partition_pairs
from deltalapse.imaging import (
    DEFAULT_PNG_COMPRESSION,
    copy_frame_file,
    probe_dimensions,
    read_frame_checked,
    write_frame,
)
from deltalapse.models.frame import Frame, FrameSequence


logger = logging.getLogger(__name__)

CHUNK_STRATEGIES = ("contiguous",)


class DiffEncoder:
    """
    Encodes a frame sequence into an anchor plus delta frames.

    Attributes:
        max_workers: Cap on worker threads (None or 0 = available CPUs)
        png_compression: zlib level for written deltas
        progress: Logger receiving progress lines from all workers

    Example:
        encoder = DiffEncoder(max_workers=4)
        encoder.encode(list_frames("screenshots"), "compressed")
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        chunk_strategy: str = "contiguous",
        png_compression: int = DEFAULT_PNG_COMPRESSION,
        progress: Optional[logging.Logger] = None,
    ) -> None:
        if chunk_strategy not in CHUNK_STRATEGIES:
            raise ValueError(f"Unknown chunk strategy: {chunk_strategy}")

        self.max_workers = max_workers
        self.chunk_strategy = chunk_strategy
        self.png_compression = png_compression
        self.progress = progress or logger

    def encode(self, frames: FrameSequence, out_dir: Union[str, Path]) -> None:
        """
        Write the anchor and all delta frames to out_dir.

        Args:
            frames: Ordered input frames
            out_dir: Existing output directory

        Raises:
            ProbeError: If the first frame cannot be decoded
            DimensionMismatchError: If any frame differs in size
            FrameIOError: On read, write or copy failure
        """
        if len(frames) == 0:
            raise ValueError("Cannot encode an empty frame sequence")

        out_dir = Path(out_dir)
        size = probe_dimensions(frames[0].path)

        self.progress.info(
            f"Found {len(frames)} images ({size[0]}x{size[1]}), starting compression..."
        )

        anchor = frames[0]
        copy_frame_file(anchor.path, out_dir / anchor.name)

        ranges = partition_pairs(len(frames) - 1, self.max_workers)
        if not ranges:
            return

        cancel = threading.Event()
        first_error: Optional[BaseException] = None

        with ThreadPoolExecutor(
            max_workers=len(ranges),
            thread_name_prefix="deltalapse-encode",
        ) as pool:
            futures: Dict[Future, WorkRange] = {
                pool.submit(self._encode_range, frames, work, size, out_dir, cancel): work
                for work in ranges
            }

            for future in as_completed(futures):
                if future.cancelled():
                    continue
                error = future.exception()
                if error is None or first_error is not None:
                    continue

                first_error = error
                work = futures[future]
                self.progress.error(
                    f"Worker {work.worker_id} failed, cancelling remaining work: {error}"
                )
                cancel.set()
                for other in futures:
                    other.cancel()

        if first_error is not None:
            raise first_error

        self.progress.info(f"Compression finished: {len(frames) - 1} delta frames written")

    def _encode_range(
        self,
        frames: FrameSequence,
        work: WorkRange,
        size: Tuple[int, int],
        out_dir: Path,
        cancel: threading.Event,
    ) -> int:
        """Encode every pair in one worker's range. Returns pairs written."""
        total = len(frames) - 1
        self.progress.info(
            f"Worker {work.worker_id} will work on range [{work.start},{work.end}]"
        )

        written = 0
        for i in work:
            if cancel.is_set():
                self.progress.info(f"Worker {work.worker_id} cancelled at pair {i}")
                break

            previous_ref = frames[i]
            current_ref = frames[i + 1]
            self.progress.info(
                f"Worker {work.worker_id} image pair {i + 1} of {total}: "
                f"{previous_ref.name} <==> {current_ref.name}"
            )

            previous = read_frame_checked(previous_ref.path, size)
            current = read_frame_checked(current_ref.path, size)
            delta = Frame(
                name=current_ref.name,
                pixels=compute_delta(previous.pixels, current.pixels),
            )
            write_frame(delta, out_dir / current_ref.name, compression=self.png_compression)
            written += 1

        return written


def encode(
    frames: FrameSequence,
    out_dir: Union[str, Path],
    max_workers: Optional[int] = None,
    png_compression: int = DEFAULT_PNG_COMPRESSION,
) -> None:
    """Encode frames into out_dir with a default DiffEncoder."""
    DiffEncoder(max_workers=max_workers, png_compression=png_compression).encode(
        frames, out_dir
    )
