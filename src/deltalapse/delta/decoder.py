"""
Delta Decoder
=============

Sequential reconstruction of a delta-encoded sequence.

This is a running sum over the delta chain: frame i+1 is
apply_delta(frame i, delta i+1), and frame i must itself be reconstructed
first. No step can start before the previous one finishes, so the decoder
runs on a single thread.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from deltalapse.delta.arithmetic import apply_delta
from deltalapse.errors import FrameReadError, ProbeError
from deltalapse.imaging import (
    DEFAULT_PNG_COMPRESSION,
    copy_frame_file,
    read_frame,
    read_frame_checked,
    write_frame,
)
from deltalapse.models.frame import Frame, FrameSequence


logger = logging.getLogger(__name__)


class DeltaDecoder:
    """
    Rebuilds original frames from an anchor plus delta frames.

    Example:
        decoder = DeltaDecoder()
        decoder.decode(list_frames("compressed"), "decompressed")
    """

    def __init__(
        self,
        png_compression: int = DEFAULT_PNG_COMPRESSION,
        progress: Optional[logging.Logger] = None,
    ) -> None:
        self.png_compression = png_compression
        self.progress = progress or logger

    def decode(self, delta_frames: FrameSequence, out_dir: Union[str, Path]) -> None:
        """
        Write the anchor and every reconstructed frame to out_dir.

        Args:
            delta_frames: Anchor followed by delta frames, in order
            out_dir: Existing output directory

        Raises:
            ProbeError: If the anchor cannot be decoded
            DimensionMismatchError: If a delta frame differs in size
            FrameIOError: On read, write or copy failure
        """
        if len(delta_frames) == 0:
            raise ValueError("Cannot decode an empty frame sequence")

        out_dir = Path(out_dir)
        anchor_ref = delta_frames[0]
        try:
            current = read_frame(anchor_ref.path)
        except FrameReadError as e:
            raise ProbeError(anchor_ref.path, str(e)) from e
        size = current.size

        total = len(delta_frames)
        self.progress.info(
            f"Found {total} images ({size[0]}x{size[1]}), starting decompression..."
        )
        copy_frame_file(anchor_ref.path, out_dir / anchor_ref.name)

        for position, ref in enumerate(delta_frames[1:], start=2):
            self.progress.info(f"Image {position} of {total}: {ref.name}")

            delta = read_frame_checked(ref.path, size)
            reconstructed = Frame(
                name=ref.name,
                pixels=apply_delta(current.pixels, delta.pixels),
            )
            write_frame(reconstructed, out_dir / ref.name, compression=self.png_compression)
            current = reconstructed

        self.progress.info(f"Decompression finished: {total} frames written")


def decode(
    delta_frames: FrameSequence,
    out_dir: Union[str, Path],
    png_compression: int = DEFAULT_PNG_COMPRESSION,
) -> None:
    """Decode delta_frames into out_dir with a default DeltaDecoder."""
    DeltaDecoder(png_compression=png_compression).decode(delta_frames, out_dir)
