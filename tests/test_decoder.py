"""
Delta Decoder Tests
===================

Sequential reconstruction and the encode/decode round trip.
"""

import numpy as np
import pytest

from deltalapse.catalog import list_frames
from deltalapse.delta import DeltaDecoder, decode, encode
from deltalapse.errors import DimensionMismatchError, ProbeError
from deltalapse.imaging import read_frame


def round_trip(source_dir, tmp_path, max_workers=None):
    compressed = tmp_path / "compressed"
    decompressed = tmp_path / "decompressed"
    compressed.mkdir()
    decompressed.mkdir()
    encode(list_frames(source_dir), compressed, max_workers=max_workers)
    decode(list_frames(compressed), decompressed)
    return compressed, decompressed


class TestRoundTrip:
    """decode(encode(F)) == F, pixel for pixel."""

    def test_reconstructs_every_frame(self, timelapse_dir, timelapse_pixels, timelapse_names, tmp_path):
        _, decompressed = round_trip(timelapse_dir, tmp_path, max_workers=3)

        for name, expected in zip(timelapse_names, timelapse_pixels):
            np.testing.assert_array_equal(read_frame(decompressed / name).pixels, expected)

    def test_extreme_values_and_alpha(self, tmp_path, write_sequence):
        """Alternating all-zero and all-ones frames wrap on every pixel."""
        frames = [
            np.full((4, 4), 0x00000000, dtype=np.uint32),
            np.full((4, 4), 0xFFFFFFFF, dtype=np.uint32),
            np.full((4, 4), 0x00FF0001, dtype=np.uint32),
            np.full((4, 4), 0x80000000, dtype=np.uint32),
        ]
        names = ["e1.png", "e2.png", "e3.png", "e4.png"]
        write_sequence(tmp_path / "extreme", frames, names)

        _, decompressed = round_trip(tmp_path / "extreme", tmp_path, max_workers=2)

        for name, expected in zip(names, frames):
            np.testing.assert_array_equal(read_frame(decompressed / name).pixels, expected)

    def test_random_frames(self, tmp_path, write_sequence, rng):
        """Completely unrelated frames still round-trip exactly."""
        frames = [rng.integers(0, 2**32, size=(9, 7), dtype=np.uint32) for _ in range(5)]
        names = [f"r{n}.png" for n in range(5)]
        write_sequence(tmp_path / "random", frames, names)

        _, decompressed = round_trip(tmp_path / "random", tmp_path, max_workers=4)

        for name, expected in zip(names, frames):
            np.testing.assert_array_equal(read_frame(decompressed / name).pixels, expected)

    def test_single_frame(self, tmp_path, write_sequence, timelapse_pixels):
        write_sequence(tmp_path / "one", timelapse_pixels[:1], ["solo1.png"])

        _, decompressed = round_trip(tmp_path / "one", tmp_path)

        assert [p.name for p in decompressed.iterdir()] == ["solo1.png"]

    def test_anchor_is_byte_identical(self, timelapse_dir, timelapse_names, tmp_path):
        _, decompressed = round_trip(timelapse_dir, tmp_path)

        anchor = timelapse_names[0]
        assert (decompressed / anchor).read_bytes() == (timelapse_dir / anchor).read_bytes()


class TestDecodeFailures:
    """Fatal conditions in the decoder."""

    def test_mismatched_delta_size(self, tmp_path, write_sequence, rng):
        anchor = rng.integers(0, 2**32, size=(5, 5), dtype=np.uint32)
        bad_delta = rng.integers(0, 2**32, size=(6, 5), dtype=np.uint32)
        write_sequence(tmp_path / "deltas", [anchor, bad_delta], ["d1.png", "d2.png"])
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        with pytest.raises(DimensionMismatchError):
            DeltaDecoder().decode(list_frames(tmp_path / "deltas"), out_dir)

        assert not (out_dir / "d2.png").exists()

    def test_unreadable_anchor(self, tmp_path):
        deltas = tmp_path / "deltas"
        deltas.mkdir()
        (deltas / "d1.png").write_bytes(b"broken")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        with pytest.raises(ProbeError):
            decode(list_frames(deltas), out_dir)

    def test_empty_sequence(self, timelapse_dir, tmp_path):
        with pytest.raises(ValueError):
            decode(list_frames(timelapse_dir)[:0], tmp_path)
