"""
Diff Encoder Tests
==================

Anchor handling, delta content, determinism and failure behaviour.
"""

import logging

import numpy as np
import pytest

from deltalapse.catalog import list_frames
from deltalapse.delta import DiffEncoder, compute_delta, encode
from deltalapse.errors import DimensionMismatchError, FrameReadError, ProbeError
from deltalapse.imaging import read_frame


@pytest.fixture
def out_dir(tmp_path):
    directory = tmp_path / "compressed"
    directory.mkdir()
    return directory


class TestEncodeOutput:
    """Tests for what encode() writes."""

    def test_one_file_per_input_same_names(self, timelapse_dir, timelapse_names, out_dir):
        encode(list_frames(timelapse_dir), out_dir, max_workers=3)

        assert sorted(p.name for p in out_dir.iterdir()) == sorted(timelapse_names)

    def test_anchor_is_byte_identical(self, timelapse_dir, out_dir):
        frames = list_frames(timelapse_dir)

        encode(frames, out_dir, max_workers=2)

        anchor = frames[0]
        assert (out_dir / anchor.name).read_bytes() == anchor.path.read_bytes()

    def test_delta_is_current_minus_previous(self, timelapse_dir, timelapse_pixels, out_dir):
        frames = list_frames(timelapse_dir)

        encode(frames, out_dir, max_workers=4)

        for i in range(1, len(frames)):
            expected = compute_delta(timelapse_pixels[i - 1], timelapse_pixels[i])
            written = read_frame(out_dir / frames[i].name).pixels
            np.testing.assert_array_equal(written, expected)

    def test_near_identical_frames_give_sparse_deltas(self, timelapse_dir, out_dir):
        frames = list_frames(timelapse_dir)

        encode(frames, out_dir)

        delta = read_frame(out_dir / frames[1].name).pixels
        assert np.count_nonzero(delta) < delta.size // 4

    def test_single_frame_copies_anchor_only(self, tmp_path, write_sequence, timelapse_pixels, out_dir):
        write_sequence(tmp_path / "one", timelapse_pixels[:1], ["only7.png"])

        encode(list_frames(tmp_path / "one"), out_dir)

        assert [p.name for p in out_dir.iterdir()] == ["only7.png"]


@pytest.mark.usefixtures("many_cpus")
class TestDeterminism:
    """Output bytes don't depend on the worker count."""

    def test_one_worker_vs_many(self, timelapse_dir, tmp_path):
        frames = list_frames(timelapse_dir)
        serial_dir = tmp_path / "serial"
        parallel_dir = tmp_path / "parallel"
        serial_dir.mkdir()
        parallel_dir.mkdir()

        DiffEncoder(max_workers=1).encode(frames, serial_dir)
        DiffEncoder(max_workers=6).encode(frames, parallel_dir)

        for ref in frames:
            assert (serial_dir / ref.name).read_bytes() == (parallel_dir / ref.name).read_bytes()


class TestEncodeFailures:
    """Fatal conditions propagate to the caller."""

    def test_dimension_guard(self, tmp_path, write_sequence, rng, out_dir):
        """A wider second frame fails and gets no delta file."""
        first = rng.integers(0, 2**32, size=(8, 8), dtype=np.uint32)
        second = rng.integers(0, 2**32, size=(8, 9), dtype=np.uint32)
        write_sequence(tmp_path / "sized", [first, second], ["f1.png", "f2.png"])

        with pytest.raises(DimensionMismatchError) as exc_info:
            encode(list_frames(tmp_path / "sized"), out_dir)

        assert exc_info.value.name == "f2.png"
        assert not (out_dir / "f2.png").exists()

    def test_corrupt_middle_frame(self, timelapse_dir, timelapse_names, out_dir):
        (timelapse_dir / timelapse_names[3]).write_bytes(b"not an image")

        with pytest.raises(FrameReadError):
            encode(list_frames(timelapse_dir), out_dir, max_workers=3)

    def test_unreadable_anchor_fails_before_workers(self, timelapse_dir, timelapse_names, out_dir):
        (timelapse_dir / timelapse_names[0]).write_bytes(b"not an image")

        with pytest.raises(ProbeError):
            encode(list_frames(timelapse_dir), out_dir)

    def test_failure_stops_remaining_pairs(self, timelapse_dir, timelapse_names, out_dir):
        """With one worker, pairs after the failing one are never written."""
        (timelapse_dir / timelapse_names[2]).write_bytes(b"not an image")

        with pytest.raises(FrameReadError):
            encode(list_frames(timelapse_dir), out_dir, max_workers=1)

        assert (out_dir / timelapse_names[1]).exists()
        for name in timelapse_names[2:]:
            assert not (out_dir / name).exists()

    def test_unknown_chunk_strategy(self):
        with pytest.raises(ValueError):
            DiffEncoder(chunk_strategy="work-stealing")

    def test_empty_sequence(self, timelapse_dir, out_dir):
        with pytest.raises(ValueError):
            encode(list_frames(timelapse_dir)[:0], out_dir)


@pytest.mark.usefixtures("many_cpus")
class TestProgress:
    """Progress lines go to the injected logger."""

    def test_worker_ranges_logged(self, timelapse_dir, out_dir, caplog):
        progress = logging.getLogger("tests.encoder.progress")

        with caplog.at_level(logging.INFO, logger="tests.encoder.progress"):
            DiffEncoder(max_workers=2, progress=progress).encode(list_frames(timelapse_dir), out_dir)

        messages = [r.getMessage() for r in caplog.records if r.name == "tests.encoder.progress"]
        assert any("will work on range [0,2]" in m for m in messages)
        assert any("will work on range [3,5]" in m for m in messages)
        assert sum("image pair" in m for m in messages) == 6
