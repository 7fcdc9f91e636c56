"""
Packed Arithmetic Tests
=======================

Wrap-around subtraction and addition on 32-bit pixel words.
"""

import numpy as np
import pytest

from deltalapse.delta import apply_delta, compute_delta


def words(*values):
    return np.array([list(values)], dtype=np.uint32)


class TestComputeDelta:
    """Tests for compute_delta."""

    def test_identical_frames_give_zero(self, rng):
        pixels = rng.integers(0, 2**32, size=(5, 7), dtype=np.uint32)

        delta = compute_delta(pixels, pixels)

        assert delta.dtype == np.uint32
        assert not delta.any()

    def test_wraps_below_zero(self):
        """0 - 1 wraps to 0xFFFFFFFF."""
        delta = compute_delta(words(0x00000001), words(0x00000000))

        assert int(delta[0, 0]) == 0xFFFFFFFF

    def test_borrow_crosses_channels(self):
        """The borrow from blue runs into green; no per-channel clamping."""
        delta = compute_delta(words(0x000000FF), words(0x00010000))

        assert int(delta[0, 0]) == 0x0000FF01

    def test_current_minus_previous(self):
        delta = compute_delta(words(0x10203040), words(0x11223344))

        assert int(delta[0, 0]) == 0x01020304

    def test_rejects_non_uint32(self):
        with pytest.raises(TypeError):
            compute_delta(np.zeros((2, 2), dtype=np.int64), np.zeros((2, 2), dtype=np.uint32))

    def test_rejects_shape_mismatch(self):
        with pytest.raises(ValueError):
            compute_delta(np.zeros((2, 2), dtype=np.uint32), np.zeros((2, 3), dtype=np.uint32))


class TestApplyDelta:
    """Tests for apply_delta."""

    def test_wraps_above_max(self):
        reconstructed = apply_delta(words(0xFFFFFFFF), words(0x00000002))

        assert int(reconstructed[0, 0]) == 0x00000001

    def test_inverse_of_compute_delta(self, rng):
        """apply_delta(prev, compute_delta(prev, cur)) == cur for any words."""
        previous = rng.integers(0, 2**32, size=(9, 11), dtype=np.uint32)
        current = rng.integers(0, 2**32, size=(9, 11), dtype=np.uint32)

        reconstructed = apply_delta(previous, compute_delta(previous, current))

        np.testing.assert_array_equal(reconstructed, current)

    def test_extreme_values(self):
        previous = words(0x00000000, 0xFFFFFFFF, 0x80000000, 0x7FFFFFFF)
        current = words(0xFFFFFFFF, 0x00000000, 0x7FFFFFFF, 0x80000000)

        reconstructed = apply_delta(previous, compute_delta(previous, current))

        np.testing.assert_array_equal(reconstructed, current)

    def test_does_not_mutate_inputs(self, rng):
        previous = rng.integers(0, 2**32, size=(3, 3), dtype=np.uint32)
        delta = rng.integers(0, 2**32, size=(3, 3), dtype=np.uint32)
        previous_copy = previous.copy()
        delta_copy = delta.copy()

        apply_delta(previous, delta)

        np.testing.assert_array_equal(previous, previous_copy)
        np.testing.assert_array_equal(delta, delta_copy)
