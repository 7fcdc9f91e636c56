"""
Packed Pixel Arithmetic
=======================

The diff primitive for the delta chain.

Each pixel is an opaque 32-bit word. Subtraction and addition are taken
modulo 2^32 on the whole word, so a borrow from one channel runs into the
next. compute_delta and apply_delta are exact inverses for any input:

    apply_delta(previous, compute_delta(previous, current)) == current

Per-channel saturating arithmetic would break that identity.
"""

import numpy as np


def _as_words(pixels: np.ndarray) -> np.ndarray:
    if pixels.dtype != np.uint32:
        raise TypeError(f"Expected uint32 pixels, got {pixels.dtype}")
    return pixels


def compute_delta(previous: np.ndarray, current: np.ndarray) -> np.ndarray:
    """
    current - previous, per pixel, wrapping modulo 2^32.

    Args:
        previous: (H, W) uint32 packed pixels of frame i
        current: (H, W) uint32 packed pixels of frame i+1

    Returns:
        (H, W) uint32 delta, written on a zeroed canvas
    """
    previous = _as_words(previous)
    current = _as_words(current)
    if previous.shape != current.shape:
        raise ValueError(f"Shape mismatch: {previous.shape} vs {current.shape}")

    delta = np.zeros(current.shape, dtype=np.uint32)
    np.subtract(current, previous, out=delta)
    return delta


def apply_delta(previous: np.ndarray, delta: np.ndarray) -> np.ndarray:
    """
    previous + delta, per pixel, wrapping modulo 2^32.

    Args:
        previous: (H, W) uint32 reconstructed pixels of frame i
        delta: (H, W) uint32 delta of frame i+1

    Returns:
        (H, W) uint32 reconstructed pixels of frame i+1
    """
    previous = _as_words(previous)
    delta = _as_words(delta)
    if previous.shape != delta.shape:
        raise ValueError(f"Shape mismatch: {previous.shape} vs {delta.shape}")

    reconstructed = np.zeros(delta.shape, dtype=np.uint32)
    np.add(previous, delta, out=reconstructed)
    return reconstructed
