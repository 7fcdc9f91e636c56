"""
Test Configuration
==================

Pytest fixtures and test configuration for deltalapse.

Frames are small synthetic PNGs written into tmp_path. Pixel values span
the full 32-bit range so delta arithmetic wraps constantly.
"""

from pathlib import Path
from typing import Callable, List, Sequence

import numpy as np
import pytest

from deltalapse.imaging import write_frame
from deltalapse.models.frame import Frame


WIDTH = 16
HEIGHT = 12


def random_pixels(rng: np.random.Generator, width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    """Uniform random packed ARGB words, alpha included."""
    return rng.integers(0, 2**32, size=(height, width), dtype=np.uint32)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so failures are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def many_cpus(monkeypatch) -> int:
    """Pretend the machine has 64 CPUs so worker caps are what limits the pool."""
    monkeypatch.setattr("deltalapse.delta.partition.available_parallelism", lambda: 64)
    return 64


@pytest.fixture
def write_sequence() -> Callable[[Path, Sequence[np.ndarray], Sequence[str]], List[Path]]:
    """Write packed-pixel arrays as PNGs under the given names."""

    def _write(directory: Path, pixels: Sequence[np.ndarray], names: Sequence[str]) -> List[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        paths = []
        for name, frame_pixels in zip(names, pixels):
            paths.append(write_frame(Frame(name=name, pixels=frame_pixels), directory / name))
        return paths

    return _write


@pytest.fixture
def timelapse_pixels(rng) -> List[np.ndarray]:
    """
    Seven near-identical frames.

    Frame 0 is random; each later frame changes a small block of the
    previous one, including writes of 0x00000000 and 0xFFFFFFFF.
    """
    frames = [random_pixels(rng)]
    for step in range(1, 7):
        nxt = frames[-1].copy()
        y = step % HEIGHT
        nxt[y, 2:6] = random_pixels(rng, width=4, height=1)[0]
        nxt[(y + 3) % HEIGHT, step] = 0x00000000 if step % 2 else 0xFFFFFFFF
        frames.append(nxt)
    return frames


@pytest.fixture
def timelapse_names() -> List[str]:
    """Capture-style names whose lexicographic order is wrong."""
    return [f"shot_{n}.png" for n in (1, 2, 3, 9, 10, 11, 100)]


@pytest.fixture
def timelapse_dir(tmp_path, write_sequence, timelapse_pixels, timelapse_names) -> Path:
    """Directory holding the synthetic timelapse."""
    directory = tmp_path / "input"
    write_sequence(directory, timelapse_pixels, timelapse_names)
    return directory
