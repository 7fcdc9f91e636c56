#!/usr/bin/env python3
"""
Round-Trip Check Script
=======================

Standalone script to exercise the full pipeline on a synthetic timelapse.

This script:
    1. Generates N near-identical PNG frames (random base + small edits)
    2. Encodes them once with a single worker and once with many workers
    3. Checks both delta directories are byte-identical
    4. Decodes, verifies and reports sizes and timings

Prerequisites:
    - Install the package: pip install -e .

Usage:
    python scripts/roundtrip_check.py --frames 200 --width 640 --height 360
    python scripts/roundtrip_check.py --workers 8 --keep ./roundtrip-work
"""

import argparse
import logging
import os
import sys
import tempfile
import time
from pathlib import Path

import numpy as np

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from deltalapse.catalog import list_frames
from deltalapse.config import Settings
from deltalapse.delta import DiffEncoder
from deltalapse.imaging import write_frame
from deltalapse.models.frame import Frame
from deltalapse.pipeline import run_pipeline


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def generate_timelapse(
    directory: Path,
    frames: int,
    width: int,
    height: int,
    seed: int,
) -> None:
    """Write a synthetic screenshot sequence into directory."""
    rng = np.random.default_rng(seed)
    directory.mkdir(parents=True, exist_ok=True)

    # Opaque, blocky base image compresses like a real screenshot
    blocks = rng.integers(0, 2**24, size=(height // 8 + 1, width // 8 + 1), dtype=np.uint32)
    current = np.kron(blocks, np.ones((8, 8), dtype=np.uint32))[:height, :width]
    current = current | np.uint32(0xFF000000)

    for index in range(frames):
        if index > 0:
            current = current.copy()
            y = int(rng.integers(0, max(1, height - 16)))
            x = int(rng.integers(0, max(1, width - 16)))
            patch = rng.integers(0, 2**24, dtype=np.uint32) | 0xFF000000
            current[y:y + 16, x:x + 16] = patch
        name = f"screenshot_{index}.png"
        write_frame(Frame(name=name, pixels=current), directory / name)


def directories_identical(a: Path, b: Path) -> bool:
    names_a = sorted(p.name for p in a.iterdir())
    names_b = sorted(p.name for p in b.iterdir())
    if names_a != names_b:
        return False
    return all((a / n).read_bytes() == (b / n).read_bytes() for n in names_a)


def run_check(work: Path, frames: int, width: int, height: int, workers: int, seed: int) -> bool:
    logger.info("=" * 60)
    logger.info("Round-Trip Check")
    logger.info("=" * 60)
    logger.info(f"Frames: {frames} ({width}x{height})")
    logger.info(f"Workers: {workers or 'all CPUs'}")
    logger.info(f"Work directory: {work}")
    logger.info("=" * 60)

    source = work / "screenshots"
    generate_timelapse(source, frames, width, height, seed)

    # Determinism: 1 worker vs N workers
    serial = work / "serial"
    serial.mkdir(parents=True, exist_ok=True)
    started = time.perf_counter()
    DiffEncoder(max_workers=1).encode(list_frames(source), serial)
    serial_seconds = time.perf_counter() - started

    settings = Settings.model_validate({"encoder": {"max_workers": workers}})
    result = run_pipeline(source, work / "compressed", work / "decompressed", settings=settings)
    deterministic = directories_identical(serial, work / "compressed")

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Input bytes: {result.input_bytes}")
    logger.info(f"Compressed bytes: {result.compressed_bytes}")
    logger.info(f"Compression ratio: {result.compression_ratio:.2f}")
    logger.info(f"Encode (1 worker): {serial_seconds:.2f}s")
    logger.info(f"Encode (parallel): {result.timings.encode:.2f}s")
    logger.info(f"Decode: {result.timings.decode:.2f}s")
    logger.info(f"Verify: {result.timings.verify:.2f}s")
    logger.info(f"Deterministic across worker counts: {deterministic}")
    logger.info(f"Mismatches: {len(result.mismatches)}")
    logger.info("=" * 60)

    passed = deterministic and result.verified
    if passed:
        logger.info("✅ CHECK PASSED - bit-exact and deterministic")
    else:
        logger.error("❌ CHECK FAILED")
    return passed


def main():
    parser = argparse.ArgumentParser(
        description="Synthetic round-trip check for the delta pipeline"
    )
    parser.add_argument("--frames", type=int, default=50, help="Number of frames (default: 50)")
    parser.add_argument("--width", type=int, default=320, help="Frame width (default: 320)")
    parser.add_argument("--height", type=int, default=180, help="Frame height (default: 180)")
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="Parallel encoder workers (default: 0 = all CPUs)",
    )
    parser.add_argument("--seed", type=int, default=7, help="Random seed (default: 7)")
    parser.add_argument(
        "--keep",
        type=str,
        default=None,
        help="Work directory to keep (default: temporary, deleted afterwards)",
    )

    args = parser.parse_args()

    if args.keep:
        passed = run_check(Path(args.keep), args.frames, args.width, args.height, args.workers, args.seed)
    else:
        with tempfile.TemporaryDirectory(prefix="deltalapse-") as tmp:
            passed = run_check(Path(tmp), args.frames, args.width, args.height, args.workers, args.seed)

    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
