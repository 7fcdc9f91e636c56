"""
deltalapse Command Line
=======================

Entry point for the delta pipeline.

Commands:
    encode INPUT_DIR OUTPUT_DIR  - Write anchor + delta frames
    decode INPUT_DIR OUTPUT_DIR  - Reconstruct frames from a delta directory
    verify DIR_A DIR_B           - Compare two directories pixel by pixel
    run                          - encode -> decode -> verify on configured paths

Exit codes:
    0 - Success
    1 - Verification found differing pixels
    2 - Fatal error (bad input, I/O failure, size mismatch)

Usage:
    deltalapse run --input screenshots
    deltalapse --workers 4 encode screenshots compressed
    deltalapse verify screenshots decompressed
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from deltalapse import __version__
from deltalapse.catalog import FrameCatalog
from deltalapse.config import Settings, load_config, setup_logging
from deltalapse.delta import DeltaDecoder, DiffEncoder
from deltalapse.errors import DeltaLapseError
from deltalapse.pipeline import run_pipeline
from deltalapse.verify import Verifier


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


# =============================================================================
# Commands
# =============================================================================

def cmd_encode(args: argparse.Namespace, settings: Settings) -> int:
    frames = FrameCatalog(extension=settings.catalog.extension).list(args.input_dir)
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    DiffEncoder(
        max_workers=settings.encoder.max_workers,
        chunk_strategy=settings.encoder.chunk_strategy,
        png_compression=settings.image.png_compression,
    ).encode(frames, output_dir)
    return EXIT_OK


def cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    frames = FrameCatalog(extension=settings.catalog.extension).list(args.input_dir)
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    DeltaDecoder(png_compression=settings.image.png_compression).decode(frames, output_dir)
    return EXIT_OK


def cmd_verify(args: argparse.Namespace, settings: Settings) -> int:
    catalog = FrameCatalog(extension=settings.catalog.extension)
    mismatches = Verifier(
        max_logged_mismatches=settings.verifier.max_logged_mismatches,
    ).compare(catalog.list(args.dir_a), catalog.list(args.dir_b))
    return EXIT_MISMATCH if mismatches else EXIT_OK


def cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    result = run_pipeline(
        input_dir=args.input or settings.paths.input_dir,
        compressed_dir=args.compressed or settings.paths.compressed_dir,
        decompressed_dir=args.decompressed or settings.paths.decompressed_dir,
        settings=settings,
    )

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Frames: {result.frame_count}")
    logger.info(f"Input bytes: {result.input_bytes}")
    logger.info(f"Compressed bytes: {result.compressed_bytes}")
    logger.info(f"Compression ratio: {result.compression_ratio:.2f}")
    logger.info(f"Encode: {result.timings.encode:.1f}s")
    logger.info(f"Decode: {result.timings.decode:.1f}s")
    logger.info(f"Verify: {result.timings.verify:.1f}s")
    logger.info("=" * 60)

    if result.verified:
        logger.info("Round trip verified: reconstruction is bit-exact")
        return EXIT_OK

    logger.error(f"Round trip FAILED: {len(result.mismatches)} differing pixels")
    return EXIT_MISMATCH


# =============================================================================
# Argument Parsing
# =============================================================================

def non_negative_int(value: str) -> int:
    """argparse type for counts where 0 is meaningful."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deltalapse",
        description="Lossless delta compression for timelapse screenshots",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search current directory)",
    )
    parser.add_argument(
        "--workers",
        type=non_negative_int,
        default=None,
        help="Cap on encoder threads (0 = available CPUs)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ...)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Write anchor + delta frames")
    encode_parser.add_argument("input_dir", help="Directory of original frames")
    encode_parser.add_argument("output_dir", help="Destination for delta frames")
    encode_parser.set_defaults(handler=cmd_encode)

    decode_parser = subparsers.add_parser("decode", help="Reconstruct frames from deltas")
    decode_parser.add_argument("input_dir", help="Directory of anchor + delta frames")
    decode_parser.add_argument("output_dir", help="Destination for reconstructed frames")
    decode_parser.set_defaults(handler=cmd_decode)

    verify_parser = subparsers.add_parser("verify", help="Compare two frame directories")
    verify_parser.add_argument("dir_a", help="Reference frames")
    verify_parser.add_argument("dir_b", help="Frames under test")
    verify_parser.set_defaults(handler=cmd_verify)

    run_parser = subparsers.add_parser("run", help="Encode, decode and verify")
    run_parser.add_argument("--input", type=str, default=None, help="Original frames")
    run_parser.add_argument("--compressed", type=str, default=None, help="Delta output")
    run_parser.add_argument("--decompressed", type=str, default=None, help="Reconstruction output")
    run_parser.set_defaults(handler=cmd_run)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    if args.workers is not None:
        settings.encoder.max_workers = args.workers
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)

    try:
        return args.handler(args, settings)
    except DeltaLapseError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
