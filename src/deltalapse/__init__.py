"""
deltalapse
==========

Lossless delta compression for timelapse screenshot sequences.

Each frame after the first is stored as the pixel-wise difference from its
predecessor, computed on the packed 32-bit ARGB word. Decoding runs the chain
back in order and the verifier checks the result bit-for-bit.

Components:
    - catalog: Discover and numerically order frame files
    - delta: Parallel diff encoder and sequential decoder
    - verify: Pixel-exact comparison of two sequences
    - imaging: PNG <-> packed-pixel frame codec
    - pipeline: encode -> decode -> verify orchestration

Example:
    from deltalapse.pipeline import run_pipeline

    result = run_pipeline("screenshots", "compressed", "decompressed")
    print(result.compression_ratio, len(result.mismatches))
"""

__version__ = "0.1.0"
__author__ = "deltalapse contributors"

__all__ = [
    "__version__",
]
