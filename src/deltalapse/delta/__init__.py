"""
Delta Module
============

Delta encoding and decoding of frame sequences.

This module provides:
    - Packed 32-bit wrap-around arithmetic (compute_delta, apply_delta)
    - Contiguous work partitioning for the encoder
    - DiffEncoder: parallel, one thread per pair range
    - DeltaDecoder: strictly sequential reconstruction
"""

from deltalapse.delta.arithmetic import apply_delta, compute_delta
from deltalapse.delta.partition import (
    WorkRange,
    available_parallelism,
    partition_pairs,
    resolve_worker_count,
)
from deltalapse.delta.encoder import DiffEncoder, encode
from deltalapse.delta.decoder import DeltaDecoder, decode

__all__ = [
    # Arithmetic
    "compute_delta",
    "apply_delta",
    # Partitioning
    "WorkRange",
    "available_parallelism",
    "partition_pairs",
    "resolve_worker_count",
    # Stages
    "DiffEncoder",
    "DeltaDecoder",
    "encode",
    "decode",
]
