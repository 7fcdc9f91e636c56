"""
Work Partitioning
=================

Splits the pair indices of a sequence into contiguous worker ranges.

For a sequence of n frames there are n - 1 pairs (i, i + 1), indexed
0..n-2. Ranges are closed intervals [start, end]. The last range absorbs
the remainder of the integer division, so every pair index belongs to
exactly one range.

Ranges must stay contiguous: each worker writes the files of its own pair
indices, and disjoint ranges keep the output filenames disjoint.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class WorkRange:
    """
    Closed interval of pair indices owned by one worker.

    Attributes:
        worker_id: Index of the worker, from 0
        start: First pair index (inclusive)
        end: Last pair index (inclusive)
    """

    worker_id: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __iter__(self):
        return iter(range(self.start, self.end + 1))


def available_parallelism() -> int:
    """Number of CPUs usable by this process."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return os.cpu_count() or 1


def resolve_worker_count(pair_count: int, max_workers: Optional[int] = None) -> int:
    """
    Number of workers for a job: min(available CPUs, max_workers, pair_count).

    Args:
        pair_count: Number of pairs to process
        max_workers: Upper bound on workers; None or 0 means no extra cap

    Returns:
        Worker count, 0 when there is nothing to do
    """
    if pair_count <= 0:
        return 0
    parallelism = available_parallelism()
    if max_workers:
        parallelism = min(parallelism, max_workers)
    return max(1, min(parallelism, pair_count))


def partition_pairs(pair_count: int, max_workers: Optional[int] = None) -> List[WorkRange]:
    """
    Partition pair indices [0, pair_count - 1] into contiguous ranges.

    Args:
        pair_count: Number of pairs (frame count - 1)
        max_workers: Upper bound on workers; None or 0 means no extra cap

    Returns:
        Ranges ordered by start index, empty when pair_count is 0
    """
    workers = resolve_worker_count(pair_count, max_workers)
    if workers == 0:
        return []

    chunk = pair_count // workers
    if chunk < 1:
        workers = 1
        chunk = pair_count

    ranges = []
    for worker_id in range(workers):
        start = worker_id * chunk
        end = start + chunk - 1
        if worker_id == workers - 1:
            end = pair_count - 1
        ranges.append(WorkRange(worker_id=worker_id, start=start, end=end))
    return ranges
