"""Thread-pool helpers for embarrassingly parallel sampling.

Every work item is handed its own child ``numpy.random.Generator`` spawned
from the caller's generator, so no random stream is ever shared between
threads and results are reproducible for a fixed parent seed regardless of
scheduling.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

import numpy as np

from .errors import InvalidParameter

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MIN_CHUNK_SIZE = 4096


def default_workers() -> int:
    return max(1, min(8, os.cpu_count() or 1))


def resolve_rng(
    seed: Optional[int] = None, rng: Optional[np.random.Generator] = None
) -> np.random.Generator:
    """Use ``rng`` when given, otherwise seed a fresh PCG64 generator."""

    if rng is not None:
        if seed is not None:
            raise InvalidParameter("pass either seed or rng, not both")
        return rng
    return np.random.default_rng(seed)


def partition(total: int, max_workers: int, min_chunk_size: int) -> List[int]:
    """Split ``total`` draws into at most ``max_workers`` near-equal chunk sizes."""

    if total <= 0:
        return []
    if max_workers <= 0:
        raise InvalidParameter("max_workers must be positive")
    chunk_floor = max(1, min_chunk_size)
    n_chunks = max(1, min(max_workers, total // chunk_floor))
    base, extra = divmod(total, n_chunks)
    return [base + (1 if idx < extra else 0) for idx in range(n_chunks)]


def run_tasks(
    task: Callable[[np.random.Generator, int], T],
    sizes: Sequence[int],
    rng: np.random.Generator,
    *,
    max_workers: Optional[int] = None,
    thread_name_prefix: str = "SamplerThread",
) -> List[T]:
    """Run ``task(child_rng, size)`` for each size, returning results in order.

    A single work item runs inline on the calling thread. Exceptions raised
    by a worker propagate to the caller.
    """

    if not sizes:
        return []
    streams = rng.spawn(len(sizes))
    if len(sizes) == 1:
        return [task(streams[0], sizes[0])]
    workers = min(max_workers or default_workers(), len(sizes))
    log.debug("dispatching %d sampling tasks over %d threads", len(sizes), workers)
    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix=thread_name_prefix
    ) as pool:
        futures = [
            pool.submit(task, stream, size) for stream, size in zip(streams, sizes)
        ]
        return [future.result() for future in futures]


def map_chunks(
    task: Callable[[np.random.Generator, int], List[T]],
    total: int,
    rng: np.random.Generator,
    *,
    max_workers: Optional[int] = None,
    min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE,
    thread_name_prefix: str = "SamplerThread",
) -> List[T]:
    """Partition ``total`` independent draws into chunks and concatenate results."""

    workers = max_workers or default_workers()
    sizes = partition(total, workers, min_chunk_size)
    parts = run_tasks(
        task,
        sizes,
        rng,
        max_workers=workers,
        thread_name_prefix=thread_name_prefix,
    )
    merged: List[T] = []
    for part in parts:
        merged.extend(part)
    return merged


__all__ = [
    "DEFAULT_MIN_CHUNK_SIZE",
    "default_workers",
    "resolve_rng",
    "partition",
    "run_tasks",
    "map_chunks",
]
