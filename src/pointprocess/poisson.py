"""Homogeneous Poisson process sampling."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .errors import require_non_negative
from .events import Event
from .parallel import DEFAULT_MIN_CHUNK_SIZE, map_chunks, resolve_rng

log = logging.getLogger(__name__)


class UniformPoissonGenerator:
    """Constant-intensity Poisson process on ``[0, tmax]``.

    The event count is drawn once as ``Poisson(tmax * lam)``; conditional on
    the count the timestamps are i.i.d. uniform, so they are drawn in
    parallel chunks with one child random stream per chunk. The returned
    list is not sorted by timestamp.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        max_workers: Optional[int] = None,
        min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE,
    ) -> None:
        self.rng = resolve_rng(seed, rng)
        self.max_workers = max_workers
        self.min_chunk_size = min_chunk_size

    def simulate(self, tmax: float, lam: float) -> List[Event]:
        require_non_negative(tmax=tmax, lam=lam)
        tmax = float(tmax)
        lam = float(lam)
        count = int(self.rng.poisson(tmax * lam))
        log.debug("poisson: tmax=%s lam=%s -> %d events", tmax, lam, count)
        if count == 0:
            return []

        def draw(stream: np.random.Generator, size: int) -> List[Event]:
            timestamps = stream.uniform(0.0, tmax, size=size)
            return [Event(float(ts), lam) for ts in timestamps]

        return map_chunks(
            draw,
            count,
            self.rng,
            max_workers=self.max_workers,
            min_chunk_size=self.min_chunk_size,
            thread_name_prefix="PoissonSampler",
        )


def simulate_poisson(
    tmax: float, lam: float, seed: Optional[int] = None
) -> List[Event]:
    """One-shot convenience wrapper around ``UniformPoissonGenerator``."""

    return UniformPoissonGenerator(seed).simulate(tmax, lam)


__all__ = ["UniformPoissonGenerator", "simulate_poisson"]
