"""Inhomogeneous Poisson sampling by thinning (acceptance-rejection).

Candidates are drawn from a homogeneous process of rate ``max_lambda`` and a
candidate at time ``t`` survives when a uniform draw on ``[0, max_lambda]``
falls below ``rate_fn(t)``. The survivors follow the target process only if
``rate_fn(t) <= max_lambda`` on the whole window. That bound is the caller's
obligation: it is not verified, because doing so exactly would require
evaluating the rate everywhere. A violated bound silently yields too few
events where the rate exceeds it. ``check_bound=True`` runs a coarse grid probe
that catches gross violations only.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .errors import InvalidParameter, require_non_negative
from .events import Event
from .parallel import DEFAULT_MIN_CHUNK_SIZE, map_chunks, resolve_rng
from .rates import RateLike, as_rate_callable

log = logging.getLogger(__name__)

BOUND_PROBE_POINTS = 257


class ThinnedVariableRateGenerator:
    """Poisson process with a bounded, time-varying intensity.

    Each accepted event records its acceptance level ``u`` (the uniform draw
    on ``[0, max_lambda]`` that fell below ``rate_fn(t)``) as its intensity,
    so ``0 <= intensity < rate_fn(t)``. Candidates are tested in parallel
    chunks, so ``rate_fn`` must be safe to call from several threads at once.
    Output is not sorted by timestamp.
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

    def simulate(
        self,
        tmax: float,
        rate_fn: RateLike,
        max_lambda: float,
        *,
        check_bound: bool = False,
    ) -> List[Event]:
        require_non_negative(tmax=tmax, max_lambda=max_lambda)
        tmax = float(tmax)
        max_lambda = float(max_lambda)
        rate = as_rate_callable(rate_fn)
        if max_lambda == 0.0:
            _reject_zero_bound(rate, tmax)
            return []
        if check_bound:
            _probe_bound(rate, tmax, max_lambda)

        candidates = int(self.rng.poisson(tmax * max_lambda))
        log.debug(
            "thinning: tmax=%s max_lambda=%s -> %d candidates", tmax, max_lambda, candidates
        )
        if candidates == 0:
            return []

        def draw(stream: np.random.Generator, size: int) -> List[Event]:
            timestamps = stream.uniform(0.0, 1.0, size=size) * tmax
            levels = stream.uniform(0.0, 1.0, size=size) * max_lambda
            accepted: List[Event] = []
            for ts, level in zip(timestamps, levels):
                value = float(rate(float(ts)))
                if level < value:
                    accepted.append(Event(float(ts), float(level)))
            return accepted

        events = map_chunks(
            draw,
            candidates,
            self.rng,
            max_workers=self.max_workers,
            min_chunk_size=self.min_chunk_size,
            thread_name_prefix="ThinningSampler",
        )
        log.debug("thinning: accepted %d of %d candidates", len(events), candidates)
        return events


def _reject_zero_bound(rate, tmax: float) -> None:
    # A zero bound only describes the empty process.
    for t in (0.0, 0.5 * tmax, tmax):
        if rate(t) > 0.0:
            raise InvalidParameter(
                f"max_lambda is 0 but rate({t}) = {rate(t)} is positive"
            )


def _probe_bound(rate, tmax: float, max_lambda: float) -> None:
    for t in np.linspace(0.0, tmax, BOUND_PROBE_POINTS):
        value = float(rate(float(t)))
        if value > max_lambda:
            raise InvalidParameter(
                f"rate({float(t):.6g}) = {value:.6g} exceeds max_lambda = {max_lambda:.6g}"
            )
        if value < 0.0:
            raise InvalidParameter(f"rate({float(t):.6g}) = {value:.6g} is negative")


def simulate_variable_poisson(
    tmax: float,
    rate_fn: RateLike,
    max_lambda: float,
    seed: Optional[int] = None,
) -> List[Event]:
    """One-shot convenience wrapper around ``ThinnedVariableRateGenerator``."""

    return ThinnedVariableRateGenerator(seed).simulate(tmax, rate_fn, max_lambda)


__all__ = [
    "ThinnedVariableRateGenerator",
    "simulate_variable_poisson",
    "BOUND_PROBE_POINTS",
]
