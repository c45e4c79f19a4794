"""Batches of independent simulation runs.

History-dependent generators cannot be parallelised inside a path, but
separate paths are independent: each run gets its own spawned random stream
and executes on a worker thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from .config import SimulationConfig
from .diagnostics import count_statistics
from .errors import InvalidParameter
from .events import Event
from .hawkes import ExactHawkesGenerator, ThinnedHawkesGenerator
from .parallel import resolve_rng, run_tasks
from .poisson import UniformPoissonGenerator
from .thinning import ThinnedVariableRateGenerator

log = logging.getLogger(__name__)

SimulateOnce = Callable[[np.random.Generator], List[Event]]


@dataclass(slots=True)
class BatchSummary:
    runs: int
    total_events: int
    mean_count: Optional[float]
    count_variance: Optional[float]
    dispersion: Optional[float]


def run_batch(
    simulate_once: SimulateOnce,
    runs: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    max_workers: Optional[int] = None,
) -> List[List[Event]]:
    """Call ``simulate_once(child_rng)`` ``runs`` times; results keep run order."""

    if runs < 0:
        raise InvalidParameter("runs must be non-negative")
    parent = resolve_rng(seed, rng)
    results = run_tasks(
        lambda stream, _: simulate_once(stream),
        [1] * runs,
        parent,
        max_workers=max_workers,
        thread_name_prefix="BatchRun",
    )
    log.debug("batch: %d runs, %d events", runs, sum(len(r) for r in results))
    return results


def summarise_batch(results: Sequence[Sequence[Event]]) -> BatchSummary:
    counts = [len(path) for path in results]
    stats = count_statistics(counts)
    return BatchSummary(
        runs=len(counts),
        total_events=int(sum(counts)),
        mean_count=stats["mean"],
        count_variance=stats["variance"],
        dispersion=stats["dispersion"],
    )


def build_simulator(config: SimulationConfig) -> SimulateOnce:
    """Return a ``rng -> events`` closure for one run of ``config``."""

    tmax = config.horizon
    sampling = config.sampling
    # Batches already occupy the pool; keep per-run sampling on one thread.
    inner_workers = 1 if config.runs > 1 else sampling.max_workers

    if config.process == "poisson":

        def once(rng: np.random.Generator) -> List[Event]:
            generator = UniformPoissonGenerator(
                rng=rng,
                max_workers=inner_workers,
                min_chunk_size=sampling.min_chunk_size,
            )
            return generator.simulate(tmax, config.lambda0)

    elif config.process == "variable_rate":
        if config.rate is None:
            raise InvalidParameter("variable_rate requires a rate section")
        rate = config.rate.build()
        bound = config.rate.bound()

        def once(rng: np.random.Generator) -> List[Event]:
            generator = ThinnedVariableRateGenerator(
                rng=rng,
                max_workers=inner_workers,
                min_chunk_size=sampling.min_chunk_size,
            )
            return generator.simulate(tmax, rate, bound)

    elif config.process == "hawkes_thinning":

        def once(rng: np.random.Generator) -> List[Event]:
            return ThinnedHawkesGenerator(rng=rng).simulate(
                tmax, config.decay, config.lambda0, config.alpha
            )

    else:
        jump_config = config.jump_config()

        def once(rng: np.random.Generator) -> List[Event]:
            path_rng, mark_rng = rng.spawn(2)
            jumps = jump_config.build(mark_rng)
            return ExactHawkesGenerator(rng=path_rng).simulate(
                tmax, config.decay, config.lambda0, jumps
            )

    return once


def run_from_config(config: SimulationConfig) -> List[List[Event]]:
    log.info(
        "running %d x %s on [0, %s]", config.runs, config.process, config.horizon
    )
    return run_batch(
        build_simulator(config),
        config.runs,
        seed=config.sampling.seed,
        max_workers=config.sampling.max_workers,
    )


__all__ = [
    "BatchSummary",
    "SimulateOnce",
    "run_batch",
    "summarise_batch",
    "build_simulator",
    "run_from_config",
]
