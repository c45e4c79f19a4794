"""Jump (mark) sequences consumed by the exact Hawkes simulator."""

from __future__ import annotations

import inspect
import itertools
from typing import Callable, Iterable, Iterator, Optional

import numpy as np

from .errors import require_non_negative
from .parallel import resolve_rng

MarkSampler = Callable[..., float]


def constant_jumps(alpha: float) -> Iterator[float]:
    """Unbounded stream repeating ``alpha``."""

    require_non_negative(alpha=alpha)
    return itertools.repeat(float(alpha))


def limited_jumps(values: Iterable[float]) -> Iterator[float]:
    """Finite stream over ``values``; running out raises ``JumpsExhausted`` downstream."""

    return (float(v) for v in values)


def _normalise_sampler(
    mark_sampler: MarkSampler,
) -> Callable[[np.random.Generator], float]:
    try:
        sig = inspect.signature(mark_sampler)
        arity = len(sig.parameters)
    except (TypeError, ValueError):  # builtins without signature metadata
        arity = 1

    if arity == 0:

        def _wrapper(rng: np.random.Generator) -> float:
            return float(mark_sampler())

        return _wrapper

    def _wrapper(rng: np.random.Generator) -> float:
        return float(mark_sampler(rng))

    return _wrapper


def sampled_jumps(
    mark_sampler: MarkSampler,
    seed: Optional[int] = None,
    *,
    rng: Optional[np.random.Generator] = None,
) -> Iterator[float]:
    """Unbounded stream of draws from ``mark_sampler``.

    The sampler may take no arguments or a single ``numpy.random.Generator``.
    """

    sampler = _normalise_sampler(mark_sampler)
    stream = resolve_rng(seed, rng)
    while True:
        yield sampler(stream)


def exponential_jumps(
    mean: float,
    seed: Optional[int] = None,
    *,
    rng: Optional[np.random.Generator] = None,
) -> Iterator[float]:
    """Unbounded stream of Exp(mean) marks."""

    require_non_negative(mean=mean)
    scale = float(mean)
    return sampled_jumps(lambda g: g.exponential(scale), seed, rng=rng)


__all__ = [
    "MarkSampler",
    "constant_jumps",
    "limited_jumps",
    "sampled_jumps",
    "exponential_jumps",
]
