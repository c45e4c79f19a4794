"""Intensity functions for inhomogeneous Poisson sampling.

A rate is anything with ``evaluate(t) -> float``; plain callables are
accepted wherever a rate is expected. Rates must be pure: the thinning
sampler calls them concurrently from several threads.
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Callable, Protocol, Tuple, Union, runtime_checkable

from .errors import InvalidParameter, require_non_negative


@runtime_checkable
class RateFunction(Protocol):
    def evaluate(self, t: float) -> float:
        ...


RateLike = Union[RateFunction, Callable[[float], float]]


def as_rate_callable(rate: RateLike) -> Callable[[float], float]:
    """Return a plain ``t -> rate`` callable for a rate object or function."""

    if isinstance(rate, RateFunction):
        return rate.evaluate
    if callable(rate):
        return rate
    raise TypeError(f"rate must be callable or expose evaluate(t), got {type(rate)!r}")


@dataclass(frozen=True, slots=True)
class ConstantRate:
    value: float

    def __post_init__(self) -> None:
        require_non_negative(value=self.value)

    def evaluate(self, t: float) -> float:
        return self.value

    def __call__(self, t: float) -> float:
        return self.evaluate(t)

    @property
    def max_rate(self) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class SinusoidalRate:
    """``base + amplitude * sin(2π t / period + phase)``, kept non-negative."""

    base: float
    amplitude: float
    period: float
    phase: float = 0.0

    def __post_init__(self) -> None:
        require_non_negative(base=self.base, amplitude=self.amplitude)
        if self.period <= 0.0:
            raise InvalidParameter(f"period must be positive, got {self.period}")
        if self.amplitude > self.base:
            raise InvalidParameter("amplitude must not exceed base")

    def evaluate(self, t: float) -> float:
        return self.base + self.amplitude * math.sin(
            2.0 * math.pi * t / self.period + self.phase
        )

    def __call__(self, t: float) -> float:
        return self.evaluate(t)

    @property
    def max_rate(self) -> float:
        return self.base + self.amplitude


@dataclass(frozen=True, slots=True)
class PiecewiseConstantRate:
    """Step function: ``values[i]`` applies on ``[breakpoints[i-1], breakpoints[i])``.

    ``len(values) == len(breakpoints) + 1``; the last value extends to infinity.
    """

    breakpoints: Tuple[float, ...]
    values: Tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "breakpoints", tuple(float(b) for b in self.breakpoints))
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))
        if len(self.values) != len(self.breakpoints) + 1:
            raise InvalidParameter("values must have exactly one more entry than breakpoints")
        if any(b1 >= b2 for b1, b2 in zip(self.breakpoints, self.breakpoints[1:])):
            raise InvalidParameter("breakpoints must be strictly increasing")
        for value in self.values:
            require_non_negative(value=value)

    def evaluate(self, t: float) -> float:
        return self.values[bisect.bisect_right(self.breakpoints, t)]

    def __call__(self, t: float) -> float:
        return self.evaluate(t)

    @property
    def max_rate(self) -> float:
        return max(self.values)


__all__ = [
    "RateFunction",
    "RateLike",
    "as_rate_callable",
    "ConstantRate",
    "SinusoidalRate",
    "PiecewiseConstantRate",
]
