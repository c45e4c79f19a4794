"""YAML-backed configuration for batch simulations.

Example::

    process: hawkes_exact
    horizon: 50.0
    runs: 200
    lambda0: 0.8
    decay: 1.5
    jumps:
      distribution: exponential
      mean: 0.5
    sampling:
      seed: 7
      max_workers: 4
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Tuple

import numpy as np
import yaml

from .errors import InvalidParameter, require_non_negative
from .marks import constant_jumps, exponential_jumps
from .parallel import DEFAULT_MIN_CHUNK_SIZE
from .rates import ConstantRate, PiecewiseConstantRate, SinusoidalRate

PROCESS_KINDS: Tuple[str, ...] = (
    "poisson",
    "variable_rate",
    "hawkes_thinning",
    "hawkes_exact",
)
RATE_KINDS: Tuple[str, ...] = ("constant", "sinusoidal", "piecewise")
JUMP_DISTRIBUTIONS: Tuple[str, ...] = ("constant", "exponential")


@dataclass(slots=True)
class SamplingConfig:
    seed: Optional[int] = None
    max_workers: Optional[int] = None
    min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers <= 0:
            raise InvalidParameter("max_workers must be positive")
        if self.min_chunk_size <= 0:
            raise InvalidParameter("min_chunk_size must be positive")


@dataclass(slots=True)
class JumpConfig:
    """Mark distribution for the exact Hawkes simulator."""

    distribution: str = "constant"
    mean: float = 0.0

    def __post_init__(self) -> None:
        if self.distribution not in JUMP_DISTRIBUTIONS:
            raise InvalidParameter(
                f"jump distribution must be one of {JUMP_DISTRIBUTIONS}, got {self.distribution!r}"
            )
        require_non_negative(mean=self.mean)

    def build(self, rng: np.random.Generator) -> Iterator[float]:
        if self.distribution == "constant":
            return constant_jumps(self.mean)
        return exponential_jumps(self.mean, rng=rng)


@dataclass(slots=True)
class RateConfig:
    """Rate-function preset for ``variable_rate`` runs.

    ``max_lambda`` overrides the bound derived from the preset.
    """

    kind: str = "constant"
    value: float = 0.0
    base: float = 0.0
    amplitude: float = 0.0
    period: float = 1.0
    phase: float = 0.0
    breakpoints: Tuple[float, ...] = ()
    values: Tuple[float, ...] = ()
    max_lambda: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in RATE_KINDS:
            raise InvalidParameter(f"rate kind must be one of {RATE_KINDS}, got {self.kind!r}")
        self.breakpoints = tuple(float(b) for b in self.breakpoints)
        self.values = tuple(float(v) for v in self.values)
        if self.max_lambda is not None:
            require_non_negative(max_lambda=self.max_lambda)
        # fail on malformed presets at load time
        self.build()

    def build(self):
        if self.kind == "constant":
            return ConstantRate(self.value)
        if self.kind == "sinusoidal":
            return SinusoidalRate(self.base, self.amplitude, self.period, self.phase)
        return PiecewiseConstantRate(self.breakpoints, self.values)

    def bound(self) -> float:
        if self.max_lambda is not None:
            return float(self.max_lambda)
        return float(self.build().max_rate)


@dataclass(slots=True)
class SimulationConfig:
    """One batch of independent runs of a single process.

    ``lambda0`` is the constant rate for ``poisson`` and the baseline for the
    Hawkes processes. ``alpha`` is the thinning jump and, when ``jumps`` is
    not given, the constant mark of ``hawkes_exact``.
    """

    process: str
    horizon: float
    runs: int = 1
    lambda0: float = 0.0
    decay: float = 0.0
    alpha: float = 0.0
    rate: Optional[RateConfig] = None
    jumps: Optional[JumpConfig] = None
    sampling: SamplingConfig = field(default_factory=SamplingConfig)

    def __post_init__(self) -> None:
        if self.process not in PROCESS_KINDS:
            raise InvalidParameter(
                f"process must be one of {PROCESS_KINDS}, got {self.process!r}"
            )
        if self.runs <= 0:
            raise InvalidParameter("runs must be positive")
        require_non_negative(
            horizon=self.horizon,
            lambda0=self.lambda0,
            decay=self.decay,
            alpha=self.alpha,
        )
        if self.process == "variable_rate" and self.rate is None:
            raise InvalidParameter("variable_rate requires a rate section")

    def jump_config(self) -> JumpConfig:
        return self.jumps or JumpConfig(distribution="constant", mean=self.alpha)


def config_from_mapping(payload: Mapping[str, Any]) -> SimulationConfig:
    """Build a validated ``SimulationConfig`` from parsed YAML/JSON data."""

    if "process" not in payload or "horizon" not in payload:
        raise InvalidParameter("configuration requires 'process' and 'horizon'")
    rate_payload = payload.get("rate")
    jumps_payload = payload.get("jumps")
    sampling_payload = payload.get("sampling") or {}
    try:
        rate = RateConfig(**rate_payload) if rate_payload is not None else None
        jumps = JumpConfig(**jumps_payload) if jumps_payload is not None else None
        sampling = SamplingConfig(**sampling_payload)
    except TypeError as exc:
        raise InvalidParameter(f"unrecognised configuration key: {exc}") from exc
    return SimulationConfig(
        process=str(payload["process"]),
        horizon=float(payload["horizon"]),
        runs=int(payload.get("runs", 1)),
        lambda0=float(payload.get("lambda0", 0.0)),
        decay=float(payload.get("decay", 0.0)),
        alpha=float(payload.get("alpha", 0.0)),
        rate=rate,
        jumps=jumps,
        sampling=sampling,
    )


def load_config(path: str | Path) -> SimulationConfig:
    """Parse a YAML configuration file into a ``SimulationConfig``."""

    payload = yaml.safe_load(Path(path).read_text())
    if not isinstance(payload, Mapping):
        raise InvalidParameter(f"{path} does not contain a mapping")
    return config_from_mapping(payload)


__all__ = [
    "PROCESS_KINDS",
    "RATE_KINDS",
    "JUMP_DISTRIBUTIONS",
    "SamplingConfig",
    "JumpConfig",
    "RateConfig",
    "SimulationConfig",
    "config_from_mapping",
    "load_config",
]
