"""Temporal point-process simulation toolkit.

Generators for homogeneous and thinned inhomogeneous Poisson processes and
for exponential-kernel Hawkes processes (thinning and exact Dassios–Zhao
simulation), plus batch runners, YAML configuration and time-rescaling
diagnostics.
"""

from .errors import InvalidParameter, JumpsExhausted, PointProcessError
from .events import (
    Event,
    EventSequenceReport,
    EventSequenceValidator,
    events_to_array,
    events_to_frame,
    sort_events,
    validate_events,
)
from .poisson import UniformPoissonGenerator, simulate_poisson
from .thinning import ThinnedVariableRateGenerator, simulate_variable_poisson
from .hawkes import (
    ExactHawkesGenerator,
    ThinnedHawkesGenerator,
    simulate_hawkes_exact,
    simulate_hawkes_thinning,
)
from .kernels import ExpKernel
from .marks import constant_jumps, exponential_jumps, limited_jumps, sampled_jumps
from .rates import ConstantRate, PiecewiseConstantRate, RateFunction, SinusoidalRate
from .config import SimulationConfig, load_config
from .runner import BatchSummary, run_batch, run_from_config, summarise_batch
from .diagnostics import compute_residuals, count_statistics, ks_test, qq_points

__all__ = [
    "PointProcessError",
    "InvalidParameter",
    "JumpsExhausted",
    "Event",
    "EventSequenceReport",
    "EventSequenceValidator",
    "events_to_array",
    "events_to_frame",
    "sort_events",
    "validate_events",
    "UniformPoissonGenerator",
    "simulate_poisson",
    "ThinnedVariableRateGenerator",
    "simulate_variable_poisson",
    "ThinnedHawkesGenerator",
    "ExactHawkesGenerator",
    "simulate_hawkes_thinning",
    "simulate_hawkes_exact",
    "ExpKernel",
    "constant_jumps",
    "exponential_jumps",
    "limited_jumps",
    "sampled_jumps",
    "RateFunction",
    "ConstantRate",
    "SinusoidalRate",
    "PiecewiseConstantRate",
    "SimulationConfig",
    "load_config",
    "BatchSummary",
    "run_batch",
    "run_from_config",
    "summarise_batch",
    "compute_residuals",
    "count_statistics",
    "ks_test",
    "qq_points",
]
