"""Goodness-of-fit diagnostics for simulated paths.

Time-rescaling theorem: if Λ is the compensator of the simulated process,
the increments Λ(t_i) − Λ(t_{i−1}) are i.i.d. Exp(1). The helpers below
compute those increments for each process family and test them.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
from scipy import integrate, stats

from .events import Event, sort_events


def poisson_residuals(timestamps: Sequence[float] | np.ndarray, rate: float) -> np.ndarray:
    """Rescaled inter-arrival times of a homogeneous process."""

    times = np.sort(np.asarray(timestamps, dtype=float))
    if times.size == 0:
        return np.empty(0, dtype=float)
    return rate * np.diff(times, prepend=0.0)


def rate_residuals(
    timestamps: Sequence[float] | np.ndarray, rate_fn: Callable[[float], float]
) -> np.ndarray:
    """Compensator increments ∫ rate over each inter-arrival gap."""

    times = np.sort(np.asarray(timestamps, dtype=float))
    out = np.empty(times.size, dtype=float)
    previous = 0.0
    for idx, t in enumerate(times):
        out[idx], _ = integrate.quad(rate_fn, previous, t)
        previous = t
    return out


def hawkes_residuals(
    timestamps: Sequence[float] | np.ndarray,
    marks: Sequence[float] | np.ndarray,
    lambda0: float,
    decay: float,
) -> np.ndarray:
    """Compensator increments of an exponential Hawkes path.

    ``marks`` are the intensity jumps added at each event.
    """

    times = np.asarray(timestamps, dtype=float)
    jumps = np.asarray(marks, dtype=float)
    if times.shape != jumps.shape:
        raise ValueError("marks must match the shape of timestamps")
    if times.size and np.any(np.diff(times) < 0):
        raise ValueError("timestamps must be non-decreasing")
    out = np.empty(times.size, dtype=float)
    excitation = 0.0
    last = 0.0
    for idx, (t, jump) in enumerate(zip(times, jumps)):
        dt = t - last
        if decay > 0.0:
            decayed = -np.expm1(-decay * dt) / decay
            out[idx] = lambda0 * dt + excitation * decayed
            excitation *= np.exp(-decay * dt)
        else:
            out[idx] = (lambda0 + excitation) * dt
        excitation += jump
        last = t
    return out


def compute_residuals(
    events: Sequence[Event],
    *,
    lambda0: float = 0.0,
    decay: float = 0.0,
    rate: Optional[Callable[[float], float]] = None,
) -> np.ndarray:
    """Residuals for an event list from any generator in the package.

    With ``rate`` the path is treated as an inhomogeneous Poisson process.
    Otherwise events without marks are non-exciting, which reduces to the
    homogeneous Poisson case at ``lambda0``.
    """

    ordered = sort_events(events)
    times = np.array([e.timestamp for e in ordered], dtype=float)
    if rate is not None:
        return rate_residuals(times, rate)
    marks = np.array([0.0 if e.mark is None else e.mark for e in ordered], dtype=float)
    return hawkes_residuals(times, marks, lambda0, decay)


def ks_test(residuals: np.ndarray, alpha: float = 0.05) -> Dict[str, float | bool]:
    """Perform one-sample KS test against Exp(1)."""

    if residuals.size == 0:
        return {"pvalue": float("nan"), "statistic": float("nan"), "pass": False}
    transformed = 1.0 - np.exp(-residuals)
    stat, pvalue = stats.kstest(transformed, "uniform")
    return {"pvalue": float(pvalue), "statistic": float(stat), "pass": bool(pvalue > alpha)}


def qq_points(residuals: np.ndarray, n_points: int = 100) -> Tuple[np.ndarray, np.ndarray]:
    """Return empirical vs theoretical quantiles for QQ plotting."""

    if residuals.size == 0:
        return np.array([]), np.array([])
    probs = np.linspace(0, 1, n_points, endpoint=False)[1:]
    empirical = np.quantile(residuals, probs)
    theoretical = stats.expon.ppf(probs)
    return empirical, theoretical


def count_statistics(counts: Sequence[int] | np.ndarray) -> Dict[str, Optional[float]]:
    """Mean, unbiased variance, and dispersion index of per-run event counts."""

    arr = np.asarray(counts, dtype=float)
    if arr.size == 0:
        return {"mean": None, "variance": None, "dispersion": None}
    mean = float(arr.mean())
    variance = float(arr.var(ddof=1)) if arr.size > 1 else 0.0
    dispersion = variance / mean if mean > 0 else None
    return {"mean": mean, "variance": variance, "dispersion": dispersion}


__all__ = [
    "poisson_residuals",
    "rate_residuals",
    "hawkes_residuals",
    "compute_residuals",
    "ks_test",
    "qq_points",
    "count_statistics",
]
