"""Exponential excitation kernel shared by the Hawkes simulators."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameter, require_non_negative


@dataclass(frozen=True, slots=True)
class ExpKernel:
    """φ(u, v) = α v e^{-βu} for u >= 0.

    ``alpha`` scales each mark ``v`` into an intensity jump; the thinning
    simulator uses ``v = 1`` so the jump is ``alpha`` itself.
    """

    alpha: float
    beta: float

    def __post_init__(self) -> None:
        require_non_negative(alpha=self.alpha, beta=self.beta)

    def phi(self, u, v=1.0):
        u = np.asarray(u, dtype=float)
        return self.alpha * np.asarray(v) * np.exp(-self.beta * np.clip(u, 0, None)) * (u >= 0)

    def decay(self, lam: float, lambda0: float, dt: float) -> float:
        """Intensity after ``dt`` without events, relaxing toward ``lambda0``."""

        return lambda0 + (lam - lambda0) * math.exp(-self.beta * dt)

    def jump(self, v: float = 1.0) -> float:
        return self.alpha * v

    # L1 norm E_v ∫ φ(u, v) du = α E[V] / β
    def branching_ratio(self, mean_mark: float = 1.0) -> float:
        if self.beta == 0.0:
            return math.inf if self.alpha * mean_mark > 0.0 else 0.0
        return self.alpha * mean_mark / self.beta

    def stationary_intensity(self, lambda0: float, mean_mark: float = 1.0) -> float:
        """Long-run mean intensity λ0 / (1 - n); requires n < 1."""

        n = self.branching_ratio(mean_mark)
        if n >= 1.0:
            raise InvalidParameter(f"process is not stationary (branching ratio {n:.4g} >= 1)")
        return lambda0 / (1.0 - n)

    def expected_count(
        self, lambda0: float, horizon: float, mean_mark: float = 1.0
    ) -> float:
        """E[N(horizon)] for a path started at baseline with no history.

        The mean intensity m(t) solves m' = βλ0 − (β − αE[V]) m with
        m(0) = λ0; the count is its integral over ``[0, horizon]``.
        """

        require_non_negative(lambda0=lambda0, horizon=horizon)
        excitation = self.alpha * mean_mark
        kappa = self.beta - excitation
        if kappa == 0.0:
            return lambda0 * horizon + 0.5 * self.beta * lambda0 * horizon**2
        m_inf = self.beta * lambda0 / kappa
        return m_inf * horizon + (lambda0 - m_inf) * (-math.expm1(-kappa * horizon)) / kappa


__all__ = ["ExpKernel"]
