"""Exponential-kernel Hawkes simulators.

Two strategies are provided:

``ThinnedHawkesGenerator``
    Ogata-style thinning with a constant jump ``alpha``. Between events the
    intensity only decays, so the current intensity is a valid upper bound
    until the next accepted event.

``ExactHawkesGenerator``
    Dassios & Zhao (2013) exact simulation. The waiting time to the next
    event is the minimum of a baseline arrival and a defective arrival from
    the decaying excitation, both obtained by closed-form inversion, so no
    candidate is ever rejected. Jump sizes are read from a caller-supplied
    iterable, one per event.

Both are strictly sequential within a path. ``stream`` exposes a path as a
lazy iterator; ``simulate`` materialises it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

import numpy as np

from .errors import InvalidParameter, JumpsExhausted, require_non_negative
from .events import Event
from .kernels import ExpKernel
from .parallel import resolve_rng

log = logging.getLogger(__name__)


def _open_unit(rng: np.random.Generator) -> float:
    u = rng.random()
    while u == 0.0:
        u = rng.random()
    return u


@dataclass(slots=True)
class ThinningState:
    time: float
    intensity: float
    bound: float


@dataclass(slots=True)
class ExactState:
    time: float
    intensity: float  # just after the previous event


class ThinnedHawkesGenerator:
    """Hawkes process λ(t) = λ0 + Σ α e^{-decay (t - t_i)} simulated by thinning.

    Emitted events carry the post-jump intensity and ``mark = alpha``.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.rng = resolve_rng(seed, rng)

    def stream(
        self, tmax: float, decay: float, lambda0: float, alpha: float
    ) -> Iterator[Event]:
        require_non_negative(tmax=tmax, decay=decay, lambda0=lambda0, alpha=alpha)
        kernel = ExpKernel(alpha=float(alpha), beta=float(decay))
        return self._run(float(tmax), kernel, float(lambda0))

    def simulate(
        self, tmax: float, decay: float, lambda0: float, alpha: float
    ) -> List[Event]:
        events = list(self.stream(tmax, decay, lambda0, alpha))
        log.debug("hawkes thinning: %d events on [0, %s]", len(events), tmax)
        return events

    def _run(self, tmax: float, kernel: ExpKernel, lambda0: float) -> Iterator[Event]:
        rng = self.rng
        if lambda0 == 0.0:
            # no baseline arrivals, so nothing can ever excite the process
            return
        jump = kernel.jump()
        first = rng.exponential(1.0 / lambda0)
        if first > tmax:
            return
        state = ThinningState(time=first, intensity=lambda0 + jump, bound=lambda0 + jump)
        yield Event(state.time, state.intensity, jump)

        while state.time < tmax:
            ds = rng.exponential(1.0 / state.bound)
            state.intensity = kernel.decay(state.intensity, lambda0, ds)
            state.time += ds
            if state.time > tmax:
                break
            if rng.random() < state.intensity / state.bound:
                state.intensity += jump
                yield Event(state.time, state.intensity, jump)
            # the intensity can only decay until the next accepted event
            state.bound = state.intensity


class ExactHawkesGenerator:
    """Marked Hawkes process with exponential decay ``beta``, simulated exactly.

    Emitted events carry the intensity just before the jump and the jump
    consumed from ``jumps`` as their mark. If ``jumps`` runs dry while the
    path is still inside ``[0, tmax]``, ``JumpsExhausted`` is raised at that
    step; ``simulate`` attaches the events produced so far to the exception.
    Jumps must be finite and non-negative.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.rng = resolve_rng(seed, rng)

    def stream(
        self, tmax: float, beta: float, lambda0: float, jumps: Iterable[float]
    ) -> Iterator[Event]:
        require_non_negative(tmax=tmax, beta=beta, lambda0=lambda0)
        kernel = ExpKernel(alpha=1.0, beta=float(beta))
        return self._run(float(tmax), kernel, float(lambda0), iter(jumps))

    def simulate(
        self, tmax: float, beta: float, lambda0: float, jumps: Iterable[float]
    ) -> List[Event]:
        events: List[Event] = []
        try:
            for event in self.stream(tmax, beta, lambda0, jumps):
                events.append(event)
        except JumpsExhausted as exc:
            exc.events = events
            raise
        log.debug("hawkes exact: %d events on [0, %s]", len(events), tmax)
        return events

    def next_interarrival(self, state: ExactState, lambda0: float, beta: float) -> float:
        """Draw the waiting time to the next event from ``state``.

        Returns ``inf`` when no further event can occur.
        """

        rng = self.rng
        u1 = _open_unit(rng)
        u2 = _open_unit(rng)
        excess = state.intensity - lambda0
        if excess > 0.0:
            d = 1.0 + beta * math.log(u1) / excess
        else:
            d = -math.inf
        s2 = -math.log(u2) / lambda0 if lambda0 > 0.0 else math.inf
        if d <= 0.0:
            return s2
        if beta == 0.0:
            # no decay: the excitation behaves as a constant extra rate
            s1 = -math.log(u1) / excess
        else:
            # Dassios & Zhao: S1 = -ln(D) / beta, with D defined above
            s1 = -math.log(d) / beta
        return min(s1, s2)

    def _run(
        self,
        tmax: float,
        kernel: ExpKernel,
        lambda0: float,
        jumps: Iterator[float],
    ) -> Iterator[Event]:
        state = ExactState(time=0.0, intensity=lambda0)
        emitted = 0
        while True:
            wait = self.next_interarrival(state, lambda0, kernel.beta)
            if math.isinf(wait):
                return
            state.time += wait
            state.intensity = kernel.decay(state.intensity, lambda0, wait)
            if state.time > tmax:
                return
            try:
                mark = float(next(jumps))
            except StopIteration:
                log.warning(
                    "hawkes exact: jump sequence exhausted at t=%s after %d events",
                    state.time,
                    emitted,
                )
                raise JumpsExhausted(
                    f"jump sequence exhausted at t={state.time} after {emitted} events",
                    timestamp=state.time,
                ) from None
            if not (math.isfinite(mark) and mark >= 0.0):
                raise InvalidParameter(
                    f"jump sizes must be finite and non-negative, got {mark}"
                )
            yield Event(state.time, state.intensity, mark)
            emitted += 1
            state.intensity += kernel.jump(mark)


def simulate_hawkes_thinning(
    tmax: float,
    decay: float,
    lambda0: float,
    alpha: float,
    seed: Optional[int] = None,
) -> List[Event]:
    return ThinnedHawkesGenerator(seed).simulate(tmax, decay, lambda0, alpha)


def simulate_hawkes_exact(
    tmax: float,
    beta: float,
    lambda0: float,
    jumps: Iterable[float],
    seed: Optional[int] = None,
) -> List[Event]:
    return ExactHawkesGenerator(seed).simulate(tmax, beta, lambda0, jumps)


__all__ = [
    "ThinningState",
    "ExactState",
    "ThinnedHawkesGenerator",
    "ExactHawkesGenerator",
    "simulate_hawkes_thinning",
    "simulate_hawkes_exact",
]
