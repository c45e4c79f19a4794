"""Event record shared by all generators, plus sequence utilities."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True, slots=True)
class Event:
    """One point of a simulated path.

    ``intensity`` is the process intensity recorded at the event; what exactly
    it measures depends on the generator (constant rate, rate function value,
    post-jump or pre-jump Hawkes intensity). ``mark`` is the excitation size for
    Hawkes variants and ``None`` otherwise.
    """

    timestamp: float
    intensity: float
    mark: Optional[float] = None

    def with_mark(self, mark: float) -> "Event":
        return Event(self.timestamp, self.intensity, float(mark))


def sort_events(events: Iterable[Event]) -> List[Event]:
    """Return a new list ordered by timestamp."""

    return sorted(events, key=lambda event: event.timestamp)


def events_to_array(
    events: Sequence[Event], *, with_marks: Optional[bool] = None
) -> np.ndarray:
    """Stack events into an ``(n, 2)`` or ``(n, 3)`` float array.

    Columns are timestamp, intensity and, when marks are requested (or any
    event carries one), mark. Missing marks become NaN.
    """

    if with_marks is None:
        with_marks = any(event.mark is not None for event in events)
    width = 3 if with_marks else 2
    if not events:
        return np.zeros((0, width), dtype=float)
    out = np.empty((len(events), width), dtype=float)
    for row, event in enumerate(events):
        out[row, 0] = event.timestamp
        out[row, 1] = event.intensity
        if with_marks:
            out[row, 2] = np.nan if event.mark is None else event.mark
    return out


def events_to_frame(events: Sequence[Event]) -> pd.DataFrame:
    """Tabular view with ``timestamp``, ``intensity`` and ``mark`` columns."""

    return pd.DataFrame(
        {
            "timestamp": [event.timestamp for event in events],
            "intensity": [event.intensity for event in events],
            "mark": [
                np.nan if event.mark is None else event.mark for event in events
            ],
        },
        columns=["timestamp", "intensity", "mark"],
    ).astype(float)


@dataclass(slots=True)
class EventSequenceError:
    index: int
    message: str
    timestamp: Optional[float] = None


@dataclass(slots=True)
class EventSequenceReport:
    total_events: int
    strictly_increasing: bool
    out_of_window: int
    invalid_intensities: int
    min_gap: Optional[float]
    errors: List[EventSequenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.strictly_increasing and not self.errors


class EventSequenceValidator:
    """Streaming checker for the ordering and window invariants of a path."""

    def __init__(self, tmax: float) -> None:
        self.tmax = float(tmax)
        self._last_timestamp: Optional[float] = None
        self._min_gap: Optional[float] = None
        self._strictly_increasing = True
        self._out_of_window = 0
        self._invalid_intensities = 0
        self._errors: List[EventSequenceError] = []
        self._count = 0

    def observe(self, event: Event) -> None:
        index = self._count
        self._count += 1
        ts = event.timestamp
        if not (0.0 <= ts <= self.tmax):
            self._out_of_window += 1
            self._errors.append(
                EventSequenceError(
                    index=index,
                    message=f"timestamp {ts} outside [0, {self.tmax}]",
                    timestamp=ts,
                )
            )
        if not math.isfinite(event.intensity) or event.intensity < 0.0:
            self._invalid_intensities += 1
            self._errors.append(
                EventSequenceError(
                    index=index,
                    message=f"invalid intensity {event.intensity}",
                    timestamp=ts,
                )
            )
        if self._last_timestamp is not None:
            gap = ts - self._last_timestamp
            if gap <= 0.0:
                self._strictly_increasing = False
                self._errors.append(
                    EventSequenceError(
                        index=index,
                        message=(
                            f"timestamp not increasing: {ts} <= {self._last_timestamp}"
                        ),
                        timestamp=ts,
                    )
                )
            elif self._min_gap is None or gap < self._min_gap:
                self._min_gap = gap
        self._last_timestamp = ts

    def report(self) -> EventSequenceReport:
        return EventSequenceReport(
            total_events=self._count,
            strictly_increasing=self._strictly_increasing,
            out_of_window=self._out_of_window,
            invalid_intensities=self._invalid_intensities,
            min_gap=self._min_gap,
            errors=list(self._errors),
        )


def validate_events(
    events: Iterable[Event], tmax: float, *, presorted: bool = False
) -> EventSequenceReport:
    """Validate a generated path; unsorted output is sorted first unless ``presorted``."""

    validator = EventSequenceValidator(tmax)
    ordered = events if presorted else sort_events(events)
    for event in ordered:
        validator.observe(event)
    return validator.report()


__all__ = [
    "Event",
    "sort_events",
    "events_to_array",
    "events_to_frame",
    "EventSequenceError",
    "EventSequenceReport",
    "EventSequenceValidator",
    "validate_events",
]
