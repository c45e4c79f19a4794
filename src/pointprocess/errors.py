"""Exception hierarchy shared by every simulator."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .events import Event


class PointProcessError(Exception):
    """Base class for simulation failures."""


class InvalidParameter(PointProcessError, ValueError):
    """A rate, decay, horizon, or bound argument cannot describe a valid process."""


class JumpsExhausted(PointProcessError, RuntimeError):
    """The exact Hawkes simulator needed a mark but the jump sequence was empty.

    ``events`` holds every event emitted before the failing step; they remain
    a valid prefix of the simulated path.
    """

    def __init__(
        self,
        message: str,
        events: Optional[List["Event"]] = None,
        timestamp: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.events: List["Event"] = list(events or [])
        self.timestamp = timestamp


def require_non_negative(**params: float) -> None:
    """Raise ``InvalidParameter`` unless every keyword value is finite and >= 0."""

    for name, value in params.items():
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameter(f"{name} must be a real number, got {value!r}") from exc
        if not math.isfinite(number):
            raise InvalidParameter(f"{name} must be finite, got {number}")
        if number < 0.0:
            raise InvalidParameter(f"{name} must be non-negative, got {number}")


__all__ = [
    "PointProcessError",
    "InvalidParameter",
    "JumpsExhausted",
    "require_non_negative",
]
