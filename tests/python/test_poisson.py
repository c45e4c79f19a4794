from __future__ import annotations

import numpy as np
import pytest

from pointprocess import InvalidParameter, UniformPoissonGenerator, validate_events
from pointprocess.poisson import simulate_poisson
from pointprocess.runner import run_batch


def test_zero_rate_yields_no_events() -> None:
    generator = UniformPoissonGenerator(seed=1)
    for _ in range(50):
        assert generator.simulate(10.0, 0.0) == []


def test_zero_width_window_yields_no_events() -> None:
    generator = UniformPoissonGenerator(seed=2)
    for _ in range(50):
        assert generator.simulate(0.0, 5.0) == []


def test_events_lie_in_window_and_carry_rate() -> None:
    events = simulate_poisson(20.0, 4.0, seed=3)
    assert events
    assert all(0.0 <= e.timestamp <= 20.0 for e in events)
    assert all(e.intensity == 4.0 for e in events)
    assert all(e.mark is None for e in events)
    assert validate_events(events, tmax=20.0).ok


def test_negative_rate_fails_before_consuming_randomness() -> None:
    generator = UniformPoissonGenerator(seed=4)
    before = generator.rng.bit_generator.state
    with pytest.raises(InvalidParameter):
        generator.simulate(10.0, -1.0)
    with pytest.raises(InvalidParameter):
        generator.simulate(-1.0, 1.0)
    with pytest.raises(InvalidParameter):
        generator.simulate(float("nan"), 1.0)
    assert generator.rng.bit_generator.state == before


def test_count_mean_and_variance_match_poisson() -> None:
    tmax, lam = 10.0, 3.0
    results = run_batch(
        lambda rng: UniformPoissonGenerator(rng=rng).simulate(tmax, lam),
        2000,
        seed=11,
    )
    counts = np.array([len(path) for path in results], dtype=float)
    assert counts.mean() == pytest.approx(tmax * lam, abs=1.0)
    assert counts.var(ddof=1) == pytest.approx(tmax * lam, abs=5.0)


def test_parallel_chunks_are_reproducible() -> None:
    first = UniformPoissonGenerator(seed=5, max_workers=4, min_chunk_size=100)
    second = UniformPoissonGenerator(seed=5, max_workers=4, min_chunk_size=100)
    a = first.simulate(100.0, 20.0)
    b = second.simulate(100.0, 20.0)
    assert len(a) > 400
    assert [e.timestamp for e in a] == [e.timestamp for e in b]


def test_worker_count_does_not_change_event_count() -> None:
    serial = UniformPoissonGenerator(seed=8, max_workers=1, min_chunk_size=10)
    threaded = UniformPoissonGenerator(seed=8, max_workers=4, min_chunk_size=10)
    assert len(serial.simulate(50.0, 10.0)) == len(threaded.simulate(50.0, 10.0))


def test_uniform_timestamps_spread_over_window() -> None:
    events = UniformPoissonGenerator(seed=6).simulate(1.0, 5000.0)
    times = np.array([e.timestamp for e in events])
    assert times.mean() == pytest.approx(0.5, abs=0.03)
    assert times.min() >= 0.0
    assert times.max() <= 1.0
