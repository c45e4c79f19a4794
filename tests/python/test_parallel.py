import threading

import numpy as np
import pytest

from pointprocess import InvalidParameter
from pointprocess.parallel import map_chunks, partition, resolve_rng, run_tasks


def test_partition_balances_chunks():
    assert partition(10, 4, 1) == [3, 3, 2, 2]
    assert partition(10, 4, 100) == [10]
    assert partition(0, 4, 1) == []
    sizes = partition(12_345, 8, 1000)
    assert sum(sizes) == 12_345
    assert len(sizes) == 8
    with pytest.raises(InvalidParameter):
        partition(10, 0, 1)


def test_run_tasks_inline_for_single_item():
    names = run_tasks(
        lambda rng, size: threading.current_thread().name,
        [5],
        np.random.default_rng(0),
    )
    assert names == [threading.current_thread().name]


def test_map_chunks_concatenates_in_order():
    merged = map_chunks(
        lambda rng, size: [size] * size,
        10,
        np.random.default_rng(1),
        max_workers=3,
        min_chunk_size=1,
    )
    assert merged == [4] * 4 + [3] * 3 + [3] * 3


def test_child_streams_are_independent():
    draws = run_tasks(
        lambda rng, size: float(rng.random()),
        [1, 1, 1, 1],
        np.random.default_rng(2),
        max_workers=4,
    )
    assert len(set(draws)) == 4


def test_resolve_rng():
    rng = np.random.default_rng(3)
    assert resolve_rng(rng=rng) is rng
    assert resolve_rng(5).random() == np.random.default_rng(5).random()
    with pytest.raises(InvalidParameter):
        resolve_rng(1, rng)
