import math

import numpy as np
import pytest

from pointprocess import ExpKernel, InvalidParameter


def test_decay_relaxes_toward_baseline() -> None:
    kernel = ExpKernel(alpha=0.5, beta=2.0)
    assert kernel.decay(3.0, 1.0, 0.0) == pytest.approx(3.0)
    assert kernel.decay(3.0, 1.0, 1.0) == pytest.approx(1.0 + 2.0 * math.exp(-2.0))
    assert kernel.decay(3.0, 1.0, 1e6) == pytest.approx(1.0)
    assert kernel.jump() == pytest.approx(0.5)
    assert kernel.jump(2.0) == pytest.approx(1.0)


def test_phi_is_causal() -> None:
    kernel = ExpKernel(alpha=0.5, beta=2.0)
    values = kernel.phi(np.array([-1.0, 0.0, 1.0]))
    np.testing.assert_allclose(values, [0.0, 0.5, 0.5 * math.exp(-2.0)])


def test_branching_and_stationary_intensity() -> None:
    kernel = ExpKernel(alpha=0.5, beta=1.5)
    assert kernel.branching_ratio() == pytest.approx(1.0 / 3.0)
    assert kernel.stationary_intensity(1.0) == pytest.approx(1.5)
    with pytest.raises(InvalidParameter):
        ExpKernel(alpha=2.0, beta=1.0).stationary_intensity(1.0)
    assert ExpKernel(alpha=0.0, beta=0.0).branching_ratio() == 0.0


def test_expected_count_limits() -> None:
    assert ExpKernel(alpha=0.0, beta=1.0).expected_count(2.0, 10.0) == pytest.approx(20.0)
    # critical case: beta == alpha
    critical = ExpKernel(alpha=1.0, beta=1.0)
    assert critical.expected_count(1.0, 2.0) == pytest.approx(2.0 + 0.5 * 4.0)
    # long horizons approach the stationary rate
    kernel = ExpKernel(alpha=0.5, beta=1.5)
    slope = kernel.expected_count(1.0, 1001.0) - kernel.expected_count(1.0, 1000.0)
    assert slope == pytest.approx(kernel.stationary_intensity(1.0), rel=1e-6)


def test_negative_parameters_rejected() -> None:
    with pytest.raises(InvalidParameter):
        ExpKernel(alpha=-0.1, beta=1.0)
    with pytest.raises(InvalidParameter):
        ExpKernel(alpha=0.1, beta=-1.0)
