from __future__ import annotations

from pathlib import Path

import pytest

from pointprocess import InvalidParameter, SinusoidalRate, load_config
from pointprocess.config import (
    JumpConfig,
    RateConfig,
    SamplingConfig,
    SimulationConfig,
    config_from_mapping,
)

HAWKES_YAML = """
process: hawkes_exact
horizon: 25.0
runs: 8
lambda0: 0.8
decay: 1.5
jumps:
  distribution: exponential
  mean: 0.4
sampling:
  seed: 7
  max_workers: 2
"""


def test_load_config_parses_nested_sections(tmp_path: Path) -> None:
    path = tmp_path / "hawkes.yaml"
    path.write_text(HAWKES_YAML, encoding="utf-8")
    config = load_config(path)

    assert config.process == "hawkes_exact"
    assert config.horizon == pytest.approx(25.0)
    assert config.runs == 8
    assert config.jumps == JumpConfig(distribution="exponential", mean=0.4)
    assert config.sampling.seed == 7
    assert config.sampling.max_workers == 2
    assert config.rate is None


def test_variable_rate_section_builds_rate() -> None:
    config = config_from_mapping(
        {
            "process": "variable_rate",
            "horizon": 10.0,
            "rate": {"kind": "sinusoidal", "base": 3.0, "amplitude": 1.0, "period": 2.0},
        }
    )
    assert config.rate is not None
    rate = config.rate.build()
    assert isinstance(rate, SinusoidalRate)
    assert config.rate.bound() == pytest.approx(4.0)

    capped = RateConfig(kind="piecewise", breakpoints=[1.0], values=[1.0, 2.0], max_lambda=5.0)
    assert capped.bound() == pytest.approx(5.0)
    assert capped.breakpoints == (1.0,)


def test_exact_hawkes_defaults_to_constant_alpha_jumps() -> None:
    config = SimulationConfig(process="hawkes_exact", horizon=1.0, alpha=0.3)
    assert config.jump_config() == JumpConfig(distribution="constant", mean=0.3)


@pytest.mark.parametrize(
    "payload",
    [
        {"process": "unknown", "horizon": 1.0},
        {"process": "poisson", "horizon": -1.0},
        {"process": "poisson", "horizon": 1.0, "runs": 0},
        {"process": "poisson", "horizon": 1.0, "lambda0": -2.0},
        {"process": "variable_rate", "horizon": 1.0},
        {"process": "variable_rate", "horizon": 1.0, "rate": {"kind": "cubic"}},
        {"process": "hawkes_exact", "horizon": 1.0, "jumps": {"distribution": "pareto"}},
        {"process": "poisson", "horizon": 1.0, "sampling": {"max_workers": 0}},
        {"process": "poisson", "horizon": 1.0, "sampling": {"threads": 4}},
        {"horizon": 1.0},
    ],
)
def test_invalid_configuration_rejected(payload: dict) -> None:
    with pytest.raises(InvalidParameter):
        config_from_mapping(payload)


def test_non_mapping_yaml_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidParameter):
        load_config(path)


def test_sampling_defaults() -> None:
    sampling = SamplingConfig()
    assert sampling.seed is None
    assert sampling.min_chunk_size > 0
