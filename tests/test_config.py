"""Checks for configuration loading and validation."""

from __future__ import annotations

import dataclasses

import pytest

from cafsim.config import SimulationConfig, load_config


def test_defaults_match_lunch_hour():
    cfg = SimulationConfig()
    assert cfg.line_count == 5
    assert cfg.service_seconds == 20
    assert cfg.customer_count == 500
    assert cfg.duration_seconds == 3600
    assert cfg.popularity == pytest.approx([0.2] * 5)
    assert cfg.arrival_rate == pytest.approx(500 / 3600)


def test_config_is_immutable():
    cfg = SimulationConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.line_count = 3


@pytest.mark.parametrize("kwargs", [
    {"line_count": 0},
    {"service_seconds": 0},
    {"customer_count": -1},
    {"duration_seconds": 0},
    {"line_count": 2, "popularity": (1.0,)},
    {"line_count": 2, "popularity": (1.0, -0.1)},
    {"line_count": 2, "popularity": (0.0, 0.0)},
    {"line_count": 2.5},
    {"line_count": 2, "popularity": (float("nan"), 1.0)},
    {"line_count": 2, "popularity": (float("inf"), 1.0)},
    {"line_count": 2, "popularity": (1e308, 1e308)},
    {"line_count": 2, "popularity": (0.5, None)},
    {"line_count": 2, "popularity": ("heavy", 0.5)},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_from_dict_converts_minutes():
    cfg = SimulationConfig.from_dict({
        "sim": {"seed": 3, "duration_minutes": 30},
        "cafeteria": {"lines": 2, "service_seconds": 15, "customers": 100, "popularity": [3, 1]},
    })
    assert cfg.duration_seconds == 1800
    assert cfg.line_count == 2
    assert cfg.popularity == (3.0, 1.0)
    assert cfg.seed == 3


def test_from_dict_uses_defaults_for_missing_sections():
    cfg = SimulationConfig.from_dict({})
    assert cfg == SimulationConfig()


def test_from_dict_rejects_bad_popularity_type():
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"cafeteria": {"lines": 1, "popularity": "1.0"}})


def test_from_dict_rejects_fractional_seconds():
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"sim": {"duration_minutes": 0.001}})


def test_load_baseline_yaml():
    raw = load_config()
    cfg = SimulationConfig.from_dict(raw)
    assert cfg.line_count == len(cfg.popularity)
    assert raw["experiments"]["replications"] >= 1


def test_load_custom_yaml(tmp_path):
    path = tmp_path / "small.yaml"
    path.write_text("sim:\n  duration_minutes: 2\ncafeteria:\n  lines: 1\n  customers: 4\n")
    cfg = SimulationConfig.from_dict(load_config(str(path)))
    assert cfg.duration_seconds == 120
    assert cfg.popularity == (1.0,)


def test_from_dict_rejects_null_weight():
    """A YAML `popularity: [0.5, null]` is a configuration error."""
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"cafeteria": {"lines": 2, "popularity": [0.5, None]}})


@pytest.mark.parametrize("raw", [
    {"cafeteria": [1, 2]},
    {"sim": "fast"},
    ["sim", "cafeteria"],
])
def test_from_dict_rejects_non_mapping_sections(raw):
    with pytest.raises(ValueError):
        SimulationConfig.from_dict(raw)


@pytest.mark.parametrize("minutes", [float("nan"), float("inf")])
def test_from_dict_rejects_non_finite_duration(minutes):
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"sim": {"duration_minutes": minutes}})
