"""Checks for arrival generation and popularity normalization."""

from __future__ import annotations

import logging
import random

import pytest

from cafsim.arrivals import generate_arrivals, normalize_popularity
from cafsim.config import SimulationConfig


def test_normalize_keeps_weights_summing_to_one(caplog):
    """Weights within tolerance of 1 pass through without a notice."""
    with caplog.at_level(logging.WARNING, logger="cafsim.arrivals"):
        out = normalize_popularity([0.25, 0.25, 0.5 + 5e-7])
    assert out == (0.25, 0.25, 0.5 + 5e-7)
    assert not caplog.records


def test_normalize_rescales_and_warns(caplog):
    """[0.5, 0.3, 0.3] sums to 1.1 and is rescaled with a notice."""
    with caplog.at_level(logging.WARNING, logger="cafsim.arrivals"):
        out = normalize_popularity([0.5, 0.3, 0.3])
    assert out == pytest.approx([0.5 / 1.1, 0.3 / 1.1, 0.3 / 1.1])
    assert out[0] == pytest.approx(0.454545, abs=1e-6)
    assert out[1] == pytest.approx(0.272727, abs=1e-6)
    assert sum(out) == pytest.approx(1.0)
    assert any("Normalizing" in r.getMessage() for r in caplog.records)


def test_normalize_rejects_all_zero():
    with pytest.raises(ValueError):
        normalize_popularity([0.0, 0.0])


def test_normalize_rejects_negative():
    with pytest.raises(ValueError):
        normalize_popularity([1.5, -0.5])


def test_zero_customers_gives_no_arrivals():
    cfg = SimulationConfig(line_count=3, customer_count=0, duration_seconds=600)
    assert generate_arrivals(cfg, random.Random(1)) == []


def test_arrivals_sorted_and_within_horizon():
    """Arrival times are whole seconds, non-decreasing, inside the horizon."""
    cfg = SimulationConfig(line_count=4, customer_count=500, duration_seconds=3600)
    arrivals = generate_arrivals(cfg, random.Random(7))
    times = [c.arrival_time for c in arrivals]
    assert times == sorted(times)
    assert all(isinstance(t, int) and 0 <= t < 3600 for t in times)
    assert 0 < len(arrivals) <= 500
    assert all(0 <= c.line < 4 for c in arrivals)


def test_never_more_than_requested():
    """A horizon far longer than needed still caps the count."""
    cfg = SimulationConfig(line_count=2, customer_count=10, duration_seconds=60)
    for seed in range(20):
        assert len(generate_arrivals(cfg, random.Random(seed))) <= 10


def test_ids_follow_draw_order():
    cfg = SimulationConfig(line_count=2, customer_count=200, duration_seconds=600)
    arrivals = generate_arrivals(cfg, random.Random(3))
    assert [c.cid for c in arrivals] == list(range(len(arrivals)))


def test_zero_popularity_line_never_chosen():
    """popularity [1, 0] routes every arrival to line 0."""
    cfg = SimulationConfig(line_count=2, customer_count=300, duration_seconds=600,
                           popularity=(1.0, 0.0))
    arrivals = generate_arrivals(cfg, random.Random(11))
    assert arrivals
    assert all(c.line == 0 for c in arrivals)


def test_same_seed_same_arrivals():
    cfg = SimulationConfig(line_count=3, customer_count=100, duration_seconds=900, seed=5)
    a = [(c.arrival_time, c.line) for c in generate_arrivals(cfg)]
    b = [(c.arrival_time, c.line) for c in generate_arrivals(cfg)]
    assert a == b


def test_unnormalized_popularity_still_routes(caplog):
    """Generation normalizes the config weights and logs the notice."""
    cfg = SimulationConfig(line_count=3, customer_count=50, duration_seconds=600,
                           popularity=(0.5, 0.3, 0.3))
    with caplog.at_level(logging.WARNING, logger="cafsim.arrivals"):
        arrivals = generate_arrivals(cfg, random.Random(2))
    assert arrivals
    assert any("Normalizing" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("weights", [
    [float("nan"), 1.0],
    [float("inf"), 1.0],
    [1e308, 1e308],
    [0.5, None],
])
def test_normalize_rejects_non_finite_or_non_numeric(weights):
    """Bad weights are reported to the caller instead of turning into NaN."""
    with pytest.raises(ValueError):
        normalize_popularity(weights)


def test_uniform_sixths_need_no_normalization(caplog):
    """Weights written as 1/6 each already sum to 1 within tolerance."""
    with caplog.at_level(logging.WARNING, logger="cafsim.arrivals"):
        out = normalize_popularity([1 / 6] * 6)
    assert len(out) == 6
    assert not caplog.records
