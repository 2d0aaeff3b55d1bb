# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Generate exogenous arrivals: exponential inter-arrival gaps at a constant
#   rate (homogeneous Poisson process) and a popularity-weighted line choice
#   for each arriving customer.
#
# Design notes:
#   - "Generate then hand over": the full arrival list is built up front and
#     the engine consumes it in time order.
#   - Continuous arrival clocks are floored to whole seconds for the tick
#     engine; ties keep their draw order.
#
# Usage:
#   arrivals = generate_arrivals(cfg, rng)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging, math, random
from typing import List, Optional, Sequence, Tuple
from .config import SimulationConfig
from .entities import Customer

logger = logging.getLogger(__name__)

POPULARITY_EPS = 1e-6

def normalize_popularity(weights: Sequence[float]) -> Tuple[float, ...]:
    """
    Return the popularity weights scaled to sum to 1.

    Weights already within POPULARITY_EPS of 1 are returned unchanged; otherwise
    each weight is divided by the total and a warning is logged. Negative,
    non-finite or non-numeric weights and an all-zero vector are rejected
    with ValueError.
    """
    try:
        weights = tuple(float(w) for w in weights)
    except (TypeError, ValueError):
        raise ValueError(f"popularity weights must be numbers: {weights!r}") from None
    if not weights:
        raise ValueError("at least one popularity weight is required")
    if any(not math.isfinite(w) or w < 0 for w in weights):
        raise ValueError(f"popularity weights must be finite and non-negative: {list(weights)}")
    total = sum(weights)
    if total <= 0.0:
        raise ValueError("popularity weights sum to zero; cannot normalize")
    if not math.isfinite(total):
        raise ValueError(f"popularity weights overflow when summed: {list(weights)}")
    if abs(total - 1.0) <= POPULARITY_EPS:
        return weights
    logger.warning("Total popularity scores do not sum to 1 (got %.6g). Normalizing...", total)
    return tuple(w / total for w in weights)

def _pick_line(rng: random.Random, cum_weights: List[float]) -> int:
    # categorical draw over the cumulative popularity
    return rng.choices(range(len(cum_weights)), cum_weights=cum_weights)[0]

def generate_arrivals(cfg: SimulationConfig, rng: Optional[random.Random] = None) -> List[Customer]:
    """
    Draw the customers arriving during the horizon, sorted by arrival time.

    Parameters
    ----------
    cfg : SimulationConfig
        Supplies customer_count, duration_seconds and popularity.
    rng : random.Random, optional
        Random stream; a fresh Random(cfg.seed) is used when omitted.

    Returns
    -------
    list[Customer]
        At most cfg.customer_count customers with integer arrival times in
        [0, duration_seconds), ordered by arrival time then draw order.
    """
    if rng is None:
        rng = random.Random(cfg.seed)
    horizon = cfg.duration_seconds
    target = cfg.customer_count
    if target <= 0 or horizon <= 0:
        return []

    popularity = normalize_popularity(cfg.popularity)
    cum_weights: List[float] = []
    acc = 0.0
    for w in popularity:
        acc += w
        cum_weights.append(acc)

    lam = cfg.arrival_rate
    clock = 0.0
    arrivals: List[Customer] = []
    while clock < horizon and len(arrivals) < target:
        clock += rng.expovariate(lam)
        if clock >= horizon:
            break
        arrivals.append(Customer(
            cid=len(arrivals),
            arrival_time=int(math.floor(clock)),
            line=_pick_line(rng, cum_weights),
        ))
    # list.sort is stable: simultaneous arrivals keep draw order
    arrivals.sort(key=lambda c: c.arrival_time)
    logger.debug("generated %d of %d requested arrivals over %ds", len(arrivals), target, horizon)
    return arrivals
