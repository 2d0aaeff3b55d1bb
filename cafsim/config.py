# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Load the YAML run configuration and turn it into a validated, immutable
#   SimulationConfig the engine can consume.
#
# Design notes:
#   - The YAML keeps the horizon in MINUTES (sim.duration_minutes); the
#     engine clock runs in SECONDS, so we convert here.
#   - Popularity may be omitted (uniform) and does not have to sum to 1;
#     normalization happens in arrivals.py.
#
# Usage:
#   from cafsim.config import load_config, SimulationConfig
#   cfg = SimulationConfig.from_dict(load_config())
# -----------------------------------------------------------------------------

from __future__ import annotations
import math, os, yaml
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(ROOT, "config", "baseline.yaml")

# Defaults match the original single-hour cafeteria setup
DEFAULT_LINES = 5
DEFAULT_SERVICE_SECONDS = 20
DEFAULT_CUSTOMERS = 500
DEFAULT_DURATION_MINUTES = 60

@dataclass(frozen=True)
class SimulationConfig:
    line_count: int = DEFAULT_LINES
    service_seconds: int = DEFAULT_SERVICE_SECONDS
    customer_count: int = DEFAULT_CUSTOMERS
    duration_seconds: int = DEFAULT_DURATION_MINUTES * 60
    popularity: Tuple[float, ...] = ()
    seed: Optional[int] = None

    def __post_init__(self):
        # Fill uniform popularity before validation (frozen -> object.__setattr__)
        if not self.popularity and isinstance(self.line_count, int) and self.line_count >= 1:
            object.__setattr__(self, "popularity", tuple([1.0 / self.line_count] * self.line_count))
        else:
            try:
                weights = tuple(float(w) for w in self.popularity)
            except (TypeError, ValueError):
                raise ValueError(f"popularity weights must be numbers: {self.popularity!r}") from None
            object.__setattr__(self, "popularity", weights)
        self.validate()

    def validate(self):
        """Raise ValueError if any field is outside its allowed range."""
        _check_int("line_count", self.line_count, minimum=1)
        _check_int("service_seconds", self.service_seconds, minimum=1)
        _check_int("customer_count", self.customer_count, minimum=0)
        _check_int("duration_seconds", self.duration_seconds, minimum=1)
        if len(self.popularity) != self.line_count:
            raise ValueError(
                f"popularity needs {self.line_count} weights, got {len(self.popularity)}"
            )
        if any(not math.isfinite(w) or w < 0 for w in self.popularity):
            raise ValueError(f"popularity weights must be finite and non-negative: {list(self.popularity)}")
        total = sum(self.popularity)
        if total <= 0.0:
            raise ValueError("popularity weights must not all be zero")
        if not math.isfinite(total):
            raise ValueError(f"popularity weights overflow when summed: {list(self.popularity)}")

    @property
    def arrival_rate(self) -> float:
        """Mean arrivals per second."""
        return self.customer_count / self.duration_seconds

    @classmethod
    def from_dict(cls, cfg: Dict) -> "SimulationConfig":
        """
        Build a config from the parsed YAML layout:

            sim:       {seed, duration_minutes}
            cafeteria: {lines, service_seconds, customers, popularity}
        """
        if not isinstance(cfg, dict):
            raise ValueError(f"config must be a mapping, got {cfg!r}")
        sim = cfg.get("sim", {}) or {}
        caf = cfg.get("cafeteria", {}) or {}
        for section, value in (("sim", sim), ("cafeteria", caf)):
            if not isinstance(value, dict):
                raise ValueError(f"{section} section must be a mapping, got {value!r}")
        minutes = sim.get("duration_minutes", DEFAULT_DURATION_MINUTES)
        if not isinstance(minutes, (int, float)) or isinstance(minutes, bool) or not math.isfinite(minutes):
            raise ValueError(f"sim.duration_minutes must be a number, got {minutes!r}")
        seconds = minutes * 60
        if seconds != int(seconds):
            raise ValueError(f"sim.duration_minutes must be a whole number of seconds, got {minutes!r}")
        popularity = caf.get("popularity") or ()
        if not isinstance(popularity, (list, tuple)):
            raise ValueError(f"cafeteria.popularity must be a list, got {popularity!r}")
        return cls(
            line_count=caf.get("lines", DEFAULT_LINES),
            service_seconds=caf.get("service_seconds", DEFAULT_SERVICE_SECONDS),
            customer_count=caf.get("customers", DEFAULT_CUSTOMERS),
            duration_seconds=int(seconds),
            popularity=tuple(popularity),
            seed=sim.get("seed"),
        )

def _check_int(name: str, value, minimum: int):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")

def load_config(path: Optional[str] = None) -> Dict:
    """Read a YAML config (defaults to config/baseline.yaml)."""
    with open(path or DEFAULT_CONFIG_PATH, "r") as f:
        return yaml.safe_load(f) or {}
